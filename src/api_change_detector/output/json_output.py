"""
JSON output formatter.
"""

import json

from api_change_detector.models.changelog import Changelog
from api_change_detector.output.formatters import (
    BaseFormatter,
    changelog_to_dict,
    register_formatter,
)


@register_formatter("json")
class JsonFormatter(BaseFormatter):
    """
    Format output as JSON.
    """

    def __init__(self, indent: int = 2) -> None:
        """
        Initialize the JSON formatter.

        Args:
            indent: JSON indentation level.
        """
        self.indent = indent

    def format(self, changelog: Changelog) -> str:
        """Format a changelog as JSON."""
        data = changelog_to_dict(changelog)
        return json.dumps(data, indent=self.indent, default=str, ensure_ascii=False)
