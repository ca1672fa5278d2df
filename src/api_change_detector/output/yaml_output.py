"""
YAML output formatter.
"""

import yaml

from api_change_detector.models.changelog import Changelog
from api_change_detector.output.formatters import (
    BaseFormatter,
    changelog_to_dict,
    register_formatter,
)


@register_formatter("yaml")
class YamlFormatter(BaseFormatter):
    """
    Format output as YAML.
    """

    def format(self, changelog: Changelog) -> str:
        """Format a changelog as YAML."""
        data = changelog_to_dict(changelog)
        return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
