"""
Output package for API Change Detector.

This package contains formatters for rendering changelogs
in various formats (text, JSON, YAML, Markdown, HTML).
"""

from api_change_detector.output.formatters import (
    BaseFormatter,
    available_formatters,
    get_formatter,
)
from api_change_detector.output.html_output import HtmlFormatter
from api_change_detector.output.json_output import JsonFormatter
from api_change_detector.output.markdown_output import MarkdownFormatter
from api_change_detector.output.text_output import TextFormatter
from api_change_detector.output.yaml_output import YamlFormatter

__all__ = [
    "BaseFormatter",
    "HtmlFormatter",
    "JsonFormatter",
    "MarkdownFormatter",
    "TextFormatter",
    "YamlFormatter",
    "available_formatters",
    "get_formatter",
]
