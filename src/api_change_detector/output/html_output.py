"""
HTML output formatter.
"""

import html

from api_change_detector.models.change import BreakingChange, Change, Severity
from api_change_detector.models.changelog import Changelog, RiskLevel
from api_change_detector.output.formatters import (
    OTHER_CHANGES_TITLE,
    SEVERITY_SECTIONS,
    BaseFormatter,
    register_formatter,
    split_info_changes,
)


@register_formatter("html")
class HtmlFormatter(BaseFormatter):
    """
    Format output as a self-contained HTML page.

    Every value taken from the changelog is escaped.
    """

    def _severity_class(self, severity: Severity) -> str:
        """Get CSS class for a severity."""
        return f"severity-{severity.value.lower()}"

    def _risk_class(self, level: RiskLevel) -> str:
        """Get CSS class for a risk level."""
        return f"risk-{level.value.lower()}"

    def _get_html_template(self) -> str:
        """Get the HTML template with inline CSS."""
        return """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{TITLE}</title>
    <style>
        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }

        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif;
            line-height: 1.6;
            color: #333;
            background: #f5f5f5;
            padding: 20px;
        }

        .container {
            max-width: 1200px;
            margin: 0 auto;
            background: white;
            padding: 30px;
            border-radius: 8px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }

        h1 {
            color: #2c3e50;
            border-bottom: 3px solid #3498db;
            padding-bottom: 10px;
            margin-bottom: 20px;
        }

        h2 {
            color: #34495e;
            margin-top: 30px;
            margin-bottom: 15px;
            border-bottom: 2px solid #ecf0f1;
            padding-bottom: 8px;
        }

        .summary {
            background: #ecf0f1;
            padding: 15px;
            border-radius: 5px;
            margin-bottom: 20px;
        }

        .summary-item {
            margin: 5px 0;
        }

        .summary-label {
            font-weight: bold;
            color: #2c3e50;
        }

        .change-card {
            background: #fff;
            border: 1px solid #e0e0e0;
            border-left-width: 5px;
            border-radius: 5px;
            padding: 12px 15px;
            margin-bottom: 10px;
        }

        .severity-breaking { border-left-color: #e74c3c; }
        .severity-dangerous { border-left-color: #e67e22; }
        .severity-warning { border-left-color: #f1c40f; }
        .severity-info { border-left-color: #27ae60; }

        .risk-critical, .risk-high { color: #c0392b; font-weight: bold; }
        .risk-medium { color: #d68910; font-weight: bold; }
        .risk-low { color: #1e8449; font-weight: bold; }

        .change-path {
            font-family: "Courier New", monospace;
            font-weight: bold;
        }

        .change-type {
            color: #7f8c8d;
            font-style: italic;
        }

        .label {
            font-weight: bold;
            color: #555;
        }

        .no-changes {
            padding: 20px;
            background: #d5f5e3;
            border-radius: 5px;
            color: #1e8449;
        }

        code {
            font-family: "Courier New", monospace;
            background: #f4f4f4;
            padding: 2px 6px;
            border-radius: 3px;
            font-size: 0.9em;
        }
    </style>
</head>
<body>
    <div class="container">
{CONTENT}
    </div>
</body>
</html>
"""

    def _summary_item(self, label: str, value: str) -> str:
        return (
            f'<div class="summary-item">'
            f'<span class="summary-label">{label}:</span> {value}'
            f"</div>"
        )

    def _change_card(self, change: Change) -> str:
        """Render a change as a card."""
        return (
            f'<div class="change-card {self._severity_class(change.severity)}">'
            f'<span class="change-path">{html.escape(change.path)}</span>: '
            f"{html.escape(change.description)} "
            f'<span class="change-type">({html.escape(change.type.value)})</span>'
            f"</div>"
        )

    def _breaking_card(self, change: BreakingChange) -> str:
        """Render a surfaced change with impact and migration details."""
        migration = change.migration_suggestion or "N/A"
        return "\n".join([
            f'<div class="change-card {self._severity_class(change.severity)}">',
            f'<div class="change-path"><code>{html.escape(change.path)}</code></div>',
            f'<div><span class="label">Type:</span> {html.escape(change.type.value)}</div>',
            f'<div><span class="label">Category:</span> {html.escape(change.category.value)}</div>',
            f'<div><span class="label">Description:</span> {html.escape(change.description)}</div>',
            f'<div><span class="label">Impact Score:</span> {change.impact_score}</div>',
            f'<div><span class="label">Migration:</span> {html.escape(migration)}</div>',
            "</div>",
        ])

    def format(self, changelog: Changelog) -> str:
        """Format a changelog as HTML."""
        risk = changelog.risk_assessment
        content_lines = []

        # Header
        content_lines.append(f"<h1>Changelog: {html.escape(changelog.api_name)}</h1>")
        content_lines.append(
            "<p style='color: #7f8c8d; font-size: 1.1em;'>"
            f"{html.escape(changelog.from_version or 'N/A')} → "
            f"{html.escape(changelog.to_version or 'N/A')}"
            "</p>"
        )

        # Summary
        content_lines.append("<h2>Summary</h2>")
        content_lines.append('<div class="summary">')
        content_lines.append(self._summary_item("Total Changes", str(changelog.total_changes)))
        content_lines.append(
            self._summary_item("Breaking Changes", str(risk.breaking_changes_count))
        )
        content_lines.append(
            self._summary_item(
                "Risk",
                f'<span class="{self._risk_class(risk.level)}">{risk.level.value}</span> '
                f"({risk.overall_score}/100)",
            )
        )
        content_lines.append(
            self._summary_item(
                "Recommended Version Bump",
                f"<strong>{risk.semver_recommendation.value}</strong>",
            )
        )
        if risk.recommendation:
            content_lines.append(
                self._summary_item("Recommendation", html.escape(risk.recommendation))
            )
        content_lines.append("</div>")

        if not changelog.changes:
            content_lines.append('<div class="no-changes">')
            content_lines.append("✅ No changes detected.")
            content_lines.append("</div>")
        else:
            additions, others = split_info_changes(changelog.changes)
            for severity, icon, title in SEVERITY_SECTIONS:
                if severity == Severity.BREAKING:
                    cards = [
                        self._breaking_card(c)
                        for c in changelog.breaking_changes
                        if c.severity == Severity.BREAKING
                    ]
                elif severity == Severity.INFO:
                    cards = [self._change_card(c) for c in additions]
                else:
                    cards = [
                        self._change_card(c)
                        for c in changelog.get_changes_by_severity(severity)
                    ]
                if cards:
                    content_lines.append(f"<h2>{icon} {title}</h2>")
                    content_lines.extend(cards)

            if others:
                content_lines.append(f"<h2>ℹ️ {OTHER_CHANGES_TITLE}</h2>")
                content_lines.extend(self._change_card(c) for c in others)

        # Wrap in template
        content = "\n".join(content_lines)
        title = html.escape(f"Changelog: {changelog.api_name}")
        return (
            self._get_html_template()
            .replace("{TITLE}", title)
            .replace("{CONTENT}", content)
        )
