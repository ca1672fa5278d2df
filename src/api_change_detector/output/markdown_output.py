"""
Markdown output formatter.
"""

from typing import Any, Optional

from api_change_detector.models.change import BreakingChange, Change, Severity
from api_change_detector.models.changelog import Changelog
from api_change_detector.output.formatters import (
    OTHER_CHANGES_TITLE,
    BaseFormatter,
    register_formatter,
    split_info_changes,
)

NOT_AVAILABLE = "N/A"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _value(value: Optional[Any]) -> str:
    return NOT_AVAILABLE if value is None or value == "" else str(value)


@register_formatter("markdown")
class MarkdownFormatter(BaseFormatter):
    """
    Format output as Markdown.
    """

    def _change_item(self, change: Change) -> str:
        """Render a change as a list item."""
        return f"- **{_value(change.path)}**: {change.description} *({change.type.value})*"

    def _breaking_block(self, change: BreakingChange) -> list[str]:
        """Render a breaking change as a detail block."""
        return [
            f"### `{_value(change.path)}`",
            "",
            f"- **Type:** {change.type.value}",
            f"- **Category:** {change.category.value}",
            f"- **Description:** {change.description}",
            f"- **Impact Score:** {change.impact_score}",
            f"- **Migration:** {_value(change.migration_suggestion)}",
            "",
        ]

    def _list_section(self, title: str, changes: list[Change]) -> list[str]:
        if not changes:
            return []
        lines = [f"## {title}", ""]
        lines.extend(self._change_item(c) for c in changes)
        lines.append("")
        return lines

    def format(self, changelog: Changelog) -> str:
        """Format a changelog as Markdown."""
        risk = changelog.risk_assessment
        lines = []

        # Header
        lines.append(f"# Changelog: {changelog.api_name}")
        lines.append("")
        lines.append(
            f"**{_value(changelog.from_version)} → {_value(changelog.to_version)}**"
        )
        lines.append("")
        lines.append(f"*Generated: {changelog.generated_at.strftime(TIMESTAMP_FORMAT)}*")
        lines.append("")
        lines.append("---")
        lines.append("")

        # Summary
        lines.append("## Summary")
        lines.append("")
        lines.append("| Metric | Value |")
        lines.append("|--------|-------|")
        lines.append(f"| Total changes | {changelog.total_changes} |")
        lines.append(f"| Breaking changes | {risk.breaking_changes_count} |")
        lines.append(f"| Risk level | {risk.level.value} |")
        lines.append(f"| Risk score | {risk.overall_score}/100 |")
        lines.append(
            f"| Recommended version bump | **{risk.semver_recommendation.value}** |"
        )
        lines.append("")
        if risk.recommendation:
            lines.append(f"> {risk.recommendation}")
            lines.append("")

        if not changelog.changes:
            lines.append("_No changes detected._")
            lines.append("")
            return "\n".join(lines)

        breaking = [c for c in changelog.breaking_changes if c.severity == Severity.BREAKING]
        if breaking:
            lines.append("## 🔴 Breaking Changes")
            lines.append("")
            for change in breaking:
                lines.extend(self._breaking_block(change))

        additions, others = split_info_changes(changelog.changes)
        lines.extend(
            self._list_section(
                "🟠 Dangerous Changes",
                changelog.get_changes_by_severity(Severity.DANGEROUS),
            )
        )
        lines.extend(
            self._list_section("🟡 Warnings", changelog.get_changes_by_severity(Severity.WARNING))
        )
        lines.extend(self._list_section("🟢 Additions", additions))
        lines.extend(self._list_section(f"ℹ️ {OTHER_CHANGES_TITLE}", others))

        return "\n".join(lines)
