"""
Human-readable text output formatter.
"""

from io import StringIO

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from api_change_detector.models.change import Change, Severity
from api_change_detector.models.changelog import Changelog, RiskLevel
from api_change_detector.output.formatters import (
    OTHER_CHANGES_TITLE,
    SEVERITY_SECTIONS,
    BaseFormatter,
    register_formatter,
    split_info_changes,
)


@register_formatter("text")
class TextFormatter(BaseFormatter):
    """
    Format output as human-readable text using Rich.
    """

    def __init__(self, colorize: bool = True) -> None:
        """
        Initialize the text formatter.

        Args:
            colorize: Whether to use colors in output.
        """
        self.colorize = colorize

    def _severity_style(self, severity: Severity) -> str:
        """Get the style for a severity."""
        if not self.colorize:
            return ""

        styles = {
            Severity.BREAKING: "bold red",
            Severity.DANGEROUS: "dark_orange",
            Severity.WARNING: "yellow",
            Severity.INFO: "green",
        }
        return styles.get(severity, "")

    def _risk_style(self, level: RiskLevel) -> str:
        """Get the style for a risk level."""
        if not self.colorize:
            return ""

        styles = {
            RiskLevel.CRITICAL: "bold red",
            RiskLevel.HIGH: "red",
            RiskLevel.MEDIUM: "yellow",
            RiskLevel.LOW: "green",
        }
        return styles.get(level, "")

    def _print_changes(
        self,
        console: Console,
        title: str,
        icon: str,
        severity: Severity,
        changes: list[Change],
    ) -> None:
        if not changes:
            return

        style = self._severity_style(severity) or "default"
        console.print(f"  {icon} [bold]{title}[/bold] ({len(changes)})")
        for change in changes:
            console.print(f"    [{style}]{escape(change.path)}[/{style}]", highlight=False)
            console.print(f"      {escape(change.description)} [dim]({change.type.value})[/dim]")
        console.print()

    def format(self, changelog: Changelog) -> str:
        """Format a changelog as text."""
        output = StringIO()
        console = Console(file=output, force_terminal=self.colorize, width=120)
        risk = changelog.risk_assessment

        # Header
        console.print()
        console.print(
            Panel.fit(
                f"[bold]Changelog: {escape(changelog.api_name)}[/bold]\n"
                f"{changelog.from_version or 'N/A'} → {changelog.to_version or 'N/A'}",
                border_style="blue",
            )
        )
        console.print()

        # Summary
        risk_style = self._risk_style(risk.level) or "default"
        console.print("[bold]Summary[/bold]")
        console.print(f"  Total Changes: {changelog.total_changes}")
        console.print(f"  Breaking Changes: {risk.breaking_changes_count}")
        console.print(
            f"  Risk: [{risk_style}]{risk.level.value}[/{risk_style}] "
            f"({risk.overall_score}/100)"
        )
        console.print(f"  Recommended Version Bump: {risk.semver_recommendation.value}")
        if risk.recommendation:
            console.print(f"  [dim]{escape(risk.recommendation)}[/dim]")
        console.print()

        if not changelog.changes:
            console.print("[green]No changes detected.[/green]")
            console.print()
            return output.getvalue()

        additions, others = split_info_changes(changelog.changes)
        for severity, icon, title in SEVERITY_SECTIONS:
            if severity == Severity.INFO:
                changes = additions
            else:
                changes = changelog.get_changes_by_severity(severity)
            self._print_changes(console, title, icon, severity, changes)
        self._print_changes(console, OTHER_CHANGES_TITLE, "ℹ️ ", Severity.INFO, others)

        # Migration guidance for surfaced changes
        if changelog.breaking_changes:
            table = Table(title="Migration Guide", show_header=True, header_style="bold")
            table.add_column("Impact", justify="right")
            table.add_column("Severity")
            table.add_column("Path", style="cyan")
            table.add_column("Migration")
            for bc in changelog.breaking_changes:
                table.add_row(
                    str(bc.impact_score),
                    bc.severity.value,
                    escape(bc.path),
                    escape(bc.migration_suggestion or ""),
                )
            console.print(table)
            console.print()

        return output.getvalue()
