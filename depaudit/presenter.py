"""Report-mode output and exit status."""

from typing import Protocol

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import AuditResult

SEVERITIES = ("low", "moderate", "high", "critical")

_SEVERITY_STYLES = {
    "info": "dim",
    "low": "cyan",
    "moderate": "yellow",
    "high": "red",
    "critical": "bold red",
}


class Printer(Protocol):
    def print_full_report(self, result: AuditResult) -> None: ...


class ConsolePrinter:
    """Renders an audit report on a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def print_full_report(self, result: AuditResult) -> None:
        counts = result.vulnerabilities
        if counts.total == 0:
            self.console.print("found 0 vulnerabilities", style="green")
            return

        for advisory in result.advisories.values():
            severity = str(advisory.get("severity") or "unknown")
            self.console.print(
                f"[{_SEVERITY_STYLES.get(severity, 'white')}]{escape(severity):<9}[/] "
                f"{escape(str(advisory.get('module_name') or '?'))} {escape(str(advisory.get('title') or ''))}"
            )
            if advisory.get("patched_versions"):
                self.console.print(f"          patched in {escape(str(advisory['patched_versions']))}")
            if advisory.get("url"):
                self.console.print(f"          {escape(str(advisory['url']))}")

        table = Table(title="Vulnerabilities")
        for severity in SEVERITIES:
            table.add_column(severity, style=_SEVERITY_STYLES[severity], justify="right")
        table.add_row(*(str(getattr(counts, severity)) for severity in SEVERITIES))
        self.console.print(table)

        summary = ", ".join(
            f"{getattr(counts, severity)} {severity}"
            for severity in SEVERITIES
            if getattr(counts, severity)
        )
        self.console.print(f"found {counts.total} vulnerabilities ({summary})")

        fixable = [action for action in result.actions if action.kind in ("install", "update")]
        if fixable:
            self.console.print("run `depaudit fix` to fix them, or review the actions below:")
            for action in fixable:
                marker = " (semver-major)" if action.is_major else ""
                self.console.print(f"  {action.kind} {action.spec}{marker}")


class ReportPresenter:
    """Computes the exit signal and forwards the report to a printer."""

    def __init__(self, printer: Printer | None = None):
        self.printer = printer or ConsolePrinter()

    def present(self, result: AuditResult) -> int:
        exit_code = 1 if result.vulnerabilities.total > 0 else 0
        self.printer.print_full_report(result)
        return exit_code
