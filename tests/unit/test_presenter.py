"""Tests for report-mode presentation."""

from unittest.mock import Mock

import pytest
from rich.console import Console

from depaudit.client import parse_audit_result
from depaudit.models import AuditResult, RemediationAction, VulnerabilityCounts
from depaudit.presenter import ConsolePrinter, ReportPresenter


class TestReportPresenter:
    """Test exit signal and forwarding."""

    def test_clean_report_exits_zero(self):
        printer = Mock()
        result = AuditResult(vulnerabilities=VulnerabilityCounts())

        assert ReportPresenter(printer).present(result) == 0
        printer.print_full_report.assert_called_once_with(result)

    @pytest.mark.parametrize("severity", ["low", "moderate", "high", "critical"])
    def test_any_vulnerability_exits_one(self, severity):
        printer = Mock()
        result = AuditResult(vulnerabilities=VulnerabilityCounts(**{severity: 1}))

        assert ReportPresenter(printer).present(result) == 1
        assert printer.print_full_report.call_args.args[0] is result

    def test_info_is_not_counted(self):
        result = AuditResult(vulnerabilities=VulnerabilityCounts(info=4))

        assert ReportPresenter(Mock()).present(result) == 0


class TestConsolePrinter:
    """Test the rich report renderer."""

    def test_renders_advisories_and_actions(self, sample_audit_response):
        console = Console(record=True, width=120)

        ConsolePrinter(console).print_full_report(parse_audit_result(sample_audit_response))

        text = console.export_text()
        assert "Prototype Pollution" in text
        assert "found 2 vulnerabilities (1 moderate, 1 high)" in text
        assert "update a@1.2.0" in text
        assert "install c@3.0.0" in text

    def test_renders_clean_report(self):
        console = Console(record=True)

        ConsolePrinter(console).print_full_report(AuditResult(vulnerabilities=VulnerabilityCounts()))

        assert "found 0 vulnerabilities" in console.export_text()

    def test_marks_major_changes(self):
        console = Console(record=True, width=120)
        result = AuditResult(
            vulnerabilities=VulnerabilityCounts(critical=1),
            actions=[RemediationAction(module="m", target="2.0.0", kind="install", is_major=True)],
        )

        ConsolePrinter(console).print_full_report(result)

        assert "install m@2.0.0 (semver-major)" in console.export_text()

    def test_advisory_fields_are_not_markup(self):
        """Null severity and bracketed text print literally."""
        console = Console(record=True, width=120)
        result = AuditResult(
            vulnerabilities=VulnerabilityCounts(low=1),
            advisories={
                "7": {
                    "severity": None,
                    "module_name": "[bold]x",
                    "title": "Bad [link]",
                    "patched_versions": "[>=2.0.0]",
                    "url": "https://example.com/[7]",
                }
            },
        )

        ConsolePrinter(console).print_full_report(result)

        text = console.export_text()
        assert "unknown" in text
        assert "[bold]x Bad [link]" in text
        assert "patched in [>=2.0.0]" in text
        assert "https://example.com/[7]" in text
