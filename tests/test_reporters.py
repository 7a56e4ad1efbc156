"""Tests for the JSON and terminal reporters."""

import io
import json
from datetime import date

from rich.console import Console

from depscope.analyzers.scorer import Scorer
from depscope.models.schemas import (
    AlternativeSuggestion,
    DependencyResult,
    DependencyType,
    MaintenanceSignal,
    PopularitySignal,
    ProjectResult,
    SecuritySignal,
    Severity,
    SizeSignal,
    Trend,
)
from depscope.reporters import json as json_reporter
from depscope.reporters import terminal as terminal_reporter
from depscope.reporters.options import ReportOptions


def dep(name, score, dependency_type=DependencyType.PRODUCTION, **kwargs) -> DependencyResult:
    defaults = dict(
        maintenance=MaintenanceSignal.from_days(12, last_publish_date=date(2025, 5, 20)),
        popularity=PopularitySignal(weekly_downloads=1_234_567, trend=Trend.GROWING, trend_percent=12.5),
        size=SizeSignal(unpacked_size_bytes=214_000, unpacked_size_human="209 KB"),
        security=SecuritySignal.clean(),
    )
    defaults.update(kwargs)
    return DependencyResult(
        name=name,
        version_constraint="^1.0.0",
        dependency_type=dependency_type,
        latest_version="1.2.3",
        score=score,
        grade=Scorer().grade(score),
        **defaults,
    )


def project(dependencies, dev_dependencies=()) -> ProjectResult:
    scorer = Scorer()
    score = scorer.project_score(dependencies, list(dev_dependencies))
    return ProjectResult(
        dependencies=dependencies,
        dev_dependencies=list(dev_dependencies),
        project_score=score,
        project_grade=scorer.grade(score),
    )


def sample_project() -> ProjectResult:
    return project(
        [
            dep("react", 95),
            dep(
                "moment",
                35,
                maintenance=MaintenanceSignal.from_days(900, last_publish_date=date(2022, 12, 13)),
                alternative=AlternativeSuggestion(name="date-fns", reason="Modular and tree-shakeable"),
            ),
            dep(
                "ghost",
                0,
                maintenance=MaintenanceSignal.unknown(),
                popularity=PopularitySignal.unknown(),
                size=SizeSignal.unknown(),
                error="Package not found or network error",
            ),
        ],
        [dep("jest", 70, DependencyType.DEV)],
    )


# --- JSON ---


def test_json_report_shape():
    report = json.loads(json_reporter.render(sample_project(), ReportOptions()))

    assert report["projectScore"] == 47  # (95 + 35 + 0 + 70 * 0.5) / 3.5
    assert report["projectGrade"] == "C"
    assert report["totalDependencies"] == 3
    assert "scannedAt" in report

    react = next(entry for entry in report["dependencies"] if entry["name"] == "react")
    assert react == {
        "name": "react",
        "type": "production",
        "version": "^1.0.0",
        "latestVersion": "1.2.3",
        "score": 95,
        "grade": "A",
        "maintenance": {"lastPublish": "2025-05-20", "daysSincePublish": 12, "status": "active"},
        "popularity": {"weeklyDownloads": 1_234_567, "trend": "growing", "trendPercent": 12.5},
        "size": {"unpackedSize": 214_000, "unpackedSizeHuman": "209 KB"},
        "security": {"vulnerabilities": 0, "severity": "none"},
    }


def test_json_sorted_worst_first():
    report = json_reporter.build_report(sample_project(), ReportOptions())
    assert [entry["name"] for entry in report["dependencies"]] == ["ghost", "moment", "react"]


def test_json_unknown_publish_age_is_null():
    report = json_reporter.build_report(sample_project(), ReportOptions())
    ghost = report["dependencies"][0]
    assert ghost["maintenance"] == {"lastPublish": "unknown", "daysSincePublish": None, "status": "abandoned"}
    assert ghost["error"] == "Package not found or network error"


def test_json_limit():
    report = json_reporter.build_report(sample_project(), ReportOptions(limit=1))
    assert [entry["name"] for entry in report["dependencies"]] == ["ghost"]
    assert report["totalDependencies"] == 3


def test_json_dev_dependencies():
    report = json_reporter.build_report(sample_project(), ReportOptions(dev=True))
    assert report["totalDependencies"] == 4
    assert report["summary"]["devCount"] == 1
    jest = next(entry for entry in report["dependencies"] if entry["name"] == "jest")
    assert jest["type"] == "dev"


def test_json_summary():
    summary = json_reporter.build_report(sample_project(), ReportOptions())["summary"]
    assert summary["grades"] == {"A": 1, "B": 0, "C": 0, "D": 1, "F": 1}
    assert summary["abandonedCount"] == 2
    assert summary["vulnerableCount"] == 0
    assert summary["productionCount"] == 3
    assert summary["devCount"] == 0


def test_json_quiet_omits_summary():
    report = json_reporter.build_report(sample_project(), ReportOptions(quiet=True))
    assert "summary" not in report


def test_json_alternatives_only_with_fix():
    plain = json_reporter.build_report(sample_project(), ReportOptions())
    assert all("alternative" not in entry for entry in plain["dependencies"])

    fixed = json_reporter.build_report(sample_project(), ReportOptions(fix=True))
    moment = next(entry for entry in fixed["dependencies"] if entry["name"] == "moment")
    assert moment["alternative"] == {"name": "date-fns", "reason": "Modular and tree-shakeable"}


def test_json_missing_signal_is_null():
    result = project([dep("partial", 75, security=None)])
    entry = json_reporter.build_report(result, ReportOptions())["dependencies"][0]
    assert entry["security"] is None


# --- Terminal ---


def render_text(result, options) -> str:
    buffer = io.StringIO()
    console = Console(file=buffer, width=120, color_system=None, force_terminal=False)
    terminal_reporter.render(result, options, console)
    return buffer.getvalue()


def test_terminal_report_lists_dependencies_and_summary():
    text = render_text(sample_project(), ReportOptions())

    assert "Dependency Health Report" in text
    assert "Production Dependencies (3)" in text
    assert "react" in text
    assert "1,234,567/wk" in text
    assert "209 KB" in text
    assert "Package not found or network error" in text
    assert "Project Health:" in text
    assert "47/100" in text
    assert "Total: 3 dependencies" in text
    assert "2 abandoned packages" in text
    assert "1 healthy package (A or B)" in text
    assert "jest" not in text


def test_terminal_report_worst_first():
    text = render_text(sample_project(), ReportOptions())
    assert text.index("ghost") < text.index("moment") < text.index("react")


def test_terminal_report_with_dev():
    text = render_text(sample_project(), ReportOptions(dev=True))
    assert "Dev Dependencies (1)" in text
    assert "Total: 4 dependencies (3 prod, 1 dev)" in text


def test_terminal_report_fix_shows_alternatives():
    assert "Consider: date-fns" not in render_text(sample_project(), ReportOptions())
    assert "Consider: date-fns" in render_text(sample_project(), ReportOptions(fix=True))


def test_terminal_report_vulnerabilities():
    result = project([dep("lodash", 60, security=SecuritySignal(vulnerability_count=2, severity=Severity.HIGH))])
    text = render_text(result, ReportOptions())
    assert "2 vulns (high)" in text
    assert "1 package with known vulnerabilities" in text


def test_terminal_report_missing_signals():
    result = project([dep("partial", 45, security=None, popularity=None)])
    text = render_text(result, ReportOptions())
    assert "security unknown" in text
    assert "?/wk" in text


def test_terminal_quiet_shows_only_offenders():
    text = render_text(sample_project(), ReportOptions(quiet=True))
    assert "depscope: C 47/100 (3 deps)" in text
    assert "Issues:" in text
    assert "ghost" in text
    assert "moment (abandoned)" in text
    assert "react" not in text
    assert "Project Health" not in text


def test_terminal_limit():
    text = render_text(sample_project(), ReportOptions(limit=2))
    assert "ghost" in text
    assert "moment" in text
    assert "react" not in text


def test_terminal_error_text_is_not_markup():
    result = project([dep("weird", 0, error="bad [bold]thing[/bold]")])
    assert "bad [bold]thing[/bold]" in render_text(result, ReportOptions())
