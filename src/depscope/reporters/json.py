"""JSON report for CI pipelines and programmatic consumers."""

import json
import math
from typing import Any

from depscope.models.schemas import (
    DependencyResult,
    Grade,
    MaintenanceStatus,
    ProjectResult,
)
from depscope.reporters.options import ReportOptions


def _maintenance_dict(dep: DependencyResult) -> dict[str, Any] | None:
    if dep.maintenance is None:
        return None
    days = dep.maintenance.days_since_publish
    return {
        "lastPublish": dep.maintenance.last_publish_date.isoformat() if dep.maintenance.last_publish_date else "unknown",
        # JSON has no infinity
        "daysSincePublish": None if math.isinf(days) else int(days),
        "status": dep.maintenance.status.value,
    }


def _popularity_dict(dep: DependencyResult) -> dict[str, Any] | None:
    if dep.popularity is None:
        return None
    return {
        "weeklyDownloads": dep.popularity.weekly_downloads,
        "trend": dep.popularity.trend.value,
        "trendPercent": dep.popularity.trend_percent,
    }


def _size_dict(dep: DependencyResult) -> dict[str, Any] | None:
    if dep.size is None:
        return None
    return {
        "unpackedSize": dep.size.unpacked_size_bytes,
        "unpackedSizeHuman": dep.size.unpacked_size_human,
    }


def _security_dict(dep: DependencyResult) -> dict[str, Any] | None:
    if dep.security is None:
        return None
    return {
        "vulnerabilities": dep.security.vulnerability_count,
        "severity": dep.security.severity.value,
    }


def format_dependency(dep: DependencyResult, options: ReportOptions) -> dict[str, Any]:
    """Format a single dependency for JSON output."""
    entry = {
        "name": dep.name,
        "type": dep.dependency_type.value,
        "version": dep.version_constraint,
        "latestVersion": dep.latest_version,
        "score": dep.score,
        "grade": dep.grade.value,
        "maintenance": _maintenance_dict(dep),
        "popularity": _popularity_dict(dep),
        "size": _size_dict(dep),
        "security": _security_dict(dep),
    }
    if options.fix and dep.alternative:
        entry["alternative"] = dep.alternative.model_dump()
    if dep.error:
        entry["error"] = dep.error
    return entry


def build_summary(result: ProjectResult, options: ReportOptions) -> dict[str, Any]:
    """Grade distribution and problem counts for in-scope dependencies."""
    grades = {grade.value: 0 for grade in Grade}
    abandoned = 0
    vulnerable = 0

    for dep in result.in_scope(options.dev):
        grades[dep.grade.value] += 1
        if dep.maintenance and dep.maintenance.status == MaintenanceStatus.ABANDONED:
            abandoned += 1
        if dep.security and dep.security.vulnerability_count > 0:
            vulnerable += 1

    return {
        "grades": grades,
        "abandonedCount": abandoned,
        "vulnerableCount": vulnerable,
        "productionCount": len(result.dependencies),
        "devCount": len(result.dev_dependencies) if options.dev else 0,
    }


def build_report(result: ProjectResult, options: ReportOptions) -> dict[str, Any]:
    """Build the JSON report object.

    Dependencies are sorted worst score first and truncated to
    ``options.limit`` when set.
    """
    in_scope = result.in_scope(options.dev)
    entries = sorted(
        (format_dependency(dep, options) for dep in in_scope),
        key=lambda entry: entry["score"],
    )
    if options.limit > 0:
        entries = entries[: options.limit]

    report = {
        "projectScore": result.project_score,
        "projectGrade": result.project_grade.value,
        "totalDependencies": len(in_scope),
        "scannedAt": result.scanned_at.isoformat(),
        "dependencies": entries,
    }
    if not options.quiet:
        report["summary"] = build_summary(result, options)
    return report


def render(result: ProjectResult, options: ReportOptions) -> str:
    """Render the report as indented JSON text."""
    return json.dumps(build_report(result, options), indent=2)
