"""Data models and schemas."""

from depscope.models.schemas import (
    AlternativeSuggestion,
    DependencyResult,
    DependencySpec,
    DependencyType,
    Grade,
    MaintenanceSignal,
    MaintenanceStatus,
    Manifest,
    PopularitySignal,
    ProjectResult,
    SecuritySignal,
    Severity,
    SignalBundle,
    SizeSignal,
    Trend,
)

__all__ = [
    "AlternativeSuggestion",
    "DependencyResult",
    "DependencySpec",
    "DependencyType",
    "Grade",
    "MaintenanceSignal",
    "MaintenanceStatus",
    "Manifest",
    "PopularitySignal",
    "ProjectResult",
    "SecuritySignal",
    "Severity",
    "SignalBundle",
    "SizeSignal",
    "Trend",
]
