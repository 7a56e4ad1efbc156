"""Pydantic models for dependency health data."""

import math
from datetime import date, datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class Ecosystem(str, Enum):
    """Package ecosystems."""

    NPM = "npm"


class MaintenanceStatus(str, Enum):
    """Publish recency buckets."""

    ACTIVE = "active"  # Published within ~6 months
    STALE = "stale"  # 6-18 months
    ABANDONED = "abandoned"  # 18+ months, or never determined


class Trend(str, Enum):
    """Direction of download volume versus ~6 months ago."""

    GROWING = "growing"
    STABLE = "stable"
    DECLINING = "declining"


class Severity(str, Enum):
    """Highest known vulnerability severity."""

    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class Grade(str, Enum):
    """Letter grade bucketing of a 0-100 score."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class DependencyType(str, Enum):
    """Which manifest section a dependency was declared in."""

    PRODUCTION = "production"
    DEV = "dev"


# Publish age thresholds in days
STALE_AFTER_DAYS = 180
ABANDONED_AFTER_DAYS = 540


def status_for_days(days: int | float) -> MaintenanceStatus:
    """Bucket a publish age; an infinite age is abandoned."""
    if days < STALE_AFTER_DAYS:
        return MaintenanceStatus.ACTIVE
    if days < ABANDONED_AFTER_DAYS:
        return MaintenanceStatus.STALE
    return MaintenanceStatus.ABANDONED


class DependencySpec(BaseModel, frozen=True):
    """A dependency as declared in the manifest."""

    name: str
    version_constraint: str


class Manifest(BaseModel):
    """Dependencies declared by a project, in declaration order."""

    name: str
    production: list[DependencySpec] = Field(default_factory=list)
    dev: list[DependencySpec] = Field(default_factory=list)


# --- Signals ---


class MaintenanceSignal(BaseModel, frozen=True):
    """Publish recency of a package."""

    last_publish_date: date | None = None
    days_since_publish: int | float = math.inf
    status: MaintenanceStatus = MaintenanceStatus.ABANDONED

    @model_validator(mode="after")
    def status_matches_days(self) -> "MaintenanceSignal":
        """Reject a status that disagrees with the publish age."""
        expected = status_for_days(self.days_since_publish)
        if self.status != expected:
            msg = (
                f"Status {self.status.value} does not match {self.days_since_publish} "
                f"days since publish (expected {expected.value})"
            )
            raise ValueError(msg)
        return self

    @classmethod
    def from_days(cls, days: int | float, last_publish_date: date | None = None) -> "MaintenanceSignal":
        """Build a signal whose status is derived from the publish age."""
        return cls(last_publish_date=last_publish_date, days_since_publish=days, status=status_for_days(days))

    @classmethod
    def unknown(cls) -> "MaintenanceSignal":
        """No publish date could be determined."""
        return cls.from_days(math.inf)

    @property
    def is_unknown(self) -> bool:
        return math.isinf(self.days_since_publish)


class PopularitySignal(BaseModel, frozen=True):
    """Download volume and its trend."""

    weekly_downloads: int = Field(default=0, ge=0)
    trend: Trend = Trend.STABLE
    trend_percent: float = 0.0

    @classmethod
    def unknown(cls) -> "PopularitySignal":
        return cls()


class SizeSignal(BaseModel, frozen=True):
    """Installed size of the latest version."""

    unpacked_size_bytes: int = Field(default=0, ge=0)  # 0 = unknown
    unpacked_size_human: str = "unknown"

    @classmethod
    def unknown(cls) -> "SizeSignal":
        return cls()


class SecuritySignal(BaseModel, frozen=True):
    """Known vulnerabilities affecting the package."""

    vulnerability_count: int = Field(default=0, ge=0)
    severity: Severity = Severity.NONE

    @classmethod
    def clean(cls) -> "SecuritySignal":
        return cls()


class SignalBundle(BaseModel, frozen=True):
    """Everything the scorer looks at for one dependency.

    Any sub-record may be missing; the scorer treats a missing record as
    that dimension's worst-case contribution.
    """

    maintenance: MaintenanceSignal | None = None
    popularity: PopularitySignal | None = None
    size: SizeSignal | None = None
    security: SecuritySignal | None = None


class AlternativeSuggestion(BaseModel, frozen=True):
    """A curated replacement for a package."""

    name: str
    reason: str


# --- Results ---


class DependencyResult(BaseModel, frozen=True):
    """Complete analysis of a single dependency."""

    name: str
    version_constraint: str
    dependency_type: DependencyType = DependencyType.PRODUCTION
    latest_version: str = "unknown"

    maintenance: MaintenanceSignal | None = None
    popularity: PopularitySignal | None = None
    size: SizeSignal | None = None
    security: SecuritySignal | None = None
    alternative: AlternativeSuggestion | None = None

    score: int = Field(ge=0, le=100)
    grade: Grade

    # Set when signal acquisition failed entirely
    error: str | None = None

    @property
    def signals(self) -> SignalBundle:
        return SignalBundle(
            maintenance=self.maintenance,
            popularity=self.popularity,
            size=self.size,
            security=self.security,
        )


class ProjectResult(BaseModel, frozen=True):
    """Analysis of every in-scope dependency of a project."""

    dependencies: list[DependencyResult] = Field(default_factory=list)
    dev_dependencies: list[DependencyResult] = Field(default_factory=list)
    project_score: int = Field(ge=0, le=100)
    project_grade: Grade
    scanned_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def in_scope(self, include_dev: bool = False) -> list[DependencyResult]:
        """Production dependencies, followed by dev dependencies when included."""
        if include_dev:
            return [*self.dependencies, *self.dev_dependencies]
        return list(self.dependencies)

    def has_failing(self, include_dev: bool = False) -> bool:
        """True if any in-scope dependency was graded F."""
        return any(dep.grade == Grade.F for dep in self.in_scope(include_dev))
