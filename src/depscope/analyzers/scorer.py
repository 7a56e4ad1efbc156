"""Score calculator for dependency health signals."""

import math
from collections.abc import Iterable
from typing import Protocol

from depscope.models.schemas import (
    Grade,
    MaintenanceStatus,
    Severity,
    SignalBundle,
    Trend,
)

KIB = 1024
MIB = 1024 * 1024

# Weekly download bands, checked with a strict ">" (first match wins)
DOWNLOAD_BANDS = (
    (1_000_000, 20),
    (100_000, 15),
    (10_000, 10),
    (1_000, 5),
)

# Unpacked size bands, checked with a strict "<" (first match wins)
SIZE_BANDS = (
    (100 * KIB, 15),
    (500 * KIB, 12),
    (1 * MIB, 8),
    (5 * MIB, 4),
)

# Partial credit when the registry does not report a size
UNKNOWN_SIZE_POINTS = 8

# Lower bound of each grade, inclusive
GRADE_THRESHOLDS = (
    (80, Grade.A),
    (60, Grade.B),
    (40, Grade.C),
    (20, Grade.D),
)


class Scored(Protocol):
    score: int


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with ties going up, e.g. 64.5 -> 65 and -2.5 -> -2."""
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


class Scorer:
    """Calculates dependency and project health scores.

    Points per dimension (total 100):
    - Maintenance: 30
    - Popularity: 20
    - Size: 15
    - Security: 25
    - Trend: 10
    """

    MAINTENANCE_POINTS = {
        MaintenanceStatus.ACTIVE: 30,
        MaintenanceStatus.STALE: 15,
        MaintenanceStatus.ABANDONED: 0,
    }

    SECURITY_POINTS = {
        Severity.NONE: 25,
        Severity.LOW: 15,
        Severity.MODERATE: 8,
        Severity.HIGH: 2,
        Severity.CRITICAL: 0,
    }

    TREND_POINTS = {
        Trend.GROWING: 10,
        Trend.STABLE: 7,
        Trend.DECLINING: 2,
    }

    # Project aggregation weights
    PRODUCTION_WEIGHT = 1.0
    DEV_WEIGHT = 0.5

    def score(self, signals: SignalBundle) -> int:
        """Calculate a 0-100 score from one dependency's signals.

        Missing sub-records contribute nothing, except that a known
        size record with an unknown byte count earns partial credit.

        Args:
            signals: Signal bundle for the dependency.

        Returns:
            Integer score clamped to [0, 100].
        """
        total = (
            self._maintenance_points(signals)
            + self._popularity_points(signals)
            + self._size_points(signals)
            + self._security_points(signals)
            + self._trend_points(signals)
        )
        return max(0, min(100, total))

    def grade(self, score: int) -> Grade:
        """Convert a numeric score to a letter grade."""
        for lower_bound, grade in GRADE_THRESHOLDS:
            if score >= lower_bound:
                return grade
        return Grade.F

    def project_score(
        self,
        results: Iterable[Scored],
        dev_results: Iterable[Scored] = (),
    ) -> int:
        """Weighted mean of dependency scores.

        Production dependencies weigh 1.0 and dev dependencies 0.5.
        Returns 0 when there is nothing to average.
        """
        weighted_sum = 0.0
        total_weight = 0.0

        for result in results:
            weighted_sum += result.score * self.PRODUCTION_WEIGHT
            total_weight += self.PRODUCTION_WEIGHT

        for result in dev_results:
            weighted_sum += result.score * self.DEV_WEIGHT
            total_weight += self.DEV_WEIGHT

        if total_weight == 0:
            return 0
        return int(round_half_up(weighted_sum / total_weight))

    def _maintenance_points(self, signals: SignalBundle) -> int:
        if signals.maintenance is None:
            return 0
        return self.MAINTENANCE_POINTS.get(signals.maintenance.status, 0)

    def _popularity_points(self, signals: SignalBundle) -> int:
        if signals.popularity is None:
            return 0
        downloads = signals.popularity.weekly_downloads
        for threshold, points in DOWNLOAD_BANDS:
            if downloads > threshold:
                return points
        return 0

    def _size_points(self, signals: SignalBundle) -> int:
        if signals.size is None:
            return 0
        size_bytes = signals.size.unpacked_size_bytes
        if size_bytes == 0:
            return UNKNOWN_SIZE_POINTS
        for threshold, points in SIZE_BANDS:
            if size_bytes < threshold:
                return points
        return 0

    def _security_points(self, signals: SignalBundle) -> int:
        if signals.security is None:
            return 0
        return self.SECURITY_POINTS.get(signals.security.severity, 0)

    def _trend_points(self, signals: SignalBundle) -> int:
        # Trend rides on the popularity record
        if signals.popularity is None:
            return 0
        return self.TREND_POINTS.get(signals.popularity.trend, 0)
