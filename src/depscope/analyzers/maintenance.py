"""Maintenance signal extraction from registry publish times."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from depscope.models.schemas import MaintenanceSignal


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse a registry ISO-8601 timestamp such as ``2024-01-02T03:04:05.678Z``."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def last_publish_time(package_info: dict[str, Any]) -> datetime | None:
    """Find when the package was last published.

    Prefers the publish time of the ``latest`` dist-tag, then the
    ``modified`` time, then the most recent version timestamp. Returns
    None if no publish time can be found.
    """
    times = package_info.get("time")
    if not isinstance(times, dict) or not times:
        return None

    latest_tag = (package_info.get("dist-tags") or {}).get("latest")
    if latest_tag and times.get(latest_tag):
        return _parse_timestamp(times[latest_tag])
    if times.get("modified"):
        return _parse_timestamp(times["modified"])

    latest = None
    for key, value in times.items():
        if key == "created":
            continue
        parsed = _parse_timestamp(value)
        if parsed is not None and (latest is None or parsed > latest):
            latest = parsed
    return latest


def analyze_maintenance(
    package_info: dict[str, Any] | None,
    now: datetime | None = None,
) -> MaintenanceSignal:
    """Derive the maintenance signal from a registry document.

    Args:
        package_info: Registry metadata for the package.
        now: Reference time, defaults to the current UTC time.

    Returns:
        MaintenanceSignal; unknown (abandoned, infinite age) when no
        publish time can be determined.
    """
    if not package_info:
        return MaintenanceSignal.unknown()

    published = last_publish_time(package_info)
    if published is None:
        return MaintenanceSignal.unknown()

    now = now or datetime.now(timezone.utc)
    days = math.floor((now - published).total_seconds() / 86400)
    return MaintenanceSignal.from_days(days, last_publish_date=published.date())
