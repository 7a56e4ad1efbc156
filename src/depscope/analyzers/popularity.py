"""Popularity signal extraction from download statistics."""

from __future__ import annotations

import asyncio
from typing import Any

from depscope.adapters.base import BaseAdapter
from depscope.analyzers.scorer import round_half_up
from depscope.models.schemas import PopularitySignal, Trend

WINDOW_DAYS = 7
# The comparison window starts roughly 26 weeks before the recent one
PRIOR_WINDOW_OFFSET_DAYS = 182
TREND_THRESHOLD_PERCENT = 10


def window_totals(daily_downloads: list[int]) -> tuple[int, int]:
    """Sum the most recent week and the week ~6 months before it.

    Args:
        daily_downloads: Daily counts, oldest first.

    Returns:
        (recent, prior) download totals.
    """
    recent = sum(daily_downloads[-WINDOW_DAYS:])
    start = max(0, len(daily_downloads) - PRIOR_WINDOW_OFFSET_DAYS - WINDOW_DAYS)
    prior = sum(daily_downloads[start:start + WINDOW_DAYS])
    return recent, prior


def derive_trend(recent: int, prior: int) -> tuple[Trend, float]:
    """Classify the change between two download windows.

    Returns:
        (trend, percent change rounded to one decimal).
    """
    if prior > 0:
        percent = round_half_up((recent - prior) / prior * 100, 1)
        if percent > TREND_THRESHOLD_PERCENT:
            return Trend.GROWING, percent
        if percent < -TREND_THRESHOLD_PERCENT:
            return Trend.DECLINING, percent
        return Trend.STABLE, percent
    if recent > 0:
        return Trend.GROWING, 100.0
    return Trend.STABLE, 0.0


def _daily_counts(range_data: dict[str, Any] | None) -> list[int] | None:
    if not range_data:
        return None
    days = range_data.get("downloads")
    if not isinstance(days, list):
        return None
    counts = []
    for day in days:
        if not isinstance(day, dict):
            return None
        count = day.get("downloads") or 0
        if not isinstance(count, int):
            return None
        counts.append(count)
    return counts


async def analyze_popularity(adapter: BaseAdapter, name: str) -> PopularitySignal:
    """Fetch weekly downloads and the download trend concurrently.

    Missing download data counts as zero downloads; missing trend data
    counts as a stable trend.
    """
    weekly_data, range_data = await asyncio.gather(
        adapter.get_weekly_downloads(name),
        adapter.get_download_range(name),
    )

    weekly_downloads = (weekly_data or {}).get("downloads") or 0
    if not isinstance(weekly_downloads, int) or weekly_downloads < 0:
        weekly_downloads = 0

    trend, percent = Trend.STABLE, 0.0
    counts = _daily_counts(range_data)
    if counts is not None:
        trend, percent = derive_trend(*window_totals(counts))

    return PopularitySignal(
        weekly_downloads=weekly_downloads,
        trend=trend,
        trend_percent=percent,
    )
