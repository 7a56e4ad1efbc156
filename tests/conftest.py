from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import unquote

import httpx
import pytest

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_package_info(
    name: str = "left-pad",
    latest: str = "1.0.0",
    days_ago: int | None = 30,
    unpacked_size: int | None = 50_000,
) -> dict[str, Any]:
    """Build a registry document shaped like registry.npmjs.org/{name}."""
    version: dict[str, Any] = {"name": name, "version": latest, "dist": {}}
    if unpacked_size is not None:
        version["dist"]["unpackedSize"] = unpacked_size

    info: dict[str, Any] = {
        "name": name,
        "dist-tags": {"latest": latest},
        "versions": {latest: version},
    }
    if days_ago is not None:
        published = (NOW - timedelta(days=days_ago)).isoformat().replace("+00:00", "Z")
        info["time"] = {"created": "2015-01-01T00:00:00.000Z", latest: published}
    return info


def make_range(recent_per_day: int, prior_per_day: int, length: int = 365) -> dict[str, Any]:
    """Daily downloads with constant values in the recent and prior windows."""
    counts = [0] * length
    for i in range(length - 7, length):
        counts[i] = recent_per_day
    start = max(0, length - 182 - 7)
    for i in range(start, start + 7):
        counts[i] = prior_per_day
    return {"downloads": [{"day": f"d{i}", "downloads": c} for i, c in enumerate(counts)]}


class FakeRegistry:
    """In-memory npm registry and downloads API behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.packages: dict[str, dict[str, Any]] = {}
        self.weekly: dict[str, int] = {}
        self.ranges: dict[str, dict[str, Any]] = {}
        self.failures: dict[str, int] = {}  # name -> HTTP status for every endpoint
        self.requests: list[str] = []

    def add(
        self,
        name: str,
        weekly: int = 2_000_000,
        recent_per_day: int = 300_000,
        prior_per_day: int = 200_000,
        **info_kwargs: Any,
    ) -> None:
        self.packages[name] = make_package_info(name=name, **info_kwargs)
        self.weekly[name] = weekly
        self.ranges[name] = make_range(recent_per_day, prior_per_day)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = unquote(request.url.raw_path.decode("ascii").split("?")[0])
        self.requests.append(f"{request.url.host}{path}")

        if request.url.host == "registry.npmjs.org":
            name = path.lstrip("/")
            if name in self.failures:
                return httpx.Response(self.failures[name])
            if name not in self.packages:
                return httpx.Response(404, json={"error": "Not found"})
            return httpx.Response(200, json=self.packages[name])

        for prefix, source in (
            ("/downloads/point/last-week/", self.weekly),
            ("/downloads/range/last-year/", self.ranges),
        ):
            if path.startswith(prefix):
                name = path[len(prefix):]
                if name in self.failures:
                    return httpx.Response(self.failures[name])
                if name not in source:
                    return httpx.Response(404, json={"error": "package not found"})
                value = source[name]
                payload = {"downloads": value, "package": name} if isinstance(value, int) else value
                return httpx.Response(200, json=payload)

        return httpx.Response(404)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()
