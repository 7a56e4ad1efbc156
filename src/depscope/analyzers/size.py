"""Size signal extraction."""

from typing import Any

from depscope.analyzers.scorer import KIB, MIB, round_half_up
from depscope.models.schemas import SizeSignal

GIB = 1024 * MIB


def format_bytes(size_bytes: int) -> str:
    """Format a byte count for display; 0 means unknown."""
    if size_bytes == 0:
        return "unknown"
    if size_bytes < KIB:
        return f"{size_bytes} B"
    if size_bytes < MIB:
        return f"{int(round_half_up(size_bytes / KIB))} KB"
    if size_bytes < GIB:
        return f"{size_bytes / MIB:.1f} MB"
    return f"{size_bytes / GIB:.1f} GB"


def analyze_size(package_info: dict[str, Any] | None) -> SizeSignal:
    """Read the unpacked size of the latest version from registry metadata."""
    if not package_info:
        return SizeSignal.unknown()

    size_bytes = 0
    latest_tag = (package_info.get("dist-tags") or {}).get("latest")
    versions = package_info.get("versions") or {}
    if latest_tag and isinstance(versions.get(latest_tag), dict):
        dist = versions[latest_tag].get("dist") or {}
        unpacked = dist.get("unpackedSize")
        if isinstance(unpacked, int) and unpacked > 0:
            size_bytes = unpacked

    return SizeSignal(
        unpacked_size_bytes=size_bytes,
        unpacked_size_human=format_bytes(size_bytes),
    )
