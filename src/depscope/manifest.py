"""Reading declared dependencies from package.json."""

import json
from pathlib import Path
from typing import Any

from depscope.models.schemas import DependencySpec, Manifest

MANIFEST_FILENAME = "package.json"


class ManifestError(Exception):
    """Raised when a manifest is missing or cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


def resolve_manifest_path(path: Path) -> Path:
    """Accept either a project directory or a package.json path."""
    if path.is_dir():
        return path / MANIFEST_FILENAME
    return path


def _parse_section(path: Path, data: dict[str, Any], section: str) -> list[DependencySpec]:
    entries = data.get(section) or {}
    if not isinstance(entries, dict):
        raise ManifestError(path, f"'{section}' must be an object")

    specs = []
    for name, constraint in entries.items():
        if not isinstance(constraint, str):
            raise ManifestError(path, f"Version constraint for '{name}' must be a string")
        specs.append(DependencySpec(name=name, version_constraint=constraint))
    return specs


def load_manifest(path: Path) -> Manifest:
    """Read dependencies and devDependencies, preserving declaration order.

    Args:
        path: Project directory or package.json file.

    Returns:
        Manifest with production and dev dependencies.

    Raises:
        ManifestError: If the file is missing or malformed.
    """
    manifest_path = resolve_manifest_path(path)
    if not manifest_path.is_file():
        raise ManifestError(manifest_path, "No package.json found")

    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(manifest_path, f"Failed to read package.json ({e})") from e
    except json.JSONDecodeError as e:
        raise ManifestError(manifest_path, f"Failed to parse package.json ({e.msg})") from e

    if not isinstance(data, dict):
        raise ManifestError(manifest_path, "package.json must contain an object")

    name = data.get("name")
    if not isinstance(name, str) or not name:
        name = manifest_path.resolve().parent.name

    return Manifest(
        name=name,
        production=_parse_section(manifest_path, data, "dependencies"),
        dev=_parse_section(manifest_path, data, "devDependencies"),
    )
