"""Abstract base class for package registry adapters."""

from abc import ABC, abstractmethod
from typing import Any

from depscope.models.schemas import Ecosystem


class BaseAdapter(ABC):
    """Base class for package registry adapters.

    An adapter acquires the raw registry documents the signal extractors
    read. Metadata acquisition is strict (it raises when the package
    cannot be fetched); download statistics are best-effort.
    """

    @property
    @abstractmethod
    def ecosystem(self) -> Ecosystem:
        """Return the ecosystem this adapter handles."""
        ...

    @abstractmethod
    async def get_package_info(self, name: str) -> dict[str, Any]:
        """Fetch the full registry document for a package.

        Args:
            name: Package name.

        Returns:
            Registry metadata as returned by the registry.

        Raises:
            PackageNotFoundError: If the package doesn't exist.
            RegistryError: If the registry could not be reached or replied
                with something unusable.
        """
        ...

    @abstractmethod
    async def get_weekly_downloads(self, name: str) -> dict[str, Any] | None:
        """Fetch the download count for the last week.

        Returns:
            Payload with a ``downloads`` count, None if unavailable.
        """
        ...

    @abstractmethod
    async def get_download_range(self, name: str) -> dict[str, Any] | None:
        """Fetch daily download counts for the last year.

        Returns:
            Payload with a ``downloads`` list of ``{day, downloads}``
            entries, None if unavailable.
        """
        ...


class PackageNotFoundError(Exception):
    """Raised when a package cannot be found."""

    def __init__(self, ecosystem: Ecosystem, name: str) -> None:
        self.ecosystem = ecosystem
        self.name = name
        super().__init__(f"Package '{name}' not found in {ecosystem.value}")


class RegistryError(Exception):
    """Raised when registry metadata could not be acquired."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Could not fetch '{name}': {reason}")
