"""Package registry adapters."""

from depscope.adapters.base import BaseAdapter, PackageNotFoundError, RegistryError
from depscope.adapters.npm import NpmAdapter

__all__ = ["BaseAdapter", "NpmAdapter", "PackageNotFoundError", "RegistryError"]
