"""NPM package registry adapter."""

import asyncio
import logging
from typing import Any

import httpx

from depscope.adapters.base import BaseAdapter, PackageNotFoundError, RegistryError
from depscope.cache import DEFAULT_TTL, ResponseCache
from depscope.models.schemas import Ecosystem

logger = logging.getLogger(__name__)


class NpmAdapter(BaseAdapter):
    """Adapter for the NPM package registry.

    Data sources:
    - Package metadata: https://registry.npmjs.org/{package}
    - Weekly downloads: https://api.npmjs.org/downloads/point/last-week/{package}
    - Daily downloads: https://api.npmjs.org/downloads/range/last-year/{package}

    Successful responses are written to the response cache (if any) and
    served from it until they expire.
    """

    REGISTRY_URL = "https://registry.npmjs.org"
    DOWNLOADS_URL = "https://api.npmjs.org/downloads"

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        cache: ResponseCache | None = None,
        registry_url: str | None = None,
        downloads_url: str | None = None,
        timeout: float = 10.0,
        cache_ttl: float = DEFAULT_TTL,
    ) -> None:
        """Initialize the adapter.

        Args:
            client: Optional httpx client. If not provided, creates one per request.
            cache: Optional response cache.
            registry_url: Override for the registry base URL.
            downloads_url: Override for the download statistics base URL.
            timeout: Absolute timeout for each request, in seconds.
            cache_ttl: Lifetime of cached responses, in seconds.
        """
        self._client = client
        self._cache = cache
        self.registry_url = (registry_url or self.REGISTRY_URL).rstrip("/")
        self.downloads_url = (downloads_url or self.DOWNLOADS_URL).rstrip("/")
        self.timeout = timeout
        self.cache_ttl = cache_ttl

    @property
    def ecosystem(self) -> Ecosystem:
        return Ecosystem.NPM

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=self.timeout)

    async def _fetch_json(self, url: str) -> Any:
        """Fetch JSON from a URL."""
        client = await self._get_client()
        try:
            response = await asyncio.wait_for(client.get(url), timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        finally:
            if self._client is None:
                await client.aclose()

    async def _cached_fetch(self, url: str, cache_key: str) -> Any:
        """Fetch JSON, reading the cache first and populating it after."""
        if self._cache is not None:
            cached = self._cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit: {cache_key}")
                return cached

        data = await self._fetch_json(url)

        if self._cache is not None:
            self._cache.set(cache_key, data, self.cache_ttl)
        return data

    async def _fetch_optional(self, url: str, cache_key: str) -> dict[str, Any] | None:
        """Fetch a best-effort JSON object, returning None on any failure."""
        try:
            data = await self._cached_fetch(url, cache_key)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.debug(f"npm: Not found: {url}")
            else:
                logger.warning(f"npm API error {e.response.status_code}: {url}")
            return None
        except httpx.RequestError as e:
            logger.warning(f"npm request error for {url}: {e}")
            return None
        except asyncio.TimeoutError:
            logger.warning(f"npm request timed out: {url}")
            return None
        except ValueError as e:
            # JSON decode error
            logger.warning(f"npm JSON decode error for {url}: {e}")
            return None

        return data if isinstance(data, dict) else None

    @staticmethod
    def _encode_name(name: str) -> str:
        # Scoped packages: @org/pkg -> @org%2Fpkg
        return name.replace("/", "%2F")

    async def get_package_info(self, name: str) -> dict[str, Any]:
        """Fetch the registry document for an NPM package.

        Args:
            name: Package name (supports scoped packages like @org/pkg).

        Returns:
            Registry metadata, including ``dist-tags``, ``versions`` and ``time``.

        Raises:
            PackageNotFoundError: If the package doesn't exist.
            RegistryError: On any other HTTP, transport, timeout or decode failure.
        """
        url = f"{self.registry_url}/{self._encode_name(name)}"

        try:
            data = await self._cached_fetch(url, f"pkg:{name}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise PackageNotFoundError(Ecosystem.NPM, name) from e
            logger.warning(f"npm registry error {e.response.status_code}: {name}")
            raise RegistryError(name, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.warning(f"npm registry request error for {name}: {e}")
            raise RegistryError(name, str(e) or type(e).__name__) from e
        except asyncio.TimeoutError as e:
            logger.warning(f"npm registry request timed out: {name}")
            raise RegistryError(name, "timed out") from e
        except ValueError as e:
            logger.warning(f"npm registry JSON decode error for {name}: {e}")
            raise RegistryError(name, "malformed response") from e

        if not isinstance(data, dict):
            raise RegistryError(name, "malformed response")
        return data

    async def get_weekly_downloads(self, name: str) -> dict[str, Any] | None:
        """Fetch last week's download count for an NPM package."""
        url = f"{self.downloads_url}/point/last-week/{self._encode_name(name)}"
        return await self._fetch_optional(url, f"dl-week:{name}")

    async def get_download_range(self, name: str) -> dict[str, Any] | None:
        """Fetch last year's daily download counts for an NPM package."""
        url = f"{self.downloads_url}/range/last-year/{self._encode_name(name)}"
        return await self._fetch_optional(url, f"dl-trend:{name}")
