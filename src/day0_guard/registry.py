"""npm registry lookups: package name to per-version publish times."""

from __future__ import annotations

import logging
from urllib.parse import quote

import requests
from requests import Response
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from .config import DEFAULT_HTTP_TIMEOUT, DEFAULT_REGISTRY_URL

logger = logging.getLogger(__name__)

USER_AGENT = "day0-guard"
# The abbreviated install document omits the ``time`` map, so ask for the full one.
ACCEPT = "application/json"

_RETRYABLE = (requests.ConnectionError, requests.Timeout)


class RegistryError(RuntimeError):
    """Raised when the registry cannot be reached or returns an unreadable document."""


@retry(
    reraise=True,
    stop=stop_after_attempt(3),
    wait=wait_fixed(2),
    retry=retry_if_exception_type(_RETRYABLE),
)
def _http_get(session: requests.Session, url: str, *, timeout: float) -> Response:
    return session.get(url, headers={"Accept": ACCEPT, "User-Agent": USER_AGENT}, timeout=timeout)


class RegistryClient:
    """Query one npm-compatible registry, one package name per request."""

    def __init__(
        self,
        base_url: str = DEFAULT_REGISTRY_URL,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def package_url(self, name: str) -> str:
        # @scope/name is sent as one path segment: %40scope%2Fname
        return f"{self.base_url}/{quote(name, safe='')}"

    def publish_times(self, name: str) -> dict[str, str] | None:
        """Return the registry's version -> publish timestamp map for ``name``.

        None means the registry had nothing usable (non-success status or no
        ``time`` map). Transport failures raise RegistryError.
        """
        url = self.package_url(name)
        try:
            response = _http_get(self.session, url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RegistryError(f"Failed to fetch {url}: {exc}") from exc

        if response.status_code != 200:
            logger.warning("Registry returned %s for %s", response.status_code, name)
            return None

        try:
            document = response.json()
        except ValueError as exc:
            raise RegistryError(f"Registry returned invalid JSON for {name}") from exc

        times = document.get("time") if isinstance(document, dict) else None
        if not isinstance(times, dict):
            return None
        return {str(version): stamp for version, stamp in times.items() if isinstance(stamp, str)}
