from typing import NamedTuple, Union

import requests

from .config import ScraperConfig
from .log import get_logger

logger = get_logger("fetcher")

MISSING_STATUSES = (404, 410)
REDIRECT_STATUSES = (301, 302, 303, 307, 308)


class Found(NamedTuple):
    data: bytes


class Missing(NamedTuple):
    pass


class TransportError(NamedTuple):
    detail: str


FetchResult = Union[Found, Missing, TransportError]


class HttpFetcher:
    """Reads files below a repository locator over HTTP(S).

    ``fetch`` never raises: a 404/410 or an empty body is ``Missing``, any other
    failure (connection error, timeout, unexpected status) is ``TransportError``.
    """

    def __init__(self, locator: str, config: ScraperConfig | None = None, session=None):
        self.locator = locator.rstrip("/")
        self.config = config or ScraperConfig()
        self.session = session or requests.Session()
        self.headers = {"User-Agent": self.config.user_agent}

    def url_for(self, path: str) -> str:
        return f"{self.locator}/{path.lstrip('/')}"

    def fetch(self, path: str) -> FetchResult:
        url = self.url_for(path)
        try:
            response = self.session.get(
                url,
                headers=self.headers,
                timeout=self.config.timeout,
                verify=self.config.verify_tls,
                allow_redirects=False,
            )
        except requests.exceptions.RequestException as exc:
            logger.debug(f"Error downloading {url}: {exc}")
            return TransportError(f"{type(exc).__name__}: {exc}")

        if response.status_code in MISSING_STATUSES:
            logger.debug(f"{url} not found ({response.status_code})")
            return Missing()
        if response.status_code in REDIRECT_STATUSES:
            location = response.headers.get("Location")
            logger.debug(f"{url} redirects to {location}, not following")
            return TransportError(f"HTTP {response.status_code} redirect to {location} (not followed)")
        if response.status_code != 200:
            logger.debug(f"Unexpected status {response.status_code} for {url}")
            return TransportError(f"HTTP {response.status_code}")
        if not response.content:
            logger.debug(f"{url} returned an empty body")
            return Missing()

        logger.debug(f"Fetched {url} ({len(response.content)} bytes)")
        return Found(response.content)

    def fetch_bytes(self, path: str) -> bytes | None:
        result = self.fetch(path)
        if isinstance(result, Found):
            return result.data
        return None
