"""Downloads repositories from publicly readable ``.git`` folders over HTTP."""

from .config import ScraperConfig
from .errors import ScrapeError
from .fetcher import HttpFetcher
from .log import get_logger
from .materializer import materialize
from .refs import resolve_head_ref, resolve_ref_hash
from .url import normalize_url
from .walker import GraphWalker, Manifest, ObjectLoader

logger = get_logger("scraper")


class GitScraper:
    def __init__(self, url: str, config: ScraperConfig | None = None, fetcher=None):
        self.path = normalize_url(url)
        self.config = config or ScraperConfig()
        self.fetcher = fetcher or HttpFetcher(self.path, self.config)
        self.loader = ObjectLoader(self.fetcher)
        self.walker = GraphWalker(
            self.loader,
            max_depth=self.config.max_depth,
            keep_going=self.config.keep_going,
        )
        self.manifest: Manifest | None = None

    def fetch(self) -> Manifest:
        # 1. HEAD -> ref path
        head_ref = resolve_head_ref(self.fetcher)
        # 2. ref path -> commit hash
        ref_hash = resolve_ref_hash(self.fetcher, head_ref)
        # 3. commit -> tree -> files
        result = self.walker.walk(ref_hash)
        if not isinstance(result, Manifest):
            raise ScrapeError(f"{head_ref} points to a blob, not a commit: {ref_hash}")

        self.manifest = result
        logger.info(
            f"Found {len(result.entries)} files "
            f"({len(result.missing)} missing objects, {len(result.failed)} failed)"
        )
        return result

    def get_files(self):
        if not self.manifest:
            raise ScrapeError("Either there are no files or you didn't call `fetch()` yet")
        return list(self.manifest.entries)

    def download(self, target_dir=".") -> list:
        return materialize(
            self.get_files(),
            target_dir,
            self.loader,
            apply_modes=self.config.apply_modes,
        )
