from .errors import (
    ConfigError,
    DecodeError,
    DepthLimitError,
    ParseError,
    ScrapeError,
    TargetDirectoryError,
    ValidationError,
)
from .scraper import GitScraper
from .url import normalize_url

__all__ = [
    "ConfigError",
    "DecodeError",
    "DepthLimitError",
    "GitScraper",
    "ParseError",
    "ScrapeError",
    "TargetDirectoryError",
    "ValidationError",
    "normalize_url",
]
