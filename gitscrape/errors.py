class ScrapeError(RuntimeError):
    """Base class for every fatal scraping failure."""


class ValidationError(ScrapeError):
    pass


class ParseError(ScrapeError):
    pass


class DepthLimitError(ParseError):
    pass


class DecodeError(ScrapeError):
    pass


class ConfigError(ScrapeError):
    pass


class TargetDirectoryError(OSError):
    pass
