import re

from .errors import ParseError
from .fetcher import Found, TransportError
from .log import get_logger

logger = get_logger("refs")

HEAD_REF_REGEX = re.compile(r'^ref: (\S+)')
HASH_REGEX = re.compile(r'^[0-9a-f]{40}$')


def _as_text(content) -> str | None:
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


def parse_head(content) -> str:
    text = _as_text(content)
    match = HEAD_REF_REGEX.match(text) if text is not None else None
    if not match:
        raise ParseError(f"No head reference found: {text!r}")
    return match.group(1)


def parse_hash(content) -> str:
    text = _as_text(content)
    value = text.strip() if text is not None else ""
    if not HASH_REGEX.match(value):
        raise ParseError(f"Hash could not be parsed: {text!r}")
    return value


def _fetch_ref_file(fetcher, path: str):
    """Return the file body, None when absent; a transport failure names the file."""
    result = fetcher.fetch(path)
    if isinstance(result, TransportError):
        raise ParseError(f"Could not fetch {path}: {result.detail}")
    if isinstance(result, Found):
        return result.data
    return None


def resolve_head_ref(fetcher) -> str:
    ref_path = parse_head(_fetch_ref_file(fetcher, "HEAD"))
    logger.info(f"HEAD points to {ref_path}")
    return ref_path


def resolve_ref_hash(fetcher, ref_path: str) -> str:
    # an absent ref and a malformed one both end up as ParseError
    ref_hash = parse_hash(_fetch_ref_file(fetcher, ref_path))
    logger.info(f"{ref_path} is at {ref_hash}")
    return ref_hash
