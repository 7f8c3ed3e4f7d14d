import re

from .errors import ValidationError

# scheme://host[/path][/.git][/]
GIT_URL_REGEX = re.compile(r'^(http|https)://([^/\s]+)(/[^\s]*)?$', re.IGNORECASE)


def normalize_url(url: str) -> str:
    """Turn any accepted repository URL into ``scheme://host[/path]/.git``."""
    if not isinstance(url, str):
        raise ValidationError(f"Invalid URL: {url!r}")

    match = GIT_URL_REGEX.match(url.strip())
    if not match:
        raise ValidationError(f"Invalid URL: {url}")

    scheme = match.group(1).lower()
    host = match.group(2)
    path = (match.group(3) or "").rstrip("/")

    # Drop one trailing ".git", whether it is its own segment or a suffix
    if path.lower().endswith("/.git"):
        path = path[:-5]
    elif path.lower().endswith(".git"):
        path = path[:-4]
    path = path.rstrip("/")

    return f"{scheme}://{host}{path}/.git"
