from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import NamedTuple

from .errors import DecodeError, DepthLimitError, ParseError
from .fetcher import Found, Missing, TransportError
from .log import get_logger
from .objects import KIND_BLOB, Blob, Commit, Tag, Tree, decode, object_path, parse_object

logger = get_logger("walker")

DEFAULT_MAX_DEPTH = 64


class ManifestEntry(NamedTuple):
    hash: str
    path: str
    mode: str


@dataclass
class Manifest:
    """Files found by one walk, plus the objects that could not be read."""

    entries: list[ManifestEntry] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


class PathStack:
    def __init__(self):
        self.segments = []

    @property
    def depth(self) -> int:
        return len(self.segments)

    def join(self, name: str) -> str:
        return "/".join(self.segments + [name])

    @contextmanager
    def entered(self, name: str):
        self.segments.append(name)
        try:
            yield self
        finally:
            self.segments.pop()


class ObjectLoader:
    """Fetches a loose object by hash and parses it.

    Returns the parsed object, or the ``Missing``/``TransportError`` result
    when the fetch did not produce any bytes.
    """

    def __init__(self, fetcher):
        self.fetcher = fetcher

    def load(self, hash: str):
        result = self.fetcher.fetch(object_path(hash))
        if not isinstance(result, Found):
            return result
        obj = parse_object(decode(result.data))
        logger.debug(f"Loaded {type(obj).__name__.lower()} {hash}")
        return obj


class GraphWalker:
    """Depth-first, pre-order walk from a commit (or tree) down to its blobs.

    All per-walk state lives in the ``PathStack`` and ``Manifest`` created by
    ``walk``, so one walker can be reused for any number of walks.
    """

    def __init__(self, loader: ObjectLoader, max_depth: int = DEFAULT_MAX_DEPTH, keep_going: bool = False):
        self.loader = loader
        self.max_depth = max_depth
        self.keep_going = keep_going

    def walk(self, hash: str):
        """Walk from ``hash``; a blob hash returns its bytes instead of a manifest."""
        manifest = Manifest()
        content = self._walk(hash, PathStack(), manifest)
        if content is not None:
            return content
        return manifest

    def _walk(self, hash: str, stack: PathStack, manifest: Manifest, commit_hops: int = 0):
        obj = self.loader.load(hash)

        if isinstance(obj, Missing):
            logger.debug(f"Object {hash} is missing, skipping")
            manifest.missing.append(hash)
            return None
        if isinstance(obj, TransportError):
            logger.warning(f"Could not fetch object {hash}: {obj.detail}")
            manifest.failed.append((hash, obj.detail))
            return None

        if isinstance(obj, Commit):
            # a commit naming another commit as its tree never adds a path segment
            if commit_hops >= self.max_depth:
                raise DepthLimitError(f"Commit chain exceeds {self.max_depth} hops at {hash}")
            self._walk(obj.tree, stack, manifest, commit_hops + 1)
        elif isinstance(obj, Tree):
            self._walk_tree(obj, stack, manifest, commit_hops)
        elif isinstance(obj, Blob):
            return obj.content
        elif isinstance(obj, Tag):
            logger.debug(f"Ignoring tag object {hash}")
        return None

    def _walk_tree(self, tree: Tree, stack: PathStack, manifest: Manifest, commit_hops: int = 0):
        for entry in tree.entries:
            if entry.kind == KIND_BLOB:
                manifest.entries.append(ManifestEntry(entry.hash, stack.join(entry.name), entry.mode))
                continue

            with stack.entered(entry.name):
                if stack.depth > self.max_depth:
                    raise DepthLimitError(
                        f"Tree nesting exceeds {self.max_depth} levels at {'/'.join(stack.segments)}"
                    )
                try:
                    self._walk(entry.hash, stack, manifest, commit_hops)
                except (ParseError, DecodeError) as exc:
                    if not self.keep_going or isinstance(exc, DepthLimitError):
                        raise
                    logger.warning(f"Skipping {'/'.join(stack.segments)}: {exc}")
                    manifest.failed.append((entry.hash, str(exc)))
