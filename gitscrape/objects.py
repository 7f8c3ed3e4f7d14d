import base64
import re
import zlib
from typing import NamedTuple, Union

from .errors import DecodeError, ParseError
from .log import get_logger

logger = get_logger("objects")

OBJECT_HEADER_REGEX = re.compile(rb'^([a-z]+) ([0-9]+)\x00')
COMMIT_TREE_REGEX = re.compile(rb'^tree ([0-9a-f]{40})$', re.MULTILINE)
# optional blob marker, five octal mode digits, space, name, NUL, 20 raw SHA-1 bytes
TREE_ENTRY_REGEX = re.compile(rb'(1)?([0-7]{5}) ([^\x00]+)\x00(.{20})', re.DOTALL)

DECODE_SAMPLE_SIZE = 64

KIND_TREE = "tree"
KIND_BLOB = "blob"


class TreeEntry(NamedTuple):
    mode: str
    name: str
    hash: str
    kind: str


class Commit(NamedTuple):
    tree: str


class Tree(NamedTuple):
    entries: list[TreeEntry]


class Blob(NamedTuple):
    content: bytes


class Tag(NamedTuple):
    raw: bytes


GitObject = Union[Commit, Tree, Blob, Tag]


def object_path(hash: str) -> str:
    return f"objects/{hash[:2]}/{hash[2:]}"


def decode(data: bytes) -> bytes:
    try:
        return zlib.decompress(data)
    except zlib.error as exc:
        sample = base64.b64encode(data[:DECODE_SAMPLE_SIZE]).decode("ascii")
        raise DecodeError(f"Cannot decode data: {sample}") from exc


def parse_object(data: bytes) -> GitObject:
    """Split ``{type} {length}\\0{payload}`` and build the matching object.

    The declared length is not compared with the payload size.
    """
    match = OBJECT_HEADER_REGEX.match(data)
    if not match:
        raise ParseError(f"Cannot parse object header: {data[:32]!r}")

    object_type = match.group(1).decode("ascii")
    payload = data[match.end():]

    if object_type == "commit":
        return Commit(find_tree_hash(payload))
    elif object_type == "tree":
        return Tree(parse_entries(payload))
    elif object_type == "blob":
        return Blob(payload)
    elif object_type == "tag":
        # annotated tags are kept raw, their target is never followed
        return Tag(payload)
    else:
        raise ParseError(f"Unknown type: {object_type}")


def find_tree_hash(payload: bytes) -> str:
    match = COMMIT_TREE_REGEX.search(payload)
    if not match:
        raise ParseError(f"Could not find tree hash: {payload[:200]!r}")
    return match.group(1).decode("ascii")


def parse_entries(body: bytes) -> list[TreeEntry]:
    entries = []
    offset = 0
    while offset < len(body):
        match = TREE_ENTRY_REGEX.match(body, offset)
        if not match:
            logger.debug(f"Stopped parsing tree at byte {offset} of {len(body)}")
            break

        is_blob = match.group(1) is not None
        digits = match.group(2).decode("ascii")
        entries.append(TreeEntry(
            mode=("1" + digits) if is_blob else digits,
            name=match.group(3).decode("utf-8", errors="surrogateescape"),
            hash=match.group(4).hex(),
            kind=KIND_BLOB if is_blob else KIND_TREE,
        ))
        offset = match.end()
    return entries
