import hashlib
import re

from gitobj.models.errors import MalformedObject
from gitobj.models.objects import (
    ADDRESS_SIZE,
    NULL_BYTE,
    Blob,
    Commit,
    ObjectType,
    Tree,
    TreeEntry,
)

__all__ = ["encode", "decode", "digest", "hash_object", "encode_header"]

HEADER_REGEX = re.compile(rb"(?P<type>[a-z]+) (?P<length>\d+)")
MODE_REGEX = re.compile(rb"[0-7]+")


def encode_header(object_type: ObjectType, length: int) -> bytes:
    return f"{object_type} {length}".encode() + NULL_BYTE


def _encode_tree_content(tree: Tree) -> bytes:
    return b"".join(
        f"{entry.mode:o} ".encode() + entry.name + NULL_BYTE + entry.address
        for entry in sorted(tree.entries, key=lambda entry: entry.name)
    )


def encode(obj: Blob | Tree | Commit) -> bytes:
    """Return the canonical bytes of *obj*: ``b"<type> <length>\\0"`` + payload."""
    match obj:
        case Blob(data=data) | Commit(data=data):
            content = data
        case Tree():
            content = _encode_tree_content(obj)
        case _:
            raise TypeError(f"Cannot encode {type(obj).__name__}")
    return encode_header(obj.type, len(content)) + content


def _decode_tree_content(content: bytes, base: int) -> Tree:
    entries = []
    offset = 0
    while offset < len(content):
        space = content.find(b" ", offset)
        if space == -1:
            raise MalformedObject("tree entry without mode", offset=base + offset)
        mode = content[offset:space]
        if not MODE_REGEX.fullmatch(mode):
            raise MalformedObject(
                f"tree entry has invalid mode {mode!r}", offset=base + offset
            )
        null = content.find(NULL_BYTE, space + 1)
        if null == -1:
            raise MalformedObject("tree entry name is not terminated", offset=base + space)
        name = content[space + 1 : null]
        address = content[null + 1 : null + 1 + ADDRESS_SIZE]
        if len(address) != ADDRESS_SIZE:
            raise MalformedObject(
                f"tree entry {name!r} has a truncated address", offset=base + null + 1
            )
        try:
            entries.append(TreeEntry(mode=int(mode, 8), name=name, address=address))
        except ValueError as e:
            raise MalformedObject(str(e), offset=base + offset) from e
        offset = null + 1 + ADDRESS_SIZE
    try:
        return Tree(tuple(entries))
    except ValueError as e:
        raise MalformedObject(str(e), offset=base) from e


def decode(data: bytes) -> Blob | Tree | Commit:
    header, null, content = data.partition(NULL_BYTE)
    if not null:
        raise MalformedObject("missing NUL byte after object header")
    header_match = HEADER_REGEX.fullmatch(header)
    if header_match is None:
        raise MalformedObject(f"invalid object header {header!r}", offset=0)
    type_name = header_match["type"]
    try:
        object_type = ObjectType(type_name.decode())
    except ValueError as e:
        raise MalformedObject(f"unknown object type {type_name!r}", offset=0) from e
    length = int(header_match["length"])
    if length != len(content):
        raise MalformedObject(
            f"header declares {length} bytes but {len(content)} follow",
            offset=len(header) + 1,
        )

    match object_type:
        case ObjectType.BLOB:
            return Blob(content)
        case ObjectType.COMMIT:
            return Commit(content)
        case ObjectType.TREE:
            return _decode_tree_content(content, len(header) + 1)


def digest(data: bytes, *, hasher=hashlib.sha1) -> bytes:
    return hasher(data).digest()


def hash_object(obj: Blob | Tree | Commit) -> bytes:
    return digest(encode(obj))
