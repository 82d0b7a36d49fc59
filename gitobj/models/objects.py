import binascii
from dataclasses import dataclass, field
from enum import StrEnum, auto

from gitobj.models.errors import InvalidInput

__all__ = [
    "ObjectType",
    "Blob",
    "Tree",
    "TreeEntry",
    "Commit",
    "MODE_FILE",
    "MODE_EXECUTABLE",
    "MODE_DIRECTORY",
    "MODE_SYMLINK",
    "ADDRESS_SIZE",
    "to_hex",
    "from_hex",
]

NULL_BYTE = b"\x00"
ADDRESS_SIZE = 20

MODE_FILE = 0o100644
MODE_EXECUTABLE = 0o100755
MODE_DIRECTORY = 0o40000
MODE_SYMLINK = 0o120000


class ObjectType(StrEnum):
    BLOB = auto()
    TREE = auto()
    COMMIT = auto()


def to_hex(address: bytes) -> str:
    return binascii.hexlify(address).decode()


def from_hex(text: str) -> bytes:
    if len(text) != ADDRESS_SIZE * 2:
        raise InvalidInput(f"Not a valid object name: {text!r}")
    try:
        return binascii.unhexlify(text)
    except binascii.Error as e:
        raise InvalidInput(f"Not a valid object name: {text!r}") from e


@dataclass(frozen=True, kw_only=True)
class TreeEntry:
    mode: int
    name: bytes
    address: bytes

    def __post_init__(self):
        if not self.name or b"/" in self.name or NULL_BYTE in self.name:
            raise InvalidInput(f"Invalid tree entry name: {self.name!r}")
        if len(self.address) != ADDRESS_SIZE:
            raise InvalidInput(
                f"Tree entry {self.name!r} has a {len(self.address)}-byte address"
            )

    @property
    def hash(self):
        return to_hex(self.address)

    @property
    def is_tree(self):
        return self.mode == MODE_DIRECTORY

    @property
    def object_type(self) -> ObjectType:
        return ObjectType.TREE if self.is_tree else ObjectType.BLOB


@dataclass(frozen=True)
class Blob:
    data: bytes
    type = ObjectType.BLOB


@dataclass(frozen=True)
class Commit:
    data: bytes
    type = ObjectType.COMMIT


@dataclass(frozen=True)
class Tree:
    """A directory snapshot.

    Entries are kept in canonical order (raw byte order of the name), so two
    trees holding the same entries compare equal whatever order they were
    built in.
    """

    entries: tuple[TreeEntry, ...] = field(default=())
    type = ObjectType.TREE

    def __post_init__(self):
        entries = tuple(sorted(self.entries, key=lambda entry: entry.name))
        for previous, current in zip(entries, entries[1:]):
            if previous.name == current.name:
                raise InvalidInput(f"Duplicate tree entry: {current.name!r}")
        object.__setattr__(self, "entries", entries)

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)
