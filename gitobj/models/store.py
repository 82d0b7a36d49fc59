"""Content-addressed object storage.

Objects are kept as zlib-compressed canonical bytes, keyed by the SHA-1 of
those bytes. :class:`FileStore` uses git's loose-object layout::

    objects/<first 2 hex chars>/<remaining 38 hex chars>

:class:`MemoryStore` keeps the same compressed bytes in a dict.

Stores are append-only: putting an object whose address is already present
is a no-op, and nothing is ever rewritten.
"""

import abc
import logging
import os
import pathlib
import tempfile
import zlib

from gitobj.models.codec import decode, digest, encode
from gitobj.models.errors import MalformedObject, NotFound, ObjectCorrupt
from gitobj.models.objects import Blob, Commit, Tree, to_hex

__all__ = ["ObjectStore", "FileStore", "MemoryStore"]

logger = logging.getLogger(__name__)


class ObjectStore(abc.ABC):
    @staticmethod
    def compress(data: bytes, *, compressor=zlib.compress) -> bytes:
        return compressor(data)

    @abc.abstractmethod
    def contains(self, address: bytes) -> bool:
        ...

    @abc.abstractmethod
    def _read(self, address: bytes) -> bytes:
        """Return the stored (compressed) bytes, raising NotFound if absent."""

    @abc.abstractmethod
    def _write(self, address: bytes, data: bytes) -> None:
        ...

    def __contains__(self, address: bytes) -> bool:
        return self.contains(address)

    def put(self, obj: Blob | Tree | Commit) -> bytes:
        """Store *obj* and return its 20-byte address."""
        raw = encode(obj)
        address = digest(raw)
        if self.contains(address):
            logger.debug("Object %s already in store, skipped", to_hex(address))
            return address
        self._write(address, self.compress(raw))
        logger.debug("Stored %s %s (%d bytes)", obj.type, to_hex(address), len(raw))
        return address

    def read_raw(self, address: bytes) -> bytes:
        """Return the canonical bytes stored under *address*, verifying them."""
        try:
            raw = zlib.decompress(self._read(address))
        except zlib.error as e:
            raise ObjectCorrupt(to_hex(address), f"cannot decompress: {e}") from e
        if digest(raw) != address:
            raise ObjectCorrupt(
                to_hex(address), f"content hashes to {to_hex(digest(raw))}"
            )
        return raw

    def get(self, address: bytes) -> Blob | Tree | Commit:
        raw = self.read_raw(address)
        try:
            obj = decode(raw)
        except MalformedObject as e:
            raise ObjectCorrupt(to_hex(address), str(e)) from e
        # decode() sorts tree entries, so stored bytes must already be canonical.
        if encode(obj) != raw:
            raise ObjectCorrupt(to_hex(address), "content is not in canonical form")
        return obj


class FileStore(ObjectStore):
    def __init__(self, objects_folder: os.PathLike | str):
        self.objects_folder = pathlib.Path(objects_folder)

    def __repr__(self):
        return f"{type(self).__name__}({str(self.objects_folder)!r})"

    def path_for(self, address: bytes) -> pathlib.Path:
        hash_value = to_hex(address)
        return self.objects_folder / hash_value[:2] / hash_value[2:]

    def contains(self, address: bytes) -> bool:
        return self.path_for(address).is_file()

    def _read(self, address: bytes) -> bytes:
        path = self.path_for(address)
        try:
            with path.open("rb") as f:
                return f.read()
        except FileNotFoundError as e:
            raise NotFound(to_hex(address)) from e

    def _write(self, address: bytes, data: bytes) -> None:
        path = self.path_for(address)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix="tmp_obj_")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp_name, 0o444)
            os.replace(tmp_name, path)
        except BaseException:
            pathlib.Path(tmp_name).unlink(missing_ok=True)
            raise


class MemoryStore(ObjectStore):
    def __init__(self):
        self.objects: dict[bytes, bytes] = {}

    def contains(self, address: bytes) -> bool:
        return address in self.objects

    def _read(self, address: bytes) -> bytes:
        try:
            return self.objects[address]
        except KeyError as e:
            raise NotFound(to_hex(address)) from e

    def _write(self, address: bytes, data: bytes) -> None:
        self.objects[address] = data
