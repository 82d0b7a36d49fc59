import pathlib
import zlib

import pytest

from gitobj.models import (
    MODE_FILE,
    Blob,
    Commit,
    FileStore,
    MemoryStore,
    NotFound,
    ObjectCorrupt,
    Tree,
    TreeEntry,
    digest,
    encode,
    from_hex,
    to_hex,
)

HELLO_HASH = "ce013625030ba8dba906f756967f9e9ca394464a"


@pytest.fixture(params=["file", "memory"])
def store(request, tmp_path):
    match request.param:
        case "file":
            return FileStore(tmp_path / "objects")
        case "memory":
            return MemoryStore()


def stored_bytes(store, address):
    return store._read(address)


def overwrite(store, address, data):
    if isinstance(store, FileStore):
        path = store.path_for(address)
        path.chmod(0o644)
        path.write_bytes(data)
    else:
        store.objects[address] = data


class TestStore:
    @pytest.mark.parametrize(
        "obj",
        [
            Blob(b"hello\n"),
            Blob(b""),
            Commit(b"tree abc\n\nmessage\n"),
            Tree(),
            Tree(
                (TreeEntry(mode=MODE_FILE, name=b"a.txt", address=from_hex(HELLO_HASH)),)
            ),
        ],
    )
    def test_put_get(self, store, obj):
        address = store.put(obj)
        assert address == digest(encode(obj))
        assert address in store
        assert store.get(address) == obj

    def test_put_returns_blob_hash(self, store):
        assert to_hex(store.put(Blob(b"hello\n"))) == HELLO_HASH

    def test_put_is_idempotent(self, store):
        address = store.put(Blob(b"hello\n"))
        before = stored_bytes(store, address)
        assert store.put(Blob(b"hello\n")) == address
        assert stored_bytes(store, address) == before

    def test_stored_bytes_are_compressed(self, store):
        address = store.put(Blob(b"hello\n"))
        assert zlib.decompress(stored_bytes(store, address)) == b"blob 6\x00hello\n"
        assert store.read_raw(address) == b"blob 6\x00hello\n"

    def test_get_missing(self, store):
        with pytest.raises(NotFound) as exc_info:
            store.get(from_hex(HELLO_HASH))
        assert exc_info.value.address == HELLO_HASH
        assert from_hex(HELLO_HASH) not in store

    def test_get_missing_is_key_error(self, store):
        with pytest.raises(KeyError):
            store.get(b"\x00" * 20)

    @pytest.mark.parametrize("position", [0, 1, 5, -6, -1])
    def test_corrupt_compressed_byte(self, store, position):
        address = store.put(Blob(b"hello\n"))
        data = bytearray(stored_bytes(store, address))
        data[position] ^= 0xFF
        overwrite(store, address, bytes(data))
        with pytest.raises(ObjectCorrupt) as exc_info:
            store.get(address)
        assert exc_info.value.address == HELLO_HASH

    def test_content_under_wrong_address(self, store):
        address = store.put(Blob(b"hello\n"))
        overwrite(store, address, zlib.compress(encode(Blob(b"goodbye\n"))))
        with pytest.raises(ObjectCorrupt, match="hashes to"):
            store.get(address)

    def test_malformed_stored_object(self, store):
        raw = b"blob 99\x00short"
        address = digest(raw)
        store._write(address, zlib.compress(raw))
        with pytest.raises(ObjectCorrupt):
            store.get(address)

    def test_non_canonical_tree(self, store):
        a, b = b"\x01" * 20, b"\x02" * 20
        payload = b"100644 b\x00" + a + b"100644 a\x00" + b
        raw = f"tree {len(payload)}\0".encode() + payload
        address = digest(raw)
        store._write(address, zlib.compress(raw))
        with pytest.raises(ObjectCorrupt, match="canonical"):
            store.get(address)


class TestFileStore:
    def test_location(self, tmp_path):
        store = FileStore(tmp_path / "objects")
        store.put(Blob(b"hello\n"))
        path = tmp_path / "objects" / HELLO_HASH[:2] / HELLO_HASH[2:]
        assert path.is_file()
        assert zlib.decompress(path.read_bytes()) == b"blob 6\x00hello\n"
        assert [p.name for p in path.parent.iterdir()] == [HELLO_HASH[2:]]

    def test_existing_shard_directory(self, tmp_path):
        store = FileStore(tmp_path / "objects")
        (tmp_path / "objects" / HELLO_HASH[:2]).mkdir(parents=True)
        assert to_hex(store.put(Blob(b"hello\n"))) == HELLO_HASH

    def test_existing_object_is_not_rewritten(self, tmp_path):
        store = FileStore(tmp_path / "objects")
        address = store.put(Blob(b"hello\n"))
        path = store.path_for(address)
        mtime = path.stat().st_mtime_ns
        store.put(Blob(b"hello\n"))
        assert path.stat().st_mtime_ns == mtime

    def test_shares_objects_between_instances(self, tmp_path):
        address = FileStore(tmp_path / "objects").put(Blob(b"hello\n"))
        assert FileStore(tmp_path / "objects").get(address) == Blob(b"hello\n")

    def test_objects_are_read_only(self, tmp_path):
        store = FileStore(tmp_path / "objects")
        path = store.path_for(store.put(Blob(b"hello\n")))
        assert path.stat().st_mode & 0o777 == 0o444
        assert [p.name for p in path.parent.iterdir()] == [HELLO_HASH[2:]]

    def test_directory_in_place_of_object(self, tmp_path):
        store = FileStore(tmp_path / "objects")
        address = from_hex(HELLO_HASH)
        store.path_for(address).mkdir(parents=True)
        assert address not in store
        with pytest.raises(OSError) as exc_info:
            store.get(address)
        assert not isinstance(exc_info.value, NotFound)

    def test_unreadable_object(self, tmp_path, monkeypatch):
        store = FileStore(tmp_path / "objects")
        address = store.put(Blob(b"hello\n"))

        def denied(self, *args, **kwargs):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(pathlib.Path, "open", denied)
        with pytest.raises(PermissionError) as exc_info:
            store.get(address)
        assert not isinstance(exc_info.value, (NotFound, ObjectCorrupt))
