import logging
import os
import pathlib
import stat

from gitobj.models.errors import InvalidInput, PartialFailure
from gitobj.models.objects import (
    MODE_DIRECTORY,
    MODE_EXECUTABLE,
    MODE_FILE,
    MODE_SYMLINK,
    Blob,
    Tree,
    TreeEntry,
)
from gitobj.models.store import ObjectStore

__all__ = ["TreeBuilder"]

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Snapshot a directory into the object store.

    Files become blobs and subdirectories become trees. Every child is
    attempted; if any of them fail, :class:`PartialFailure` is raised with the
    entries that were built and the list of ``(path, exception)`` failures,
    and no tree is stored for that directory.
    """

    ignore_patterns = frozenset({".git"})

    def __init__(self, store: ObjectStore, *, ignore: frozenset[str] | None = None):
        self.store = store
        if ignore is not None:
            self.ignore_patterns = frozenset(ignore)

    def build(self, working_directory: os.PathLike | str = ".") -> bytes:
        dir_path = pathlib.Path(working_directory)
        if not dir_path.is_dir():
            raise InvalidInput(f"Not a directory: {dir_path}")

        entries = []
        failures = []
        for child in dir_path.iterdir():
            if child.name in self.ignore_patterns:
                continue
            try:
                entry = self._build_entry(child)
            except (OSError, PartialFailure) as e:
                logger.warning("Could not snapshot %s: %s", child, e)
                failures.append((child, e))
                continue
            if entry is not None:
                entries.append(entry)

        if failures:
            raise PartialFailure(dir_path, sorted(entries, key=lambda e: e.name), failures)
        return self.store.put(Tree(tuple(entries)))

    def _build_entry(self, path: pathlib.Path) -> TreeEntry | None:
        st = path.lstat()
        name = os.fsencode(path.name)
        if stat.S_ISDIR(st.st_mode):
            return TreeEntry(mode=MODE_DIRECTORY, name=name, address=self.build(path))
        if stat.S_ISREG(st.st_mode):
            with path.open("rb") as f:
                address = self.store.put(Blob(f.read()))
            mode = MODE_EXECUTABLE if st.st_mode & stat.S_IXUSR else MODE_FILE
            return TreeEntry(mode=mode, name=name, address=address)
        if stat.S_ISLNK(st.st_mode):
            target = os.fsencode(os.readlink(path))
            address = self.store.put(Blob(target))
            return TreeEntry(mode=MODE_SYMLINK, name=name, address=address)
        logger.warning("Skipping %s: not a regular file, directory or symlink", path)
        return None
