import pathlib
import sys
from os import PathLike

from gitobj.models.codec import hash_object
from gitobj.models.commit import format_commit
from gitobj.models.errors import InvalidInput
from gitobj.models.objects import Blob, Tree, TreeEntry, from_hex, to_hex
from gitobj.models.render import render, render_tree_long
from gitobj.models.store import FileStore
from gitobj.models.tree_builder import TreeBuilder

__all__ = ["Git"]


class Git:
    def __init__(self, root: PathLike | str = "."):
        self.root = pathlib.Path(root)
        self.git_folder = self.root / ".git"
        self.objects_folder = self.git_folder / "objects"
        self.store = FileStore(self.objects_folder)

    def init_repo(self):
        dirs = [self.git_folder, self.objects_folder, self.git_folder / "refs"]
        for new_path in dirs:
            new_path.mkdir(exist_ok=False, parents=True)
        with (self.git_folder / "HEAD").open("w") as f:
            f.write("ref: refs/heads/main\n")
        sys.stdout.write(f"Initialized git directory in {self.git_folder}\n")

    def cat_file(self, hash_: str, *, pretty_print: bool = False):
        obj = self.store.get(from_hex(hash_))
        if pretty_print:
            sys.stdout.write(render(obj))
        return obj

    def hash_object(self, path: pathlib.Path, *, write: bool = False) -> str:
        path = pathlib.Path(path)
        if not path.is_file():
            raise InvalidInput(f"Not a file: {path}")
        with path.open("rb") as f:
            blob = Blob(f.read())
        if write:
            hash_value = to_hex(self.store.put(blob))
        else:
            hash_value = to_hex(hash_object(blob))
        sys.stdout.write(hash_value)
        return hash_value

    def ls_tree(self, hash_value: str, *, name_only: bool = False) -> list[TreeEntry]:
        tree = self.store.get(from_hex(hash_value))
        if not isinstance(tree, Tree):
            raise InvalidInput(f"Not a tree object: {hash_value}")
        if name_only:
            sys.stdout.write(render(tree))
        else:
            sys.stdout.write(render_tree_long(tree))
        return list(tree)

    def write_tree(self) -> str:
        builder = TreeBuilder(self.store, ignore={self.git_folder.name})
        hash_value = to_hex(builder.build(self.root))
        sys.stdout.write(hash_value)
        return hash_value

    def commit_tree(self, tree_hash: str, message: str, *, parent: str = "", **kwargs):
        if not isinstance(self.store.get(from_hex(tree_hash)), Tree):
            raise InvalidInput(f"Not a tree object: {tree_hash}")
        if parent:
            from_hex(parent)
        commit = format_commit(tree_hash, message, parent=parent, **kwargs)
        hash_value = to_hex(self.store.put(commit))
        sys.stdout.write(hash_value)
        return hash_value
