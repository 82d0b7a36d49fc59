from gitobj.models.codec import decode, digest, encode, hash_object
from gitobj.models.commit import format_commit
from gitobj.models.errors import (
    GitObjError,
    InvalidInput,
    MalformedObject,
    NotFound,
    NotText,
    ObjectCorrupt,
    PartialFailure,
)
from gitobj.models.git import Git
from gitobj.models.objects import (
    MODE_DIRECTORY,
    MODE_EXECUTABLE,
    MODE_FILE,
    MODE_SYMLINK,
    Blob,
    Commit,
    ObjectType,
    Tree,
    TreeEntry,
    from_hex,
    to_hex,
)
from gitobj.models.render import display_name, render, render_tree_long
from gitobj.models.store import FileStore, MemoryStore, ObjectStore
from gitobj.models.tree_builder import TreeBuilder
