from gitobj.models.errors import NotText
from gitobj.models.objects import Blob, Commit, Tree

__all__ = ["render", "render_tree_long", "display_name"]


def display_name(name: bytes) -> str:
    """Decode a tree entry name, escaping bytes that are not UTF-8."""
    return name.decode(errors="backslashreplace")


def render(obj: Blob | Tree | Commit) -> str:
    match obj:
        case Blob(data=data):
            try:
                return data.decode()
            except UnicodeDecodeError as e:
                raise NotText(f"blob is not valid UTF-8 text: {e}") from e
        case Tree():
            return "".join(display_name(entry.name) + "\n" for entry in obj)
        case Commit():
            # Commit payloads are opaque here.
            return ""
        case _:
            raise TypeError(f"Cannot render {type(obj).__name__}")


def render_tree_long(tree: Tree) -> str:
    """Render *tree* the way ``git ls-tree`` does: mode, type, hash and name."""
    return "".join(
        f"{entry.mode:06o} {entry.object_type} {entry.hash}\t{display_name(entry.name)}\n"
        for entry in tree
    )
