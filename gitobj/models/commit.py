import time

from gitobj.models.objects import Commit

__all__ = ["format_commit"]

DEFAULT_AUTHOR = "Author Name <author@email.com>"
DEFAULT_COMMITTER = "Committer Name <committer@email.com>"


def format_commit(
    tree_hash: str,
    message: str,
    *,
    parent: str = "",
    author: str = DEFAULT_AUTHOR,
    committer: str = DEFAULT_COMMITTER,
    timestamp: int | None = None,
    timezone: str = "-0500",
) -> Commit:
    if timestamp is None:
        timestamp = int(time.time())

    lines = [
        f"tree {tree_hash}",
    ]
    if parent:
        lines.append(f"parent {parent}")

    lines.append(f"author {author} {timestamp} {timezone}")
    lines.append(f"committer {committer} {timestamp} {timezone}")
    lines.append("")
    lines.append(message)
    return Commit("\n".join(lines).encode() + b"\n")
