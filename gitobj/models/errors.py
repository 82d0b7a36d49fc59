__all__ = [
    "GitObjError",
    "InvalidInput",
    "MalformedObject",
    "ObjectCorrupt",
    "NotFound",
    "NotText",
    "PartialFailure",
]


class GitObjError(Exception):
    """Base class for every error raised by gitobj."""


class InvalidInput(GitObjError, ValueError):
    pass


class MalformedObject(GitObjError, ValueError):
    def __init__(self, message: str, *, offset: int | None = None):
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)
        self.offset = offset


class ObjectCorrupt(GitObjError):
    def __init__(self, address: str, reason: str):
        super().__init__(f"object {address} is corrupt: {reason}")
        self.address = address
        self.reason = reason


class NotFound(GitObjError, KeyError):
    def __init__(self, address: str):
        super().__init__(address)
        self.address = address

    def __str__(self):
        return f"object {self.address} not found"


class NotText(GitObjError, ValueError):
    pass


class PartialFailure(GitObjError):
    """Some children of a directory could not be snapshotted.

    ``entries`` holds the tree entries that were built, ``failures`` a list of
    ``(path, exception)`` pairs for the children that were not.
    """

    def __init__(self, path, entries, failures):
        names = ", ".join(str(child) for child, _ in failures)
        super().__init__(f"{len(failures)} entries under {path} failed: {names}")
        self.path = path
        self.entries = list(entries)
        self.failures = list(failures)
