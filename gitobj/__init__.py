"""A minimal content-addressable object store using git's loose-object format."""

__version__ = "0.1.0"
