"""Chat bot that mirrors per-user task lists into a Trilium note."""

__version__ = "0.1.0"
