"""SDK for bundling and uploading releases to a distribution backend."""

__version__ = "0.1.0"
