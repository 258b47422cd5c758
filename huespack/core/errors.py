"""
Exception hierarchy for huespack.

CatalogInitError and its subclasses describe why a pack could not be
initialized. DecodeError is raised by resource decode calls and only
affects the resource that failed.
"""
from pathlib import Path
from typing import Optional


class RespackError(Exception):
    """Base class for all huespack errors."""


class CatalogInitError(RespackError):
    """Pack metadata is missing or malformed."""


class PackFileNotFoundError(CatalogInitError, FileNotFoundError):
    """A required pack directory or metadata file does not exist."""


class MetadataParseError(CatalogInitError):
    """A metadata file is not well-formed or has the wrong root element."""


class MissingFieldError(CatalogInitError):
    """A metadata record lacks a required field."""


class PackStateError(RespackError):
    """Operation not allowed in the pack's current lifecycle state."""


class DecodeError(RespackError):
    """A backing audio or image file is missing or could not be decoded."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path
