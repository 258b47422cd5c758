"""
Catalog snapshot I/O for the .hcat format.

File format:
- MessagePack binary format (fast, compact)
- Contains: PackCatalog (pack info + song and image records) + version
- Re-hydrated through ResourcePack.init_from_catalog()
"""
import logging
from pathlib import Path
from typing import Union

import msgpack

from huespack.core.models import PackCatalog

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = ".hcat"


class CatalogFile:
    """Handles .hcat catalog snapshot I/O."""

    @staticmethod
    def save(catalog: PackCatalog, path: Union[str, Path]) -> Path:
        """
        Save a catalog to a .hcat file.

        Args:
            catalog: Catalog to save
            path: Destination file path (suffix forced to .hcat)

        Returns:
            Path actually written

        Raises:
            IOError: If save fails
        """
        path = Path(path)
        if path.suffix != SNAPSHOT_SUFFIX:
            path = path.with_suffix(SNAPSHOT_SUFFIX)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            packed_data = msgpack.packb(catalog.to_dict(), use_bin_type=True)
            with open(path, "wb") as f:
                f.write(packed_data)
        except (OSError, TypeError, ValueError) as e:
            raise IOError(f"Failed to save catalog to {path}: {e}") from e

        logger.info("Saved catalog snapshot to %s", path)
        return path

    @staticmethod
    def load(path: Union[str, Path]) -> PackCatalog:
        """
        Load a catalog from a .hcat file.

        Args:
            path: Source file path

        Returns:
            Loaded catalog

        Raises:
            IOError: If the file is missing or unreadable
            ValueError: If the file format or version is invalid
        """
        path = Path(path)
        if not path.exists():
            raise IOError(f"Catalog file not found: {path}")

        try:
            with open(path, "rb") as f:
                packed_data = f.read()
        except OSError as e:
            raise IOError(f"Failed to load catalog from {path}: {e}") from e

        try:
            data = msgpack.unpackb(packed_data, raw=False)
        except (msgpack.exceptions.ExtraData, msgpack.exceptions.UnpackException, ValueError) as e:
            raise ValueError(f"Invalid .hcat file format: {e}") from e

        if not isinstance(data, dict):
            raise ValueError("Invalid .hcat file format: expected a map at top level")

        version = str(data.get("version", "unknown"))
        if not version.startswith("1."):
            raise ValueError(f"Incompatible catalog version: {version}. Expected 1.x")

        try:
            return PackCatalog.from_dict(data)
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid .hcat catalog contents: {e}") from e
