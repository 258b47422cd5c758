"""
ResourcePack: the catalog of songs and images in a pack directory.

Lifecycle:
- ResourcePack(path) only records the base path
- init() parses the metadata once and builds undecoded resources
- get_all_songs()/get_all_images() hand out the pack's own resource objects
- resources decode lazily when the caller asks them to
"""
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from huespack.core.errors import (
    CatalogInitError,
    MetadataParseError,
    MissingFieldError,
    PackFileNotFoundError,
    PackStateError,
)
from huespack.core.metadata import find_metadata_root, parse_pack_metadata
from huespack.core.models import AudioResource, ImageResource, PackCatalog, PackInfo, TrackType
from huespack.core.settings import Settings

logger = logging.getLogger(__name__)


class InitErrorKind(Enum):
    """Why ResourcePack initialization failed."""
    FILE_NOT_FOUND = "file_not_found"
    PARSE_ERROR = "parse_error"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    ALREADY_INITIALIZED = "already_initialized"


@dataclass(frozen=True)
class InitResult:
    """
    Outcome of ResourcePack.init(). Truthy on success.

    Attributes:
        ok: Whether the catalog is ready
        error_kind: Failure cause (None on success)
        message: Human-readable failure detail ("" on success)
    """
    ok: bool
    error_kind: Optional[InitErrorKind] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls) -> "InitResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, kind: InitErrorKind, message: str) -> "InitResult":
        return cls(ok=False, error_kind=kind, message=message)


def _error_kind(error: Exception) -> InitErrorKind:
    """Map an init exception to its InitErrorKind."""
    if isinstance(error, PackFileNotFoundError):
        return InitErrorKind.FILE_NOT_FOUND
    if isinstance(error, MissingFieldError):
        return InitErrorKind.MISSING_REQUIRED_FIELD
    if isinstance(error, PackStateError):
        return InitErrorKind.ALREADY_INITIALIZED
    return InitErrorKind.PARSE_ERROR


class ResourcePack:
    """
    Catalog of the songs and images in a pack directory.

    The pack owns every AudioResource and ImageResource it creates. Songs
    with a buildup are listed once; the buildup is a track of the song.
    Not safe for concurrent init(); resources guard their own decoding.
    """

    def __init__(self, path: Union[str, Path], settings: Optional[Settings] = None):
        """
        Args:
            path: Root directory of the pack
            settings: Layout and decode settings (default: built-in defaults)
        """
        self._base_path = Path(path)
        self.settings = settings or Settings.defaults()

        self._song_list: List[AudioResource] = []
        self._image_list: List[ImageResource] = []
        self._catalog: Optional[PackCatalog] = None
        self._metadata_root: Optional[Path] = None

    @property
    def is_initialized(self) -> bool:
        return self._catalog is not None

    @property
    def info(self) -> Optional[PackInfo]:
        """Pack info from info.xml, None if absent or not initialized."""
        return self._catalog.info if self._catalog else None

    @property
    def songs(self) -> Tuple[AudioResource, ...]:
        return tuple(self._song_list)

    @property
    def images(self) -> Tuple[ImageResource, ...]:
        return tuple(self._image_list)

    def catalog(self) -> Optional[PackCatalog]:
        """Metadata records the catalog was built from (None before init)."""
        return self._catalog

    def get_base_path(self) -> Path:
        return self._base_path

    def init(self) -> InitResult:
        """
        Parse the pack metadata and build the catalog.

        Call once. A second call is rejected and leaves the catalog as is.
        On failure the catalog stays empty and the pack must not be used.

        Returns:
            InitResult; its error_kind tells missing files, malformed XML,
            missing fields and repeated initialization apart
        """
        try:
            self._check_not_initialized()
            self._metadata_root = find_metadata_root(
                self._base_path, self.settings.get("pack", "songs_file"))
            catalog = parse_pack_metadata(self._metadata_root, self.settings)
        except (CatalogInitError, PackStateError) as e:
            return self._init_failed(e)

        return self._populate(catalog)

    def init_from_catalog(self, catalog: PackCatalog) -> InitResult:
        """
        Build the catalog from already-parsed metadata (e.g. a snapshot).

        Same once-only rule as init().
        """
        try:
            self._check_not_initialized()
            self._metadata_root = find_metadata_root(
                self._base_path, self.settings.get("pack", "songs_file"))
        except (CatalogInitError, PackStateError) as e:
            return self._init_failed(e)

        return self._populate(catalog)

    def _check_not_initialized(self):
        if self.is_initialized:
            raise PackStateError(f"Pack {self._base_path} is already initialized")

    def _init_failed(self, error: Exception) -> InitResult:
        kind = _error_kind(error)
        if kind == InitErrorKind.ALREADY_INITIALIZED:
            logger.warning("%s", error)
        else:
            logger.error("Failed to initialize pack %s: %s", self._base_path, error)
        return InitResult.failure(kind, str(error))

    def _media_dir(self, key: str) -> Path:
        """Media subdirectory, or the metadata root when the pack is flat."""
        root = self._metadata_root or self._base_path
        subdir = root / self.settings.get("pack", key)
        return subdir if subdir.is_dir() else root

    def _populate(self, catalog: PackCatalog) -> InitResult:
        songs_dir = self._media_dir("songs_dir")
        images_dir = self._media_dir("images_dir")
        audio_extensions = self.settings.get("media", "audio_extensions")
        image_extensions = self.settings.get("media", "image_extensions")
        force_rgba = self.settings.get("media", "force_rgba", True)

        try:
            songs = [AudioResource.from_record(record, songs_dir, audio_extensions)
                     for record in catalog.songs]
            images = [ImageResource.from_record(record, images_dir, image_extensions, force_rgba)
                      for record in catalog.images]
        except ValueError as e:
            return self._init_failed(MetadataParseError(str(e)))

        self._song_list = songs
        self._image_list = images
        self._catalog = catalog

        logger.info("Loaded pack %s: %d song(s), %d image(s)",
                    catalog.info.name if catalog.info and catalog.info.name else self._base_path,
                    len(songs), len(images))
        return InitResult.success()

    def get_all_songs(self, song_list: List[AudioResource]) -> int:
        """
        Append every song to song_list, in metadata order.

        Buildups are not listed separately; they come with their loop.

        Returns:
            Number of songs appended (0 before init)
        """
        song_list.extend(self._song_list)
        return len(self._song_list)

    def get_all_images(self, image_list: List[ImageResource]) -> int:
        """
        Append every image to image_list, in metadata order.

        Returns:
            Number of images appended (0 before init)
        """
        image_list.extend(self._image_list)
        return len(self._image_list)

    def find_song(self, title: str) -> Optional[AudioResource]:
        """First song with the given title, or None."""
        return next((s for s in self._song_list if s.get_title() == title), None)

    def find_image(self, name: str) -> Optional[ImageResource]:
        """First image with the given name, or None."""
        return next((i for i in self._image_list if i.get_name() == name), None)

    def close(self):
        """Release all decoded PCM held by the pack's songs."""
        for song in self._song_list:
            song.release(TrackType.LOOP)
            if song.has_buildup():
                song.release(TrackType.BUILDUP)

    def __repr__(self) -> str:
        return (f"<ResourcePack path='{self._base_path}' songs={len(self._song_list)} "
                f"images={len(self._image_list)}>")
