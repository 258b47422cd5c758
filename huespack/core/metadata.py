"""
Pack metadata parsing.

Reads songs.xml, images.xml and the optional info.xml of a pack into
immutable records, preserving file order.
"""
import logging
from pathlib import Path
from typing import Optional, Tuple

from lxml import etree

from huespack.core.errors import MetadataParseError, MissingFieldError, PackFileNotFoundError
from huespack.core.models import ImageRecord, PackCatalog, PackInfo, SongRecord
from huespack.core.settings import Settings

logger = logging.getLogger(__name__)

_PARSER = etree.XMLParser(remove_comments=True, resolve_entities=False, no_network=True)


def _load_root(path: Path, root_tag: str) -> etree._Element:
    """
    Parse an XML file and check its root element.

    Raises:
        PackFileNotFoundError: If the file does not exist
        MetadataParseError: If the XML is malformed or the root tag is wrong
    """
    if not path.is_file():
        raise PackFileNotFoundError(f"Metadata file not found: {path}")

    try:
        tree = etree.parse(str(path), _PARSER)
    except etree.XMLSyntaxError as e:
        raise MetadataParseError(f"Malformed XML in {path.name}: {e}") from e
    except OSError as e:
        raise MetadataParseError(f"Failed to read {path}: {e}") from e

    root = tree.getroot()
    if root.tag != root_tag:
        raise MetadataParseError(
            f"{path.name}: expected <{root_tag}> root element, got <{root.tag}>"
        )
    return root


def _text(element: etree._Element, tag: str) -> Optional[str]:
    """Stripped text of a child element, "" if empty, None if absent."""
    value = element.findtext(tag)
    return value.strip() if value is not None else None


def _beatmap_text(element: etree._Element, tag: str) -> Optional[str]:
    """Beatmap text with line breaks and tabs trimmed; spaces are beat slots."""
    value = element.findtext(tag)
    return value.strip("\r\n\t") if value is not None else None


def _parse_bpm(raw: Optional[str], song_name: str) -> Optional[float]:
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise MetadataParseError(f"Song '{song_name}': invalid bpm {raw!r}") from e


def parse_song_element(element: etree._Element, index: int) -> SongRecord:
    """
    Build a SongRecord from a <song> element.

    Required: the name attribute and the <title> and <rhythm> children
    (either may be empty). <buildup>, <buildupRhythm>, <source> and <bpm>
    are optional.
    """
    name = (element.get("name") or "").strip()
    if not name:
        raise MissingFieldError(f"Song #{index + 1} has no name attribute")

    title = _text(element, "title")
    if title is None:
        raise MissingFieldError(f"Song '{name}' has no <title>")

    rhythm = _beatmap_text(element, "rhythm")
    if rhythm is None:
        raise MissingFieldError(f"Song '{name}' has no <rhythm>")

    buildup = _text(element, "buildup") or ""
    buildup_rhythm = _beatmap_text(element, "buildupRhythm") or ""
    if buildup_rhythm and not buildup:
        logger.warning("Song '%s': buildupRhythm without buildup, ignoring", name)
        buildup_rhythm = ""

    try:
        return SongRecord(
            name=name,
            title=title,
            rhythm=rhythm,
            buildup=buildup,
            buildup_rhythm=buildup_rhythm,
            source=_text(element, "source") or "",
            bpm=_parse_bpm(_text(element, "bpm"), name),
        )
    except ValueError as e:
        raise MetadataParseError(f"Song '{name}': {e}") from e


def parse_image_element(element: etree._Element, index: int) -> ImageRecord:
    """Build an ImageRecord from an <image> element (name attribute required)."""
    name = (element.get("name") or "").strip()
    if not name:
        raise MissingFieldError(f"Image #{index + 1} has no name attribute")

    return ImageRecord(
        name=name,
        align=_text(element, "align") or "center",
        full_name=_text(element, "fullname") or "",
        source=_text(element, "source") or "",
        source_other=_text(element, "source_other") or "",
    )


def parse_songs_file(path: Path) -> Tuple[SongRecord, ...]:
    """Parse songs.xml into song records, in file order."""
    root = _load_root(Path(path), "songs")
    return tuple(parse_song_element(el, i) for i, el in enumerate(root.iterchildren("song")))


def parse_images_file(path: Path) -> Tuple[ImageRecord, ...]:
    """Parse images.xml into image records, in file order."""
    root = _load_root(Path(path), "images")
    return tuple(parse_image_element(el, i) for i, el in enumerate(root.iterchildren("image")))


def parse_info_file(path: Path) -> PackInfo:
    """Parse info.xml into PackInfo."""
    root = _load_root(Path(path), "info")
    return PackInfo(
        name=_text(root, "name") or "",
        author=_text(root, "author") or "",
        description=_text(root, "description") or "",
        link=_text(root, "link") or "",
    )


def find_metadata_root(base_path: Path, songs_file: str) -> Path:
    """
    Find the directory holding a pack's metadata.

    Pack archives often wrap everything in one folder, so when songs.xml is
    not directly under base_path, a single subdirectory containing it is
    accepted instead.

    Raises:
        PackFileNotFoundError: If base_path does not exist
    """
    if not base_path.is_dir():
        raise PackFileNotFoundError(f"Pack directory not found: {base_path}")

    if (base_path / songs_file).is_file():
        return base_path

    candidates = [d for d in sorted(base_path.iterdir())
                  if d.is_dir() and (d / songs_file).is_file()]
    if len(candidates) == 1:
        logger.info("Using nested pack directory %s", candidates[0])
        return candidates[0]
    return base_path


def parse_pack_metadata(metadata_root: Path, settings: Settings) -> PackCatalog:
    """
    Parse all metadata of a pack.

    Args:
        metadata_root: Directory holding songs.xml/images.xml/info.xml
        settings: Supplies the metadata file names

    Returns:
        PackCatalog with songs and images in file order

    Raises:
        CatalogInitError: Any missing or malformed metadata
    """
    songs = parse_songs_file(metadata_root / settings.get("pack", "songs_file"))
    images = parse_images_file(metadata_root / settings.get("pack", "images_file"))

    info = None
    info_path = metadata_root / settings.get("pack", "info_file")
    if info_path.is_file():
        info = parse_info_file(info_path)

    return PackCatalog(songs=songs, images=images, info=info)
