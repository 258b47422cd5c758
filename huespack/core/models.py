"""
Data models for huespack.

Metadata records (SongRecord, ImageRecord, PackInfo, PackCatalog) are
immutable dataclasses produced by the metadata parser and stored in catalog
snapshots. AudioResource and ImageResource are the live catalog entries
owned by a ResourcePack:
- AudioResource decodes each of its tracks at most once and keeps the PCM
- ImageResource decodes afresh on every call and hands the pixels over
"""
import logging
import math
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Tuple, Optional, Dict, Any, List

import numpy as np

from huespack.core import constants
from huespack.core.errors import DecodeError
from huespack.media.audio import DecodedAudio, decode_audio
from huespack.media.image import ColorType, DecodedImage, decode_image

logger = logging.getLogger(__name__)

__all__ = [
    "Align",
    "AudioResource",
    "Beat",
    "ColorType",
    "DecodedImage",
    "ImageRecord",
    "ImageResource",
    "PackCatalog",
    "PackInfo",
    "SongRecord",
    "TrackType",
    "find_backing_file",
]


class Beat(Enum):
    """Visual transition cue for one beat slot. Values are beatmap characters."""
    VERTICAL_BLUR = "x"
    HORIZONTAL_BLUR = "o"
    NO_BLUR = "-"
    BLACKOUT = "+"
    SHORT_BLACKOUT = "|"
    COLOR_ONLY = ":"
    IMAGE_ONLY = "*"
    NO_TRANSITION = "."


class Align(Enum):
    """Image placement for upscaled images and non-matching aspect ratios."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class TrackType(Enum):
    """Selects one of the two tracks of an AudioResource."""
    LOOP = "loop"
    BUILDUP = "buildup"


def find_backing_file(directory: Path, name: str, extensions: List[str]) -> Path:
    """
    Locate the file backing a named resource.

    Args:
        directory: Directory holding the media files
        name: Resource name, with or without extension
        extensions: Extensions to try, in order

    Returns:
        Path to the first existing candidate

    Raises:
        DecodeError: If no candidate exists
    """
    direct = directory / name
    if direct.suffix.lower() in extensions and direct.is_file():
        return direct

    for ext in extensions:
        candidate = directory / f"{name}{ext}"
        if candidate.is_file():
            return candidate

    raise DecodeError(
        f"No backing file for '{name}' in {directory} (tried {', '.join(extensions)})",
        direct,
    )


@dataclass(frozen=True)
class SongRecord:
    """
    One <song> entry from songs.xml.

    Attributes:
        name: Loop track name (file name without extension)
        title: Display title
        rhythm: Loop beatmap
        buildup: Buildup track name ("" = no buildup)
        buildup_rhythm: Buildup beatmap
        source: Where the song came from (URL or free text)
        bpm: Optional tempo; gives the beat period before any decode
    """
    name: str
    title: str
    rhythm: str = ""
    buildup: str = ""
    buildup_rhythm: str = ""
    source: str = ""
    bpm: Optional[float] = None

    def __post_init__(self):
        """Validate song record."""
        if not self.name:
            raise ValueError("Song loop name must not be empty")
        if self.bpm is not None and not (math.isfinite(self.bpm) and self.bpm > 0):
            raise ValueError(f"BPM must be a positive finite number, got {self.bpm}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "title": self.title,
            "rhythm": self.rhythm,
            "buildup": self.buildup,
            "buildup_rhythm": self.buildup_rhythm,
            "source": self.source,
            "bpm": self.bpm,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SongRecord":
        """Create SongRecord from dictionary."""
        bpm = data.get("bpm")
        return cls(
            name=data["name"],
            title=data.get("title", ""),
            rhythm=data.get("rhythm", ""),
            buildup=data.get("buildup", ""),
            buildup_rhythm=data.get("buildup_rhythm", ""),
            source=data.get("source", ""),
            bpm=float(bpm) if bpm is not None else None,
        )


@dataclass(frozen=True)
class ImageRecord:
    """
    One <image> entry from images.xml.

    Attributes:
        name: Image name (file name without extension)
        align: Raw alignment string, interpreted leniently
        full_name: Long display name
        source: Artwork source
        source_other: Secondary source
    """
    name: str
    align: str = "center"
    full_name: str = ""
    source: str = ""
    source_other: str = ""

    def __post_init__(self):
        """Validate image record."""
        if not self.name:
            raise ValueError("Image name must not be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "align": self.align,
            "full_name": self.full_name,
            "source": self.source,
            "source_other": self.source_other,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImageRecord":
        """Create ImageRecord from dictionary."""
        return cls(
            name=data["name"],
            align=data.get("align", "center"),
            full_name=data.get("full_name", ""),
            source=data.get("source", ""),
            source_other=data.get("source_other", ""),
        )


@dataclass(frozen=True)
class PackInfo:
    """Pack-level metadata from info.xml."""
    name: str = ""
    author: str = ""
    description: str = ""
    link: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "author": self.author,
            "description": self.description,
            "link": self.link,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackInfo":
        """Create PackInfo from dictionary."""
        return cls(
            name=data.get("name", ""),
            author=data.get("author", ""),
            description=data.get("description", ""),
            link=data.get("link", ""),
        )


@dataclass(frozen=True)
class PackCatalog:
    """
    Everything parsed from a pack's metadata, in file order.

    Attributes:
        songs: Song records in songs.xml order
        images: Image records in images.xml order
        info: Pack info, None when the pack has no info.xml
    """
    songs: Tuple[SongRecord, ...] = field(default_factory=tuple)
    images: Tuple[ImageRecord, ...] = field(default_factory=tuple)
    info: Optional[PackInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = {
            "version": "1.0.0",
            "songs": [s.to_dict() for s in self.songs],
            "images": [i.to_dict() for i in self.images],
        }
        if self.info:
            result["info"] = self.info.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackCatalog":
        """Create PackCatalog from dictionary."""
        info = None
        if "info" in data and data["info"]:
            info = PackInfo.from_dict(data["info"])

        return cls(
            songs=tuple(SongRecord.from_dict(s) for s in data.get("songs", [])),
            images=tuple(ImageRecord.from_dict(i) for i in data.get("images", [])),
            info=info,
        )


class _TrackInfo:
    """
    Per-track state of an AudioResource.

    The decoded stream is published with a single attribute assignment, so
    readers see either no PCM or the complete DecodedAudio with its counts.
    """

    def __init__(self, name: str, beatmap: str = "", usec_per_beat: float = 0.0):
        self.name = name
        self.beatmap = beatmap
        self.usec_per_beat = usec_per_beat
        self.decoded: Optional[DecodedAudio] = None
        self.lock = threading.Lock()

    @property
    def channel_count(self) -> int:
        return self.decoded.channel_count if self.decoded else 0

    @property
    def sample_count(self) -> int:
        return self.decoded.sample_count if self.decoded else 0

    @property
    def sample_rate(self) -> int:
        return self.decoded.sample_rate if self.decoded else 0


class AudioResource:
    """
    A song: a mandatory loop track plus an optional buildup track.

    Each track has its own name, beatmap, and decode state. Decoding is
    explicit (read_and_decode) and happens at most once per track; the PCM
    then stays owned by this object and callers get read-only views.
    """

    def __init__(self, base_path: Path, song_title: str,
                 loop_name: str, buildup_name: str = "",
                 audio_extensions: Optional[List[str]] = None):
        """
        Args:
            base_path: Directory holding the pack's audio files
            song_title: Display title
            loop_name: Loop track name (required)
            buildup_name: Buildup track name, "" when the song has none
            audio_extensions: Backing file extensions to try, in order
        """
        if not loop_name:
            raise ValueError("Loop track name must not be empty")

        self._base_path = Path(base_path)
        self._song_title = song_title
        self._audio_extensions = list(audio_extensions or constants.AUDIO_EXTENSIONS)
        self._loop = _TrackInfo(loop_name)
        self._buildup = _TrackInfo(buildup_name or "")

    @classmethod
    def from_record(cls, record: SongRecord, base_path: Path,
                    audio_extensions: Optional[List[str]] = None) -> "AudioResource":
        """
        Build a catalog entry from a parsed song record.

        This is the only place beatmaps and beat periods get assigned.
        """
        resource = cls(base_path, record.title, record.name, record.buildup, audio_extensions)

        usec_per_beat = constants.bpm_to_usec_per_beat(record.bpm) if record.bpm else 0.0
        resource._loop.beatmap = record.rhythm
        resource._loop.usec_per_beat = usec_per_beat
        if resource.has_buildup():
            resource._buildup.beatmap = record.buildup_rhythm
            resource._buildup.usec_per_beat = usec_per_beat
        return resource

    def _track(self, track_type: TrackType) -> _TrackInfo:
        return self._loop if track_type == TrackType.LOOP else self._buildup

    def has_buildup(self) -> bool:
        """Returns whether or not this song has a buildup."""
        return bool(self._buildup.name)

    @property
    def title(self) -> str:
        return self._song_title

    def get_title(self) -> str:
        return self._song_title

    def get_name(self, track_type: TrackType) -> str:
        return self._track(track_type).name

    def get_beatmap(self, track_type: TrackType) -> str:
        return self._track(track_type).beatmap

    def get_song_duration_usec(self, track_type: TrackType) -> float:
        """
        Track duration in microseconds.

        Zero until the track has been decoded.
        """
        track = self._track(track_type)
        if not track.sample_rate:
            return 0.0
        return track.sample_count / track.sample_rate * constants.USEC_PER_SECOND

    def get_beat_duration_usec(self, track_type: TrackType) -> float:
        """Beat period from the song metadata (0.0 if the pack gives none)."""
        return self._track(track_type).usec_per_beat

    def estimate_beat_duration_usec(self, track_type: TrackType) -> float:
        """
        Beat period derived from the decoded duration and beatmap length.

        Returns 0.0 if the track is undecoded or its beatmap is empty.
        """
        beatmap = self.get_beatmap(track_type)
        if not beatmap:
            return 0.0
        return self.get_song_duration_usec(track_type) / len(beatmap)

    def get_pcm_data(self, track_type: TrackType) -> Optional[np.ndarray]:
        """
        Read-only view of the decoded PCM, shape (sample_count, channel_count).

        Returns None before the track is decoded.
        """
        decoded = self._track(track_type).decoded
        if decoded is None:
            return None
        view = decoded.pcm.view()
        view.flags.writeable = False
        return view

    def get_pcm_data_size(self, track_type: TrackType) -> int:
        decoded = self._track(track_type).decoded
        return decoded.size_bytes if decoded else 0

    def get_channel_count(self, track_type: TrackType) -> int:
        return self._track(track_type).channel_count

    def get_sample_count(self, track_type: TrackType) -> int:
        return self._track(track_type).sample_count

    def get_sample_rate(self, track_type: TrackType) -> int:
        return self._track(track_type).sample_rate

    def is_decoded(self, track_type: TrackType) -> bool:
        return self._track(track_type).decoded is not None

    def get_file_path(self, track_type: TrackType) -> Path:
        """
        Locate the backing audio file of a track.

        Raises:
            ValueError: If the buildup is requested for a song without one
            DecodeError: If no backing file exists
        """
        track = self._track(track_type)
        if not track.name:
            raise ValueError(f"Song '{self._song_title}' has no buildup track")
        return find_backing_file(self._base_path, track.name, self._audio_extensions)

    def read_and_decode(self, track_type: TrackType):
        """
        Decode a track into 16-bit little-endian interleaved PCM.

        Does nothing if the track is already decoded. Concurrent calls on the
        same track decode once; the others wait and return.

        Args:
            track_type: Which track to decode

        Raises:
            ValueError: If the buildup is requested for a song without one
            DecodeError: If the backing file is missing or undecodable. The
                track stays undecoded and the other track is unaffected.
        """
        track = self._track(track_type)
        if track.decoded is not None:
            return

        with track.lock:
            if track.decoded is not None:
                return
            path = self.get_file_path(track_type)
            logger.debug("Decoding %s track of '%s' from %s",
                         track_type.value, self._song_title, path)
            track.decoded = decode_audio(path)

    def release(self, track_type: TrackType):
        """Drop the decoded PCM of a track; the next decode reads the file again."""
        track = self._track(track_type)
        with track.lock:
            track.decoded = None

    def get_beats(self, track_type: TrackType) -> Tuple[Beat, ...]:
        """Classify every character of a track's beatmap."""
        return tuple(self.parse_beat_character(c) for c in self.get_beatmap(track_type))

    def get_beat_at(self, track_type: TrackType, index: int) -> Beat:
        """
        Beat event for a beat slot, wrapping around the beatmap.

        An empty beatmap yields NO_TRANSITION for every slot.
        """
        beatmap = self.get_beatmap(track_type)
        if not beatmap:
            return Beat.NO_TRANSITION
        return self.parse_beat_character(beatmap[index % len(beatmap)])

    @staticmethod
    def parse_beat_character(beat_char: str) -> Beat:
        """
        Map a beatmap character to its Beat.

        Total: unrecognized characters map to Beat.NO_TRANSITION, so packs
        written for newer players still load.
        """
        return Beat[constants.beat_name_for_character(beat_char)]

    def __repr__(self) -> str:
        buildup = f" buildup='{self._buildup.name}'" if self.has_buildup() else ""
        return f"<AudioResource title='{self._song_title}' loop='{self._loop.name}'{buildup}>"


class ImageResource:
    """
    A named, aligned image. Each read_and_decode call decodes the file again
    and returns a buffer the caller owns.
    """

    def __init__(self, base_path: Path, name: str, alignment: Align = Align.CENTER,
                 full_name: str = "", source: str = "", source_other: str = "",
                 image_extensions: Optional[List[str]] = None,
                 force_rgba: bool = True):
        """
        Args:
            base_path: Directory holding the pack's image files
            name: Image name (file name without extension)
            alignment: Placement policy, fixed for the resource's lifetime
            full_name: Long display name
            source: Artwork source
            source_other: Secondary source
            image_extensions: Backing file extensions to try, in order
            force_rgba: Always decode to RGBA
        """
        if not name:
            raise ValueError("Image name must not be empty")

        self._base_path = Path(base_path)
        self._image_name = name
        self._alignment = alignment
        self.full_name = full_name
        self.source = source
        self.source_other = source_other
        self._image_extensions = list(image_extensions or constants.IMAGE_EXTENSIONS)
        self._force_rgba = force_rgba

    @classmethod
    def from_record(cls, record: ImageRecord, base_path: Path,
                    image_extensions: Optional[List[str]] = None,
                    force_rgba: bool = True) -> "ImageResource":
        """Build a catalog entry from a parsed image record."""
        alignment = cls.parse_alignment_string(record.align)
        if alignment.value != record.align:
            logger.warning("Image '%s': unknown alignment %r, using center",
                           record.name, record.align)
        return cls(
            base_path,
            record.name,
            alignment,
            full_name=record.full_name,
            source=record.source,
            source_other=record.source_other,
            image_extensions=image_extensions,
            force_rgba=force_rgba,
        )

    @property
    def name(self) -> str:
        return self._image_name

    @property
    def alignment(self) -> Align:
        return self._alignment

    def get_name(self) -> str:
        """Returns this ImageResource's name (without file extension)."""
        return self._image_name

    def get_alignment(self) -> Align:
        return self._alignment

    def get_file_path(self) -> Path:
        """Locate the backing image file (DecodeError if there is none)."""
        return find_backing_file(self._base_path, self._image_name, self._image_extensions)

    def read_and_decode(self) -> DecodedImage:
        """
        Decode the backing file into a freshly allocated pixel buffer.

        Returns:
            DecodedImage with pixels (height, width, channels), the true
            width and height, and the color type

        Raises:
            DecodeError: If the backing file is missing or undecodable
        """
        path = self.get_file_path()
        logger.debug("Decoding image '%s' from %s", self._image_name, path)
        return decode_image(path, force_rgba=self._force_rgba)

    @staticmethod
    def parse_alignment_string(align: str) -> Align:
        """
        Map an alignment string to an Align.

        Total and case-sensitive: anything but "left", "center" or "right"
        maps to Align.CENTER.
        """
        return Align[constants.alignment_name_for_string(align)]

    def __repr__(self) -> str:
        return f"<ImageResource name='{self._image_name}' align={self._alignment.value}>"
