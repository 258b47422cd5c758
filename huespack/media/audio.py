"""
Audio decoding for song tracks.

Turns a backing audio file into signed 16-bit little-endian PCM, interleaved
across channels. libsndfile (through soundfile) handles MP3 from 1.1.0 on,
plus OGG/Vorbis, WAV and FLAC.
"""
import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import soundfile as sf

from huespack.core.constants import BYTES_PER_SAMPLE, PCM_DTYPE
from huespack.core.errors import DecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedAudio:
    """
    Fully decoded PCM stream.

    Attributes:
        pcm: int16 little-endian array, shape (sample_count, channel_count).
             Row-major, so the raw bytes are interleaved frames.
        sample_rate: Frames per second
    """
    pcm: np.ndarray
    sample_rate: int

    def __post_init__(self):
        """Validate decoded stream."""
        if self.pcm.ndim != 2:
            raise ValueError(f"PCM must be 2-D (frames, channels), got {self.pcm.ndim}-D")
        if self.pcm.dtype != np.dtype(PCM_DTYPE):
            raise ValueError(f"PCM must be {PCM_DTYPE}, got {self.pcm.dtype}")
        if self.sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {self.sample_rate}")

    @property
    def sample_count(self) -> int:
        """Number of frames (samples per channel)."""
        return int(self.pcm.shape[0])

    @property
    def channel_count(self) -> int:
        """Number of interleaved channels."""
        return int(self.pcm.shape[1])

    @property
    def size_bytes(self) -> int:
        """Byte length of the interleaved buffer."""
        return self.sample_count * self.channel_count * BYTES_PER_SAMPLE


def decode_audio(path: Path) -> DecodedAudio:
    """
    Decode an audio file to 16-bit little-endian interleaved PCM.

    Args:
        path: Backing audio file

    Returns:
        DecodedAudio with the PCM buffer and stream parameters

    Raises:
        DecodeError: If the file is missing or libsndfile cannot decode it
    """
    path = Path(path)
    if not path.is_file():
        raise DecodeError(f"Audio file not found: {path}", path)

    try:
        data, sample_rate = sf.read(str(path), dtype="int16", always_2d=True)
    except (RuntimeError, OSError) as e:
        raise DecodeError(f"Failed to decode audio file {path.name!r}: {e}", path) from e

    # soundfile hands back native byte order; pin it to little-endian
    pcm = np.ascontiguousarray(data.astype(PCM_DTYPE, copy=False))

    decoded = DecodedAudio(pcm=pcm, sample_rate=int(sample_rate))
    logger.debug(
        "Decoded %s: %d frames, %d channel(s), %d Hz",
        path.name, decoded.sample_count, decoded.channel_count, decoded.sample_rate,
    )
    return decoded
