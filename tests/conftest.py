"""
Shared fixtures for the test suite.

Packs are built on disk under tmp_path: metadata written as XML text, audio
written with soundfile (16-bit WAV), images written with Pillow. No test
depends on assets outside the temporary directory.
"""

from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pytest
import soundfile as sf
from PIL import Image

from huespack.core.settings import Settings

# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


def write_wav(path: Path, frames: int = 2205, channels: int = 2, sample_rate: int = 22050) -> np.ndarray:
    """Write a deterministic 16-bit WAV and return the samples written."""
    ramp = np.arange(frames * channels, dtype=np.int64) * 37 % 65536 - 32768
    data = ramp.astype(np.int16).reshape(frames, channels)
    path.parent.mkdir(parents=True, exist_ok=True)
    sf.write(str(path), data, sample_rate, subtype="PCM_16")
    return data


def write_png(path: Path, width: int = 4, height: int = 3, mode: str = "RGBA") -> Image.Image:
    """Write a small PNG with distinct pixel values."""
    image = Image.new(mode, (width, height))
    channels = len(mode)
    pixels = [
        tuple((x * 40 + y * 7 + c * 11) % 256 for c in range(channels))
        for y in range(height) for x in range(width)
    ]
    if channels == 1:
        pixels = [p[0] for p in pixels]
    image.putdata(pixels)
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path)
    return image


def songs_xml(songs: List[Dict[str, str]]) -> str:
    """Render songs.xml. Keys: name, title, rhythm, buildup, buildupRhythm, bpm, source."""
    entries = []
    for song in songs:
        children = "".join(
            f"<{tag}>{song[tag]}</{tag}>"
            for tag in ("title", "rhythm", "buildup", "buildupRhythm", "source", "bpm")
            if tag in song
        )
        entries.append(f'  <song name="{song["name"]}">{children}</song>')
    return "<songs>\n" + "\n".join(entries) + "\n</songs>\n"


def images_xml(images: List[Dict[str, str]]) -> str:
    """Render images.xml. Keys: name, align, fullname, source, source_other."""
    entries = []
    for image in images:
        children = "".join(
            f"<{tag}>{image[tag]}</{tag}>"
            for tag in ("fullname", "align", "source", "source_other")
            if tag in image
        )
        entries.append(f'  <image name="{image["name"]}">{children}</image>')
    return "<images>\n" + "\n".join(entries) + "\n</images>\n"


def build_pack(
    root: Path,
    songs: List[Dict[str, str]],
    images: List[Dict[str, str]],
    info: Optional[Dict[str, str]] = None,
    write_media: bool = True,
) -> Path:
    """Create a pack directory with metadata and (optionally) media files."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "songs.xml").write_text(songs_xml(songs), encoding="utf-8")
    (root / "images.xml").write_text(images_xml(images), encoding="utf-8")
    if info is not None:
        children = "".join(f"<{k}>{v}</{k}>" for k, v in info.items())
        (root / "info.xml").write_text(f"<info>{children}</info>", encoding="utf-8")

    if write_media:
        for song in songs:
            write_wav(root / "Songs" / f"{song['name']}.wav")
            if song.get("buildup"):
                write_wav(root / "Songs" / f"{song['buildup']}.wav", frames=1102)
        for image in images:
            write_png(root / "Images" / f"{image['name']}.png")
    return root


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    """In-memory default settings (never touches ~/.huespack)."""
    return Settings.defaults()


@pytest.fixture
def sample_pack(tmp_path: Path) -> Path:
    """Pack with two songs (one with a buildup) and two images."""
    return build_pack(
        tmp_path / "pack",
        songs=[
            {"name": "loop_Alpha", "title": "Alpha", "rhythm": "x...o...",
             "buildup": "build_Alpha", "buildupRhythm": "..+.", "bpm": "120"},
            {"name": "loop_Beta", "title": "Beta", "rhythm": "x-o.:*|+"},
        ],
        images=[
            {"name": "bg1", "align": "right", "fullname": "Background One"},
            {"name": "bg2"},
        ],
        info={"name": "Test Pack", "author": "Someone", "description": "For tests",
              "link": "https://example.org"},
    )
