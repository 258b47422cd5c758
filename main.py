"""
huespack - resource pack inspector
Main entry point
"""
import argparse
import logging
import sys
from typing import List, Optional

from huespack.core.errors import DecodeError
from huespack.core.models import AudioResource, ImageResource, TrackType
from huespack.core.pack import ResourcePack
from huespack.core.persistence import CatalogFile
from huespack.core.settings import Settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="List (and optionally decode) the songs and images of a resource pack.")
    parser.add_argument("pack_dir", help="Pack directory")
    parser.add_argument("--decode", action="store_true",
                        help="Decode every track and image and report their sizes")
    parser.add_argument("--snapshot", metavar="FILE",
                        help="Write a .hcat catalog snapshot after loading")
    parser.add_argument("--settings", metavar="FILE",
                        help="Settings file (default: ~/.huespack/settings.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def describe_song(song: AudioResource) -> str:
    line = (f"{song.get_title()!r}: loop={song.get_name(TrackType.LOOP)} "
            f"beats={len(song.get_beatmap(TrackType.LOOP))}")
    if song.has_buildup():
        line += (f" buildup={song.get_name(TrackType.BUILDUP)} "
                 f"beats={len(song.get_beatmap(TrackType.BUILDUP))}")
    return line


def decode_song(song: AudioResource) -> str:
    parts = []
    track_types = [TrackType.BUILDUP, TrackType.LOOP] if song.has_buildup() else [TrackType.LOOP]
    for track_type in track_types:
        song.read_and_decode(track_type)
        parts.append(
            f"{track_type.value} {song.get_song_duration_usec(track_type) / 1e6:.2f}s "
            f"{song.get_channel_count(track_type)}ch {song.get_sample_rate(track_type)}Hz")
    return ", ".join(parts)


def decode_image(image: ImageResource) -> str:
    decoded = image.read_and_decode()
    return f"{decoded.width}x{decoded.height} {decoded.color_type.value}"


def main(argv: Optional[List[str]] = None) -> int:
    """Inspect a pack. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    settings = Settings.load(args.settings)
    level = "DEBUG" if args.verbose else settings.get("logging", "level", "INFO")
    logging.basicConfig(level=level, format="[%(levelname)s %(name)s] %(message)s")

    pack = ResourcePack(args.pack_dir, settings)
    result = pack.init()
    if not result:
        print(f"Could not load pack: {result.message} ({result.error_kind.value})", file=sys.stderr)
        return 1

    if pack.info:
        print(f"=== {pack.info.name or args.pack_dir} ===")
        if pack.info.author:
            print(f"by {pack.info.author}")

    songs: List[AudioResource] = []
    images: List[ImageResource] = []
    print(f"\nSongs ({pack.get_all_songs(songs)}):")
    exit_code = 0
    for song in songs:
        line = describe_song(song)
        if args.decode:
            try:
                line += f" -> {decode_song(song)}"
            except DecodeError as e:
                line += f" -> FAILED: {e}"
                exit_code = 2
        print(f"  {line}")

    print(f"\nImages ({pack.get_all_images(images)}):")
    for image in images:
        line = f"{image.get_name()} align={image.get_alignment().value}"
        if args.decode:
            try:
                line += f" -> {decode_image(image)}"
            except DecodeError as e:
                line += f" -> FAILED: {e}"
                exit_code = 2
        print(f"  {line}")

    if args.snapshot:
        written = CatalogFile.save(pack.catalog(), args.snapshot)
        print(f"\nSnapshot written to {written}")

    pack.close()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
