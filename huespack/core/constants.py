"""
Pack constants and grammar tables.

Beat characters, alignment names, default pack layout, PCM format.
"""
import math

# Beatmap character -> Beat member name (one character = one beat slot)
BEAT_CHARACTERS = {
    "x": "VERTICAL_BLUR",
    "o": "HORIZONTAL_BLUR",
    "-": "NO_BLUR",
    "+": "BLACKOUT",
    "|": "SHORT_BLACKOUT",
    ":": "COLOR_ONLY",
    "*": "IMAGE_ONLY",
    ".": "NO_TRANSITION",
}

# Fallback for any character not in BEAT_CHARACTERS
DEFAULT_BEAT = "NO_TRANSITION"

# Alignment string -> Align member name (case-sensitive)
ALIGNMENT_NAMES = {
    "left": "LEFT",
    "center": "CENTER",
    "right": "RIGHT",
}

# Fallback for any alignment string not in ALIGNMENT_NAMES
DEFAULT_ALIGNMENT = "CENTER"

# PCM output format: signed 16-bit little-endian, interleaved
BYTES_PER_SAMPLE = 2
PCM_DTYPE = "<i2"

USEC_PER_SECOND = 1_000_000
USEC_PER_MINUTE = 60 * USEC_PER_SECOND

# Default pack layout
SONGS_FILE = "songs.xml"
IMAGES_FILE = "images.xml"
INFO_FILE = "info.xml"
SONGS_DIR = "Songs"
IMAGES_DIR = "Images"

# Backing file extensions, tried in order
AUDIO_EXTENSIONS = [".mp3", ".ogg", ".wav", ".flac"]
IMAGE_EXTENSIONS = [".png", ".gif", ".jpg", ".jpeg"]


def beat_name_for_character(beat_char: str) -> str:
    """
    Look up the Beat member name for a beatmap character.

    Args:
        beat_char: Single beatmap character

    Returns:
        Beat member name; DEFAULT_BEAT for unrecognized characters

    Example:
        >>> beat_name_for_character("x")
        'VERTICAL_BLUR'
        >>> beat_name_for_character("q")
        'NO_TRANSITION'
    """
    return BEAT_CHARACTERS.get(beat_char, DEFAULT_BEAT)


def alignment_name_for_string(align: str) -> str:
    """
    Look up the Align member name for an alignment string.

    Args:
        align: Alignment string from image metadata

    Returns:
        Align member name; DEFAULT_ALIGNMENT for unrecognized strings

    Example:
        >>> alignment_name_for_string("right")
        'RIGHT'
        >>> alignment_name_for_string("LEFT")
        'CENTER'
    """
    return ALIGNMENT_NAMES.get(align, DEFAULT_ALIGNMENT)


def bpm_to_usec_per_beat(bpm: float) -> float:
    """
    Convert a tempo in beats per minute to microseconds per beat.

    Args:
        bpm: Tempo in BPM (must be positive)

    Returns:
        Beat period in microseconds

    Example:
        >>> bpm_to_usec_per_beat(120.0)
        500000.0
    """
    if not (math.isfinite(bpm) and bpm > 0):
        raise ValueError(f"BPM must be a positive finite number, got {bpm}")
    return USEC_PER_MINUTE / bpm
