"""
Media decoding layer for huespack.

Modules:
- audio: MP3/OGG/WAV/FLAC -> 16-bit little-endian interleaved PCM (soundfile)
- image: PNG/GIF/JPEG -> row-major uint8 pixel arrays (Pillow)
"""
