"""
huespack - resource packs for a beat-synchronized visualizer.

Packages:
- core: Catalog, resource models, metadata parsing, settings, snapshots
- media: Audio and image decoders used by the resource models
"""
from huespack.core.models import (
    Align,
    AudioResource,
    Beat,
    ColorType,
    DecodedImage,
    ImageResource,
    TrackType,
)
from huespack.core.pack import InitErrorKind, InitResult, ResourcePack

__all__ = [
    "Align",
    "AudioResource",
    "Beat",
    "ColorType",
    "DecodedImage",
    "ImageResource",
    "InitErrorKind",
    "InitResult",
    "ResourcePack",
    "TrackType",
]

__version__ = "1.0.0"
