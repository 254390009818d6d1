"""Raw YUV/RGB video formats, raw file sources, quality measures and playback scheduling."""

__version__ = "0.1.0"
__all__ = [
    "colorconv",
    "colormap",
    "interface",
    "layout",
    "measures",
    "process",
    "raw_source",
    "render",
    "scoring",
]