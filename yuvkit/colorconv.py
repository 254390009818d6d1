"""Colour format classification and plane preparation for conversion."""

from __future__ import annotations

from typing import Sequence, Union

from .interface import ColorFormat

_NATIVE = frozenset({ColorFormat.Y800, ColorFormat.I420, ColorFormat.I422, ColorFormat.I444})

_SUPPORTED = frozenset(ColorFormat) - {ColorFormat.NODATA}

_NATIVE_OF = {
    ColorFormat.YV16: ColorFormat.I422,
    ColorFormat.YUY2: ColorFormat.I422,
    ColorFormat.UYVY: ColorFormat.I422,
    ColorFormat.YUYV: ColorFormat.I422,
    ColorFormat.YVYU: ColorFormat.I422,
    ColorFormat.YV12: ColorFormat.I420,
    ColorFormat.NV12: ColorFormat.I420,
    ColorFormat.IYUV: ColorFormat.I420,
    ColorFormat.IMC2: ColorFormat.I420,
    ColorFormat.IMC4: ColorFormat.I420,
    ColorFormat.YV24: ColorFormat.I444,
    ColorFormat.RGB24: ColorFormat.I444,
    ColorFormat.RGBX32: ColorFormat.I444,
    ColorFormat.XRGB32: ColorFormat.I444,
    ColorFormat.BGR24: ColorFormat.I444,
    ColorFormat.BGRX32: ColorFormat.I444,
    ColorFormat.XBGR32: ColorFormat.I444,
    ColorFormat.RGB565: ColorFormat.I444,
    ColorFormat.BGR565: ColorFormat.I444,
}

_FLIPPED = {
    ColorFormat.YV12: ColorFormat.I420,
    ColorFormat.YV16: ColorFormat.I422,
    ColorFormat.YV24: ColorFormat.I444,
}


def flipped_color(color: Union[ColorFormat, int]) -> ColorFormat:
    """The U/V-swapped counterpart of a YV format; I420 for anything else."""
    return _FLIPPED.get(color, ColorFormat.I420)


def prepare_color(color: Union[ColorFormat, int], planes: Sequence) -> tuple:
    """Normalise a colour format and its planes before conversion.

    YV formats become their I counterparts with the U and V planes swapped;
    IYUV becomes I420. Returns the new colour and a new list of planes.
    """
    planes = list(planes)
    if color in _FLIPPED:
        return flipped_color(color), [planes[0], planes[2], planes[1], None]
    if color == ColorFormat.IYUV:
        return ColorFormat.I420, planes
    return color, planes


def is_native_format(code: int) -> bool:
    """True for formats handled without conversion."""
    return code in _NATIVE


def is_format_supported(code: int) -> bool:
    """True for every known colour format."""
    return code in _SUPPORTED


def native_format(code: int) -> ColorFormat:
    """The native format a given format is converted to; I420 by default."""
    if code in _NATIVE and code != ColorFormat.Y800:
        return ColorFormat(code)
    return _NATIVE_OF.get(code, ColorFormat.I420)