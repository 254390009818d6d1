"""Render a distortion map as an XRGB32 frame using a jet colour map."""

from __future__ import annotations

import numpy as np

from .interface import ColorFormat, Frame, YuvKitError

UNDERSHOOT_COLOR = 0xFF0000FF  # blue
OVERSHOOT_COLOR = 0xFFFF0000  # red

# Jet colour map from blue to red, 256 entries of RRGGBB, eight per line.
_JET_RGB_HEX = (
    "000080 000084 000089 00008D 000092 000096 00009B 00009F "
    "0000A4 0000A9 0000AD 0000B2 0000B6 0000BB 0000BF 0000C4 "
    "0000C9 0000CD 0000D2 0000D6 0000DB 0000DF 0000E4 0000E8 "
    "0000ED 0000F2 0000F6 0000FB 0000FF 0000FF 0000FF 0000FF "
    "0000FF 0004FF 0008FF 000CFF 0010FF 0014FF 0018FF 001CFF "
    "0020FF 0024FF 0028FF 002CFF 0030FF 0034FF 0038FF 003CFF "
    "0040FF 0044FF 0048FF 004CFF 0050FF 0054FF 0058FF 005CFF "
    "0060FF 0064FF 0068FF 006CFF 0070FF 0074FF 0078FF 007CFF "
    "0081FF 0085FF 0089FF 008DFF 0091FF 0095FF 0099FF 009DFF "
    "00A1FF 00A5FF 00A9FF 00ADFF 00B1FF 00B5FF 00B9FF 00BDFF "
    "00C1FF 00C5FF 00C9FF 00CDFF 00D1FF 00D5FF 00D9FF 00DDFF "
    "00E1FB 00E5F8 02E9F5 05EDF2 08F1EE 0CF5EB 0FF9E8 12FDE5 "
    "15FFE1 19FFDE 1CFFDB 1FFFD8 22FFD4 26FFD1 29FFCE 2CFFCB "
    "2FFFC7 33FFC4 36FFC1 39FFBE 3CFFBB 3FFFB7 43FFB4 46FFB1 "
    "49FFAE 4CFFAA 50FFA7 53FFA4 56FFA1 59FF9D 5DFF9A 60FF97 "
    "63FF94 66FF90 6AFF8D 6DFF8A 70FF87 73FF83 77FF80 7AFF7D "
    "7DFF7A 80FF77 83FF73 87FF70 8AFF6D 8DFF6A 90FF66 94FF63 "
    "97FF60 9AFF5D 9DFF59 A1FF56 A4FF53 A7FF50 AAFF4C AEFF49 "
    "B1FF46 B4FF43 B7FF3F BBFF3C BEFF39 C1FF36 C4FF33 C7FF2F "
    "CBFF2C CEFF29 D1FF26 D4FF22 D8FF1F DBFF1C DEFF19 E1FF15 "
    "E5FF12 E8FF0F EBFF0C EEFF08 F2FD05 F5F902 F8F500 FBF100 "
    "FFEE00 FFEA00 FFE600 FFE200 FFDF00 FFDB00 FFD700 FFD400 "
    "FFD000 FFCC00 FFC800 FFC500 FFC100 FFBD00 FFBA00 FFB600 "
    "FFB200 FFAE00 FFAB00 FFA700 FFA300 FFA000 FF9C00 FF9800 "
    "FF9400 FF9100 FF8D00 FF8900 FF8600 FF8200 FF7E00 FF7A00 "
    "FF7700 FF7300 FF6F00 FF6C00 FF6800 FF6400 FF6000 FF5D00 "
    "FF5900 FF5500 FF5100 FF4E00 FF4A00 FF4600 FF4300 FF3F00 "
    "FF3B00 FF3700 FF3400 FF3000 FF2C00 FF2900 FF2500 FF2100 "
    "FF1D00 FF1A00 FF1600 FF1200 FB0F00 F60B00 F20700 ED0300 "
    "E80000 E40000 DF0000 DB0000 D60000 D20000 CD0000 C90000 "
    "C40000 BF0000 BB0000 B60000 B20000 AD0000 A90000 A40000 "
    "9F0000 9B0000 960000 920000 8D0000 890000 840000 800000"
)


def _build_table() -> np.ndarray:
    rgb = np.frombuffer(bytes.fromhex(_JET_RGB_HEX), dtype=np.uint8).reshape(-1, 3)
    rgb = rgb.astype(np.uint32)
    table = np.uint32(0xFF000000) | (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]
    assert table.size == 256
    return table


_TABLE = _build_table()

JET_COLOR_MAP = tuple(int(c) for c in _TABLE)

# Both ends of the colour map are cut off so that overshoot and undershoot stand out.
_OFFSET = 50


def create_color_map(
    frame: Frame,
    dist_map,
    width: int,
    height: int,
    upper_range: float,
    lower_range: float,
    bigger_value_is_better: bool,
) -> np.ndarray:
    """Paint ``dist_map`` into ``frame`` as XRGB32 pixels.

    The frame is reallocated when its format does not match. Values at or
    beyond the range ends take the undershoot/overshoot colours. Returns
    the pixels as a ``(height, width)`` array of 32-bit values.
    """
    fmt = frame.format
    if fmt.color != ColorFormat.XRGB32 or fmt.width != width or fmt.height != height:
        frame.reset()

    if frame.planes[0] is None:
        frame.format.color = ColorFormat.XRGB32
        frame.format.width = width
        frame.format.height = height
        frame.format.set_stride(0, 0)
        frame.allocate()

    total = width * height
    values = np.asarray(dist_map, dtype=np.float32).ravel()
    if values.size < total:
        raise YuvKitError(f"distortion map holds {values.size} values, {total} needed")
    values = values[:total]

    if bigger_value_is_better:
        upper_color, lower_color = UNDERSHOOT_COLOR, OVERSHOOT_COLOR
    else:
        upper_color, lower_color = OVERSHOOT_COLOR, UNDERSHOOT_COLOR

    if upper_range < lower_range:
        upper_range, lower_range = lower_range, upper_range

    span = upper_range - lower_range
    scale = np.float32((255 - 2 * _OFFSET) / span) if span else np.float32(0)
    upper = np.float32(upper_range)
    lower = np.float32(lower_range)

    delta = (upper - values) if bigger_value_is_better else (values - lower)
    with np.errstate(invalid="ignore", over="ignore"):
        index = (delta * scale).astype(np.int64) + _OFFSET
    colors = _TABLE[np.clip(index, 0, len(_TABLE) - 1)]
    colors = np.where(
        values >= upper,
        np.uint32(upper_color),
        np.where(values <= lower, np.uint32(lower_color), colors),
    )

    pixels = frame.planes[0].view("<u4")
    pixels[:total] = colors
    return pixels[:total].reshape(height, width)