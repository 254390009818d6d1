"""Core video types: colour formats, frame formats, frames and measure records."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import numpy as np

INVALID_PTS = 0xFFFFFFFF
PLANE_COUNT = 4


class YuvKitError(Exception):
    """Base error for video handling failures."""


class EndOfFileError(YuvKitError):
    """Raised when a source has no more frame data to deliver."""


class ColorFormat(enum.IntEnum):
    """Pixel layouts, identified by FOURCC codes or small tags for RGB."""

    NODATA = 0xFFFFFFFF
    # Natively supported
    Y800 = 0x30303859  # 8 bit single plane
    I420 = 0x30323449  # planar 4:2:0
    I422 = 0x32323449  # planar 4:2:2
    I444 = 0x34343449  # planar 4:4:4
    IYUV = 0x56555949  # same as I420
    YV12 = 0x32315659  # planar 4:2:0, U and V swapped
    YV16 = 0x36315659  # planar 4:2:2, U and V swapped
    YV24 = 0x34325659  # planar 4:4:4, U and V swapped
    IMC2 = 0x32434D49
    IMC4 = 0x34434D49
    # Conversion needed
    YUY2 = 0x32595559
    UYVY = 0x59565955
    YVYU = 0x55595659
    YUYV = 0x56595559  # same as YUY2
    NV12 = 0x3231564E
    RGB24 = 24
    BGR24 = 241
    RGBX32 = 32
    XRGB32 = 321
    BGRX32 = 322
    XBGR32 = 323
    RGB565 = 16
    BGR565 = 161


class InfoKey(enum.Enum):
    """Keys of the side information attached to a frame."""

    VIEW_ID = enum.auto()
    IS_LAST_FRAME = enum.auto()
    SEEKING_PTS = enum.auto()
    NEXT_PTS = enum.auto()
    SRC_RECT = enum.auto()
    DST_RECT = enum.auto()
    RENDER_SRC_SCALE_X = enum.auto()
    RENDER_SRC_SCALE_Y = enum.auto()


class YuvPlane(enum.IntEnum):
    """Plane selectors; COLOR means all planes jointly."""

    Y = 0
    U = 1
    V = 2
    COLOR = 3


class PluginType(enum.IntEnum):
    """Kinds of processing components."""

    UNKNOWN = -1
    SOURCE = 0
    RENDERER = 1
    TRANSFORM = 2
    MEASURE = 3


def fourcc(a: Union[str, int], b: Union[str, int], c: Union[str, int], d: Union[str, int]) -> int:
    """Pack four characters (or byte values) into a little-endian FOURCC code."""

    def byte(x: Union[str, int]) -> int:
        return (ord(x) if isinstance(x, str) else int(x)) & 0xFF

    return byte(a) | (byte(b) << 8) | (byte(c) << 16) | (byte(d) << 24)


# Per plane: (horizontal subsampling shift, vertical subsampling shift, bytes per sample)
_P420 = ((0, 0, 1), (1, 1, 1), (1, 1, 1))
_P422 = ((0, 0, 1), (1, 0, 1), (1, 0, 1))
_P444 = ((0, 0, 1), (0, 0, 1), (0, 0, 1))
_IMC = ((0, 0, 1), (0, 1, 1))
_PACKED16 = ((0, 0, 2),)
_PACKED24 = ((0, 0, 3),)
_PACKED32 = ((0, 0, 4),)

_LAYOUTS = {
    ColorFormat.Y800: ((0, 0, 1),),
    ColorFormat.I420: _P420,
    ColorFormat.IYUV: _P420,
    ColorFormat.YV12: _P420,
    ColorFormat.I422: _P422,
    ColorFormat.YV16: _P422,
    ColorFormat.I444: _P444,
    ColorFormat.YV24: _P444,
    ColorFormat.IMC2: _IMC,
    ColorFormat.IMC4: _IMC,
    ColorFormat.NV12: ((0, 0, 1), (1, 1, 2)),
    ColorFormat.YUY2: _PACKED16,
    ColorFormat.UYVY: _PACKED16,
    ColorFormat.YVYU: _PACKED16,
    ColorFormat.YUYV: _PACKED16,
    ColorFormat.RGB24: _PACKED24,
    ColorFormat.BGR24: _PACKED24,
    ColorFormat.RGBX32: _PACKED32,
    ColorFormat.XRGB32: _PACKED32,
    ColorFormat.BGRX32: _PACKED32,
    ColorFormat.XBGR32: _PACKED32,
    ColorFormat.RGB565: _PACKED16,
    ColorFormat.BGR565: _PACKED16,
}


def _ceil_shift(value: int, shift: int) -> int:
    return (value + (1 << shift) - 1) >> shift


@dataclass
class Format:
    """Colour format, size and per-plane strides of a video frame.

    A stride of 0 means the natural stride of the plane.
    """

    color: Union[ColorFormat, int] = ColorFormat.NODATA
    width: int = 0
    height: int = 0
    strides: list = field(default_factory=lambda: [0] * PLANE_COUNT)

    def __post_init__(self) -> None:
        self.strides = list(self.strides) + [0] * (PLANE_COUNT - len(self.strides))
        try:
            self.color = ColorFormat(self.color)
        except ValueError:
            pass

    def _plane_spec(self, plane: int) -> Optional[tuple]:
        layout = _LAYOUTS.get(self.color, ())
        if 0 <= plane < len(layout):
            return layout[plane]
        return None

    def plane_width(self, plane: int) -> int:
        """Number of samples per row in the plane."""
        spec = self._plane_spec(plane)
        if spec is None or self.width <= 0:
            return 0
        return _ceil_shift(self.width, spec[0])

    def plane_height(self, plane: int) -> int:
        """Number of rows in the plane."""
        spec = self._plane_spec(plane)
        if spec is None or self.height <= 0:
            return 0
        return _ceil_shift(self.height, spec[1])

    def stride(self, plane: int) -> int:
        """Bytes per row in the plane."""
        explicit = self.strides[plane]
        if explicit:
            return explicit
        spec = self._plane_spec(plane)
        if spec is None:
            return 0
        return self.plane_width(plane) * spec[2]

    def set_stride(self, plane: int, value: int) -> None:
        self.strides[plane] = value

    def plane_size(self, plane: int) -> int:
        """Number of bytes the plane occupies."""
        return self.stride(plane) * self.plane_height(plane)

    def copy(self) -> "Format":
        return Format(self.color, self.width, self.height, list(self.strides))


@dataclass(eq=False)
class Frame:
    """A video frame: its format, plane buffers, timing and side information."""

    format: Format = field(default_factory=Format)
    planes: list = field(default_factory=lambda: [None] * PLANE_COUNT)
    pts: int = 0
    frame_number: int = 0
    extern_data: Any = None
    _info: dict = field(default_factory=dict, init=False, repr=False)

    def allocate(self) -> None:
        """Allocate zeroed plane buffers for the current format."""
        sizes = [self.format.plane_size(p) for p in range(PLANE_COUNT)]
        if sizes[0] <= 0:
            raise YuvKitError(f"cannot allocate a frame for {self.format!r}")
        self.planes = [np.zeros(size, dtype=np.uint8) if size > 0 else None for size in sizes]

    def reset(self) -> None:
        """Drop the plane buffers, e.g. before changing the format."""
        self.planes = [None] * PLANE_COUNT

    def has_info(self, key: InfoKey) -> bool:
        return key in self._info

    def info(self, key: InfoKey, default: Any = None) -> Any:
        return self._info.get(key, default)

    def set_info(self, key: InfoKey, value: Any) -> None:
        self._info[key] = value


@dataclass
class SourceInfo:
    """Description of a video source."""

    format: Optional[Format] = None
    max_fps: float = 0.0
    num_frames: int = 0
    duration: int = 0  # milliseconds
    last_pts: int = 0

    def reset(self) -> None:
        self.format = None
        self.max_fps = 0.0
        self.num_frames = 0
        self.duration = 0
        self.last_pts = 0


@dataclass
class MeasureInfo:
    """Description of one quality measure."""

    name: str = ""
    unit: str = ""
    upper_range: float = 0.0
    lower_range: float = 0.0
    bigger_value_is_better: bool = True
    has_distortion_map: bool = True


@dataclass
class MeasureCapabilities:
    """The measures a component provides and its distortion map support."""

    measures: list = field(default_factory=list)
    has_plane_distortion_map: bool = False
    has_color_distortion_map: bool = False


@dataclass
class MeasureOperation:
    """One requested measure with per-plane results and an optional distortion map."""

    measure_name: str = ""
    has_results: list = field(default_factory=lambda: [False] * PLANE_COUNT)
    results: list = field(default_factory=lambda: [0.0] * PLANE_COUNT)
    dist_map: Optional[np.ndarray] = None
    dist_map_width: int = 0
    dist_map_height: int = 0

    def clear_results(self) -> None:
        self.has_results = [False] * PLANE_COUNT


@dataclass
class TransformCapability:
    """One transform a component offers."""

    transform_id: int = 0
    output_name: str = ""
    input_colors: list = field(default_factory=list)
    support_color: bool = False
    support_planes: bool = False
    need_2_inputs: bool = False


_TO_FFMPEG = {
    # Little endian: #00RRGGBB is stored as BB GG RR
    ColorFormat.RGB24: "bgr24",
    ColorFormat.RGBX32: "rgb32_1",
    ColorFormat.XRGB32: "rgb32",
    ColorFormat.Y800: "gray8",
    ColorFormat.BGR24: "rgb24",
    ColorFormat.BGRX32: "bgr32_1",
    ColorFormat.XBGR32: "bgr32",
    ColorFormat.RGB565: "rgb565",
    ColorFormat.BGR565: "bgr565",
    ColorFormat.I444: "yuv444p",
    ColorFormat.YV24: "yuv444p",
    ColorFormat.I422: "yuv422p",
    ColorFormat.YV16: "yuv422p",
    ColorFormat.I420: "yuv420p",
    ColorFormat.IYUV: "yuv420p",
    ColorFormat.YV12: "yuv420p",
    ColorFormat.IMC2: "yuv420p",
    ColorFormat.IMC4: "yuv420p",
    ColorFormat.YUY2: "yuyv422",
    ColorFormat.YUYV: "yuyv422",
    ColorFormat.UYVY: "uyvy422",
    ColorFormat.YVYU: "yuyv422",
    ColorFormat.NV12: "nv12",
}

_FROM_FFMPEG = {
    "rgb24": ColorFormat.BGR24,
    "rgb32_1": ColorFormat.RGBX32,
    "rgb32": ColorFormat.XRGB32,
    "gray8": ColorFormat.Y800,
    "yuv420p": ColorFormat.I420,
    "yuv444p": ColorFormat.I444,
    "yuv422p": ColorFormat.I422,
    "yuyv422": ColorFormat.YUY2,
    "uyvy422": ColorFormat.UYVY,
    "nv12": ColorFormat.NV12,
    "bgr24": ColorFormat.RGB24,
    "bgr32_1": ColorFormat.BGRX32,
    "bgr32": ColorFormat.XBGR32,
    "rgb565": ColorFormat.RGB565,
    "bgr565": ColorFormat.BGR565,
}


def to_ffmpeg_format(color: Union[ColorFormat, int]) -> str:
    """Name of the matching ffmpeg pixel format, or "none"."""
    return _TO_FFMPEG.get(color, "none")


def from_ffmpeg_format(name: str) -> ColorFormat:
    """Colour format for an ffmpeg pixel format name, or NODATA."""
    key = name.lower()
    if key.startswith("pix_fmt_"):
        key = key[len("pix_fmt_"):]
    return _FROM_FFMPEG.get(key, ColorFormat.NODATA)