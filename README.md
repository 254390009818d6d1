# yuvkit

A library for working with raw, uncompressed video: YUV and RGB pixel
formats, headerless raw video files, frame-level quality measures
(MSE and PSNR), distortion colour maps, and the scheduling logic a
viewer needs to play several videos side by side.

## Installation

```
pip install yuvkit
```

The only runtime dependency is numpy.

## Modules

- `yuvkit.interface`: the core types.
  - `ColorFormat` lists the pixel formats (FOURCC codes such as `I420`,
    `YV12`, `NV12`, `YUY2`, and RGB tags such as `RGB24`, `XRGB32`,
    `RGB565`). `fourcc()` packs four characters into a FOURCC code.
  - `Format` holds colour, width, height and per-plane strides, and
    gives `plane_width()`, `plane_height()`, `stride()` and
    `plane_size()` for each plane. A stride of 0 means the natural
    stride of the plane.
  - `Frame` holds a format, plane buffers (numpy `uint8` arrays made by
    `allocate()`), a presentation time, a frame number and side
    information keyed by `InfoKey`.
  - `SourceInfo`, `MeasureInfo`, `MeasureCapabilities`,
    `MeasureOperation` and `TransformCapability` describe sources and
    measures. `YuvPlane` selects a plane or all planes (`COLOR`).
  - `to_ffmpeg_format()` and `from_ffmpeg_format()` map formats to and
    from FFmpeg pixel-format names such as `"yuv420p"`.
  - Errors are raised as `YuvKitError`; `EndOfFileError` is its
    subclass for sources that have run out of data.
- `yuvkit.colorconv`: `is_format_supported()`, `is_native_format()`,
  `native_format()` (the planar format a given format maps to),
  `flipped_color()` and `prepare_color()`, which turns YV formats into
  their I counterparts with the U and V planes swapped.
- `yuvkit.colormap`: `create_color_map()` paints a distortion map into a
  frame as XRGB32 pixels using a jet colour map; values at or beyond
  the ends of the range get a distinct blue or red.
- `yuvkit.measures`: `compute_mse()` for one plane of two frames, and
  `BasicMeasures`, which fills `MeasureOperation` results for `"MSE"`
  and `"PSNR"` per plane and weighted over all planes, and fills
  distortion maps for the chosen plane when an operation carries one.
- `yuvkit.raw_source`: `parse_path()` guesses width, height, frame rate
  and pixel format from a file name such as
  `foreman_352x288_30fps_I420.yuv` or `clip_CIF.yuv`. `RawSource`
  opens such a file, reads frames in order or by seeking to a time,
  converts between frame indices and times, and accepts custom time
  stamps through `set_timestamps()`.
- `yuvkit.layout`: `Layout` arranges views in the grid that covers the
  render area best, reports the size needed to show them, finds the
  view under a point, and passes mouse presses, moves and releases to
  the active view in its own coordinates.
- `yuvkit.process`: `FrameScheduler` collects frames per view and
  returns `Scene` objects in presentation order for a given
  `PlaybackStatus`, handles seeking, looping and selections, and runs
  `MeasureItem` requests on each scene, adding colour-mapped
  distortion frames to it.
- `yuvkit.render`: `RenderQueue` holds scenes waiting to be shown (a
  seeking scene drops those queued before it), `RenderClock` decides
  when the next scene is due and tracks the playback speed ratio, and
  `Rect.scaled()` maps a rectangle onto a subsampled plane.
- `yuvkit.scoring`: `ScoreSheet` records subjective ratings from
  sliders or a button choice and formats them as result lines;
  `shuffle_list()` shuffles scenes and the videos within them,
  optionally keeping the reference video first.

## Example

```python
from yuvkit.interface import Frame, MeasureOperation, YuvPlane
from yuvkit.measures import BasicMeasures
from yuvkit.raw_source import RawSource

with RawSource().open("foreman_352x288_30fps_I420.yuv") as reference, \
        RawSource().open("foreman_352x288_30fps_I420_coded.yuv") as processed:
    frame1 = reference.read_frame(Frame())
    frame2 = processed.read_frame(Frame())

psnr = MeasureOperation(measure_name="PSNR")
BasicMeasures().process(frame1, frame2, YuvPlane.Y, [psnr])
print(psnr.results)  # Y, U, V and combined, in dB
```

## What it does not do

yuvkit is a library only. It has no command-line program and no
window: it does not draw video on screen, and `FrameScheduler`,
`RenderQueue` and `RenderClock` only decide what to show and when. It
does not convert pixels from one colour format to another;
`yuvkit.colorconv` classifies formats and rearranges planes but does
not resample them. Raw files are the only video source; compressed
formats are not read.

## Running the tests

```
pip install yuvkit[test]
pytest
```