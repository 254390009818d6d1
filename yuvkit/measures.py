"""Mean squared error and PSNR quality measures with distortion maps."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import numpy as np

from .interface import (
    PLANE_COUNT,
    Frame,
    MeasureCapabilities,
    MeasureInfo,
    MeasureOperation,
    YuvKitError,
    YuvPlane,
)

PLUGIN_NAME = "Compute PSNR/MSE"

_PSNR_PEAK = 20.0 * math.log10(255.0)
_MIN_MSE = 0.001


def _plane_view(frame: Frame, plane: int, width: int, height: int) -> np.ndarray:
    """The visible ``(height, width)`` samples of one plane, ignoring row padding."""
    data = frame.planes[plane]
    if data is None:
        raise YuvKitError(f"plane {plane} holds no data")
    stride = frame.format.stride(plane)
    buf = np.asarray(data, dtype=np.uint8).ravel()
    needed = stride * height
    if buf.size < needed:
        raise YuvKitError(f"plane {plane} holds {buf.size} bytes, {needed} needed")
    return buf[:needed].reshape(height, stride)[:, :width]


def _ensure_size(values, size: int) -> np.ndarray:
    """Grow a float map to at least ``size`` values, keeping what it holds."""
    values = np.asarray(values, dtype=np.float32)
    if values.size >= size:
        return values
    grown = np.zeros(size, dtype=np.float32)
    grown[: values.size] = values.ravel()
    return grown


def compute_mse(
    frame1: Frame,
    frame2: Frame,
    plane: int,
    mse_map: Optional[np.ndarray] = None,
) -> Tuple[float, Optional[np.ndarray]]:
    """Mean squared error between one plane of two frames.

    The plane size is taken from ``frame1``. When ``mse_map`` is given, the
    squared difference of every sample is written into it, row by row; the
    map is grown first if it is too small. Returns the error and the map.
    """
    width = frame1.format.plane_width(plane)
    height = frame1.format.plane_height(plane)
    if width <= 0 or height <= 0:
        raise YuvKitError(f"plane {plane} is empty")

    a = _plane_view(frame1, plane, width, height).astype(np.int32)
    b = _plane_view(frame2, plane, width, height).astype(np.int32)
    squared = (a - b) ** 2
    mse = float(squared.sum()) / width / height

    if mse_map is not None:
        size = width * height
        mse_map = _ensure_size(mse_map, size)
        mse_map[:size] = squared.ravel()
    return mse, mse_map


class BasicMeasures:
    """Computes MSE and PSNR per plane and for all planes combined."""

    def __init__(self) -> None:
        self._capabilities: Optional[MeasureCapabilities] = None

    def capabilities(self) -> MeasureCapabilities:
        if self._capabilities is None:
            self._capabilities = MeasureCapabilities(
                measures=[
                    MeasureInfo(
                        name="MSE",
                        unit="",
                        lower_range=1,
                        upper_range=400,
                        bigger_value_is_better=False,
                        has_distortion_map=True,
                    ),
                    MeasureInfo(
                        name="PSNR",
                        unit="dB",
                        lower_range=22,
                        upper_range=50,
                        bigger_value_is_better=True,
                        has_distortion_map=True,
                    ),
                ],
                has_plane_distortion_map=True,
                has_color_distortion_map=False,
            )
        return self._capabilities

    def process(
        self,
        source1: Frame,
        source2: Frame,
        plane: int,
        operations: Sequence[MeasureOperation],
    ) -> None:
        """Fill the results of the MSE and PSNR operations among ``operations``.

        A distortion map is produced for ``plane`` when an operation carries
        a map array (an empty array is enough).
        """
        op_mse: Optional[MeasureOperation] = None
        op_psnr: Optional[MeasureOperation] = None
        for op in operations:
            op.clear_results()
            if op.measure_name == "MSE":
                op_mse = op
            elif op.measure_name == "PSNR":
                op_psnr = op

        if op_mse is not None:
            op_mse.results[:] = [0.0] * PLANE_COUNT
            mse_results = op_mse.results
        elif op_psnr is not None:
            mse_results = op_psnr.results
        else:
            return

        if op_psnr is not None:
            op_psnr.results[:] = [0.0] * PLANE_COUNT

        fmt1 = source1.format
        fmt2 = source2.format
        weight_sum = 0
        mse_map: Optional[np.ndarray] = None
        map_width = map_height = 0

        for i in range(PLANE_COUNT):
            if i < YuvPlane.COLOR:
                width1, height1 = fmt1.plane_width(i), fmt1.plane_height(i)
                width2, height2 = fmt2.plane_width(i), fmt2.plane_height(i)
                if width1 == width2 and height1 == height2 and width1 > 0 and height1 > 0:
                    weight = fmt1.width * fmt1.height * 4 // width1 // height1
                    weight_sum += weight

                    if i == plane:
                        owner = None
                        if op_mse is not None and op_mse.dist_map is not None:
                            owner = op_mse
                        elif op_psnr is not None and op_psnr.dist_map is not None:
                            owner = op_psnr
                        target = owner.dist_map if owner is not None else None
                        mse, filled = compute_mse(source1, source2, i, target)
                        if owner is not None:
                            owner.dist_map = filled
                            mse_map = filled
                            map_width, map_height = width1, height1
                    else:
                        mse, _ = compute_mse(source1, source2, i)

                    mse_results[i] = mse
                    mse_results[YuvPlane.COLOR] += weight * mse
                    if op_mse is not None:
                        op_mse.has_results[i] = True
            else:
                mse_results[i] = mse_results[i] / weight_sum if weight_sum else math.nan
                if op_mse is not None:
                    op_mse.has_results[i] = True

            if op_psnr is not None and weight_sum > 0:
                mse_min = max(mse_results[i], _MIN_MSE)
                op_psnr.results[i] = _PSNR_PEAK - 10.0 * math.log10(mse_min)
                op_psnr.has_results[i] = True

        if mse_map is None:
            return

        size = map_width * map_height
        if op_psnr is not None and op_psnr.dist_map is not None:
            with np.errstate(divide="ignore"):
                if op_mse is not None and op_mse.dist_map is not None:
                    psnr_map = _ensure_size(op_psnr.dist_map, size)
                    psnr_map[:size] = _PSNR_PEAK - 10.0 * np.log10(
                        op_mse.dist_map[:size].astype(np.float64)
                    )
                    op_psnr.dist_map = psnr_map
                else:
                    psnr_map = op_psnr.dist_map
                    psnr_map[:size] = _PSNR_PEAK - 10.0 * np.log10(
                        psnr_map[:size].astype(np.float64)
                    )
            op_psnr.dist_map_width = map_width
            op_psnr.dist_map_height = map_height

        if op_mse is not None and op_mse.dist_map is not None:
            op_mse.dist_map_width = map_width
            op_mse.dist_map_height = map_height