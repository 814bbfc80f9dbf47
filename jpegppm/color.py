"""YCbCr to RGB conversion and saturation."""

from __future__ import annotations

import math
from typing import Sequence

BLOCK_SIZE = 8

Blocks = Sequence[Sequence[Sequence[Sequence[float]]]]


def _check_planes(blocks: Blocks, block_count: int) -> None:
    if len(blocks) < 3:
        raise ValueError(f"expected three colour planes, got {len(blocks)}")
    for plane in blocks[:3]:
        if len(plane) < block_count:
            raise ValueError(f"a colour plane holds fewer than {block_count} blocks")


def ycbcr_to_rgb(blocks: Blocks, block_count: int) -> list[list[list[list[float]]]]:
    """Convert the first ``block_count`` Y, Cb, Cr blocks into unclamped R, G, B blocks."""
    _check_planes(blocks, block_count)
    y_plane, cb_plane, cr_plane = blocks[0], blocks[1], blocks[2]
    red, green, blue = [], [], []
    for k in range(block_count):
        r_block, g_block, b_block = [], [], []
        for y_row, cb_row, cr_row in zip(y_plane[k], cb_plane[k], cr_plane[k]):
            r_block.append([y + 1.402 * (cr - 128) for y, cr in zip(y_row, cr_row)])
            g_block.append(
                [
                    y - 0.34414 * (cb - 128) - 0.71414 * (cr - 128)
                    for y, cb, cr in zip(y_row, cb_row, cr_row)
                ]
            )
            b_block.append([y + 1.772 * (cb - 128) for y, cb in zip(y_row, cb_row)])
        red.append(r_block)
        green.append(g_block)
        blue.append(b_block)
    return [red, green, blue]


def _saturate(value: float) -> int:
    value = min(255.0, max(0.0, value))
    return int(math.floor(value + 0.5))


def saturate_rgb(rgb_blocks: Blocks, block_count: int) -> list[list[list[list[int]]]]:
    """Clamp R, G, B values to 0..255 and round them to the nearest integer."""
    _check_planes(rgb_blocks, block_count)
    return [
        [[[_saturate(v) for v in row] for row in plane[k]] for k in range(block_count)]
        for plane in rgb_blocks[:3]
    ]