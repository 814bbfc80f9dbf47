"""Inverse zigzag reordering and the inverse discrete cosine transform."""

from __future__ import annotations

import math
from typing import Sequence

from .header import ComponentInfo

BLOCK_SIZE = 8

ZIGZAG = (
    0, 1, 5, 6, 14, 15, 27, 28,
    2, 4, 7, 13, 16, 26, 29, 42,
    3, 8, 12, 17, 25, 30, 41, 43,
    9, 11, 18, 24, 31, 40, 44, 53,
    10, 19, 23, 32, 39, 45, 52, 54,
    20, 22, 33, 38, 46, 51, 55, 60,
    21, 34, 37, 47, 50, 56, 59, 61,
    35, 36, 48, 49, 57, 58, 62, 63,
)

_SQRT2 = math.sqrt(2)
_SQRT8 = math.sqrt(8)


def zigzag_inverse(coefficients: Sequence[int]) -> list[list[int]]:
    """Rearrange 64 zigzag-ordered coefficients into an 8x8 matrix."""
    if len(coefficients) != BLOCK_SIZE * BLOCK_SIZE:
        raise ValueError(f"expected 64 coefficients, got {len(coefficients)}")
    return [
        [coefficients[ZIGZAG[i * BLOCK_SIZE + j]] for j in range(BLOCK_SIZE)]
        for i in range(BLOCK_SIZE)
    ]


def butterfly(x: float, y: float) -> tuple[float, float]:
    """Return the half sum and half difference of ``x`` and ``y``."""
    return (x + y) / 2, (x - y) / 2


def rotation(x: float, y: float, k: float, n: int) -> tuple[float, float]:
    """Rotate (x, y) by n*pi/16 and divide by ``k``."""
    angle = n * math.pi / 16
    c, s = math.cos(angle), math.sin(angle)
    return (x * c - y * s) / k, (y * c + x * s) / k


def idct_vector(values: Sequence[float]) -> list[float]:
    """One-dimensional 8-point inverse DCT by the butterfly flow graph."""
    if len(values) != BLOCK_SIZE:
        raise ValueError(f"expected 8 values, got {len(values)}")
    s4 = [_SQRT8 * v for v in values]

    s3 = [0.0] * 8
    s3[0], s3[2], s3[4], s3[6] = s4[0], s4[2], s4[4], s4[6]
    s3[1], s3[7] = butterfly(s4[1], s4[7])
    s3[3] = s4[3] / _SQRT2
    s3[5] = s4[5] / _SQRT2

    s2 = [0.0] * 8
    s2[0], s2[4] = butterfly(s3[0], s3[4])
    s2[2], s2[6] = rotation(s3[2], s3[6], _SQRT2, 6)
    s2[7], s2[5] = butterfly(s3[7], s3[5])
    s2[1], s2[3] = butterfly(s3[1], s3[3])

    s1 = [0.0] * 8
    s1[0], s1[6] = butterfly(s2[0], s2[6])
    s1[4], s1[2] = butterfly(s2[4], s2[2])
    s1[7], s1[1] = rotation(s2[7], s2[1], 1, 3)
    s1[3], s1[5] = rotation(s2[3], s2[5], 1, 1)

    s0 = [0.0] * 8
    s0[0], s0[1] = butterfly(s1[0], s1[1])
    s0[4], s0[5] = butterfly(s1[4], s1[5])
    s0[2], s0[3] = butterfly(s1[2], s1[3])
    s0[6], s0[7] = butterfly(s1[6], s1[7])

    return [s0[0], s0[4], s0[2], s0[6], s0[7], s0[3], s0[5], s0[1]]


def _to_pixel_truncated(value: float) -> int:
    value += 128
    return int(min(255.0, max(0.0, value)))


def fast_idct(block: Sequence[Sequence[int]]) -> list[list[int]]:
    """Two-dimensional inverse DCT of an 8x8 block, level-shifted and clamped to 0..255."""
    columns = [
        idct_vector([block[i][j] for i in range(BLOCK_SIZE)]) for j in range(BLOCK_SIZE)
    ]
    rows = [[column[i] for column in columns] for i in range(BLOCK_SIZE)]
    return [[_to_pixel_truncated(v) for v in idct_vector(row)] for row in rows]


def scalar_idct(block: Sequence[Sequence[int]]) -> list[list[int]]:
    """Direct (slow) two-dimensional inverse DCT, rounded, level-shifted and clamped."""
    c = (0.70710678, 1, 1, 1, 1, 1, 1, 1)
    cosines = [
        [math.cos((2 * x + 1) * u * math.pi / 16.0) for u in range(BLOCK_SIZE)]
        for x in range(BLOCK_SIZE)
    ]
    out = []
    for x in range(BLOCK_SIZE):
        row = []
        for y in range(BLOCK_SIZE):
            total = sum(
                c[u] * c[v] * block[u][v] * cosines[x][u] * cosines[y][v]
                for u in range(BLOCK_SIZE)
                for v in range(BLOCK_SIZE)
            )
            value = round(total / 4.0) + 128
            row.append(min(255, max(0, value)))
        out.append(row)
    return out


def blocks_to_pixels(
    blocks: Sequence[Sequence[Sequence[int]]],
    components: Sequence[ComponentInfo],
    mcu_w: int,
    mcu_h: int,
) -> list[list[list[list[int]]]]:
    """Turn each component's dequantised zigzag blocks into 8x8 pixel blocks."""
    result = []
    for c, comp in enumerate(components):
        count = mcu_w * mcu_h * comp.h_samp * comp.v_samp
        source = blocks[c]
        if len(source) < count:
            raise ValueError(f"component {c + 1} has {len(source)} blocks, expected {count}")
        result.append([fast_idct(zigzag_inverse(source[b])) for b in range(count)])
    return result