"""Inverse quantisation of decoded coefficient blocks."""

from __future__ import annotations

from typing import Optional, Sequence

from .header import ComponentInfo, JpegFormatError

BLOCK_SIZE = 8
BLOCK_LENGTH = BLOCK_SIZE * BLOCK_SIZE


def _to_int16(value: int) -> int:
    """Wrap an integer to the signed 16-bit range, as coefficient storage does."""
    return ((value + 0x8000) & 0xFFFF) - 0x8000


def _block_counts(size: Sequence[int], components: Sequence[ComponentInfo]) -> list[int]:
    if not components:
        raise JpegFormatError("no colour components to dequantise")
    first = components[0]
    height, width = size[0], size[1]
    unit_w = BLOCK_SIZE * first.h_samp
    unit_h = BLOCK_SIZE * first.v_samp
    total_mcu = ((width + unit_w - 1) // unit_w) * ((height + unit_h - 1) // unit_h)
    return [total_mcu * comp.h_samp * comp.v_samp for comp in components]


def dequantize(
    blocks: Sequence[Sequence[Sequence[int]]],
    components: Sequence[ComponentInfo],
    size: Sequence[int],
    quant_tables: Sequence[Optional[Sequence[int]]],
    qt_ids: Sequence[int],
) -> list[list[list[int]]]:
    """Multiply every coefficient by the matching entry of its component's table.

    ``blocks`` holds, per component, blocks of 64 zigzag-ordered coefficients;
    ``size`` is (height, width). The table of component ``p`` is
    ``quant_tables[qt_ids[p]]``.
    """
    result = []
    for p, count in enumerate(_block_counts(size, components)):
        table_id = qt_ids[p]
        table = quant_tables[table_id] if 0 <= table_id < len(quant_tables) else None
        if table is None:
            raise JpegFormatError(f"quantisation table {table_id} is not defined")
        if len(table) != BLOCK_LENGTH:
            raise JpegFormatError(f"quantisation table {table_id} must hold 64 values")
        source = blocks[p]
        if len(source) < count:
            raise JpegFormatError(
                f"component {p + 1} has {len(source)} blocks, expected {count}"
            )
        result.append(
            [
                [_to_int16(coef * factor) for coef, factor in zip(source[k], table)]
                for k in range(count)
            ]
        )
    return result