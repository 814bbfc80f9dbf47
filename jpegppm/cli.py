"""Command line decoder from baseline JPEG to PGM/PPM."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from .color import saturate_rgb, ycbcr_to_rgb
from .decoding import decode_mcu_blocks, upsample
from .header import (
    JpegFormatError,
    build_huffman_tables,
    init_component_info,
    parse_image_info,
    parse_quant_tables,
)
from .idct import blocks_to_pixels
from .ppm import write_image
from .quantization import dequantize

BLOCK_SIZE = 8

Decoded = tuple[tuple[int, int], tuple[int, int], list, int]


def _round_up(value: int, unit: int) -> int:
    return (value + unit - 1) // unit * unit


def _decode(path: str | os.PathLike[str], report: Callable[[str], None]) -> Decoded:
    data = Path(path).read_bytes()
    info = parse_image_info(data)
    count = info.component_count
    if count not in (1, 3):
        raise JpegFormatError(f"unsupported number of colour components: {count}")

    components = init_component_info(data)
    dc_tables, ac_tables = build_huffman_tables(data)

    first = components[0]
    unit_w = BLOCK_SIZE * first.h_samp
    unit_h = BLOCK_SIZE * first.v_samp
    full_size = (_round_up(info.height, unit_h), _round_up(info.width, unit_w))
    mcu_w = full_size[1] // unit_w
    mcu_h = full_size[0] // unit_h

    coefficients = decode_mcu_blocks(data, dc_tables, ac_tables, full_size, components)
    quant_tables = parse_quant_tables(data)

    report("inverse quantisation..")
    dequantised = dequantize(coefficients, components, info.size, quant_tables, info.qt_ids)

    report("inverse zigzag + IDCT..")
    pixels = blocks_to_pixels(dequantised, components, mcu_w, mcu_h)

    report("upsampling..")
    blocks = upsample(pixels, components, mcu_w, mcu_h)

    if count == 3:
        report("RGB conversion..")
        total = mcu_w * mcu_h * first.h_samp * first.v_samp
        blocks = saturate_rgb(ycbcr_to_rgb(blocks, total), total)

    return full_size, info.size, blocks, count


def decode_jpeg(path: str | os.PathLike[str]) -> Decoded:
    """Decode a baseline JPEG file.

    Returns (padded size, real size, planes of 8x8 pixel blocks, component
    count); sizes are (height, width) and the planes are grey or R, G, B.
    """
    return _decode(path, lambda message: None)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Decode the JPEG named on the command line into a PGM or PPM file."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("Usage: jpegppm <jpeg_file>", file=sys.stderr)
        return 1
    source = args[0]
    try:
        full_size, real_size, blocks, count = _decode(source, print)
        print("writing grey image.." if count == 1 else "writing colour image..")
        write_image(full_size, real_size, blocks, count, source)
    except (JpegFormatError, OSError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())