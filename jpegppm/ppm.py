"""Writing decoded blocks out as binary PGM (grey) or PPM (colour) images."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

BLOCK_SIZE = 8
MAX_VALUE = 255

Planes = Sequence[Sequence[Sequence[Sequence[int]]]]


def output_path(jpeg_path: str | os.PathLike[str]) -> str:
    """Return the output file name without its suffix.

    The directory part is dropped and a trailing ``.jpeg`` or ``.jpg`` is removed.
    """
    name = os.fspath(jpeg_path).rsplit("/", 1)[-1]
    for extension in (".jpeg", ".jpg"):
        if name.endswith(extension):
            return name[: -len(extension)]
    return name


def render_image(
    full_size: Sequence[int],
    real_size: Sequence[int],
    blocks: Planes,
    component_count: int,
) -> bytes:
    """Return the whole PGM/PPM file for the given blocks.

    ``full_size`` is the padded (height, width) covered by the blocks and
    ``real_size`` the (height, width) of the image. ``blocks`` holds, per
    component, 8x8 blocks in raster order over the padded block grid.
    Padding pixels beyond the real size are left out.
    """
    if component_count < 1:
        raise ValueError(f"invalid number of components: {component_count}")
    if len(blocks) < component_count:
        raise ValueError(f"expected {component_count} planes, got {len(blocks)}")
    full_h, full_w = full_size[0], full_size[1]
    height, width = real_size[0], real_size[1]
    block_rows = full_h // BLOCK_SIZE
    block_cols = full_w // BLOCK_SIZE
    planes = blocks[:component_count]

    body = bytearray()
    for p in range(block_rows):
        row_count = BLOCK_SIZE - (full_h - height) if p == block_rows - 1 else BLOCK_SIZE
        for i in range(row_count):
            for k in range(block_cols):
                col_count = (
                    BLOCK_SIZE - (full_w - width) if k == block_cols - 1 else BLOCK_SIZE
                )
                index = p * block_cols + k
                for j in range(col_count):
                    body.extend(plane[index][i][j] for plane in planes)

    magic = b"P5" if component_count == 1 else b"P6"
    header = magic + f"\n{width} {height}\n{MAX_VALUE}\n".encode("ascii")
    return header + bytes(body) + b"\n"


def write_image(
    full_size: Sequence[int],
    real_size: Sequence[int],
    blocks: Planes,
    component_count: int,
    jpeg_path: str | os.PathLike[str],
) -> Path:
    """Write the image next to the working directory and return the path written.

    The name is the JPEG's base name with ``.pgm`` for one component and
    ``.ppm`` otherwise.
    """
    suffix = ".pgm" if component_count == 1 else ".ppm"
    path = Path(output_path(jpeg_path) + suffix)
    path.write_bytes(render_image(full_size, real_size, blocks, component_count))
    return path