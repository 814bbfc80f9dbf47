"""Entropy decoding of the baseline scan and chroma upsampling."""

from __future__ import annotations

from typing import Optional, Sequence

from .header import MAX_CODE_LENGTH, SOS, ComponentInfo, HuffmanTable, JpegFormatError

BLOCK_SIZE = 8
BLOCK_LENGTH = BLOCK_SIZE * BLOCK_SIZE

Block = list[list[int]]


class BitReader:
    """Reads a byte string one bit at a time, most significant bit first."""

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self.position = 0

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.data) * 8

    def read_bit(self) -> Optional[int]:
        """Return the next bit, or None once every bit has been read."""
        if self.exhausted:
            return None
        byte = self.data[self.position >> 3]
        bit = (byte >> (7 - (self.position & 7))) & 1
        self.position += 1
        return bit

    def read_bits(self, count: int) -> int:
        """Return the next ``count`` bits as an unsigned integer."""
        value = 0
        for _ in range(count):
            bit = self.read_bit()
            if bit is None:
                raise JpegFormatError("scan data ends in the middle of a value")
            value = (value << 1) | bit
        return value


def magnitude_to_coefficient(magnitude: int, index: int) -> int:
    """Return the coefficient encoded by ``index`` within magnitude class ``magnitude``."""
    if magnitude == 0:
        return 0
    half = 1 << (magnitude - 1)
    if index < half:
        return -((1 << magnitude) - 1) + index
    return half + (index - half)


def extract_scan_data(data: bytes) -> bytes:
    """Return the entropy-coded bytes of the first scan, with byte stuffing removed.

    Restart markers are dropped; the data ends at the first other marker or at
    the end of the input.
    """
    data = bytes(data)
    pos = 0
    start = None
    while pos < len(data):
        value = data[pos]
        pos += 1
        if value == 0xFF and pos < len(data):
            marker = data[pos]
            pos += 1
            if marker == SOS:
                if pos + 3 > len(data):
                    raise JpegFormatError("truncated start-of-scan header")
                count = data[pos + 2]
                start = pos + 3 + 2 * count + 3
                break
    if start is None:
        raise JpegFormatError("no start-of-scan segment found")

    out = bytearray()
    pos = start
    while pos < len(data):
        value = data[pos]
        if value != 0xFF:
            out.append(value)
            pos += 1
            continue
        if pos + 1 >= len(data):
            break
        following = data[pos + 1]
        if following == 0x00:
            out.append(0xFF)
            pos += 2
        elif 0xD0 <= following <= 0xD7:
            pos += 2
        else:
            break
    return bytes(out)


def _require_table(table: Optional[HuffmanTable], kind: str) -> HuffmanTable:
    if table is None:
        raise JpegFormatError(f"missing {kind} Huffman table")
    return table


def decode_block(
    reader: BitReader,
    prev_dc: int,
    dc_table: Optional[HuffmanTable],
    ac_table: Optional[HuffmanTable],
) -> tuple[list[int], int]:
    """Decode one 8x8 block in zigzag order.

    Returns the 64 coefficients and the new DC predictor. A block cut short by
    the end of the stream is left filled with zeros.
    """
    dc_table = _require_table(dc_table, "DC")
    ac_table = _require_table(ac_table, "AC")
    coefficients = [0] * BLOCK_LENGTH

    bits = ""
    while True:
        bit = reader.read_bit()
        if bit is None:
            return coefficients, prev_dc
        bits += str(bit)
        magnitude = dc_table.lookup(bits)
        if magnitude is not None:
            prev_dc += magnitude_to_coefficient(magnitude, reader.read_bits(magnitude))
            coefficients[0] = prev_dc
            break
        if len(bits) == MAX_CODE_LENGTH:
            raise JpegFormatError("DC code too long: corrupt JPEG data")

    position = 1
    bits = ""
    while position < BLOCK_LENGTH:
        bit = reader.read_bit()
        if bit is None:
            break
        bits += str(bit)
        symbol = ac_table.lookup(bits)
        if symbol is None:
            if len(bits) == MAX_CODE_LENGTH:
                raise JpegFormatError("AC code too long: corrupt JPEG data")
            continue
        if symbol == 0x00:
            break
        zeros, magnitude = symbol >> 4, symbol & 0x0F
        index = reader.read_bits(magnitude)
        position = min(BLOCK_LENGTH, position + zeros)
        if position < BLOCK_LENGTH:
            coefficients[position] = magnitude_to_coefficient(magnitude, index)
            position += 1
        bits = ""
    return coefficients, prev_dc


def pixel_dup(block: Sequence[Sequence[int]], h_factor: int, v_factor: int) -> list[Block]:
    """Enlarge an 8x8 block by pixel duplication and cut it into 8x8 blocks, row by row."""
    rows = BLOCK_SIZE * v_factor
    cols = BLOCK_SIZE * h_factor
    enlarged = [
        [block[y // v_factor][x // h_factor] for x in range(cols)] for y in range(rows)
    ]
    return [
        [row[left:left + BLOCK_SIZE] for row in enlarged[top:top + BLOCK_SIZE]]
        for top in range(0, rows, BLOCK_SIZE)
        for left in range(0, cols, BLOCK_SIZE)
    ]


def _mcu_grid(size: Sequence[int], first: ComponentInfo) -> tuple[int, int]:
    height, width = size[0], size[1]
    unit_w = BLOCK_SIZE * first.h_samp
    unit_h = BLOCK_SIZE * first.v_samp
    return (width + unit_w - 1) // unit_w, (height + unit_h - 1) // unit_h


def decode_mcu_blocks(
    data: bytes,
    dc_tables: Sequence[Optional[HuffmanTable]],
    ac_tables: Sequence[Optional[HuffmanTable]],
    size: Sequence[int],
    components: Sequence[ComponentInfo],
) -> list[list[list[int]]]:
    """Decode every block of the scan.

    Returns, for each component, its blocks of 64 zigzag-ordered coefficients,
    stored in raster order over the component's block grid.
    """
    if not components:
        raise JpegFormatError("no colour components to decode")
    mcu_w, mcu_h = _mcu_grid(size, components[0])
    total_mcu = mcu_w * mcu_h
    result = [
        [[0] * BLOCK_LENGTH for _ in range(total_mcu * comp.h_samp * comp.v_samp)]
        for comp in components
    ]
    tables = [
        (
            _require_table(dc_tables[comp.dc_idx] if comp.dc_idx < len(dc_tables) else None, "DC"),
            _require_table(ac_tables[comp.ac_idx] if comp.ac_idx < len(ac_tables) else None, "AC"),
        )
        for comp in components
    ]
    reader = BitReader(extract_scan_data(data))
    predictors = [0] * len(components)

    for my in range(mcu_h):
        for mx in range(mcu_w):
            for c, comp in enumerate(components):
                row_length = mcu_w * comp.h_samp
                dc_table, ac_table = tables[c]
                for v in range(comp.v_samp):
                    for h in range(comp.h_samp):
                        block_x = mx * comp.h_samp + h
                        block_y = my * comp.v_samp + v
                        coefficients, predictors[c] = decode_block(
                            reader, predictors[c], dc_table, ac_table
                        )
                        result[c][block_y * row_length + block_x] = coefficients
    return result


def upsample(
    blocks: Sequence[Sequence[Sequence[Sequence[int]]]],
    components: Sequence[ComponentInfo],
    mcu_w: int,
    mcu_h: int,
) -> list[list[Block]]:
    """Bring every component to the luminance block grid by pixel duplication."""
    first = components[0]
    hy, vy = first.h_samp, first.v_samp
    total = mcu_w * mcu_h * hy * vy
    out: list[list[Block]] = []
    for c, comp in enumerate(components):
        source = blocks[c]
        if (comp.h_samp, comp.v_samp) == (hy, vy):
            out.append([[list(row) for row in source[b]] for b in range(total)])
            continue
        per_mcu = comp.h_samp * comp.v_samp
        target: list[Block] = [
            [[0] * BLOCK_SIZE for _ in range(BLOCK_SIZE)] for _ in range(total)
        ]
        for my in range(mcu_h):
            for mx in range(mcu_w):
                duplicated = pixel_dup(source[(my * mcu_w + mx) * per_mcu], hy, vy)
                for j in range(vy):
                    for i in range(hy):
                        dst = (my * vy + j) * (mcu_w * hy) + mx * hy + i
                        target[dst] = duplicated[j * hy + i]
        out.append(target)
    return out