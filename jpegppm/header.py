"""Parsing of baseline JPEG header segments: frame, quantisation and Huffman tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

SOI = 0xD8
APP0 = 0xE0
SOF0 = 0xC0
DHT = 0xC4
DQT = 0xDB
SOS = 0xDA

MAX_CODE_LENGTH = 16
MAX_TABLES = 4
MAX_COMPONENTS = 4
BASELINE_PRECISION = 8


class JpegFormatError(ValueError):
    """Raised when the JPEG data is malformed or unsupported."""


@dataclass(frozen=True)
class ComponentInfo:
    """Sampling factors and table selectors of one colour component."""

    id: int
    h_samp: int
    v_samp: int
    qt_idx: int
    dc_idx: int = 0
    ac_idx: int = 0


@dataclass(frozen=True)
class HuffmanCode:
    """One canonical Huffman code: the symbol and its bit string."""

    symbol: int
    code: str
    length: int


@dataclass
class HuffmanTable:
    """A canonical Huffman table that maps bit strings to symbols."""

    codes: tuple[HuffmanCode, ...]
    _by_code: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.codes = tuple(self.codes)
        self._by_code = {entry.code: entry.symbol for entry in self.codes}

    @classmethod
    def from_counts(cls, counts: Sequence[int], symbols: Sequence[int]) -> "HuffmanTable":
        """Build the canonical table from 16 per-length counts and the symbols in order."""
        counts = list(counts)
        symbols = list(symbols)
        if len(counts) != MAX_CODE_LENGTH:
            raise ValueError(f"expected {MAX_CODE_LENGTH} code counts, got {len(counts)}")
        if sum(counts) != len(symbols):
            raise ValueError(
                f"code counts announce {sum(counts)} symbols but {len(symbols)} were given"
            )
        codes = []
        value = 0
        remaining = iter(symbols)
        for length, count in enumerate(counts, start=1):
            for _ in range(count):
                codes.append(HuffmanCode(next(remaining), code_to_bits(value)[-length:], length))
                value += 1
            value <<= 1
        return cls(tuple(codes))

    def lookup(self, bits: str) -> Optional[int]:
        """Return the symbol whose code is exactly ``bits``, or None."""
        return self._by_code.get(bits)

    def __len__(self) -> int:
        return len(self.codes)


@dataclass(frozen=True)
class ImageInfo:
    """Frame header contents: size, sampling factors and quantisation table ids."""

    height: int
    width: int
    sampling: tuple[tuple[int, int], ...]
    qt_ids: tuple[int, ...]

    @property
    def component_count(self) -> int:
        return len(self.sampling)

    @property
    def size(self) -> tuple[int, int]:
        return (self.height, self.width)


class _Stream:
    """Byte cursor over JPEG data."""

    def __init__(self, data: bytes, pos: int = 0) -> None:
        self.data = bytes(data)
        self.pos = pos

    def byte(self) -> int:
        if self.pos >= len(self.data):
            raise JpegFormatError("unexpected end of JPEG data")
        value = self.data[self.pos]
        self.pos += 1
        return value

    def u16(self) -> int:
        return (self.byte() << 8) | self.byte()

    def take(self, count: int) -> bytes:
        end = self.pos + count
        if end > len(self.data):
            raise JpegFormatError("unexpected end of JPEG data")
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def skip(self, count: int) -> None:
        self.pos = min(len(self.data), self.pos + max(0, count))

    def markers(self) -> Iterator[int]:
        """Yield every byte that follows a 0xFF, scanning from the current position."""
        while self.pos < len(self.data):
            value = self.data[self.pos]
            self.pos += 1
            if value == 0xFF and self.pos < len(self.data):
                marker = self.data[self.pos]
                self.pos += 1
                yield marker


def code_to_bits(n: int) -> str:
    """Return the 16-bit binary representation of ``n``, most significant bit first."""
    return format(n & 0xFFFF, "016b")


def _read_frame(stream: _Stream) -> ImageInfo:
    stream.skip(2)
    precision = stream.byte()
    if precision != BASELINE_PRECISION:
        raise JpegFormatError(f"baseline precision must be 8, got {precision}")
    height = stream.u16()
    width = stream.u16()
    count = stream.byte()
    if not 1 <= count <= MAX_COMPONENTS:
        raise JpegFormatError(f"invalid number of colour components: {count}")
    sampling = []
    qt_ids = []
    for _ in range(count):
        stream.byte()
        factors = stream.byte()
        sampling.append(((factors >> 4) & 0x0F, factors & 0x0F))
        qt_ids.append(stream.byte())
    return ImageInfo(height, width, tuple(sampling), tuple(qt_ids))


def parse_image_info(data: bytes) -> ImageInfo:
    """Read the image size, sampling factors and quantisation ids from the SOF0 segment."""
    if len(data) < 2 or data[0] != 0xFF or data[1] != SOI:
        raise JpegFormatError("missing start-of-image marker")
    stream = _Stream(data, 2)
    if stream.byte() != 0xFF:
        raise JpegFormatError("expected a marker after start-of-image")
    if stream.byte() == APP0:
        length = stream.u16()
        stream.skip(length - 2)

    info = None
    for marker in stream.markers():
        if marker == SOF0:
            info = _read_frame(stream)
    if info is None:
        raise JpegFormatError("no baseline frame header found")
    return info


def parse_quant_tables(data: bytes) -> list[Optional[list[int]]]:
    """Return the four quantisation tables in file order (zigzag), None where undefined."""
    tables: list[Optional[list[int]]] = [None] * MAX_TABLES
    stream = _Stream(data)
    for marker in stream.markers():
        if marker != DQT:
            continue
        remaining = stream.u16() - 2
        while remaining > 0:
            info = stream.byte()
            remaining -= 1
            index = info & 0x0F
            if index >= MAX_TABLES:
                raise JpegFormatError(f"quantisation table index {index} out of range")
            if info >> 4 == 1:
                values = [stream.u16() for _ in range(64)]
                remaining -= 128
            else:
                values = list(stream.take(64))
                remaining -= 64
            tables[index] = values
        if remaining != 0:
            raise JpegFormatError("quantisation segment length does not match its tables")
    return tables


HuffmanGroups = list[list[int]]


def parse_huffman_info(
    data: bytes,
) -> tuple[list[Optional[HuffmanGroups]], list[Optional[HuffmanGroups]]]:
    """Return (DC, AC) tables, each a list of four entries.

    An entry is None or a list of 16 symbol lists, one per code length.
    Only segments before the start of scan are read, and a table whose index
    is not below the number of tables of its class is discarded.
    """
    dc: list[Optional[HuffmanGroups]] = [None] * MAX_TABLES
    ac: list[Optional[HuffmanGroups]] = [None] * MAX_TABLES
    by_class = (dc, ac)
    seen = [0, 0]
    stream = _Stream(data)
    for marker in stream.markers():
        if marker == SOS:
            break
        if marker != DHT:
            continue
        stream.skip(2)
        selector = stream.byte()
        kind = (selector >> 4) & 0x0F
        index = selector & 0x0F
        if kind not in (0, 1):
            raise JpegFormatError(f"invalid Huffman table class {kind}")
        if index >= MAX_TABLES:
            raise JpegFormatError(f"Huffman table index {index} out of range")
        seen[kind] += 1
        counts = list(stream.take(MAX_CODE_LENGTH))
        by_class[kind][index] = [list(stream.take(count)) for count in counts]
    for tables, count in zip(by_class, seen):
        for index in range(count, MAX_TABLES):
            tables[index] = None
    return dc, ac


def build_huffman_tables(
    data: bytes,
) -> tuple[list[Optional[HuffmanTable]], list[Optional[HuffmanTable]]]:
    """Return (DC, AC) lists of four canonical Huffman tables, None where undefined."""

    def build(groups: Optional[HuffmanGroups]) -> Optional[HuffmanTable]:
        if groups is None:
            return None
        return HuffmanTable.from_counts(
            [len(group) for group in groups],
            [symbol for group in groups for symbol in group],
        )

    dc, ac = parse_huffman_info(data)
    return [build(groups) for groups in dc], [build(groups) for groups in ac]


def parse_huffman_indices(data: bytes) -> list[Optional[tuple[int, int]]]:
    """Return the (DC, AC) table selectors of each component, indexed by id - 1."""
    stream = _Stream(data)
    for marker in stream.markers():
        if marker != SOS:
            continue
        stream.skip(2)
        count = stream.byte()
        indices: list[Optional[tuple[int, int]]] = [None] * count
        for _ in range(count):
            component_id = stream.byte()
            selector = stream.byte()
            if not 1 <= component_id <= count:
                raise JpegFormatError(f"scan component id {component_id} out of range")
            indices[component_id - 1] = ((selector >> 4) & 0x0F, selector & 0x0F)
        return indices
    raise JpegFormatError("no start-of-scan segment found")


def init_component_info(data: bytes) -> list[ComponentInfo]:
    """Combine frame and scan headers into per-component information (at most three)."""
    info = parse_image_info(data)
    selectors = parse_huffman_indices(data)
    components = []
    for i, ((h_samp, v_samp), qt_idx) in enumerate(zip(info.sampling[:3], info.qt_ids)):
        if i >= len(selectors) or selectors[i] is None:
            raise JpegFormatError(f"component {i + 1} has no Huffman table selectors")
        dc_idx, ac_idx = selectors[i]
        components.append(ComponentInfo(i + 1, h_samp, v_samp, qt_idx, dc_idx, ac_idx))
    return components