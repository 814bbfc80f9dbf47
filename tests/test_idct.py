import math

import pytest

from jpegppm.header import ComponentInfo
from jpegppm.idct import (
    ZIGZAG,
    blocks_to_pixels,
    butterfly,
    fast_idct,
    idct_vector,
    rotation,
    scalar_idct,
    zigzag_inverse,
)


def _dc_block(value):
    block = [[0] * 8 for _ in range(8)]
    block[0][0] = value
    return block


def test_zigzag_inverse_places_first_entries():
    matrix = zigzag_inverse(list(range(64)))
    assert matrix[0][0] == 0
    assert matrix[0][1] == 1
    assert matrix[1][0] == 2
    assert matrix[2][0] == 3
    assert matrix[7][7] == 63


def test_zigzag_inverse_is_permutation():
    matrix = zigzag_inverse(list(range(64)))
    flat = [v for row in matrix for v in row]
    assert sorted(flat) == list(range(64))
    assert flat == list(ZIGZAG)


def test_zigzag_inverse_rejects_wrong_length():
    with pytest.raises(ValueError):
        zigzag_inverse([0] * 63)


def test_butterfly_inverts_by_sum_and_difference():
    a, b = butterfly(10.0, 4.0)
    assert a + b == 10.0
    assert a - b == 4.0


def test_rotation_preserves_norm():
    x, y = rotation(3.0, 4.0, 1, 5)
    assert math.hypot(x, y) == pytest.approx(5.0)


def test_rotation_zero_angle_divides_by_k():
    assert rotation(6.0, 8.0, 2.0, 0) == pytest.approx((3.0, 4.0))


def test_idct_vector_zero():
    assert idct_vector([0] * 8) == pytest.approx([0.0] * 8)


def test_idct_vector_dc_is_constant():
    out = idct_vector([16, 0, 0, 0, 0, 0, 0, 0])
    assert max(out) == pytest.approx(min(out))


def test_idct_vector_does_not_mutate_input():
    values = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0]
    idct_vector(values)
    assert values == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0]


def test_fast_idct_zero_block_is_mid_gray():
    assert fast_idct(_dc_block(0)) == [[128] * 8 for _ in range(8)]


def test_scalar_idct_zero_block_is_mid_gray():
    assert scalar_idct(_dc_block(0)) == [[128] * 8 for _ in range(8)]


def test_idct_saturates():
    assert fast_idct(_dc_block(4000)) == [[255] * 8 for _ in range(8)]
    assert fast_idct(_dc_block(-4000)) == [[0] * 8 for _ in range(8)]
    assert scalar_idct(_dc_block(4000)) == [[255] * 8 for _ in range(8)]
    assert scalar_idct(_dc_block(-4000)) == [[0] * 8 for _ in range(8)]


@pytest.mark.parametrize(
    "position, value",
    [((0, 0), 80), ((0, 1), 60), ((1, 0), -50), ((2, 3), 40), ((7, 7), 30), ((4, 5), -70)],
)
def test_fast_agrees_with_scalar(position, value):
    block = [[0] * 8 for _ in range(8)]
    block[position[0]][position[1]] = value
    fast = fast_idct(block)
    slow = scalar_idct(block)
    for fast_row, slow_row in zip(fast, slow):
        for f, s in zip(fast_row, slow_row):
            assert abs(f - s) <= 1


def test_blocks_to_pixels_counts_and_values():
    comps = [ComponentInfo(1, 2, 1, 0), ComponentInfo(2, 1, 1, 0)]
    zero = [0] * 64
    result = blocks_to_pixels([[zero, zero], [zero]], comps, 1, 1)
    assert len(result[0]) == 2
    assert len(result[1]) == 1
    assert result[1][0] == [[128] * 8 for _ in range(8)]


def test_blocks_to_pixels_too_few_blocks():
    comps = [ComponentInfo(1, 1, 1, 0)]
    with pytest.raises(ValueError):
        blocks_to_pixels([[[0] * 64]], comps, 2, 1)