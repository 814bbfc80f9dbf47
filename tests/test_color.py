import pytest

from jpegppm.color import saturate_rgb, ycbcr_to_rgb


def _plane(value, count=1):
    return [[[value] * 8 for _ in range(8)] for _ in range(count)]


def test_neutral_chroma_gives_gray():
    rgb = ycbcr_to_rgb([_plane(90), _plane(128), _plane(128)], 1)
    for plane in rgb:
        assert plane[0] == [[pytest.approx(90.0)] * 8 for _ in range(8)]


def test_red_channel_depends_only_on_cr():
    a = ycbcr_to_rgb([_plane(100), _plane(0), _plane(200)], 1)
    b = ycbcr_to_rgb([_plane(100), _plane(255), _plane(200)], 1)
    assert a[0] == b[0]
    assert a[2] != b[2]


def test_blue_channel_depends_only_on_cb():
    a = ycbcr_to_rgb([_plane(100), _plane(50), _plane(0)], 1)
    b = ycbcr_to_rgb([_plane(100), _plane(50), _plane(255)], 1)
    assert a[2] == b[2]


def test_conversion_respects_block_count():
    rgb = ycbcr_to_rgb([_plane(10, 3), _plane(128, 3), _plane(128, 3)], 2)
    assert [len(plane) for plane in rgb] == [2, 2, 2]


def test_missing_plane_raises():
    with pytest.raises(ValueError):
        ycbcr_to_rgb([_plane(10), _plane(128)], 1)


def test_too_few_blocks_raises():
    with pytest.raises(ValueError):
        ycbcr_to_rgb([_plane(10), _plane(128), _plane(128)], 2)


def test_saturation_clamps():
    rgb = [_plane(300.0), _plane(-5.0), _plane(255.0)]
    result = saturate_rgb(rgb, 1)
    assert result[0][0] == [[255] * 8 for _ in range(8)]
    assert result[1][0] == [[0] * 8 for _ in range(8)]
    assert result[2][0] == [[255] * 8 for _ in range(8)]


def test_saturation_rounds_half_up():
    result = saturate_rgb([_plane(2.5), _plane(2.4), _plane(2.6)], 1)
    assert result[0][0][0][0] == 3
    assert result[1][0][0][0] == 2
    assert result[2][0][0][0] == 3


def test_round_trip_gray_is_identity():
    y = [[[(i * 8 + j) * 4 % 256 for j in range(8)] for i in range(8)]]
    rgb = ycbcr_to_rgb([y, _plane(128), _plane(128)], 1)
    result = saturate_rgb(rgb, 1)
    for plane in result:
        assert plane == y


def test_saturated_values_in_range():
    rgb = ycbcr_to_rgb([_plane(255), _plane(0), _plane(255)], 1)
    result = saturate_rgb(rgb, 1)
    for plane in result:
        for row in plane[0]:
            assert all(0 <= v <= 255 for v in row)