import numpy as np
import pytest

from canvas_layout.bitmap import BLACK, BLUE, GREEN, RED, Bitmap, PixelColor, parse_color


def test_origin_is_bottom_left():
    bitmap = Bitmap(4, 3)

    bitmap.set_pixel(0, 0, RED)

    array = bitmap.to_array()
    assert array.shape == (3, 4, 4)
    assert tuple(array[2, 0]) == (255, 0, 0, 255)
    assert bitmap.get_pixel(0, 0) == RED


def test_writes_outside_permitted_region_are_dropped():
    bitmap = Bitmap(10, 10)
    bitmap.set_permitted_region(2, 5, 2, 5)

    bitmap.set_pixel(5, 3, RED)
    bitmap.set_pixel(3, 1, RED)
    bitmap.set_pixel(4, 4, GREEN)

    assert bitmap.get_pixel(5, 3) == BLACK
    assert bitmap.get_pixel(3, 1) == BLACK
    assert bitmap.get_pixel(4, 4) == GREEN


def test_permitted_region_is_clipped_to_bounds():
    bitmap = Bitmap(10, 8)

    bitmap.set_permitted_region(-5, 20, 3, 100)

    assert bitmap.permitted_region == (0, 10, 3, 8)
    bitmap.reset_permitted_region()
    assert bitmap.permitted_region == (0, 10, 0, 8)


def test_z_order_keeps_front_pixels_and_ties_overwrite():
    bitmap = Bitmap(2, 2)

    bitmap.set_pixel(1, 1, RED, z=2.0)
    bitmap.set_pixel(1, 1, GREEN, z=1.0)
    assert bitmap.get_pixel(1, 1) == RED

    bitmap.set_pixel(1, 1, BLUE, z=2.0)
    assert bitmap.get_pixel(1, 1) == BLUE


def test_fill_rect_matches_pixel_writes():
    filled = Bitmap(6, 6)
    looped = Bitmap(6, 6)
    for bitmap in (filled, looped):
        bitmap.set_permitted_region(1, 5, 0, 4)
        bitmap.set_pixel(2, 2, RED, z=3.0)

    filled.fill_rect(0, 6, 1, 6, GREEN, z=1.0)
    for x in range(0, 6):
        for y in range(1, 6):
            looped.set_pixel(x, y, GREEN, z=1.0)

    np.testing.assert_array_equal(filled.to_array(), looped.to_array())
    assert filled.get_pixel(2, 2) == RED


def test_get_pixel_outside_image_is_black():
    assert Bitmap(2, 2).get_pixel(5, -1) == BLACK


def test_negative_size_is_rejected():
    with pytest.raises(ValueError):
        Bitmap(-1, 3)


@pytest.mark.parametrize(
    'text, expected',
    [
        ('red', RED),
        ('Blue', BLUE),
        ('#102030', PixelColor(16, 32, 48)),
        ('#10203040', PixelColor(16, 32, 48, 64)),
    ],
)
def test_parse_color(text, expected):
    assert parse_color(text) == expected


def test_parse_color_rejects_garbage():
    with pytest.raises(ValueError):
        parse_color('#12')


def test_save_writes_png(tmp_path):
    matplotlib = pytest.importorskip("matplotlib")
    from matplotlib import image as mpimg

    backend = matplotlib.get_backend()
    bitmap = Bitmap(3, 2)
    bitmap.set_pixel(0, 0, RED)

    output = bitmap.save(tmp_path / "out" / "image.png")

    assert output.exists()
    assert matplotlib.get_backend() == backend
    pixels = mpimg.imread(output)
    assert pixels.shape == (2, 3, 4)
    np.testing.assert_allclose(pixels[1, 0], [1.0, 0.0, 0.0, 1.0])
