import io

import pytest
from PIL import Image

from shotdiff.screenshoter import CompareResult, Screenshoter, compare_images


def _solid(color, size=(2, 2)):
    return Image.new("RGBA", size, color)


def test_identical_images_have_no_error():
    img = _solid((10, 20, 30, 255))
    result = compare_images(img, img.copy())
    assert result.average_rgb_error == 0.0
    assert result.relative_error == 0.0
    assert list(result.diff.getdata()) == list(img.getdata())


def test_fully_different_images():
    result = compare_images(_solid((0, 0, 0, 255)), _solid((1, 1, 1, 255)))
    assert result.average_rgb_error == 100.0
    assert result.relative_error == 100.0


def test_alpha_difference_counts_only_in_relative_error():
    result = compare_images(_solid((5, 5, 5, 255)), _solid((5, 5, 5, 0)))
    assert result.average_rgb_error == 0.0
    assert result.relative_error == 100.0


def test_diff_clears_green_on_changed_pixels_only():
    main = _solid((50, 60, 70, 255), size=(3, 1))
    prev = main.copy()
    prev.putpixel((1, 0), (80, 90, 100, 255))
    result = compare_images(main, prev)
    assert result.diff.getpixel((1, 0)) == (80, 0, 100, 255)
    assert result.diff.getpixel((0, 0)) == (50, 60, 70, 255)
    assert result.diff.getpixel((2, 0)) == (50, 60, 70, 255)
    assert 0.0 < result.relative_error < 100.0


def test_relative_error_not_below_average_error():
    main = _solid((1, 2, 3, 255), size=(4, 4))
    prev = main.copy()
    prev.putpixel((0, 0), (9, 2, 3, 255))
    prev.putpixel((1, 1), (9, 9, 9, 255))
    result = compare_images(main, prev)
    assert result.relative_error >= result.average_rgb_error


def test_rgb_and_rgba_modes_compare_equal():
    rgb = Image.new("RGB", (2, 2), (7, 8, 9))
    rgba = _solid((7, 8, 9, 255))
    assert compare_images(rgb, rgba).relative_error == 0.0


def test_size_mismatch_raises():
    with pytest.raises(ValueError):
        compare_images(_solid((0, 0, 0, 255), (2, 2)), _solid((0, 0, 0, 255), (3, 2)))


def test_empty_images_raise():
    with pytest.raises(ValueError):
        compare_images(Image.new("RGBA", (0, 0)), Image.new("RGBA", (0, 0)))


def test_set_prev_shot_without_image_takes_main():
    shooter = Screenshoter()
    first = _solid((1, 1, 1, 255))
    shooter.set_main_shot(first)
    shooter.set_prev_shot()
    assert shooter.prev_shot is first


def test_set_prev_shot_with_image():
    shooter = Screenshoter()
    other = _solid((2, 2, 2, 255))
    shooter.set_main_shot(_solid((1, 1, 1, 255)))
    shooter.set_prev_shot(other)
    assert shooter.prev_shot is other


def test_compare_stores_results():
    shooter = Screenshoter()
    shooter.set_main_shot(_solid((0, 0, 0, 255)))
    shooter.set_prev_shot(_solid((255, 255, 255, 255)))
    result = shooter.compare()
    assert isinstance(result, CompareResult)
    assert shooter.relative_error == result.relative_error == 100.0
    assert shooter.average_error == result.average_rgb_error
    assert shooter.diff_shot is result.diff


def test_compare_without_shots_raises():
    shooter = Screenshoter()
    with pytest.raises(ValueError):
        shooter.compare()


def test_png_round_trip():
    shooter = Screenshoter()
    img = _solid((12, 34, 56, 200), size=(5, 3))
    shooter.set_main_shot(img)
    data = shooter.to_png_bytes()
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    assert shooter.image_bytes == data
    decoded = Image.open(io.BytesIO(data)).convert("RGBA")
    assert list(decoded.getdata()) == list(img.getdata())


def test_png_without_main_shot_raises():
    with pytest.raises(ValueError):
        Screenshoter().to_png_bytes()


def test_hash_is_stable_and_depends_on_image():
    shooter = Screenshoter()
    shooter.set_main_shot(_solid((1, 1, 1, 255)))
    shooter.to_png_bytes()
    first = shooter.compute_hash()
    assert len(first) == 16
    assert shooter.compute_hash() == first
    assert shooter.digest == first

    shooter.set_main_shot(_solid((2, 2, 2, 255)))
    shooter.to_png_bytes()
    assert shooter.compute_hash() != first
    assert len(shooter.digest) == 16


def test_hash_before_encoding_raises():
    with pytest.raises(ValueError):
        Screenshoter().compute_hash()