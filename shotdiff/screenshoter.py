"""Screenshot holder and pixel-by-pixel comparison of two screenshots."""

from __future__ import annotations

import hashlib
import io
from dataclasses import dataclass
from functools import reduce

from PIL import Image, ImageChops


@dataclass(frozen=True)
class CompareResult:
    """Outcome of comparing two screenshots of the same size.

    ``average_rgb_error`` is the mean over the red, green and blue channels of
    the percentage of pixels whose channel differs.  ``relative_error`` is the
    percentage of pixels that differ in any channel, alpha included.  ``diff``
    is the previous image with the green channel cleared on every differing
    pixel.
    """

    average_rgb_error: float
    relative_error: float
    diff: Image.Image


def _mismatch_mask(first: Image.Image, second: Image.Image) -> Image.Image:
    return ImageChops.difference(first, second).point(lambda v: 255 if v else 0)


def _count_set(mask: Image.Image) -> int:
    return mask.histogram()[255]


def compare_images(main: Image.Image, previous: Image.Image) -> CompareResult:
    """Compare ``main`` against ``previous`` pixel by pixel."""
    if main.size != previous.size:
        raise ValueError("need screenshots with same size")
    width, height = main.size
    pixels = width * height
    if pixels == 0:
        raise ValueError("cannot compare empty screenshots")

    main_bands = main.convert("RGBA").split()
    prev_bands = previous.convert("RGBA").split()
    masks = [_mismatch_mask(a, b) for a, b in zip(main_bands, prev_bands)]

    red_err, green_err, blue_err, _alpha_err = (
        _count_set(mask) * 100.0 / pixels for mask in masks
    )
    any_mismatch = reduce(ImageChops.lighter, masks)
    total_errors = _count_set(any_mismatch)

    red, green, blue, alpha = prev_bands
    cleared_green = Image.composite(Image.new("L", main.size, 0), green, any_mismatch)
    diff = Image.merge("RGBA", (red, cleared_green, blue, alpha))

    return CompareResult(
        average_rgb_error=(red_err + green_err + blue_err) / 3.0,
        relative_error=total_errors * 100.0 / pixels,
        diff=diff,
    )


class Screenshoter:
    """Keeps the current and previous screenshot and the last comparison."""

    def __init__(self) -> None:
        self.main_shot: Image.Image | None = None
        self.prev_shot: Image.Image | None = None
        self.diff_shot: Image.Image | None = None
        self.image_bytes: bytes | None = None
        self.digest: bytes | None = None
        self.average_error: float = 0.0
        self.relative_error: float = 0.0

    def set_main_shot(self, image: Image.Image | None) -> None:
        self.main_shot = image

    def set_prev_shot(self, image: Image.Image | None = None) -> None:
        """Set the previous shot; with no image, the current main shot moves there."""
        self.prev_shot = image if image is not None else self.main_shot

    def compare(self) -> CompareResult:
        """Compare the main shot with the previous one and keep the results."""
        if self.main_shot is None or self.prev_shot is None:
            raise ValueError("need more screenshots")
        result = compare_images(self.main_shot, self.prev_shot)
        self.average_error = result.average_rgb_error
        self.relative_error = result.relative_error
        self.diff_shot = result.diff
        return result

    def to_png_bytes(self) -> bytes:
        """Encode the main shot as PNG and keep the bytes."""
        if self.main_shot is None:
            raise ValueError("there is no screenshot to encode")
        buffer = io.BytesIO()
        self.main_shot.save(buffer, "PNG")
        self.image_bytes = buffer.getvalue()
        return self.image_bytes

    def compute_hash(self) -> bytes:
        """MD5 digest of the encoded main shot."""
        if self.image_bytes is None:
            raise ValueError("screenshot has not been encoded")
        self.digest = hashlib.md5(self.image_bytes).digest()
        return self.digest