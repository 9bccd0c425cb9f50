"""Capture, comparison and storage workflow behind the main window."""

from __future__ import annotations

import io
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from pathlib import Path

from PIL import Image

from shotdiff.database import ScreenshotDatabase
from shotdiff.screenshoter import CompareResult, Screenshoter

Grabber = Callable[[], "Image.Image | None"]


class Side(Enum):
    """Where a screenshot is shown: newer on the left, older on the right."""

    LEFT = "left"
    RIGHT = "right"


def screenshot_filename(directory: str | Path, now: datetime) -> Path:
    """Path of a saved screenshot taken at ``now`` inside ``directory``."""
    return Path(directory) / f"screenshot-{now:%y.%m.%d. %H_%M_%S}.png"


def format_results(result: CompareResult) -> tuple[str, str]:
    """Texts showing the average RGB error and the relative error."""
    return (
        f"Average RGB error: {result.average_rgb_error:g}%",
        f"Relative error: {result.relative_error:g}%",
    )


def _decode(data: bytes | None) -> Image.Image | None:
    if not data:
        return None
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except OSError:
        return None
    return image


class Monitor:
    """Takes screenshots, compares each with the one before and stores results."""

    def __init__(self, database: ScreenshotDatabase, grab: Grabber) -> None:
        self.database = database
        self.grab = grab
        self.shots = Screenshoter()

    def load_latest(self) -> bool:
        """Load the two newest stored screenshots; True if a main shot was found."""
        newest, older = self.database.latest_two()
        self.shots.main_shot = _decode(newest)
        self.shots.prev_shot = _decode(older)
        return self.shots.main_shot is not None

    def has_main_shot(self) -> bool:
        return self.shots.main_shot is not None

    def has_previous_shot(self) -> bool:
        return self.shots.prev_shot is not None and self.shots.main_shot is not None

    def capture(self) -> bool:
        """Take a new screenshot; True if there are now two shots to compare."""
        image = self.grab()
        self.shots.set_prev_shot()
        self.shots.set_main_shot(image)
        return self.has_main_shot() and self.has_previous_shot()

    def compare(self) -> CompareResult:
        """Compare the newest screenshot with the previous one."""
        if not self.has_main_shot() or not self.has_previous_shot():
            raise ValueError("need more screenshots")
        if self.shots.main_shot.size != self.shots.prev_shot.size:
            raise ValueError("need screenshots with same size")
        return self.shots.compare()

    def store_results(self) -> int:
        """Store the newest screenshot with its hash and relative error."""
        image_bytes = self.shots.to_png_bytes()
        digest = self.shots.compute_hash()
        return self.database.insert(image_bytes, digest, self.shots.relative_error)

    def save_current(self, directory: str | Path, now: datetime) -> Path:
        """Save the newest screenshot as PNG in ``directory`` and return its path."""
        if not self.has_main_shot():
            raise ValueError("there nothing to save")
        target = Path(directory)
        target.mkdir(parents=True, exist_ok=True)
        path = screenshot_filename(target, now)
        self.shots.main_shot.save(path, "PNG")
        return path

    def image_from_db(self, index: int) -> Image.Image | None:
        """Decoded image stored in row ``index`` of the table."""
        return _decode(self.database.image_at(index))