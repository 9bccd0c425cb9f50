"""Tk window showing screenshots, their comparison and the stored history."""

from __future__ import annotations

import argparse
import sys
import tkinter as tk
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from tkinter import ttk

from PIL import Image, ImageGrab, ImageTk

from shotdiff.database import DATABASE_NAME, DatabaseError, ScreenshotDatabase, default_db_dir
from shotdiff.monitor import Monitor, Side, format_results
from shotdiff.screenshoter import CompareResult

TIMER_INTERVAL_MS = 60000
STATUS_TIMEOUT_MS = 5000
POLL_INTERVAL_MS = 100
SCREENSHOT_DIR = "Screenshots"


def scaled_size(width: int, height: int, divisor: int) -> tuple[int, int]:
    """Size of an image shrunk by ``divisor``, keeping its aspect ratio."""
    if width <= 0 or height <= 0:
        raise ValueError("image has no pixels")
    if divisor <= 0:
        raise ValueError("divisor must be positive")
    box_w, box_h = width // divisor, height // divisor
    fit_w = box_h * width // height
    if fit_w <= box_w:
        size = (fit_w, box_h)
    else:
        size = (box_w, box_w * height // width)
    return max(size[0], 1), max(size[1], 1)


def _grab_window(root: tk.Misc) -> Image.Image:
    x, y = root.winfo_rootx(), root.winfo_rooty()
    return ImageGrab.grab(bbox=(x, y, x + root.winfo_width(), y + root.winfo_height()))


def _os_name() -> str:
    return "macos" if sys.platform == "darwin" else sys.platform


class MainWindow:
    """Main window: two screenshot views, controls and the database table."""

    def __init__(self, root: tk.Tk, monitor: Monitor) -> None:
        self.root = root
        self.monitor = monitor
        self._executor = ThreadPoolExecutor(max_workers=1)
        self._timer_id: str | None = None
        self._status_id: str | None = None
        self._photos: dict[Side, ImageTk.PhotoImage] = {}
        self._db_photo: ImageTk.PhotoImage | None = None

        root.title("Screenshot")
        self._build()
        try:
            monitor.load_latest()
        except DatabaseError as exc:
            self.show_status(str(exc))
        self.show_screenshot(monitor.shots.main_shot, Side.LEFT)
        self.show_screenshot(monitor.shots.prev_shot, Side.RIGHT)
        self.refresh_table()
        self._set_items_size()
        root.protocol("WM_DELETE_WINDOW", self._close)

    def _build(self) -> None:
        self._status = ttk.Label(self.root, anchor="w")
        self._status.pack(side="bottom", fill="x")

        notebook = ttk.Notebook(self.root)
        notebook.pack(fill="both", expand=True)
        shots_tab = ttk.Frame(notebook)
        db_tab = ttk.Frame(notebook)
        notebook.add(shots_tab, text="Screenshots")
        notebook.add(db_tab, text="Database")

        images = ttk.Frame(shots_tab)
        images.pack(fill="both", expand=True)
        self._image_labels = {Side.LEFT: ttk.Label(images), Side.RIGHT: ttk.Label(images)}
        self._image_labels[Side.LEFT].grid(row=0, column=0, padx=5, pady=5)
        self._image_labels[Side.RIGHT].grid(row=0, column=1, padx=5, pady=5)

        controls = ttk.Frame(shots_tab)
        controls.pack(fill="x")
        self._start_button = ttk.Button(controls, text="START", command=self.toggle_timer)
        self._compare_button = ttk.Button(controls, text="Compare", command=self.compare_images)
        buttons = [
            self._start_button,
            ttk.Button(controls, text="Clear", command=self.clear_screen),
            ttk.Button(controls, text="Save", command=self.save_current),
            ttk.Button(
                controls,
                text="Show newer",
                command=lambda: self.show_screenshot(self.monitor.shots.main_shot, Side.LEFT),
            ),
            ttk.Button(
                controls,
                text="Show older",
                command=lambda: self.show_screenshot(self.monitor.shots.prev_shot, Side.RIGHT),
            ),
            self._compare_button,
            ttk.Button(controls, text="Difference", command=self.show_difference),
        ]
        for button in buttons:
            button.pack(side="left", padx=2, pady=2)

        self._average_label = ttk.Label(shots_tab)
        self._average_label.pack(anchor="w")
        self._relative_label = ttk.Label(shots_tab)
        self._relative_label.pack(anchor="w")

        columns = ("id", "similarity", "hash", "size")
        self._table = ttk.Treeview(db_tab, columns=columns, show="headings", selectmode="browse")
        for column in columns:
            self._table.heading(column, text=column)
        self._table.pack(side="left", fill="y")
        self._table.bind("<<TreeviewSelect>>", self._on_table_select)
        side_panel = ttk.Frame(db_tab)
        side_panel.pack(side="left", fill="both", expand=True)
        ttk.Button(side_panel, text="Update", command=self.refresh_table).pack(anchor="w")
        self._db_image = ttk.Label(side_panel)
        self._db_image.pack(fill="both", expand=True)

    def _set_items_size(self) -> None:
        width, height = self.root.winfo_screenwidth(), self.root.winfo_screenheight()
        self.root.geometry(f"{int(width / 1.1)}x{int(height / 1.1)}")
        self.root.minsize(width // 2, height // 2)

    def toggle_timer(self) -> None:
        """Start or stop taking a screenshot every minute."""
        if self._timer_id is not None:
            self.root.after_cancel(self._timer_id)
            self._timer_id = None
            self._start_button.configure(text="START")
        else:
            self._timer_id = self.root.after(TIMER_INTERVAL_MS, self._tick)
            self._start_button.configure(text="STOP")

    def _tick(self) -> None:
        self._timer_id = self.root.after(TIMER_INTERVAL_MS, self._tick)
        self.on_timeout()

    def show_status(self, message: str) -> None:
        """Show ``message`` in the status bar for a few seconds."""
        if self._status_id is not None:
            self.root.after_cancel(self._status_id)
        self._status.configure(text=message)
        self._status_id = self.root.after(STATUS_TIMEOUT_MS, self._clear_status)

    def _clear_status(self) -> None:
        self._status_id = None
        self._status.configure(text="")

    def show_screenshot(self, image: Image.Image | None, side: Side = Side.LEFT) -> None:
        """Show ``image`` at a third of its size on the given side."""
        if image is None:
            self.show_status("there no screenshot to show")
            return
        size = scaled_size(image.width, image.height, 3)
        photo = ImageTk.PhotoImage(image.resize(size, Image.Resampling.LANCZOS))
        self._photos[side] = photo
        self._image_labels[side].configure(image=photo)

    def clear_screen(self) -> None:
        """Remove both shown screenshots."""
        for label in self._image_labels.values():
            label.configure(image="")
        self._photos.clear()

    def save_current(self) -> None:
        """Save the newest screenshot under the working directory."""
        try:
            self.monitor.save_current(
                Path.cwd() / SCREENSHOT_DIR, datetime.now(timezone.utc)
            )
        except ValueError as exc:
            self.show_status(str(exc))
        except OSError:
            self.show_status("something went wrong")
        else:
            self.show_status("successfully saved")

    def compare_images(self) -> None:
        """Compare the two shown screenshots in the background."""
        if not self.monitor.has_main_shot() or not self.monitor.has_previous_shot():
            self.show_status("need more screenshots")
            return
        if self.monitor.shots.main_shot.size != self.monitor.shots.prev_shot.size:
            self.show_status("need screenshots with same size")
            return
        self._start_computation()

    def show_difference(self) -> None:
        """Show the last difference image on the right."""
        if self.monitor.shots.diff_shot is not None:
            self.show_screenshot(self.monitor.shots.diff_shot, Side.RIGHT)

    def on_timeout(self) -> None:
        """Take a screenshot and compare it with the previous one."""
        try:
            ready = self.monitor.capture()
        except OSError as exc:
            self.show_status(f"cannot take screenshot: {exc}")
            return
        self.show_screenshot(self.monitor.shots.main_shot, Side.LEFT)
        self.show_screenshot(self.monitor.shots.prev_shot, Side.RIGHT)
        if ready:
            self._start_computation()

    def _start_computation(self) -> None:
        self._compare_button.state(["disabled"])
        future = self._executor.submit(self.monitor.compare)
        self.root.after(POLL_INTERVAL_MS, self._poll, future)

    def _poll(self, future: Future) -> None:
        if not future.done():
            self.root.after(POLL_INTERVAL_MS, self._poll, future)
            return
        self._compare_button.state(["!disabled"])
        try:
            result = future.result()
        except ValueError as exc:
            self.show_status(str(exc))
            return
        self._handle_results(result)

    def _handle_results(self, result: CompareResult) -> None:
        average, relative = format_results(result)
        self._average_label.configure(text=average)
        self._relative_label.configure(text=relative)
        try:
            self.monitor.store_results()
        except DatabaseError as exc:
            self.show_status(str(exc))
            return
        except (ValueError, OSError):
            self.show_status("byte array is empty")
            return
        self.refresh_table()

    def refresh_table(self) -> None:
        """Reload the table of stored screenshots, newest first."""
        try:
            records = self.monitor.database.records()
        except DatabaseError as exc:
            self.show_status(str(exc))
            return
        self._table.delete(*self._table.get_children())
        ordered = sorted(enumerate(records), key=lambda pair: pair[1].id, reverse=True)
        for index, record in ordered:
            self._table.insert(
                "",
                "end",
                iid=str(index),
                values=(record.id, record.similarity, record.hash.hex(), len(record.img)),
            )

    def _on_table_select(self, _event: tk.Event) -> None:
        selection = self._table.selection()
        if not selection:
            return
        try:
            image = self.monitor.image_from_db(int(selection[0]))
        except (IndexError, DatabaseError) as exc:
            self.show_status(str(exc))
            return
        if image is None:
            self.show_status("there no screenshot to show")
            return
        size = scaled_size(image.width, image.height, 2)
        self._db_photo = ImageTk.PhotoImage(image.resize(size, Image.Resampling.LANCZOS))
        self._db_image.configure(image=self._db_photo)

    def _close(self) -> None:
        if self._timer_id is not None:
            self.root.after_cancel(self._timer_id)
            self._timer_id = None
        self._executor.shutdown(wait=True)
        self.monitor.database.close()
        self.root.destroy()


def main(argv: list[str] | None = None) -> int:
    """Open the screenshot window."""
    parser = argparse.ArgumentParser(
        prog="shotdiff", description="Take screenshots and compare them."
    )
    parser.add_argument("--db", type=Path, default=None, help="path of the database file")
    args = parser.parse_args(argv)

    path = args.db or default_db_dir(Path.home(), _os_name()) / DATABASE_NAME
    database = ScreenshotDatabase(path)
    try:
        database.connect()
    except DatabaseError as exc:
        print(exc, file=sys.stderr)
        return 1

    root = tk.Tk()
    monitor = Monitor(database, lambda: _grab_window(root))
    MainWindow(root, monitor)
    root.mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())