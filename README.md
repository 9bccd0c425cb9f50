# shotdiff

shotdiff captures the area covered by its own window at a fixed interval,
compares each new capture with the one before it pixel by pixel, and stores
every compared capture in a small SQLite database together with its MD5 hash
and the share of pixels that changed.

## Installation

```
pip install .
```

Screen grabbing uses Pillow's `ImageGrab`, so it works wherever Pillow can grab
the screen (Windows, macOS, and X11 on Linux). The window is built with
tkinter, which ships with most Python installations.

## Running

```
shotdiff
shotdiff --db path/to/database
```

`--db` names the database file to use instead of the default location
described below. If the database cannot be opened, the command prints the
error and exits with status 1.

The window has two tabs. The *Screenshots* tab shows the newest capture on the
left and the previous one on the right, each at a third of its size. Its
controls:

- **START / STOP** – start or stop capturing; once started, a capture is taken
  every 60 seconds. After each capture, if there are two captures, they are
  compared in the background.
- **Clear** – blank both image panes.
- **Save** – write the newest capture as
  `Screenshots/screenshot-<yy.mm.dd. HH_MM_SS>.png` under the current
  directory, with a UTC timestamp. The directory is created if needed.
- **Show newer** / **Show older** – show the newest or the previous capture
  again.
- **Compare** – compare the two latest captures. Both must exist and have the
  same size. The window then shows the *average RGB error* (the mean of the
  red, green and blue channel mismatch percentages) and the *relative error*
  (the percentage of pixels with any channel, alpha included, changed), and
  stores the newest capture in the database.
- **Difference** – show the previous capture with every changed pixel's green
  channel set to zero.

The *Database* tab lists the stored captures, newest first, with their id,
relative error, hash and size in bytes. **Update** reloads the list; selecting
a row shows that capture at half its size.

Messages such as "need more screenshots" appear in the status bar for five
seconds. At start-up the two most recently stored captures are loaded back
from the database.

## Where the database lives

By default the database file is named `scrDB` and sits in a `DB` directory
under the home directory (under `~/Documents` on macOS); the directory and
table are created when missing. It holds one table, `Screenshots`, with the
columns `img` (PNG bytes), `hash` (MD5 digest), `similarity` (the relative
error) and `id`.

## Using it from Python

```python
from PIL import Image
from shotdiff.screenshoter import compare_images

before = Image.open("a.png")
after = Image.open("b.png")
result = compare_images(after, before)
print(result.average_rgb_error, result.relative_error)
result.diff.save("diff.png")
```

`compare_images` raises `ValueError` when the images differ in size or are
empty.

`shotdiff.database.ScreenshotDatabase` is a context manager over the SQLite
file, with `insert`, `latest_two`, `records` and `image_at`; failures raise
`shotdiff.database.DatabaseError`. `shotdiff.monitor.Monitor` ties capture,
comparison and storage together without any window: give it a database and a
function returning a Pillow image, then call `capture`, `compare`,
`store_results` or `save_current`.

## Tests

```
pip install ".[test]"
pytest
```