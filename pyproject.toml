[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shotdiff"
version = "0.1.0"
description = "Periodic window capture with pixel-level comparison and an SQLite history of screenshots"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["screenshot", "screen capture", "image diff", "sqlite", "monitoring"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Environment :: Win32 (MS Windows)",
    "Environment :: MacOS X",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Capture :: Screen Capture",
]

[project.optional-dependencies]
test = [
    "pytest",
    "freezegun",
]

[project.scripts]
shotdiff = "shotdiff.gui:main"

[tool.hatch.build.targets.wheel]
packages = ["shotdiff"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
