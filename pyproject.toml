[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "glyphrun"
version = "0.1.0"
description = "Text layout helpers: grapheme cluster breaks, pattern hyphenation, glyph rasters and run utilities"
requires-python = ">=3.10"
dependencies = []
keywords = ["text", "layout", "grapheme", "hyphenation", "fonts", "unicode", "utf-16", "glyphs"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Fonts",
    "Topic :: Text Processing :: Linguistic",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["glyphrun"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
