# glyphrun

Building blocks for laying out text as runs of glyphs. It uses only the
standard library. Text may be given as a `str` or as a sequence of UTF-16
code units. All offsets count code units.

## Modules

### `glyphrun.grapheme`

This module finds grapheme cluster boundaries. It follows the extended
grapheme cluster rules with these tailorings:

- Some format controls (soft hyphen, ZWSP, LRM/RLM, bidi embeddings, tag
  characters and similar) act as Extend.
- Arabic subtending marks and a few other characters act as Prepend.
- Thai SARA AM counts as an ordinary letter.
- A virama joins the letter that follows it, except for pure killers.
- Emoji ZWJ sequences stay together, and so do emoji bases followed by skin
  tone modifiers.

Functions:

- `is_grapheme_break(buf, start, count, offset)`
- `get_text_run_cursor(buf, start, count, offset, opt)`, which moves a cursor
  with a `MoveOpt` (`AFTER`, `AT_OR_AFTER`, `BEFORE`, `AT_OR_BEFORE`, `AT`).
  With `AT` it returns `None` when the offset is not a boundary.
- `grapheme_cluster_break(c)` and `tailored_grapheme_cluster_break(c)`,
  which return a `GraphemeClusterBreak`.
- `is_pure_killer`, `is_emoji`, `is_emoji_base` and `is_emoji_modifier`.

```python
from glyphrun.grapheme import is_grapheme_break, get_text_run_cursor, MoveOpt

text = [0x0041, 0x0301, 0x0042]          # "A" + combining acute + "B"
is_grapheme_break(text, 0, len(text), 1)  # False: the accent belongs to "A"
get_text_run_cursor(text, 0, len(text), 1, MoveOpt.AFTER)  # 2
```

### `glyphrun.hyphenator`

This module hyphenates single words with compiled binary pattern files.

- `Hyphenator.load_binary(data)` parses the pattern file into
  `HyphenationPatterns`.
- `Hyphenator.hyphenate(word)` returns one value per code unit. A value of 1
  means a hyphen may go before that unit.
- Patterns are used only for words that meet all of these conditions:
  - they have at least `min_prefix + min_suffix` units (defaults 2 and 3);
  - they fit within `max_hyphenated_size` (64) once padded;
  - every character is in the alphabet.
- In every other case it falls back to `hyphenate_soft`. That function
  allows a break only right after a soft hyphen (U+00AD).

A pattern file that is too short raises `ValueError`.

```python
from glyphrun.hyphenator import Hyphenator

Hyphenator().hyphenate("co\u00adop")  # [0, 0, 0, 1, 0]
```

### `glyphrun.raster`

- `Bitmap(width, height)` is an 8-bit grey surface.
  - `draw_glyph(glyph, x, y)` adds a `GlyphBitmap` at a pen position. Parts
    outside the surface are clipped, and pixel values saturate at 255.
  - `pixel(x, y)` reads one pixel.
  - `write_pnm(stream)` writes a binary PGM (P5) image.
- `Rect` is an immutable rectangle with `is_empty()`, `offset(dx, dy)` and
  `join(other)`. The `join` method ignores empty rectangles.

```python
from glyphrun.raster import Bitmap, GlyphBitmap

surface = Bitmap(4, 2)
dot = GlyphBitmap(width=2, height=1, left=0, top=0, buffer=b"\x80\x80")
surface.draw_glyph(dot, 1, 0)
surface.draw_glyph(dot, 1, 0)
surface.pixel(1, 0)  # 255
```

### `glyphrun.text_runs`

Helpers used while shaping a run:

- `decode_utf16(chars, index)` returns the code point at `index` and the
  index after it. An unpaired surrogate becomes U+FFFD.
- `script_runs(chars, script_of)` yields `(start, end, script)`. Common
  (`"Zyyy"`) and Inherited (`"Zinh"`) characters join the run around them.
  You supply the script lookup as `script_of`.
- `is_script_ok_for_letterspacing(script)` is false for Arabic, Devanagari
  and other cursive scripts, given as ISO 15924 codes.
- `letter_spacing_halves(letter_spacing, size, scale_x, linear)` returns the
  total spacing and its left and right halves. Unless `linear` is set, these
  are rounded to whole pixels.
- `to_fixed` and `from_fixed` convert to and from 24.8 fixed point.
- `parse_features(settings)` parses strings such as `"kern,-liga,ss01=2"`
  into `Feature` values. It drops entries that are malformed or limited to a
  range.

```python
from glyphrun.text_runs import letter_spacing_halves, parse_features

letter_spacing_halves(0.1, 16, 1.0, False)  # (2.0, 1.0, 1.0)
[f.tag for f in parse_features("kern,-liga,ss01=2")]  # ['kern', 'liga', 'ss01']
```

## What it does not do

glyphrun does not read font files and does not shape text into glyphs. It
has no layout cache, no cache of font objects and no word-boundary heuristics
for layout caching. It provides no command-line tool. The pieces above are
meant to be combined with a shaping engine and fonts supplied elsewhere.

## Installing

```
pip install .
pip install .[test]   # with pytest
```

## Running the tests

```
pytest
```