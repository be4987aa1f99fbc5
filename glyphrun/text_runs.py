"""Helpers used while shaping a run: UTF-16 decoding, script runs,
letter spacing, fixed-point conversion and font feature settings."""

from __future__ import annotations

import math
import string
import struct
from collections.abc import Callable, Hashable, Iterator, Sequence
from dataclasses import dataclass

__all__ = [
    "SCRIPT_COMMON",
    "SCRIPT_INHERITED",
    "SCRIPT_UNKNOWN",
    "REPLACEMENT_CHARACTER",
    "FEATURE_GLOBAL_END",
    "Feature",
    "decode_utf16",
    "script_runs",
    "is_script_ok_for_letterspacing",
    "letter_spacing_halves",
    "to_fixed",
    "from_fixed",
    "parse_features",
]

SCRIPT_COMMON = "Zyyy"
SCRIPT_INHERITED = "Zinh"
SCRIPT_UNKNOWN = "Zzzz"
REPLACEMENT_CHARACTER = 0xFFFD
FEATURE_GLOBAL_END = 0xFFFFFFFF

# Scripts with cursive connection, which letter spacing would break.
_NO_LETTERSPACING_SCRIPTS = frozenset(
    [
        "Arab", "Nkoo", "Phlp", "Mand", "Mong", "Phag", "Deva",
        "Beng", "Guru", "Modi", "Shrd", "Sylo", "Tirh", "Ogam",
    ]
)

_TAG_CHARS = frozenset(string.ascii_letters + string.digits + "_")


def _code_units(chars: str | Sequence[int]) -> Sequence[int]:
    """Return UTF-16 code units for a string, or the sequence unchanged."""
    if isinstance(chars, str):
        data = chars.encode("utf-16-le", "surrogatepass")
        return struct.unpack(f"<{len(data) // 2}H", data)
    return chars


def decode_utf16(chars: str | Sequence[int], index: int) -> tuple[int, int]:
    """Decode the code point at ``index``; return it and the index after it.

    Unpaired surrogates decode to U+FFFD, consuming one code unit.
    """
    units = _code_units(chars)
    v = units[index]
    index += 1
    if (v & 0xF800) != 0xD800:
        return v, index
    if index < len(units) and (v & 0xFC00) == 0xD800:
        v2 = units[index]
        if (v2 & 0xFC00) == 0xDC00:
            return 0x10000 + ((v - 0xD800) << 10) + (v2 - 0xDC00), index + 1
    return REPLACEMENT_CHARACTER, index


def script_runs(
    chars: str | Sequence[int], script_of: Callable[[int], Hashable]
) -> Iterator[tuple[int, int, Hashable]]:
    """Yield (start, end, script) for each run of one script in ``chars``.

    Common and Inherited characters join the run around them; a run made
    only of Inherited characters is reported as Common.
    """
    units = _code_units(chars)
    length = len(units)
    index = 0
    neutral = (SCRIPT_INHERITED, SCRIPT_COMMON)
    while index < length:
        start = index
        cp, index = decode_utf16(units, index)
        current = script_of(cp)
        while index < length:
            prev = index
            cp, index = decode_utf16(units, index)
            script = script_of(cp)
            if script == current:
                continue
            if current in neutral:
                current = script
            elif script in neutral:
                continue
            else:
                index = prev
                break
        if current == SCRIPT_INHERITED:
            current = SCRIPT_COMMON
        yield start, index, current


def is_script_ok_for_letterspacing(script: Hashable) -> bool:
    """False for scripts (mostly cursive) that must not get letter spacing."""
    return script not in _NO_LETTERSPACING_SCRIPTS


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def letter_spacing_halves(
    letter_spacing: float, size: float, scale_x: float, linear: bool
) -> tuple[float, float, float]:
    """Return (total, left half, right half) of the letter spacing in pixels.

    Without linear text the total is rounded and the left half floored, so
    both halves land on whole pixels.
    """
    if letter_spacing == 0:
        return 0.0, 0.0, 0.0
    space = letter_spacing * size * scale_x
    if linear:
        left = space * 0.5
    else:
        space = _round_half_away(space)
        left = float(math.floor(space * 0.5))
    return space, left, space - left


def to_fixed(value: float) -> int:
    """Convert to 24.8 fixed point, truncating toward zero."""
    return int(value * 256)


def from_fixed(value: int) -> float:
    """Convert from 24.8 fixed point."""
    return value / 256


@dataclass(frozen=True)
class Feature:
    """An OpenType feature setting over a range of clusters."""

    tag: str
    value: int = 1
    start: int = 0
    end: int = FEATURE_GLOBAL_END

    @property
    def is_global(self) -> bool:
        """True if the setting applies to the whole text."""
        return self.start == 0 and self.end == FEATURE_GLOBAL_END


class _Scanner:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def skip_spaces(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def take(self, chars: str) -> str:
        c = self.peek()
        if c and c in chars:
            self.pos += 1
            return c
        return ""

    def uint(self) -> int | None:
        begin = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in string.digits:
            self.pos += 1
        if self.pos == begin:
            return None
        value = int(self.text[begin : self.pos])
        return value if value <= 0xFFFFFFFF else None

    def word(self, word: str) -> bool:
        if self.text[self.pos : self.pos + len(word)].lower() == word:
            self.pos += len(word)
            return True
        return False


def _parse_feature(text: str) -> Feature | None:
    s = _Scanner(text)
    s.skip_spaces()
    value = 1
    prefix = s.take("+-")
    if prefix == "-":
        value = 0
    s.skip_spaces()

    quote = s.take("'\"")
    begin = s.pos
    while s.peek() and s.peek() in _TAG_CHARS:
        s.pos += 1
    tag = s.text[begin : s.pos]
    if not 1 <= len(tag) <= 4:
        return None
    if quote and (len(tag) != 4 or s.take(quote) != quote):
        return None
    tag = tag.ljust(4)
    s.skip_spaces()

    start, end = 0, FEATURE_GLOBAL_END
    if s.take("["):
        s.skip_spaces()
        first = s.uint()
        if first is not None:
            start = first
        s.skip_spaces()
        if s.take(":;"):
            s.skip_spaces()
            last = s.uint()
            if last is not None:
                end = last
        elif first is not None:
            end = first + 1
        s.skip_spaces()
        if not s.take("]"):
            return None
    s.skip_spaces()

    had_equal = bool(s.take("="))
    s.skip_spaces()
    number = s.uint()
    had_value = number is not None
    if had_value:
        value = number
    elif s.word("on"):
        value, had_value = 1, True
    elif s.word("off"):
        value, had_value = 0, True
    if had_equal and not had_value:
        return None
    s.skip_spaces()
    if s.pos != len(s.text):
        return None
    return Feature(tag, value, start, end)


def parse_features(settings: str) -> list[Feature]:
    """Parse comma separated feature settings such as ``"kern,-liga,ss01=2"``.

    Entries that fail to parse, or that apply to a range narrower than the
    whole text, are dropped.
    """
    features = []
    for item in settings.split(","):
        feature = _parse_feature(item)
        if feature is not None and feature.is_global:
            features.append(feature)
    return features