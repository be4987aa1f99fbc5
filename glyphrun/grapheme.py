"""Tailored extended grapheme cluster boundaries over UTF-16 code units."""

from __future__ import annotations

import bisect
import enum
import struct
import unicodedata
from collections.abc import Sequence

__all__ = [
    "GraphemeClusterBreak",
    "MoveOpt",
    "grapheme_cluster_break",
    "tailored_grapheme_cluster_break",
    "is_pure_killer",
    "is_emoji",
    "is_emoji_modifier",
    "is_emoji_base",
    "is_grapheme_break",
    "get_text_run_cursor",
]


class GraphemeClusterBreak(enum.IntEnum):
    """Values of the Grapheme_Cluster_Break property."""

    OTHER = 0
    CONTROL = 1
    CR = 2
    EXTEND = 3
    L = 4
    LF = 5
    LV = 6
    LVT = 7
    T = 8
    V = 9
    SPACING_MARK = 10
    PREPEND = 11
    REGIONAL_INDICATOR = 12


class MoveOpt(enum.IntEnum):
    """How a cursor moves to a grapheme boundary."""

    AFTER = 0
    AT_OR_AFTER = 1
    BEFORE = 2
    AT_OR_BEFORE = 3
    AT = 4


_GCB = GraphemeClusterBreak

_OTHER_GRAPHEME_EXTEND = frozenset(
    [
        0x09BE, 0x09D7, 0x0B3E, 0x0B57, 0x0BBE, 0x0BD7, 0x0CC2, 0x0CD5, 0x0CD6,
        0x0D3E, 0x0D57, 0x0DCF, 0x0DDF, 0x200C, 0x200D, 0x302E, 0x302F, 0xFF9E,
        0xFF9F, 0x1133E, 0x11357, 0x114B0, 0x114BD, 0x115AF, 0x1D165,
        0x1D16E, 0x1D16F, 0x1D170, 0x1D171, 0x1D172,
    ]
)

_NOT_SPACING_MARK = frozenset(
    [0x102B, 0x102C, 0x1038, 0x1062, 0x1063, 0x1064, 0x1083, 0x108F, 0x1A61,
     0x1A63, 0x1A64, 0xAA7B, 0xAA7D, 0x11720, 0x11721]
    + list(range(0x1067, 0x106E))
    + list(range(0x1087, 0x108D))
    + list(range(0x109A, 0x109D))
)

_CONTROL_CATEGORIES = frozenset(["Cc", "Cf", "Zl", "Zp", "Cs"])

_PURE_KILLERS = frozenset(
    [0x0E3A, 0x0E4E, 0x0F84, 0x103A, 0x1714, 0x1734, 0x17D1, 0x1BAA, 0x1BF2,
     0x1BF3, 0xA806, 0xA953, 0xABED, 0x11134, 0x112EA, 0x1172B]
)

_EMOJI_RANGES = (
    (0x0023, 0x0023), (0x002A, 0x002A), (0x0030, 0x0039), (0x00A9, 0x00A9),
    (0x00AE, 0x00AE), (0x203C, 0x203C), (0x2049, 0x2049), (0x2122, 0x2122),
    (0x2139, 0x2139), (0x2194, 0x2199), (0x21A9, 0x21AA), (0x231A, 0x231B),
    (0x2328, 0x2328), (0x23CF, 0x23CF), (0x23E9, 0x23F3), (0x23F8, 0x23FA),
    (0x24C2, 0x24C2), (0x25AA, 0x25AB), (0x25B6, 0x25B6), (0x25C0, 0x25C0),
    (0x25FB, 0x25FE), (0x2600, 0x2604), (0x260E, 0x260E), (0x2611, 0x2611),
    (0x2614, 0x2615), (0x2618, 0x2618), (0x261D, 0x261D), (0x2620, 0x2620),
    (0x2622, 0x2623), (0x2626, 0x2626), (0x262A, 0x262A), (0x262E, 0x262F),
    (0x2638, 0x263A), (0x2640, 0x2640), (0x2642, 0x2642), (0x2648, 0x2653),
    (0x265F, 0x2660), (0x2663, 0x2663), (0x2665, 0x2666), (0x2668, 0x2668),
    (0x267B, 0x267B), (0x267E, 0x267F), (0x2692, 0x2697), (0x2699, 0x2699),
    (0x269B, 0x269C), (0x26A0, 0x26A1), (0x26A7, 0x26A7), (0x26AA, 0x26AB),
    (0x26B0, 0x26B1), (0x26BD, 0x26BE), (0x26C4, 0x26C5), (0x26C8, 0x26C8),
    (0x26CE, 0x26CF), (0x26D1, 0x26D1), (0x26D3, 0x26D4), (0x26E9, 0x26EA),
    (0x26F0, 0x26F5), (0x26F7, 0x26FA), (0x26FD, 0x26FD), (0x2702, 0x2702),
    (0x2705, 0x2705), (0x2708, 0x270D), (0x270F, 0x270F), (0x2712, 0x2712),
    (0x2714, 0x2714), (0x2716, 0x2716), (0x271D, 0x271D), (0x2721, 0x2721),
    (0x2728, 0x2728), (0x2733, 0x2734), (0x2744, 0x2744), (0x2747, 0x2747),
    (0x274C, 0x274C), (0x274E, 0x274E), (0x2753, 0x2755), (0x2757, 0x2757),
    (0x2763, 0x2764), (0x2795, 0x2797), (0x27A1, 0x27A1), (0x27B0, 0x27B0),
    (0x27BF, 0x27BF), (0x2934, 0x2935), (0x2B05, 0x2B07), (0x2B1B, 0x2B1C),
    (0x2B50, 0x2B50), (0x2B55, 0x2B55), (0x3030, 0x3030), (0x303D, 0x303D),
    (0x3297, 0x3297), (0x3299, 0x3299), (0x1F004, 0x1F004), (0x1F0CF, 0x1F0CF),
    (0x1F170, 0x1F171), (0x1F17E, 0x1F17F), (0x1F18E, 0x1F18E),
    (0x1F191, 0x1F19A), (0x1F1E6, 0x1F1FF), (0x1F201, 0x1F202),
    (0x1F21A, 0x1F21A), (0x1F22F, 0x1F22F), (0x1F232, 0x1F23A),
    (0x1F250, 0x1F251), (0x1F300, 0x1F321), (0x1F324, 0x1F393),
    (0x1F396, 0x1F397), (0x1F399, 0x1F39B), (0x1F39E, 0x1F3F0),
    (0x1F3F3, 0x1F3F5), (0x1F3F7, 0x1F4FD), (0x1F4FF, 0x1F53D),
    (0x1F549, 0x1F54E), (0x1F550, 0x1F567), (0x1F56F, 0x1F570),
    (0x1F573, 0x1F57A), (0x1F587, 0x1F587), (0x1F58A, 0x1F58D),
    (0x1F590, 0x1F590), (0x1F595, 0x1F596), (0x1F5A4, 0x1F5A5),
    (0x1F5A8, 0x1F5A8), (0x1F5B1, 0x1F5B2), (0x1F5BC, 0x1F5BC),
    (0x1F5C2, 0x1F5C4), (0x1F5D1, 0x1F5D3), (0x1F5DC, 0x1F5DE),
    (0x1F5E1, 0x1F5E1), (0x1F5E3, 0x1F5E3), (0x1F5E8, 0x1F5E8),
    (0x1F5EF, 0x1F5EF), (0x1F5F3, 0x1F5F3), (0x1F5FA, 0x1F64F),
    (0x1F680, 0x1F6C5), (0x1F6CB, 0x1F6D2), (0x1F6E0, 0x1F6E5),
    (0x1F6E9, 0x1F6E9), (0x1F6EB, 0x1F6EC), (0x1F6F0, 0x1F6F0),
    (0x1F6F3, 0x1F6F8), (0x1F910, 0x1F93A), (0x1F93C, 0x1F93E),
    (0x1F940, 0x1F945), (0x1F947, 0x1F94C), (0x1F950, 0x1F96B),
    (0x1F980, 0x1F997), (0x1F9C0, 0x1F9C0), (0x1F9D0, 0x1F9E6),
)

_EMOJI_BASE_RANGES = (
    (0x261D, 0x261D), (0x26F9, 0x26F9), (0x270A, 0x270D), (0x1F385, 0x1F385),
    (0x1F3C2, 0x1F3C4), (0x1F3C7, 0x1F3C7), (0x1F3CA, 0x1F3CC),
    (0x1F442, 0x1F443), (0x1F446, 0x1F450), (0x1F466, 0x1F469),
    (0x1F46E, 0x1F46E), (0x1F470, 0x1F478), (0x1F47C, 0x1F47C),
    (0x1F481, 0x1F483), (0x1F485, 0x1F487), (0x1F4AA, 0x1F4AA),
    (0x1F574, 0x1F575), (0x1F57A, 0x1F57A), (0x1F590, 0x1F590),
    (0x1F595, 0x1F596), (0x1F645, 0x1F647), (0x1F64B, 0x1F64F),
    (0x1F6A3, 0x1F6A3), (0x1F6B4, 0x1F6B6), (0x1F6C0, 0x1F6C0),
    (0x1F6CC, 0x1F6CC), (0x1F918, 0x1F91C), (0x1F91E, 0x1F91F),
    (0x1F926, 0x1F926), (0x1F930, 0x1F939), (0x1F93D, 0x1F93E),
    (0x1F9D1, 0x1F9DD),
)


def _in_ranges(c: int, ranges: Sequence[tuple[int, int]], starts: Sequence[int]) -> bool:
    i = bisect.bisect_right(starts, c) - 1
    return i >= 0 and ranges[i][0] <= c <= ranges[i][1]


_EMOJI_STARTS = tuple(lo for lo, _ in _EMOJI_RANGES)
_EMOJI_BASE_STARTS = tuple(lo for lo, _ in _EMOJI_BASE_RANGES)


def is_emoji(c: int) -> bool:
    """True if ``c`` has the Emoji property."""
    return _in_ranges(c, _EMOJI_RANGES, _EMOJI_STARTS)


def is_emoji_modifier(c: int) -> bool:
    """True for the Fitzpatrick skin tone modifiers."""
    return 0x1F3FB <= c <= 0x1F3FF


def is_emoji_base(c: int) -> bool:
    """True if ``c`` may be followed by a skin tone modifier."""
    return _in_ranges(c, _EMOJI_BASE_RANGES, _EMOJI_BASE_STARTS)


def _is_unassigned_ignorable(c: int) -> bool:
    return c == 0x2065 or 0xFFF0 <= c <= 0xFFF8 or 0xE0000 <= c <= 0xE0FFF


def grapheme_cluster_break(c: int) -> GraphemeClusterBreak:
    """Return the untailored Grapheme_Cluster_Break value of code point ``c``."""
    if c == 0x0D:
        return _GCB.CR
    if c == 0x0A:
        return _GCB.LF
    if 0x1F1E6 <= c <= 0x1F1FF:
        return _GCB.REGIONAL_INDICATOR
    if 0x1100 <= c <= 0x115F or 0xA960 <= c <= 0xA97C:
        return _GCB.L
    if 0x1160 <= c <= 0x11A7 or 0xD7B0 <= c <= 0xD7C6:
        return _GCB.V
    if 0x11A8 <= c <= 0x11FF or 0xD7CB <= c <= 0xD7FB:
        return _GCB.T
    if 0xAC00 <= c <= 0xD7A3:
        return _GCB.LV if (c - 0xAC00) % 28 == 0 else _GCB.LVT
    if c in _OTHER_GRAPHEME_EXTEND:
        return _GCB.EXTEND
    category = unicodedata.category(chr(c))
    if category in _CONTROL_CATEGORIES:
        return _GCB.CONTROL
    if category == "Cn" and _is_unassigned_ignorable(c):
        return _GCB.CONTROL
    if category in ("Mn", "Me"):
        return _GCB.EXTEND
    if c in (0x0E33, 0x0EB3):
        return _GCB.SPACING_MARK
    if category == "Mc" and c not in _NOT_SPACING_MARK:
        return _GCB.SPACING_MARK
    return _GCB.OTHER


def tailored_grapheme_cluster_break(c: int) -> GraphemeClusterBreak:
    """Return the Grapheme_Cluster_Break value with local tailorings applied."""
    # Format controls that are treated as Extend rather than Control.
    if (
        c in (0x00AD, 0x061C, 0x180E, 0x200B, 0x200E, 0x200F, 0xFEFF)
        or 0x202A <= c <= 0x202E
        or (c | 0xF) == 0x206F
        or (c | 0x7F) == 0xE007F
    ):
        return _GCB.EXTEND
    # UTC-approved characters for the Prepend class.
    if 0x0600 <= c <= 0x0605 or c in (0x06DD, 0x070F, 0x0D4E, 0x110BD, 0x111C2, 0x111C3):
        return _GCB.PREPEND
    # THAI CHARACTER SARA AM is treated as a normal letter.
    if c == 0x0E33:
        return _GCB.OTHER
    return grapheme_cluster_break(c)


def is_pure_killer(c: int) -> bool:
    """True if ``c`` has Indic_Syllabic_Category Pure_Killer."""
    return c in _PURE_KILLERS


def _code_units(buf: str | Sequence[int]) -> Sequence[int]:
    if isinstance(buf, str):
        data = buf.encode("utf-16-le", "surrogatepass")
        return struct.unpack(f"<{len(data) // 2}H", data)
    return buf


def _is_lead(unit: int) -> bool:
    return 0xD800 <= unit <= 0xDBFF


def _is_trail(unit: int) -> bool:
    return 0xDC00 <= unit <= 0xDFFF


def _prev(buf: Sequence[int], start: int, index: int) -> tuple[int, int]:
    """Decode the code point ending at ``index``; return it and its start."""
    index -= 1
    c = buf[index]
    if _is_trail(c) and index > start and _is_lead(buf[index - 1]):
        index -= 1
        c = 0x10000 + ((buf[index] - 0xD800) << 10) + (c - 0xDC00)
    return c, index


def _next(buf: Sequence[int], index: int, limit: int) -> tuple[int, int]:
    """Decode the code point starting at ``index``; return it and the next index."""
    c = buf[index]
    index += 1
    if _is_lead(c) and index != limit and _is_trail(buf[index]):
        c = 0x10000 + ((c - 0xD800) << 10) + (buf[index] - 0xDC00)
        index += 1
    return c, index


def is_grapheme_break(buf: str | Sequence[int], start: int, count: int, offset: int) -> bool:
    """True if ``offset`` is a grapheme cluster boundary within ``buf[start:start+count]``."""
    buf = _code_units(buf)
    # GB1, GB2: break at start and end of text.
    if offset <= start or offset >= start + count:
        return True
    if _is_trail(buf[offset]):
        # Don't split a surrogate pair; a lonely trailing surrogate is a break.
        return not _is_lead(buf[offset - 1])
    c1, offset_back = _prev(buf, start, offset)
    c2, offset = _next(buf, offset, start + count)
    p1 = tailored_grapheme_cluster_break(c1)
    p2 = tailored_grapheme_cluster_break(c2)
    controls = (_GCB.CONTROL, _GCB.CR, _GCB.LF)
    # GB3: CR x LF
    if p1 == _GCB.CR and p2 == _GCB.LF:
        return False
    # GB4, GB5: break around controls.
    if p1 in controls or p2 in controls:
        return True
    # GB6: L x (L | V | LV | LVT)
    if p1 == _GCB.L and p2 in (_GCB.L, _GCB.V, _GCB.LV, _GCB.LVT):
        return False
    # GB7: (LV | V) x (V | T)
    if p1 in (_GCB.LV, _GCB.V) and p2 in (_GCB.V, _GCB.T):
        return False
    # GB8: (LVT | T) x T
    if p1 in (_GCB.LVT, _GCB.T) and p2 == _GCB.T:
        return False
    # GB8a: pair regional indicators, counting back over at most 1000 code units.
    if p1 == _GCB.REGIONAL_INDICATOR and p2 == _GCB.REGIONAL_INDICATOR:
        limit = max(start, offset_back - 1000)
        while offset_back > limit:
            c, offset_back = _prev(buf, limit, offset_back)
            if tailored_grapheme_cluster_break(c) != _GCB.REGIONAL_INDICATOR:
                offset_back += 1 if c <= 0xFFFF else 2
                break
        # offset has moved past c2 (two code units); a whole flag is four.
        return (offset - 2 - offset_back) % 4 == 0
    # GB9: x Extend; GB9a: x SpacingMark; GB9b: Prepend x
    if p2 in (_GCB.EXTEND, _GCB.SPACING_MARK) or p1 == _GCB.PREPEND:
        return False
    # Keep indic syllables together: virama followed by a letter.
    if (
        unicodedata.combining(chr(c1)) == 9
        and not is_pure_killer(c1)
        and unicodedata.category(chr(c2)) == "Lo"
    ):
        return False
    # Emoji ZWJ sequences form a single cluster.
    if c1 == 0x200D and is_emoji(c2) and offset_back > start:
        c0, back = _prev(buf, start, offset_back)
        if c0 == 0xFE0F and back > start:
            c0, back = _prev(buf, start, back)
        if is_emoji(c0):
            return False
    # E_Base x E_Modifier
    if is_emoji_modifier(c2):
        base = c1
        if c1 == 0xFE0F and offset_back > start:
            base, _ = _prev(buf, start, offset_back)
        if is_emoji_base(base):
            return False
    # GB10: Any ÷ Any
    return True


def get_text_run_cursor(
    buf: str | Sequence[int], start: int, count: int, offset: int, opt: MoveOpt
) -> int | None:
    """Move ``offset`` to a grapheme boundary as ``opt`` asks.

    With ``MoveOpt.AT`` the offset is returned unchanged if it is a boundary,
    otherwise None.
    """
    buf = _code_units(buf)
    opt = MoveOpt(opt)
    if opt in (MoveOpt.AFTER, MoveOpt.AT_OR_AFTER):
        if opt is MoveOpt.AFTER and offset < start + count:
            offset += 1
        while not is_grapheme_break(buf, start, count, offset):
            offset += 1
        return offset
    if opt in (MoveOpt.BEFORE, MoveOpt.AT_OR_BEFORE):
        if opt is MoveOpt.BEFORE and offset > start:
            offset -= 1
        while not is_grapheme_break(buf, start, count, offset):
            offset -= 1
        return offset
    return offset if is_grapheme_break(buf, start, count, offset) else None