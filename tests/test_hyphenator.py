import struct

import pytest

from glyphrun.hyphenator import (
    MAX_HYPHENATED_SIZE,
    HyphenationPatterns,
    Hyphenator,
    hyphenate_soft,
)

CHAR_MASK = 0x1F
LINK_SHIFT = 5
LINK_MASK = 0xFFFE0
PATTERN_SHIFT = 20
STRIDE = 32
LETTERS = "abcdefghijklmnopqrstuvwxyz"


def _code(ch):
    return 0 if ch == "." else ord(ch) - 96


def _alphabet(version):
    if version == 0:
        return struct.pack("<3I", 0, ord("a"), ord("z") + 1) + bytes(range(1, 27))
    if version == 1:
        entries = [(ord(ch) << 11) | _code(ch) for ch in LETTERS]
        return struct.pack(f"<2I{len(entries)}I", 1, len(entries), *entries)
    return struct.pack("<I", version)


def build_hyb(patterns, alphabet_version=0):
    children = [{}]
    pattern_of = [0]
    entries = [0]
    pool = bytearray()
    for letters, values in patterns.items():
        node = 0
        for ch in letters:
            code = _code(ch)
            if code not in children[node]:
                children[node][code] = len(children)
                children.append({})
                pattern_of.append(0)
            node = children[node][code]
        trimmed = list(values)
        while trimmed and trimmed[-1] == 0:
            trimmed.pop()
        shift = len(values) - len(trimmed)
        entries.append((len(trimmed) << 26) | (shift << 20) | len(pool))
        pool.extend(trimmed)
        pattern_of[node] = len(entries) - 1

    data = [CHAR_MASK] * (len(children) * STRIDE)
    for k, kids in enumerate(children):
        base = k * STRIDE
        data[base] |= pattern_of[k] << PATTERN_SHIFT
        for code, child in kids.items():
            keep = data[base + code] & ~(CHAR_MASK | LINK_MASK)
            data[base + code] = keep | code | ((child * STRIDE) << LINK_SHIFT)

    alphabet = _alphabet(alphabet_version)
    trie = struct.pack(
        f"<6I{len(data)}I", 0, CHAR_MASK, LINK_SHIFT, LINK_MASK, PATTERN_SHIFT, len(data), *data
    )
    pattern = (
        struct.pack("<4I", 0, len(entries), 16 + 4 * len(entries), len(pool))
        + struct.pack(f"<{len(entries)}I", *entries)
        + bytes(pool)
    )
    alphabet_offset = 24
    trie_offset = alphabet_offset + len(alphabet)
    pattern_offset = trie_offset + len(trie)
    total = pattern_offset + len(pattern)
    header = struct.pack("<6I", 0, 0, alphabet_offset, trie_offset, pattern_offset, total)
    return header + alphabet + trie + pattern


def test_pattern_marks_break():
    h = Hyphenator.load_binary(build_hyb({"ab": [0, 1, 0]}))
    assert h.hyphenate("aaabbb") == [0, 0, 0, 1, 0, 0]


def test_even_value_suppresses_break():
    h = Hyphenator.load_binary(build_hyb({"ab": [0, 2, 0]}))
    assert h.hyphenate("aaabbb") == [0] * 6


def test_patterns_combine_by_maximum():
    h = Hyphenator.load_binary(build_hyb({"ab": [0, 1, 0], "b": [2, 0]}))
    assert h.hyphenate("aaabbb") == [0] * 6


@pytest.mark.parametrize("word", ["abbbbb", "bbbbab"])
def test_no_break_inside_prefix_or_suffix(word):
    h = Hyphenator.load_binary(build_hyb({"ab": [0, 1, 0]}))
    assert h.hyphenate(word) == [0] * len(word)


@pytest.mark.parametrize("length", range(5, 11))
def test_breaks_only_between_prefix_and_suffix(length):
    h = Hyphenator.load_binary(build_hyb({"a": [1, 1]}))
    word = "a" * length
    expected = [
        1 if h.min_prefix <= i <= length - h.min_suffix else 0 for i in range(length)
    ]
    assert h.hyphenate(word) == expected


def test_alphabet_version_one_matches_version_zero():
    patterns = {"ab": [0, 1, 0], "ca": [1, 0, 1]}
    h0 = Hyphenator.load_binary(build_hyb(patterns, 0))
    h1 = Hyphenator.load_binary(build_hyb(patterns, 1))
    for word in ["aaabbb", "cacacab", "abcabcabc", "zzzzzz"]:
        assert h0.hyphenate(word) == h1.hyphenate(word)


@pytest.mark.parametrize("version", [0, 1])
def test_alphabet_codes(version):
    patterns = HyphenationPatterns(build_hyb({"ab": [0, 1, 0]}, version))
    assert patterns.alphabet_codes("abz") == [0] + [_code(c) for c in "abz"] + [0]
    assert patterns.alphabet_codes("aBz") is None
    assert patterns.alphabet_codes("a1") is None


def test_unknown_alphabet_version_falls_back_to_soft():
    patterns = HyphenationPatterns(build_hyb({"ab": [0, 1, 0]}, 7))
    assert patterns.alphabet_codes("abc") is None
    h = Hyphenator(patterns)
    assert h.hyphenate("aaabbb") == [0] * 6


def test_unknown_character_falls_back_to_soft_hyphens():
    h = Hyphenator.load_binary(build_hyb({"ab": [0, 1, 0]}))
    assert h.hyphenate("aa\u00adabb") == [0, 0, 0, 1, 0, 0]


def test_without_patterns_uses_soft_hyphens():
    assert Hyphenator().hyphenate("hel\u00adlo") == [0, 0, 0, 0, 1, 0]


def test_short_word_not_hyphenated_by_patterns():
    h = Hyphenator.load_binary(build_hyb({"ab": [0, 1, 0]}))
    assert h.hyphenate("abab") == hyphenate_soft("abab")
    assert h.hyphenate("abab") == [0] * 4


def test_too_long_word_not_hyphenated_by_patterns():
    h = Hyphenator.load_binary(build_hyb({"ab": [0, 1, 0]}))
    longest = "aaab" * ((MAX_HYPHENATED_SIZE - 2) // 4) + "aa"
    assert len(longest) + 2 == MAX_HYPHENATED_SIZE
    assert 1 in h.hyphenate(longest)
    too_long = longest + "a"
    assert h.hyphenate(too_long) == [0] * len(too_long)


def test_code_unit_sequence_equals_string():
    h = Hyphenator.load_binary(build_hyb({"ab": [0, 1, 0]}))
    assert h.hyphenate([ord(c) for c in "aaabbb"]) == h.hyphenate("aaabbb")


def test_bytes_accepted_directly():
    data = build_hyb({"ab": [0, 1, 0]})
    assert Hyphenator(data).hyphenate("aaabbb") == Hyphenator.load_binary(data).hyphenate(
        "aaabbb"
    )


def test_result_length_matches_word():
    h = Hyphenator.load_binary(build_hyb({"a": [1, 1]}))
    for word in ["", "a", "aaaaaaaa", "x\u00ady"]:
        result = h.hyphenate(word)
        assert len(result) == len(word)
        assert set(result) <= {0, 1}


def test_hyphenate_soft():
    assert hyphenate_soft("") == []
    assert hyphenate_soft([0x61, 0xAD, 0x62]) == [0, 0, 1]
    assert hyphenate_soft("\u00ad") == [0]


def test_truncated_data_raises():
    with pytest.raises(ValueError):
        HyphenationPatterns(b"\x00" * 10)


def test_truncated_tables_raise():
    data = build_hyb({"ab": [0, 1, 0]})
    with pytest.raises(ValueError):
        HyphenationPatterns(data[:60])