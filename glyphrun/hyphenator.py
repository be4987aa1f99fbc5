"""Liang-style hyphenation driven by a compiled binary pattern file.

The binary file starts with a header of six little-endian 32-bit words
(magic, version, alphabet offset, trie offset, pattern offset, file size),
followed by the alphabet, trie and pattern tables it points to.
"""

from __future__ import annotations

import bisect
import struct
from collections.abc import Iterator, Sequence

__all__ = [
    "CHAR_SOFT_HYPHEN",
    "MIN_PREFIX",
    "MIN_SUFFIX",
    "MAX_HYPHENATED_SIZE",
    "HyphenationPatterns",
    "Hyphenator",
    "hyphenate_soft",
]

CHAR_SOFT_HYPHEN = 0x00AD
MIN_PREFIX = 2
MIN_SUFFIX = 3
MAX_HYPHENATED_SIZE = 64

_HEADER = struct.Struct("<6I")
_U32 = struct.Struct("<I")
_ALPHABET0 = struct.Struct("<3I")
_ALPHABET1 = struct.Struct("<2I")
_TRIE = struct.Struct("<6I")
_PATTERN = struct.Struct("<4I")


def _code_units(word: str | Sequence[int]) -> Sequence[int]:
    """Return UTF-16 code units for a string, or the sequence unchanged."""
    if isinstance(word, str):
        data = word.encode("utf-16-le", "surrogatepass")
        return struct.unpack(f"<{len(data) // 2}H", data)
    return word


def _u32_array(data: bytes, offset: int, count: int) -> tuple[int, ...]:
    return struct.unpack_from(f"<{count}I", data, offset)


class HyphenationPatterns:
    """Parsed tables of a binary hyphenation pattern file."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        try:
            self._parse()
        except struct.error as exc:
            raise ValueError(f"truncated hyphenation pattern data: {exc}") from exc

    def _parse(self) -> None:
        data = self._data
        (
            self.magic,
            self.version,
            alphabet_offset,
            trie_offset,
            pattern_offset,
            self.file_size,
        ) = _HEADER.unpack_from(data, 0)

        (self.alphabet_version,) = _U32.unpack_from(data, alphabet_offset)
        self._alphabet_min = 0
        self._alphabet_max = 0
        self._alphabet_table = b""
        self._alphabet_entries: tuple[int, ...] = ()
        if self.alphabet_version == 0:
            _, self._alphabet_min, self._alphabet_max = _ALPHABET0.unpack_from(
                data, alphabet_offset
            )
            size = max(self._alphabet_max - self._alphabet_min, 0)
            start = alphabet_offset + _ALPHABET0.size
            self._alphabet_table = data[start : start + size]
            if len(self._alphabet_table) < size:
                raise ValueError("truncated alphabet table")
        elif self.alphabet_version == 1:
            _, count = _ALPHABET1.unpack_from(data, alphabet_offset)
            self._alphabet_entries = _u32_array(data, alphabet_offset + _ALPHABET1.size, count)

        (
            _,
            self._char_mask,
            self._link_shift,
            self._link_mask,
            self._pattern_shift,
            count,
        ) = _TRIE.unpack_from(data, trie_offset)
        self._trie = _u32_array(data, trie_offset + _TRIE.size, count)

        _, count, pool_offset, _pool_size = _PATTERN.unpack_from(data, pattern_offset)
        self._pattern_entries = _u32_array(data, pattern_offset + _PATTERN.size, count)
        self._pool_base = pattern_offset + pool_offset

    def alphabet_codes(self, word: str | Sequence[int]) -> list[int] | None:
        """Map a word to alphabet codes padded with 0 at both ends.

        Returns None if any character is not in the alphabet or the alphabet
        version is unknown.
        """
        units = _code_units(word)
        codes = [0]
        if self.alphabet_version == 0:
            for c in units:
                if not self._alphabet_min <= c < self._alphabet_max:
                    return None
                code = self._alphabet_table[c - self._alphabet_min]
                if code == 0:
                    return None
                codes.append(code)
        elif self.alphabet_version == 1:
            entries = self._alphabet_entries
            for c in units:
                i = bisect.bisect_left(entries, c << 11)
                if i == len(entries) or entries[i] >> 11 != c:
                    return None
                codes.append(entries[i] & 0x7FF)
        else:
            return None
        codes.append(0)
        return codes

    def _trie_at(self, index: int) -> int | None:
        return self._trie[index] if 0 <= index < len(self._trie) else None

    def _pattern(self, pat_ix: int) -> tuple[bytes, int]:
        try:
            entry = self._pattern_entries[pat_ix]
        except IndexError:
            raise ValueError(f"pattern index {pat_ix} out of range") from None
        length = entry >> 26
        shift = (entry >> 20) & 0x3F
        start = self._pool_base + (entry & 0xFFFFF)
        values = self._data[start : start + length]
        if len(values) < length:
            raise ValueError("truncated pattern pool")
        return values, shift

    def _matches(self, codes: Sequence[int], i: int) -> Iterator[tuple[int, bytes, int]]:
        """Yield (end index, values, shift) for patterns matching codes from ``i``."""
        node = 0
        for j, c in enumerate(codes[i:], start=i):
            entry = self._trie_at(node + c)
            if entry is None or (entry & self._char_mask) != c:
                return
            node = (entry & self._link_mask) >> self._link_shift
            node_entry = self._trie_at(node)
            pat_ix = 0 if node_entry is None else node_entry >> self._pattern_shift
            if pat_ix:
                values, shift = self._pattern(pat_ix)
                yield j, values, shift


def hyphenate_soft(word: str | Sequence[int]) -> list[int]:
    """Allow hyphenation only right after soft hyphens present in the word."""
    units = _code_units(word)
    if not units:
        return []
    return [0] + [int(c == CHAR_SOFT_HYPHEN) for c in units[:-1]]


class Hyphenator:
    """Find hyphenation points of single words."""

    def __init__(
        self,
        pattern_data: HyphenationPatterns | bytes | None = None,
        min_prefix: int = MIN_PREFIX,
        min_suffix: int = MIN_SUFFIX,
        max_hyphenated_size: int = MAX_HYPHENATED_SIZE,
    ) -> None:
        if pattern_data is not None and not isinstance(pattern_data, HyphenationPatterns):
            pattern_data = HyphenationPatterns(pattern_data)
        self.patterns = pattern_data
        self.min_prefix = min_prefix
        self.min_suffix = min_suffix
        self.max_hyphenated_size = max_hyphenated_size

    @classmethod
    def load_binary(cls, data: bytes) -> Hyphenator:
        """Create a hyphenator from the bytes of a binary pattern file."""
        return cls(HyphenationPatterns(data))

    def hyphenate(self, word: str | Sequence[int]) -> list[int]:
        """Return one value per code unit; 1 means a hyphen may go before it."""
        units = _code_units(word)
        padded_len = len(units) + 2  # start and stop codes count for one each
        if (
            self.patterns is not None
            and len(units) >= self.min_prefix + self.min_suffix
            and padded_len <= self.max_hyphenated_size
        ):
            codes = self.patterns.alphabet_codes(units)
            if codes is not None:
                return self._hyphenate_from_codes(codes)
        return hyphenate_soft(units)

    def _hyphenate_from_codes(self, codes: Sequence[int]) -> list[int]:
        """Apply the patterns to padded alphabet codes."""
        padded_len = len(codes)
        result = [0] * (padded_len - 2)
        max_offset = padded_len - self.min_suffix - 1
        for i in range(padded_len - 1):
            for j, values, shift in self.patterns._matches(codes, i):
                # Index in result lining up with the first pattern value.
                offset = j + 1 - (len(values) + shift)
                lo = max(self.min_prefix - offset, 0)
                hi = min(len(values), max_offset - offset)
                for k in range(lo, hi):
                    result[offset + k] = max(result[offset + k], values[k])
        # Values outside [min_prefix, max_offset) were never touched and stay 0.
        lo, hi = self.min_prefix, max(max_offset, self.min_prefix)
        result[lo:hi] = [v & 1 for v in result[lo:hi]]
        return result