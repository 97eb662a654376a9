"""Turkish-aware text helpers and the shared numeric-aware comparator.

Every ordering in the rollup (standard codes, condition codes, action
codes, unknown component codes) goes through ``compare_natural``:

* codes are split into digit and non-digit runs;
* digit runs compare by integer value, so ``"10"`` sorts after ``"9"``;
* text runs compare with the Turkish alphabet (``ç`` after ``c``, ``ı``
  before ``i``) case-insensitively;
* a digit run facing a text run falls back to plain collation of the two
  runs;
* a full tie is broken by the raw strings so the order stays total.
"""

from __future__ import annotations

import functools
import re
import unicodedata

TURKISH_ALPHABET = "abcçdefgğhıijklmnoöpqrsştuüvwxyz"
_ALPHABET_INDEX = {ch: i for i, ch in enumerate(TURKISH_ALPHABET)}

_CHUNK_RE = re.compile(r"([0-9]+)")

_ASCII_FOLD = str.maketrans({
    "ç": "c", "Ç": "C",
    "ğ": "g", "Ğ": "G",
    "ı": "i", "İ": "I",
    "ö": "o", "Ö": "O",
    "ş": "s", "Ş": "S",
    "ü": "u", "Ü": "U",
})


def turkish_lower(text: str) -> str:
    """Lower-case with the dotted/dotless I rules of Turkish."""
    return text.replace("I", "ı").replace("İ", "i").lower()


def turkish_upper(text: str) -> str:
    """Upper-case with the dotted/dotless I rules of Turkish."""
    return text.replace("i", "İ").replace("ı", "I").upper()


def contains_folded(haystack: str | None, needle: str) -> bool:
    """Case-insensitive substring test using Turkish case folding."""
    if not haystack:
        return False
    return turkish_lower(needle) in turkish_lower(haystack)


def ascii_fold(text: str) -> str:
    """Strip diacritics down to printable ASCII."""
    folded = unicodedata.normalize("NFKD", text.translate(_ASCII_FOLD))
    return "".join(ch for ch in folded if not unicodedata.combining(ch)).encode("ascii", "ignore").decode("ascii")


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with an ellipsis."""
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    if limit <= 3:
        return text[:limit]
    return text[: limit - 3].rstrip() + "..."


def _char_key(ch: str) -> tuple[int, int]:
    lower = turkish_lower(ch)
    if lower in _ALPHABET_INDEX:
        return (2, _ALPHABET_INDEX[lower])
    if ch.isdigit():
        return (1, ord(ch))
    if ch.isalpha():
        return (3, ord(lower))
    return (0, ord(ch))


def collation_key(text: str) -> tuple[tuple[int, int], ...]:
    """Primary (case-insensitive) Turkish collation key for a text run."""
    return tuple(_char_key(ch) for ch in text)


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _is_number(chunk: str) -> bool:
    # Only ASCII digit runs are split out; other Unicode digits are text
    return chunk.isascii() and chunk.isdigit()


def _split(text: str) -> list[str]:
    return [chunk for chunk in _CHUNK_RE.split(text) if chunk]


def compare_natural(a: str | None, b: str | None) -> int:
    """Numeric-aware Turkish comparison of two codes; returns -1, 0 or 1.

    ``None`` and empty strings sort before any non-empty code.
    """
    a = a or ""
    b = b or ""
    if a == b:
        return 0

    for left, right in zip(_split(a), _split(b)):
        if _is_number(left) and _is_number(right):
            result = _cmp(int(left), int(right))
        else:
            result = _cmp(collation_key(left), collation_key(right))
        if result:
            return result

    result = _cmp(len(_split(a)), len(_split(b)))
    if result:
        return result
    return _cmp(a, b)


natural_key = functools.cmp_to_key(compare_natural)
