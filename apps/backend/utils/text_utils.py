"""Korean text helpers shared by the review rules."""

import re
from typing import Any, Dict, Iterable, List, Optional

# Precomposed Hangul syllables: 0xAC00 + (initial * 21 + medial) * 28 + final
HANGUL_BASE = 0xAC00
HANGUL_LAST = 0xD7A3
FINAL_CONSONANT_COUNT = 28
FINAL_BIEUP = 17  # ㅂ
FINAL_NIEUN = 4  # ㄴ

_WHITESPACE_RE = re.compile(r"\s+")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def is_hangul_syllable(ch: str) -> bool:
    return len(ch) == 1 and HANGUL_BASE <= ord(ch) <= HANGUL_LAST


def final_consonant(ch: str) -> int:
    """Index of the syllable's final consonant (0 = none, -1 = not a syllable)."""
    if not is_hangul_syllable(ch):
        return -1
    return (ord(ch) - HANGUL_BASE) % FINAL_CONSONANT_COUNT


def with_final_consonant(ch: str, final_index: int) -> str:
    if not is_hangul_syllable(ch):
        return ch
    code = ord(ch) - HANGUL_BASE
    return chr(HANGUL_BASE + code - (code % FINAL_CONSONANT_COUNT) + final_index)


def remove_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub("", text or "")


def parse_leading_int(value: Any) -> Optional[int]:
    """
    Parse an integer prefix the way loosely typed session numbers are stored:
    "12", " 12", "12차시" -> 12; "", None, "차시" -> None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value else None
    match = _LEADING_INT_RE.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def non_empty_values(record: Dict[str, Any], fields: Iterable[str]) -> List[str]:
    """Trimmed, non-empty string values of the given fields, in field order."""
    values: List[str] = []
    for field in fields:
        value = record.get(field)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            values.append(text)
    return values
