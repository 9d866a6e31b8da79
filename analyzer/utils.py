import hashlib
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .errors import AnalyzerError, ErrorKind

_NON_ALNUM = re.compile(r'[^a-z0-9]')


@dataclass(frozen=True)
class PropertyRecord:
    length: int
    is_palindrome: bool
    unique_characters: int
    word_count: int
    sha256_hash: str
    character_frequency_map: dict = field(default_factory=dict)

    @property
    def content_hash(self) -> str:
        return self.sha256_hash

    def as_dict(self) -> dict:
        return {
            'length': self.length,
            'is_palindrome': self.is_palindrome,
            'unique_characters': self.unique_characters,
            'word_count': self.word_count,
            'sha256_hash': self.sha256_hash,
            'character_frequency_map': dict(self.character_frequency_map),
        }


@dataclass(frozen=True)
class AnalyzedEntry:
    id: str
    value: str
    properties: PropertyRecord
    created_at: Optional[datetime] = None


def compute_sha256(value: str) -> str:
    """Compute SHA-256 hash for the string."""
    return hashlib.sha256(value.encode('utf-8')).hexdigest()


def is_palindrome(value: str) -> bool:
    """Check if string reads the same forward and backward, ignoring case and anything but ASCII letters/digits."""
    normalized = _NON_ALNUM.sub('', value.lower())
    return normalized == normalized[::-1]


def is_raw_palindrome(value: str) -> bool:
    """Check if the raw characters read the same forward and backward."""
    return value == value[::-1]


PALINDROME_CHECKS = {
    'normalized': is_palindrome,
    'raw': is_raw_palindrome,
}


def get_palindrome_check(mode: str):
    try:
        return PALINDROME_CHECKS[mode]
    except KeyError:
        raise ValueError(f"Unknown palindrome mode: {mode!r}")


def count_words(value: str) -> int:
    # str.split() with no separator trims and collapses whitespace runs
    return len(value.split())


def _check_text(value):
    if not isinstance(value, str):
        raise AnalyzerError(ErrorKind.INVALID_TYPE,
                            'Invalid data type for "value" (must be string).')
    # lone surrogates have no UTF-8 encoding, so they can be neither hashed nor stored
    try:
        value.encode('utf-8')
    except UnicodeEncodeError:
        raise AnalyzerError(ErrorKind.INVALID_TYPE,
                            '"value" must be valid Unicode text (unpaired surrogate found).')


def validate_value(value):
    _check_text(value)
    if not value.strip():
        raise AnalyzerError(ErrorKind.EMPTY_VALUE,
                            '"value" must not be empty.')
    return value


def identify(value: str) -> str:
    """Return the content identifier of a value: its SHA-256 hex digest."""
    _check_text(value)
    return compute_sha256(value)


def analyze_string(value: str, palindrome_check=is_palindrome) -> PropertyRecord:
    """Compute all required string properties."""
    validate_value(value)

    return PropertyRecord(
        length=len(value),
        is_palindrome=palindrome_check(value),
        unique_characters=len(set(value)),
        word_count=count_words(value),
        sha256_hash=compute_sha256(value),
        character_frequency_map=dict(Counter(value)),
    )
