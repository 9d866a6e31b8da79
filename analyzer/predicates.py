import re
from dataclasses import dataclass, fields
from typing import Optional

from django.db.models import Q

from .errors import AnalyzerError, ErrorKind

FILTER_FIELDS = ('is_palindrome', 'min_length', 'max_length',
                 'word_count', 'contains_character')

_DIGITS = re.compile(r'^\d+$')


@dataclass(frozen=True)
class FilterPredicate:
    """
    AND-composition of optional constraints over a PropertyRecord.

    A field left as None imposes no constraint, so an empty predicate
    matches every record.
    """
    is_palindrome: Optional[bool] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    word_count: Optional[int] = None
    contains_character: Optional[str] = None

    def __post_init__(self):
        if (self.min_length is not None and self.max_length is not None
                and self.min_length > self.max_length):
            raise AnalyzerError(
                ErrorKind.CONFLICTING_FILTERS,
                'Conflicting filters detected: min_length cannot be greater than max_length.')
        if self.word_count is not None and self.word_count < 0:
            raise AnalyzerError(
                ErrorKind.CONFLICTING_FILTERS,
                'Conflicting filters detected: word_count cannot be negative.')
        if self.contains_character is not None:
            object.__setattr__(self, 'contains_character',
                               self.contains_character.lower())

    def is_empty(self) -> bool:
        return not self.as_dict()

    def as_dict(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def to_q(self) -> Q:
        """Storage-side equivalent of ``matches`` over StringRecord columns."""
        filters = Q()
        if self.is_palindrome is not None:
            filters &= Q(is_palindrome=self.is_palindrome)
        if self.min_length is not None:
            filters &= Q(length__gte=self.min_length)
        if self.max_length is not None:
            filters &= Q(length__lte=self.max_length)
        if self.word_count is not None:
            filters &= Q(word_count=self.word_count)
        if self.contains_character is not None:
            # exact match on per-character rows; avoids JSON path quoting of the key
            filters &= Q(characters__character=self.contains_character)
        return filters


def matches(record, predicate: FilterPredicate) -> bool:
    """Evaluate a predicate against a PropertyRecord in memory."""
    if predicate.is_palindrome is not None and record.is_palindrome != predicate.is_palindrome:
        return False
    if predicate.min_length is not None and record.length < predicate.min_length:
        return False
    if predicate.max_length is not None and record.length > predicate.max_length:
        return False
    if predicate.word_count is not None and record.word_count != predicate.word_count:
        return False
    if predicate.contains_character is not None:
        if record.character_frequency_map.get(predicate.contains_character, 0) < 1:
            return False
    return True


def filter_records(records, predicate: FilterPredicate):
    """Yield the records (or entries carrying ``properties``) matching the predicate."""
    for record in records:
        props = getattr(record, 'properties', record)
        if matches(props, predicate):
            yield record


def _invalid(field, message):
    return AnalyzerError(ErrorKind.INVALID_FILTER_PARAMETER, message, field=field)


def _parse_bool(field, raw):
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.lower() in ('true', 'false'):
        return raw.lower() == 'true'
    raise _invalid(field, f'"{field}" must be true or false.')


def _parse_non_negative_int(field, raw):
    # bool is an int subclass, reject it explicitly
    if isinstance(raw, int) and not isinstance(raw, bool):
        if raw < 0:
            raise _invalid(field, f'"{field}" must be a non-negative integer.')
        return raw
    if isinstance(raw, str) and _DIGITS.match(raw):
        return int(raw)
    raise _invalid(field, f'"{field}" must be a non-negative integer.')


def _parse_character(field, raw):
    if isinstance(raw, str) and len(raw) == 1:
        return raw.lower()
    raise _invalid(field, f'"{field}" must be exactly one character.')


_PARSERS = {
    'is_palindrome': _parse_bool,
    'min_length': _parse_non_negative_int,
    'max_length': _parse_non_negative_int,
    'word_count': _parse_non_negative_int,
    'contains_character': _parse_character,
}


def parse_filter_query(params) -> FilterPredicate:
    """
    Build a FilterPredicate from structured filter parameters.

    ``params`` is any mapping (a QueryDict included) of raw query-string
    values or typed primitives. Unknown keys are ignored; each known key
    is validated on its own and reported by name when invalid.
    """
    parsed = {}
    for name in FILTER_FIELDS:
        if name not in params:
            continue
        raw = params.get(name)
        parsed[name] = _PARSERS[name](name, raw)
    return FilterPredicate(**parsed)
