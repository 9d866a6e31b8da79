"""
Natural-language query translation.

A bounded, keyword-driven heuristic: each rule looks at the lower-cased
query text and fills in at most one field of a FilterPredicate. Rules are
independent of each other; within a rule the first pattern that matches
wins. The combined result goes through the FilterPredicate conflict check.
"""
import logging
import re

from .errors import AnalyzerError, ErrorKind
from .predicates import FilterPredicate

logger = logging.getLogger(__name__)

NUMBER_WORDS = {
    'one': 1, 'two': 2, 'three': 3, 'four': 4, 'five': 5,
    'six': 6, 'seven': 7, 'eight': 8, 'nine': 9, 'ten': 10,
}

_NUMBER = r'(\d+|' + '|'.join(NUMBER_WORDS) + r')'

WORD_COUNT_PATTERN = re.compile(r'\b' + _NUMBER + r'\s+words?\b')
WORD_COUNT_OF_PATTERN = re.compile(r'word count of (\d+)')
LONGER_PATTERN = re.compile(r'(?:longer than|more than)\s+(\d+)')
SHORTER_PATTERN = re.compile(r'(?:shorter than|less than)\s+(\d+)')
CONTAINS_PATTERN = re.compile(r'contain(?:s|ing)?\s+(?:the\s+letter\s+)?([a-z])\b')


def _to_int(token):
    if token in NUMBER_WORDS:
        return NUMBER_WORDS[token]
    return int(token)


def _palindrome(text, filters):
    if 'palindrom' in text:
        filters['is_palindrome'] = True


def _word_count(text, filters):
    if 'single word' in text:
        filters['word_count'] = 1
        return
    match = WORD_COUNT_PATTERN.search(text)
    if match:
        filters['word_count'] = _to_int(match.group(1))
        return
    match = WORD_COUNT_OF_PATTERN.search(text)
    if match:
        filters['word_count'] = int(match.group(1))


def _length(text, filters):
    # "longer than N" is exclusive, stored as the inclusive bound N + 1
    match_longer = LONGER_PATTERN.search(text)
    if match_longer:
        filters['min_length'] = int(match_longer.group(1)) + 1
    match_shorter = SHORTER_PATTERN.search(text)
    if match_shorter:
        filters['max_length'] = int(match_shorter.group(1)) - 1


def _contains(text, filters):
    match = CONTAINS_PATTERN.search(text)
    if match:
        filters['contains_character'] = match.group(1)
    elif 'first vowel' in text:
        filters['contains_character'] = 'a'


RULES = (_palindrome, _word_count, _length, _contains)


def extract_filters(text: str) -> dict:
    """Run every rule over the query and return the raw field values found."""
    text = text.lower()
    filters = {}
    for rule in RULES:
        rule(text, filters)
    return filters


def translate_natural_language(text) -> FilterPredicate:
    """
    Translate a free-text query into a FilterPredicate.

    Raises AnalyzerError with kind UNPARSEABLE_QUERY when no rule fires and
    CONFLICTING_FILTERS when the rules produce an impossible predicate.
    """
    if not isinstance(text, str) or not text.strip():
        raise AnalyzerError(ErrorKind.UNPARSEABLE_QUERY,
                            'Unable to parse natural language query.')

    filters = extract_filters(text)
    if not filters:
        logger.info("No filter rule matched query %r", text)
        raise AnalyzerError(ErrorKind.UNPARSEABLE_QUERY,
                            'Unable to parse natural language query.',
                            details={'parsed_filters': filters})

    try:
        return FilterPredicate(**filters)
    except AnalyzerError as exc:
        logger.info("Query %r produced conflicting filters %s", text, filters)
        raise AnalyzerError(exc.kind, exc.message,
                            details={'parsed_filters': filters}) from exc
