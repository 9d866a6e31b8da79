import logging

from django.conf import settings

from .errors import AnalyzerError, ErrorKind
from .nlp import translate_natural_language
from .predicates import FilterPredicate
from .repository import DjangoStringRepository, duplicate_error
from .utils import AnalyzedEntry, analyze_string, get_palindrome_check

logger = logging.getLogger(__name__)


def get_palindrome_mode():
    return getattr(settings, 'STRING_ANALYZER', {}).get('PALINDROME_MODE', 'normalized')


class StringAnalyzerService:
    """
    Write and read paths over an injected StringRepository.

    The service holds no connection of its own; every storage call goes
    through ``repository``.
    """

    def __init__(self, repository=None, palindrome_mode=None):
        self.repository = repository if repository is not None else DjangoStringRepository()
        self.palindrome_check = get_palindrome_check(palindrome_mode or get_palindrome_mode())

    def create(self, value) -> AnalyzedEntry:
        properties = analyze_string(value, palindrome_check=self.palindrome_check)

        if self.repository.find_by_value(value) is not None:
            logger.info("Rejected duplicate string %s", properties.sha256_hash)
            raise duplicate_error()

        entry = self.repository.save(AnalyzedEntry(
            id=properties.sha256_hash,
            value=value,
            properties=properties,
        ))
        logger.info("Stored analyzed string %s (length=%d)", entry.id, properties.length)
        return entry

    def get(self, value) -> AnalyzedEntry:
        entry = self.repository.find_by_value(value)
        if entry is None:
            raise AnalyzerError(ErrorKind.NOT_FOUND, 'String not found.')
        return entry

    def delete(self, value) -> None:
        entry = self.get(value)
        self.repository.remove(entry)
        logger.info("Deleted analyzed string %s", entry.id)

    def list(self, predicate=None):
        return self.repository.query_by_predicate(predicate or FilterPredicate())

    def filter_by_natural_language(self, query):
        predicate = translate_natural_language(query)
        return predicate, self.list(predicate)
