import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from .errors import AnalyzerError, ErrorKind
from .models import StringCharacter, StringRecord
from .predicates import FilterPredicate, filter_records
from .utils import AnalyzedEntry

logger = logging.getLogger(__name__)


def duplicate_error():
    return AnalyzerError(ErrorKind.DUPLICATE, 'String already exists.')


def collision_error(entry_id):
    logger.error("Content hash %s already belongs to a different value", entry_id)
    return AnalyzerError(ErrorKind.INTERNAL,
                         'Content identifier collision with a different value.')


class StringRepository:
    """
    Storage collaborator for analyzed entries.

    ``save`` must enforce uniqueness of ``value`` atomically and report a
    violation as an AnalyzerError of kind DUPLICATE.
    """

    def save(self, entry: AnalyzedEntry) -> AnalyzedEntry:
        raise NotImplementedError

    def find_by_value(self, value: str):
        raise NotImplementedError

    def find_by_id(self, entry_id: str):
        raise NotImplementedError

    def remove(self, entry: AnalyzedEntry) -> None:
        raise NotImplementedError

    def query_by_predicate(self, predicate: FilterPredicate):
        raise NotImplementedError


class DjangoStringRepository(StringRepository):
    """Repository backed by the StringRecord model, pushing predicates down as Q objects."""

    def __init__(self, queryset=None):
        self._queryset = queryset

    @property
    def queryset(self):
        if self._queryset is None:
            return StringRecord.objects.all()
        return self._queryset.all()

    def save(self, entry):
        record = StringRecord.from_properties(entry.value, entry.properties)
        try:
            with transaction.atomic():
                record.save(force_insert=True)
                StringCharacter.objects.bulk_create(record.build_characters())
        except IntegrityError:
            # the storage constraint is authoritative; tell a duplicate
            # value apart from an identifier clash
            if self.find_by_value(entry.value) is not None:
                raise duplicate_error()
            if self.find_by_id(entry.id) is not None:
                raise collision_error(entry.id)
            raise
        return record.to_entry()

    def find_by_value(self, value):
        record = self.queryset.filter(value=value).first()
        return record.to_entry() if record is not None else None

    def find_by_id(self, entry_id):
        record = self.queryset.filter(pk=entry_id).first()
        return record.to_entry() if record is not None else None

    def remove(self, entry):
        self.queryset.filter(pk=entry.id, value=entry.value).delete()

    def query_by_predicate(self, predicate):
        return [record.to_entry() for record in self.queryset.filter(predicate.to_q())]


class InMemoryStringRepository(StringRepository):
    """Dictionary-backed repository evaluating predicates in memory."""

    def __init__(self):
        self._entries = {}

    def save(self, entry):
        existing = self._entries.get(entry.id)
        if existing is not None:
            if existing.value == entry.value:
                raise duplicate_error()
            raise collision_error(entry.id)
        if entry.created_at is None:
            entry = AnalyzedEntry(id=entry.id, value=entry.value,
                                  properties=entry.properties,
                                  created_at=timezone.now())
        self._entries[entry.id] = entry
        return entry

    def find_by_value(self, value):
        for entry in self._entries.values():
            if entry.value == value:
                return entry
        return None

    def find_by_id(self, entry_id):
        return self._entries.get(entry_id)

    def remove(self, entry):
        self._entries.pop(entry.id, None)

    def query_by_predicate(self, predicate):
        entries = sorted(self._entries.values(),
                         key=lambda e: e.created_at, reverse=True)
        return list(filter_records(entries, predicate))
