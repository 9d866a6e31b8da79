from enum import Enum


class ErrorKind(str, Enum):
    INVALID_TYPE = 'invalid_type'
    EMPTY_VALUE = 'empty_value'
    DUPLICATE = 'duplicate'
    NOT_FOUND = 'not_found'
    INVALID_FILTER_PARAMETER = 'invalid_filter_parameter'
    UNPARSEABLE_QUERY = 'unparseable_query'
    CONFLICTING_FILTERS = 'conflicting_filters'
    INTERNAL = 'internal'


class AnalyzerError(Exception):
    """
    Single error type for every failure the analyzer can report.

    Callers branch on ``kind`` (a closed ``ErrorKind`` taxonomy) rather than
    on exception subclasses. ``field`` names the offending filter parameter
    when there is one; ``details`` carries extra context for the response
    body (e.g. the filters a query was interpreted as).
    """

    def __init__(self, kind, message, field=None, details=None):
        super().__init__(message)
        self.kind = ErrorKind(kind)
        self.message = message
        self.field = field
        self.details = details or {}

    def __repr__(self):
        return f"AnalyzerError({self.kind.value!r}, {self.message!r})"
