import django_filters

from .models import StringRecord
from .predicates import parse_filter_query


class StringRecordFilter(django_filters.FilterSet):
    """
    Structured query-parameter filtering for the list endpoint.

    No per-field filters are declared: the raw query parameters go through
    ``parse_filter_query`` so that the list endpoint and the
    natural-language endpoint share one predicate model. The accepted
    parameters are documented by the view's swagger ``manual_parameters``.
    """

    class Meta:
        model = StringRecord
        fields = []

    @property
    def predicate(self):
        if not hasattr(self, '_predicate'):
            self._predicate = parse_filter_query(self.data)
        return self._predicate

    def filter_queryset(self, queryset):
        return queryset.filter(self.predicate.to_q())
