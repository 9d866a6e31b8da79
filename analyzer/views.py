import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .errors import AnalyzerError, ErrorKind
from .filters import StringRecordFilter
from .models import StringRecord
from .repository import DjangoStringRepository
from .serializers import (
    AnalyzedEntrySerializer,
    ErrorResponseSerializer,
    NaturalLanguageResponseSerializer,
    StringAnalyzeSerializer,
    StringListResponseSerializer,
)
from .services import StringAnalyzerService

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.INVALID_TYPE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.EMPTY_VALUE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_FILTER_PARAMETER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNPARSEABLE_QUERY: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICTING_FILTERS: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(exc, **extra):
    if exc.kind == ErrorKind.INTERNAL:
        # never leak internal detail to the caller
        body = {'error': 'Internal server error'}
    else:
        body = {'error': exc.message}
        if exc.field:
            body['field'] = exc.field
    body.update(extra)
    return Response(body, status=STATUS_BY_KIND[exc.kind])


def internal_error_response():
    return Response({'error': 'Internal server error'},
                    status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class ServiceMixin:
    def get_service(self):
        return StringAnalyzerService(DjangoStringRepository())


# 1️⃣ POST & GET /strings


class StringAnalyzerView(ServiceMixin, generics.ListAPIView):
    queryset = StringRecord.objects.all().order_by('-created_at')
    serializer_class = AnalyzedEntrySerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = StringRecordFilter

    @swagger_auto_schema(
        request_body=StringAnalyzeSerializer,
        operation_summary="Analyze and store a new string",
        responses={
            201: AnalyzedEntrySerializer,
            400: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
            422: ErrorResponseSerializer,
        },
    )
    def post(self, request):
        if not isinstance(request.data, dict) or 'value' not in request.data:
            return error_response(AnalyzerError(
                ErrorKind.EMPTY_VALUE, 'Invalid request body or missing "value" field.'))

        try:
            entry = self.get_service().create(request.data['value'])
        except AnalyzerError as exc:
            if exc.kind == ErrorKind.INTERNAL:
                logger.error("Failed to store string: %s", exc.message)
            return error_response(exc)
        except Exception as e:
            logger.exception("Unexpected error while analyzing string: %s", e)
            return internal_error_response()

        return Response(AnalyzedEntrySerializer(entry).data, status=status.HTTP_201_CREATED)

    @swagger_auto_schema(
        operation_summary="List all analyzed strings",
        manual_parameters=[
            openapi.Parameter(
                "is_palindrome",
                openapi.IN_QUERY,
                description="Filter by palindrome (true/false)",
                type=openapi.TYPE_BOOLEAN,
            ),
            openapi.Parameter(
                "min_length",
                openapi.IN_QUERY,
                description="Minimum string length",
                type=openapi.TYPE_INTEGER,
            ),
            openapi.Parameter(
                "max_length",
                openapi.IN_QUERY,
                description="Maximum string length",
                type=openapi.TYPE_INTEGER,
            ),
            openapi.Parameter(
                "word_count",
                openapi.IN_QUERY,
                description="Exact word count",
                type=openapi.TYPE_INTEGER,
            ),
            openapi.Parameter(
                "contains_character",
                openapi.IN_QUERY,
                description="Filter strings that contain this character",
                type=openapi.TYPE_STRING,
            ),
        ],
        responses={
            200: StringListResponseSerializer,
            400: ErrorResponseSerializer,
            422: ErrorResponseSerializer,
        },
    )
    def get(self, request, *args, **kwargs):
        try:
            filterset = DjangoFilterBackend().get_filterset(request, self.get_queryset(), self)
            filtered_queryset = filterset.qs
            predicate = filterset.predicate
            entries = [record.to_entry() for record in filtered_queryset]
        except AnalyzerError as exc:
            return error_response(exc)
        except Exception as e:
            logger.exception("Unexpected error while listing strings: %s", e)
            return internal_error_response()

        serializer = self.get_serializer(entries, many=True)

        return Response({
            "data": serializer.data,
            "count": len(entries),
            "filters_applied": predicate.as_dict(),
        }, status=status.HTTP_200_OK)

# 2️⃣ GET &  DELETE  /strings/{string_value}


class StringDetailView(ServiceMixin, APIView):

    @swagger_auto_schema(
        operation_summary="Get an analyzed string by its value",
        responses={200: AnalyzedEntrySerializer, 404: ErrorResponseSerializer},
    )
    def get(self, request, value):
        try:
            entry = self.get_service().get(value)
        except AnalyzerError as exc:
            return error_response(exc)
        except Exception as e:
            logger.exception("Unexpected error while fetching string: %s", e)
            return internal_error_response()

        return Response(AnalyzedEntrySerializer(entry).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_summary="Delete an analyzed string by its value",
        responses={204: 'Deleted', 404: ErrorResponseSerializer},
    )
    def delete(self, request, value):
        try:
            self.get_service().delete(value)
        except AnalyzerError as exc:
            return error_response(exc)
        except Exception as e:
            logger.exception("Unexpected error while deleting string: %s", e)
            return internal_error_response()
        return Response(status=status.HTTP_204_NO_CONTENT)


# 3️⃣ GET /strings/filter-by-natural-language

class NaturalLanguageFilterView(ServiceMixin, APIView):
    @swagger_auto_schema(
        operation_summary="Filter analyzed strings using natural language queries",
        manual_parameters=[
            openapi.Parameter(
                "query",
                openapi.IN_QUERY,
                description="Natural language query, e.g. 'all single word palindromic strings'",
                type=openapi.TYPE_STRING,
                required=True,
            )
        ],
        responses={
            200: NaturalLanguageResponseSerializer,
            400: ErrorResponseSerializer,
            422: ErrorResponseSerializer,
        },
    )
    def get(self, request):
        query = request.query_params.get("query", "")
        if not query.strip():
            return error_response(AnalyzerError(
                ErrorKind.UNPARSEABLE_QUERY, 'Query parameter is required.', field='query'))

        try:
            predicate, entries = self.get_service().filter_by_natural_language(query)
        except AnalyzerError as exc:
            return error_response(exc, interpreted_query={
                "original": query,
                "parsed_filters": exc.details.get("parsed_filters", {}),
            })
        except Exception as e:
            logger.exception("Unexpected error in natural language filter: %s", e)
            return internal_error_response()

        return Response({
            "data": AnalyzedEntrySerializer(entries, many=True).data,
            "count": len(entries),
            "interpreted_query": {
                "original": query,
                "parsed_filters": predicate.as_dict(),
            }
        }, status=status.HTTP_200_OK)
