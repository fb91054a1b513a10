import logging

from django.apps import apps
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import InvalidType, MissingField, StringsApiError
from .filters import filter_records
from .nl_filters import filter_by_natural_language
from .serializers import (
    ErrorResponseSerializer,
    NaturalLanguageResponseSerializer,
    StringAnalyzeSerializer,
    StringListResponseSerializer,
    StringRecordSerializer,
)

logger = logging.getLogger(__name__)


def error_response(exc):
    payload = {"error": exc.message}
    if exc.details is not None:
        payload["details"] = exc.details
    return Response(payload, status=exc.status_code)


class StoreMixin:

    @property
    def store(self):
        return apps.get_app_config('strings_api').store


# 1️⃣ POST & GET /strings


class StringAnalyzerView(StoreMixin, APIView):

    @swagger_auto_schema(
        request_body=StringAnalyzeSerializer,
        operation_summary="Analyze and store a new string",
        responses={
            201: StringRecordSerializer,
            400: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
            422: ErrorResponseSerializer,
        },
    )
    def post(self, request):
        serializer = StringAnalyzeSerializer(data=request.data)
        try:
            if not serializer.is_valid():
                codes = serializer.errors.get('value', [])
                code = getattr(codes[0], 'code', None) if codes else None
                if code in ('invalid', 'null'):
                    raise InvalidType()
                raise MissingField()

            record = self.store.create(serializer.validated_data['value'])
        except StringsApiError as exc:
            logger.warning("Rejected string creation: %s", exc.message)
            return error_response(exc)

        return Response(StringRecordSerializer(record).data, status=status.HTTP_201_CREATED)

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
        },
    )
    def get(self, request):
        try:
            records, filters_applied = filter_records(
                self.store.list(), request.query_params.dict()
            )
        except StringsApiError as exc:
            return error_response(exc)

        payload = {
            "data": StringRecordSerializer(records, many=True).data,
            "count": len(records),
        }
        # omitted entirely when nothing was filtered
        if filters_applied:
            payload["filters_applied"] = filters_applied
        return Response(payload, status=status.HTTP_200_OK)

# 2️⃣ GET &  DELETE  /strings/{string_value}


class StringDetailView(StoreMixin, APIView):

    @swagger_auto_schema(
        operation_summary="Get a stored string by its value",
        responses={200: StringRecordSerializer, 404: ErrorResponseSerializer},
    )
    def get(self, request, value):
        try:
            record = self.store.get_by_value(value)
        except StringsApiError as exc:
            return error_response(exc)

        return Response(StringRecordSerializer(record).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_summary="Delete a stored string by its value",
        responses={204: 'String deleted', 404: ErrorResponseSerializer},
    )
    def delete(self, request, value):
        try:
            self.store.delete_by_value(value)
        except StringsApiError as exc:
            return error_response(exc)

        return Response(status=status.HTTP_204_NO_CONTENT)


# 4️⃣ GET /strings/filter-by-natural-language

class NaturalLanguageFilterView(StoreMixin, APIView):
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
        query = request.query_params.get("query")
        try:
            result = filter_by_natural_language(self.store.list(), query)
        except StringsApiError as exc:
            return error_response(exc)

        result["data"] = StringRecordSerializer(result["data"], many=True).data
        return Response(result, status=status.HTTP_200_OK)
