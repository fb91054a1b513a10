from rest_framework import status


class StringsApiError(Exception):
    """
    Base class for every caller-input error raised by the strings API.

    Each subclass maps to a single HTTP status; views turn the exception into
    an ``{"error": ...}`` response without any ``data``.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Bad Request'

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class MissingField(StringsApiError):
    default_message = 'Bad Request: Missing "value" field'


class InvalidType(StringsApiError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = 'Unprocessable Entity: Invalid data type for "value" (must be string)'


class Conflict(StringsApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Conflict: String already exists in the system'


class NotFound(StringsApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Not Found: String does not exist in the system'


class InvalidFilterValue(StringsApiError):

    def __init__(self, filter_name, details=None):
        self.filter_name = filter_name
        super().__init__(
            f'Bad Request: Invalid query parameter value for {filter_name}',
            details=details,
        )


class BadQuery(StringsApiError):
    default_message = 'Bad Request: Unable to parse natural language query'


class ConflictingFilters(StringsApiError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = 'Unprocessable Entity: Query parsed but resulted in conflicting filters'
