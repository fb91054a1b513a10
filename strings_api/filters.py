import logging

from .exceptions import InvalidFilterValue
from .serializers import FilterParamsSerializer

logger = logging.getLogger(__name__)


def _is_palindrome(record, expected):
    return record.properties.is_palindrome == expected


def _min_length(record, bound):
    return record.properties.length >= bound


def _max_length(record, bound):
    return record.properties.length <= bound


def _word_count(record, expected):
    return record.properties.word_count == expected


def _contains_character(record, char):
    # case-sensitive, unlike the palindrome check
    return char in record.value


def parse_filters(params):
    """
    Validate raw filter params into a typed filter set.

    Raises InvalidFilterValue naming the first filter that fails to parse.
    """
    serializer = FilterParamsSerializer(data=dict(params))
    if not serializer.is_valid():
        name, messages = next(iter(serializer.errors.items()))
        logger.warning("Invalid value for filter %s: %s", name, messages)
        raise InvalidFilterValue(name, details=messages)
    return dict(serializer.validated_data)


class StringRecordFilter:
    """
    Structured filters over StringRecords, combined with logical AND.

    ``applied`` echoes the constraints that were actually given, or is None
    when nothing was filtered.
    """
    predicates = {
        'is_palindrome': _is_palindrome,
        'min_length': _min_length,
        'max_length': _max_length,
        'word_count': _word_count,
        'contains_character': _contains_character,
    }

    def __init__(self, params=None):
        self.filters = parse_filters(params or {})

    @property
    def applied(self):
        return dict(self.filters) or None

    def matches(self, record):
        return all(
            self.predicates[name](record, value)
            for name, value in self.filters.items()
        )

    def filter(self, records):
        return [record for record in records if self.matches(record)]


def filter_records(records, params=None):
    """Return ``(matching_records, filters_applied)`` for ``params``."""
    record_filter = StringRecordFilter(params)
    logger.debug("Applying filters %s", record_filter.filters)
    return record_filter.filter(records), record_filter.applied
