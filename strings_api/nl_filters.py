"""
Heuristic translation of free-text queries into structured filters.

This is a fixed decision list, not a parser: each rule is a pattern and an
effect on the filter set, applied in order against the lower-cased query.

Supported phrases:
  - "single word"                  -> word_count=1
  - "not palindromic"              -> is_palindrome=False
  - "palindromic"                  -> is_palindrome=True
  - "first vowel"                  -> contains_character='a'
  - "letter z"                     -> contains_character='z'
  - "longer than <N> characters"   -> min_length=N+1
"""
import logging
import re

from rest_framework import serializers

from .exceptions import BadQuery, ConflictingFilters, InvalidFilterValue
from .filters import filter_records

logger = logging.getLogger(__name__)


def _set(name, value):
    def effect(filters, match):
        filters[name] = value
    return effect


def _set_if_unset(name, value):
    def effect(filters, match):
        filters.setdefault(name, value)
    return effect


def _min_length_after(filters, match):
    digits = match.group(1)
    # same bound the structured min_length filter gets from IntegerField
    if len(digits) > serializers.IntegerField.MAX_STRING_LENGTH:
        logger.warning("Length bound too long in query (%s digits)", len(digits))
        raise InvalidFilterValue('min_length', details=['String value too large.'])
    # "longer than 10" is strict, min_length is inclusive
    filters['min_length'] = int(digits) + 1


# Order matters: "not palindromic" must run before "palindromic", and
# "letter z" overwrites "first vowel" when both are present.
RULES = (
    (re.compile(r'single word'), _set('word_count', 1)),
    (re.compile(r'not palindromic'), _set('is_palindrome', False)),
    (re.compile(r'palindromic'), _set_if_unset('is_palindrome', True)),
    (re.compile(r'first vowel'), _set('contains_character', 'a')),
    (re.compile(r'letter z'), _set('contains_character', 'z')),
    (re.compile(r'longer than (\d+) characters', re.ASCII), _min_length_after),
)


def translate_query(query):
    """Map a free-text query onto the structured filter vocabulary."""
    if query is None or not query.strip():
        raise BadQuery()

    query_lower = query.lower()
    parsed_filters = {}
    for pattern, effect in RULES:
        match = pattern.search(query_lower)
        if match:
            effect(parsed_filters, match)

    logger.debug("Interpreted %r as %s", query, parsed_filters)
    return parsed_filters


def check_conflicts(parsed_filters):
    # Only this pair is treated as contradictory; e.g. min_length > max_length
    # is deliberately not checked.
    if parsed_filters.get('word_count') == 1 and parsed_filters.get('is_palindrome') is False:
        logger.warning("Conflicting filters: %s", parsed_filters)
        raise ConflictingFilters()


def filter_by_natural_language(records, query):
    """
    Translate ``query`` and apply it to ``records``.

    Returns a dict with ``data``, ``count`` and ``interpreted_query``.
    """
    parsed_filters = translate_query(query)
    check_conflicts(parsed_filters)
    matches, _ = filter_records(records, parsed_filters)

    return {
        'data': matches,
        'count': len(matches),
        'interpreted_query': {
            'original': query,
            'parsed_filters': parsed_filters,
        },
    }
