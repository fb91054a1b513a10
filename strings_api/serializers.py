from django.core.validators import ProhibitNullCharactersValidator
from rest_framework import serializers
from rest_framework.validators import ProhibitSurrogateCharactersValidator


class PropertyBundleSerializer(serializers.Serializer):
    length = serializers.IntegerField()
    is_palindrome = serializers.BooleanField()
    unique_characters = serializers.IntegerField()
    word_count = serializers.IntegerField()
    sha256_hash = serializers.CharField()
    character_frequency_map = serializers.DictField(child=serializers.IntegerField())


class StringRecordSerializer(serializers.Serializer):
    """
    Read-only representation of a stored string and its properties
    """
    id = serializers.CharField(read_only=True)
    value = serializers.CharField(read_only=True)
    properties = PropertyBundleSerializer(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)


class StrictStringField(serializers.CharField):
    """
    CharField that refuses to coerce numbers and booleans into strings.

    Any string is a storable value, so CharField's null-character and
    surrogate validators are dropped.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.validators = [
            validator for validator in self.validators
            if not isinstance(
                validator,
                (ProhibitNullCharactersValidator, ProhibitSurrogateCharactersValidator),
            )
        ]

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail('invalid')
        return super().to_internal_value(data)


class StringAnalyzeSerializer(serializers.Serializer):
    value = StrictStringField(allow_blank=True, trim_whitespace=False)


class FilterParamsSerializer(serializers.Serializer):
    """
    Typed structured filters. Unknown keys are ignored; absent keys stay absent
    from ``validated_data``.

    Feed it a plain dict, not a QueryDict: with HTML-style input DRF fills a
    missing BooleanField with ``False``.
    """
    is_palindrome = serializers.BooleanField(required=False)
    min_length = serializers.IntegerField(required=False, min_value=0)
    max_length = serializers.IntegerField(required=False, min_value=0)
    word_count = serializers.IntegerField(required=False, min_value=0)
    contains_character = serializers.CharField(
        required=False, min_length=1, max_length=1, trim_whitespace=False
    )


class StringListResponseSerializer(serializers.Serializer):
    data = StringRecordSerializer(many=True)
    count = serializers.IntegerField()
    filters_applied = serializers.DictField(required=False)


class InterpretedQuerySerializer(serializers.Serializer):
    original = serializers.CharField()
    parsed_filters = serializers.DictField()


class NaturalLanguageResponseSerializer(serializers.Serializer):
    data = StringRecordSerializer(many=True)
    count = serializers.IntegerField()
    interpreted_query = InterpretedQuerySerializer()


class ErrorResponseSerializer(serializers.Serializer):
    """
    Serializer for error responses
    """
    error = serializers.CharField()
    # validation messages for the offending filter, when there are any
    details = serializers.JSONField(required=False)
