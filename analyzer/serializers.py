from rest_framework import serializers

from .models import StringRecord


class PropertiesSerializer(serializers.Serializer):
    length = serializers.IntegerField()
    is_palindrome = serializers.BooleanField()
    unique_characters = serializers.IntegerField()
    word_count = serializers.IntegerField()
    sha256_hash = serializers.CharField()
    character_frequency_map = serializers.DictField(child=serializers.IntegerField())


class AnalyzedEntrySerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    value = serializers.CharField(read_only=True)
    properties = PropertiesSerializer(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)

    def to_representation(self, instance):
        # accept model rows as well as AnalyzedEntry objects
        if isinstance(instance, StringRecord):
            instance = instance.to_entry()

        return {
            'id': instance.id,
            'value': instance.value,
            'properties': instance.properties.as_dict(),
            'created_at': instance.created_at.isoformat() if instance.created_at is not None else None,
        }


class StringAnalyzeSerializer(serializers.Serializer):
    """Request body of POST /strings (documentation only; the raw value is type-checked by the analyzer)."""
    value = serializers.CharField()


class InterpretedQuerySerializer(serializers.Serializer):
    original = serializers.CharField()
    parsed_filters = serializers.DictField()


class StringListResponseSerializer(serializers.Serializer):
    data = AnalyzedEntrySerializer(many=True)
    count = serializers.IntegerField()
    filters_applied = serializers.DictField()


class NaturalLanguageResponseSerializer(serializers.Serializer):
    data = AnalyzedEntrySerializer(many=True)
    count = serializers.IntegerField()
    interpreted_query = InterpretedQuerySerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    field = serializers.CharField(required=False)
