from django.db import models

from .utils import AnalyzedEntry, PropertyRecord


class StringRecord(models.Model):
    id = models.CharField(
        max_length=64, primary_key=True)  # sha256 hex length = 64
    value = models.TextField(unique=True)
    length = models.PositiveIntegerField()
    is_palindrome = models.BooleanField()
    unique_characters = models.PositiveIntegerField()
    word_count = models.PositiveIntegerField()
    character_frequency_map = models.JSONField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.value[:50]} - {self.id[:12]}"

    @classmethod
    def from_properties(cls, value, properties: PropertyRecord):
        return cls(
            id=properties.sha256_hash,
            value=value,
            length=properties.length,
            is_palindrome=properties.is_palindrome,
            unique_characters=properties.unique_characters,
            word_count=properties.word_count,
            character_frequency_map=dict(properties.character_frequency_map),
        )

    def to_properties(self) -> PropertyRecord:
        return PropertyRecord(
            length=self.length,
            is_palindrome=self.is_palindrome,
            unique_characters=self.unique_characters,
            word_count=self.word_count,
            sha256_hash=self.id,
            character_frequency_map=dict(self.character_frequency_map),
        )

    def to_entry(self) -> AnalyzedEntry:
        return AnalyzedEntry(
            id=self.id,
            value=self.value,
            properties=self.to_properties(),
            created_at=self.created_at,
        )

    def build_characters(self):
        return [
            StringCharacter(record=self, character=character, count=count)
            for character, count in self.character_frequency_map.items()
        ]


class StringCharacter(models.Model):
    """One row per distinct character of a StringRecord, for exact containment lookups."""
    record = models.ForeignKey(
        StringRecord, on_delete=models.CASCADE, related_name='characters')
    character = models.CharField(max_length=16)
    count = models.PositiveIntegerField()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['record', 'character'],
                                    name='unique_character_per_record'),
        ]

    def __str__(self):
        return f"{self.character!r} x{self.count}"
