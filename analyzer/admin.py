from django.contrib import admin
from .models import StringRecord


@admin.register(StringRecord)
class StringRecordAdmin(admin.ModelAdmin):
    """
    Admin configuration for StringRecord model
    """
    list_display = [
        'value',
        'length',
        'is_palindrome',
        'unique_characters',
        'word_count',
        'created_at',
    ]
    list_filter = ['is_palindrome', 'word_count', 'created_at']
    search_fields = ['value', 'id']
    ordering = ['-created_at']
    readonly_fields = [
        'id',
        'length',
        'is_palindrome',
        'unique_characters',
        'word_count',
        'character_frequency_map',
        'created_at',
    ]

    fieldsets = (
        ('String', {
            'fields': ('id', 'value')
        }),
        ('Properties', {
            'fields': ('length', 'is_palindrome', 'unique_characters',
                       'word_count', 'character_frequency_map')
        }),
        ('Metadata', {
            'fields': ('created_at',),
            'classes': ('collapse',)
        }),
    )

    def has_change_permission(self, request, obj=None):
        # analyzed strings are immutable once stored
        return False

    def has_add_permission(self, request):
        # entries are created through the analysis API only
        return False
