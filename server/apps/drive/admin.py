"""Django admin configuration for drive app."""

from typing import override

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.drive.models import File, Folder


def format_bytes(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < 1024:
        return f'{size_bytes} B'
    if size_bytes < 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / 1024:.1f} KB'
    if size_bytes < 1024 * 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / (1024 * 1024):.1f} MB'
    return f'{size_bytes / (1024 * 1024 * 1024):.1f} GB'


@admin.register(Folder)
class FolderAdmin(admin.ModelAdmin[Folder]):
    """Admin interface for Folder model."""

    list_display = [
        'name',
        'user',
        'parent',
        'created_at',
    ]

    list_filter = [
        'user',
        'created_at',
    ]

    search_fields = [
        'name',
        'user__username',
    ]

    readonly_fields = ['created_at']

    @override
    def get_queryset(self, request: HttpRequest) -> QuerySet[Folder]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user', 'parent')


@admin.register(File)
class FileAdmin(admin.ModelAdmin[File]):
    """Admin interface for File model."""

    list_display = [
        'name',
        'user',
        'folder',
        'size_display',
        'mime_type',
        'storage_kind',
        'created_at',
    ]

    list_filter = [
        'storage_kind',
        'mime_type',
        'created_at',
    ]

    search_fields = [
        'name',
        'user__username',
    ]

    # Locator columns must stay consistent with stored bytes
    readonly_fields = [
        'size_bytes',
        'mime_type',
        'storage_kind',
        'local_path',
        'remote_url',
        'remote_id',
        'created_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('name', 'user', 'folder'),
        }),
        ('Metadata', {
            'fields': ('size_bytes', 'mime_type'),
        }),
        ('Storage', {
            'fields': (
                'storage_kind',
                'local_path',
                'remote_url',
                'remote_id',
            ),
        }),
        ('Timestamps', {
            'fields': ('created_at',),
        }),
    )

    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format.

        Args:
            obj: File instance.

        Returns:
            Formatted size string.
        """
        return format_bytes(obj.size_bytes)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    @override
    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user', 'folder')
