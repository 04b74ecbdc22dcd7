from django.contrib import admin

from .models import Node


@admin.register(Node)
class NodeAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "resource_type", "capture_rate", "owner", "last_settled_at")
    list_filter = ("resource_type", "owner")
    search_fields = ("name", "id")
    readonly_fields = ("last_settled_at", "created_at")
