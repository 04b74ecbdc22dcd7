from django.contrib import admin

from .models import AuditLog, GameSettings, ResourceLedgerEntry, Team


class ResourceLedgerEntryInline(admin.TabularInline):
    model = ResourceLedgerEntry
    extra = 0
    readonly_fields = ("resource_type", "amount")
    can_delete = False


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "color", "score", "created_at")
    search_fields = ("name",)
    readonly_fields = ("score",)
    inlines = [ResourceLedgerEntryInline]


@admin.register(ResourceLedgerEntry)
class ResourceLedgerEntryAdmin(admin.ModelAdmin):
    list_display = ("team", "resource_type", "amount")
    list_filter = ("resource_type",)
    search_fields = ("team__name",)


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "kind", "team", "message")
    list_filter = ("kind",)
    search_fields = ("message", "team__name")

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(GameSettings)
class GameSettingsAdmin(admin.ModelAdmin):
    list_display = ("is_active", "updated_at")
    fieldsets = (
        (None, {"fields": ("is_active",)}),
    )

    def has_add_permission(self, request):
        # Enforce singleton
        count = GameSettings.objects.count()
        if count >= 1:
            return False
        return super().has_add_permission(request)
