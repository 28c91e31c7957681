"""
Packman Admin.

- Store, Game, Bin, Shift: editable reference data
- Pack: read-only, status only changes via the packs service
- PackBinHistory, ShiftOpening, ShiftClosing, Variance, TicketSerial:
  read-only trail for production debugging
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from packman.models import (
    Bin,
    Game,
    Pack,
    PackBinHistory,
    Shift,
    ShiftClosing,
    ShiftOpening,
    Store,
    TicketSerial,
    Variance,
)


class ReadOnlyAdmin(admin.ModelAdmin):
    """Rows are written by the service layer only."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# REFERENCE DATA
# =========================================================================

@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'is_active']
    list_filter = ['is_active']
    search_fields = ['code', 'name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Game)
class GameAdmin(admin.ModelAdmin):
    list_display = ['game_code', 'name', 'price', 'status', 'tickets_per_pack']
    list_filter = ['status']
    search_fields = ['game_code', 'name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Bin)
class BinAdmin(admin.ModelAdmin):
    list_display = ['name', 'store', 'display_order', 'location', 'is_active', 'active_pack']
    list_filter = ['store', 'is_active']
    search_fields = ['name', 'location']
    ordering = ['store', 'display_order']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Shift)
class ShiftAdmin(admin.ModelAdmin):
    list_display = ['id', 'store', 'opened_at', 'closed_at', 'status', 'opened_by']
    list_filter = ['store', 'status']
    date_hierarchy = 'opened_at'


# =========================================================================
# PACKS (read-only)
# =========================================================================

@admin.register(Pack)
class PackAdmin(ReadOnlyAdmin):
    """Pack admin: read-only. Lifecycle only changes via the packs service."""

    list_display = ['pack_number', 'game', 'store', 'serial_start', 'serial_end',
                    'status', 'current_bin', 'received_at']
    list_filter = ['status', 'store', 'game']
    search_fields = ['pack_number', 'game__game_code', 'game__name']
    date_hierarchy = 'received_at'


@admin.register(PackBinHistory)
class PackBinHistoryAdmin(ReadOnlyAdmin):
    """Immutable placement trail."""

    list_display = ['moved_at', 'pack', 'bin', 'moved_by', 'reason']
    list_filter = ['bin__store']
    search_fields = ['pack__pack_number', 'reason']
    date_hierarchy = 'moved_at'


# =========================================================================
# SHIFT RECONCILIATION (read-only)
# =========================================================================

@admin.register(ShiftOpening)
class ShiftOpeningAdmin(ReadOnlyAdmin):
    list_display = ['shift', 'pack', 'opening_serial', 'created_at']
    search_fields = ['pack__pack_number']


@admin.register(ShiftClosing)
class ShiftClosingAdmin(ReadOnlyAdmin):
    list_display = ['shift', 'pack', 'bin', 'opening_serial', 'closing_serial',
                    'tickets_sold', 'sales_display', 'entry_method', 'is_system_generated']
    list_filter = ['entry_method', 'is_system_generated']
    search_fields = ['pack__pack_number']
    date_hierarchy = 'closed_at'

    @admin.display(description=_('Sales'))
    def sales_display(self, obj):
        return obj.sales_amount


@admin.register(Variance)
class VarianceAdmin(ReadOnlyAdmin):
    list_display = ['shift', 'pack', 'expected', 'actual', 'difference',
                    'resolved_display', 'approved_by']
    search_fields = ['pack__pack_number', 'reason']

    @admin.display(description=_('Resolved'), boolean=True)
    def resolved_display(self, obj):
        return obj.is_resolved


@admin.register(TicketSerial)
class TicketSerialAdmin(ReadOnlyAdmin):
    list_display = ['serial_number', 'pack', 'sold_at', 'shift', 'cashier']
    search_fields = ['serial_number']
