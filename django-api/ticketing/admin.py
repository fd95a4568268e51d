from django.contrib import admin

from ticketing.models import Event, Notification, Order, Ticket


class TicketInline(admin.TabularInline):
    model = Ticket
    extra = 0
    fields = ["position", "code", "is_used", "used_at", "issued_at"]
    readonly_fields = fields
    can_delete = False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "location", "starts_at", "price", "is_published"]
    list_filter = ["is_published"]
    search_fields = ["title", "location"]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["id", "buyer", "event", "quantity", "total_amount", "payment_status", "created_at"]
    list_filter = ["payment_status", "event"]
    search_fields = ["id", "payment_ref", "buyer__email"]
    readonly_fields = ["id", "unit_price", "total_amount", "payment_ref", "created_at", "updated_at"]
    inlines = [TicketInline]


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ["code", "event", "order", "is_used", "issued_at"]
    list_filter = ["is_used", "event"]
    search_fields = ["code"]


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["user", "type", "subject", "status", "created_at"]
    list_filter = ["type", "status"]
