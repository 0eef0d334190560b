from django.contrib import admin

from events.models import Attendee, Event, User


class AttendeeInline(admin.TabularInline):
    model = Attendee
    extra = 0
    readonly_fields = ["checked_in", "checked_in_by", "checked_in_time"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "location", "state", "starts_at", "created_at"]
    search_fields = ["name", "location"]
    list_filter = ["state"]
    readonly_fields = ["marketers", "concierge_requests", "version"]
    inlines = [AttendeeInline]


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "role"]
    search_fields = ["name", "email"]
    list_filter = ["role"]
    readonly_fields = ["event_participation", "version"]


@admin.register(Attendee)
class AttendeeAdmin(admin.ModelAdmin):
    list_display = ["name", "phone", "event", "checked_in", "checked_in_time"]
    list_filter = ["event", "checked_in"]
    search_fields = ["name", "phone"]
    readonly_fields = ["checked_in", "checked_in_by", "checked_in_time"]
