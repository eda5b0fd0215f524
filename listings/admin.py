# listings/admin.py

from django.contrib import admin
from django.utils.html import format_html
from .models import ListingDraft, Listing


# === ADMIN FOR WIZARD DRAFTS ===
@admin.register(ListingDraft)
class ListingDraftAdmin(admin.ModelAdmin):
    list_display = ('draft_title', 'user', 'current_step', 'updated_at')
    list_filter = ('current_step', 'updated_at')
    search_fields = ('user__email', 'user__username')
    readonly_fields = ('created_at', 'updated_at')

    def draft_title(self, obj):
        return (obj.state.get('draft') or {}).get('title') or "Untitled Draft"
    draft_title.short_description = "Title"


# === ADMIN FOR COMMITTED LISTINGS ===
@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):

    def host_name(self, obj):
        user = obj.host
        return f"{user.display_name} ({user.email})"
    host_name.short_description = "Host"

    def status_badge(self, obj):
        if obj.status == 'active':
            return format_html('<span style="color: green; font-weight: bold;">✅ Active</span>')
        if obj.status == 'pending':
            return format_html('<span style="color: orange; font-weight: bold;">🟡 Pending</span>')
        return format_html('<span style="color: gray; font-weight: bold;">Draft</span>')
    status_badge.short_description = "Status"
    status_badge.admin_order_field = 'status'

    def rent_display(self, obj):
        return f"₹{obj.rent:,}"
    rent_display.short_description = "Rent"
    rent_display.admin_order_field = 'rent'

    def image_thumbnail(self, obj):
        url = obj.cover_image()
        if not url:
            return "❌ No"
        return format_html(
            '<img src="{}" style="width: 80px; height: 60px; object-fit: cover; border-radius: 4px;" />',
            url
        )
    image_thumbnail.short_description = "Image"

    list_display = (
        'title',
        'host_name',
        'status_badge',
        'category',
        'listing_type',
        'rent_display',
        'city',
        'image_thumbnail',
        'created_at',
    )
    list_filter = ('status', 'category', 'listing_type', 'created_at')
    search_fields = ('title', 'city', 'landmark', 'host__email')
    readonly_fields = ('id', 'position', 'created_at', 'updated_at')
    ordering = ('-created_at',)
    fieldsets = (
        ("Basic Information", {
            "fields": ("id", "host", "title", "description", "category", "listing_type", "rent", "status")
        }),
        ("Location", {
            "fields": ("city", "landmark", "latitude", "longitude")
        }),
        ("Property Details", {
            "fields": ("images", "amenities", "max_guests", "bedrooms", "bathrooms")
        }),
        ("Metadata", {
            "fields": ("position", "created_at", "updated_at"),
            "classes": ("collapse",)
        }),
    )
