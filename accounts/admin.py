from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin

User = get_user_model()


@admin.register(User)
class HostAdmin(UserAdmin):
    """Users sign in with email, so the admin forms are keyed on it too."""
    list_display = ('email', 'display_name', 'listing_count', 'has_draft', 'is_staff', 'date_joined')
    search_fields = ('email', 'first_name', 'last_name')
    list_filter = ('is_staff', 'is_active')
    ordering = ('-date_joined',)
    readonly_fields = ('username', 'last_login', 'date_joined')

    fieldsets = (
        (None, {'fields': ('email', 'password', 'username')}),
        ('Personal info', {'fields': ('first_name', 'last_name')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'first_name', 'password1', 'password2'),
        }),
    )

    @admin.display(description="Listings")
    def listing_count(self, obj):
        return obj.listings.count()

    @admin.display(boolean=True, description="Draft in progress")
    def has_draft(self, obj):
        return hasattr(obj, 'listing_draft')
