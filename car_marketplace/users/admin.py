from django.contrib import admin
from rolepermissions.roles import get_user_roles

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    ordering = ['email']
    list_display = ['email', 'name', 'roles', 'is_staff', 'is_active', 'date_joined']
    search_fields = ['email', 'name']
    list_filter = ['is_staff', 'is_superuser', 'is_active']
    readonly_fields = ['date_joined', 'last_login', 'password']
    fields = ['email', 'password', 'name', 'avatar', 'is_active', 'is_staff', 'is_superuser',
              'last_login', 'date_joined']

    def roles(self, obj):
        return ", ".join(role.get_name() for role in get_user_roles(obj)) or "-"

    roles.short_description = "Roles"
