from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.contrib.auth.forms import UserCreationForm
from .models import User, Role, Address, Country, State


class PlatformUserCreationForm(UserCreationForm):
    class Meta(UserCreationForm.Meta):
        model = User
        fields = ('email',)


@admin.register(User)
class PlatformUserAdmin(UserAdmin):
    add_form = PlatformUserCreationForm
    ordering = ['email']
    list_display = ['email', 'first_name', 'last_name', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['is_active', 'is_staff', 'spree_roles']
    search_fields = ['email', 'first_name', 'last_name']
    filter_horizontal = ['spree_roles', 'groups', 'user_permissions']
    readonly_fields = ['spree_api_key', 'date_joined', 'last_login']

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Personal info', {'fields': ('first_name', 'last_name', 'bill_address', 'ship_address')}),
        ('Access', {'fields': ('is_active', 'is_staff', 'is_superuser', 'spree_roles', 'spree_api_key')}),
        ('Dates', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {'classes': ('wide',), 'fields': ('email', 'password1', 'password2')}),
    )


admin.site.register(Role)
admin.site.register(Address)
admin.site.register(Country)
admin.site.register(State)
