from django.contrib import admin
from .models import Enterprise, EnterpriseRole, Customer


class EnterpriseRoleInline(admin.TabularInline):
    model = EnterpriseRole
    extra = 0
    raw_id_fields = ['user']


@admin.register(Enterprise)
class EnterpriseAdmin(admin.ModelAdmin):
    list_display = ['name', 'owner', 'is_primary_producer', 'sells', 'created_at']
    list_filter = ['is_primary_producer', 'sells']
    search_fields = ['name', 'permalink', 'owner__email']
    readonly_fields = ['permalink', 'created_at', 'updated_at']
    inlines = [EnterpriseRoleInline]


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['email', 'enterprise', 'code', 'tag_list', 'created_at']
    list_filter = ['enterprise']
    search_fields = ['email', 'code', 'tag_list']
    raw_id_fields = ['user']
