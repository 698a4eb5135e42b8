import django_filters
from authentication.models import User
from django.db.models import Q


class UserFilterSet(django_filters.FilterSet):
    """Admin users search, accepting the `q[...]` parameter names the admin UI sends"""
    email_cont = django_filters.CharFilter(field_name='email', lookup_expr='icontains')
    firstname_cont = django_filters.CharFilter(method='filter_by_firstname')
    lastname_cont = django_filters.CharFilter(method='filter_by_lastname')
    role = django_filters.BaseInFilter(field_name='spree_roles__name', lookup_expr='in')

    class Meta:
        model = User
        fields = ['is_active']

    def __init__(self, data=None, *args, **kwargs):
        if data is not None:
            data = self.unwrap_query_keys(data)
        super().__init__(data, *args, **kwargs)

    @staticmethod
    def unwrap_query_keys(data):
        """Map `q[email_cont]` style keys onto the plain filter names"""
        unwrapped = data.copy()
        for key in list(data.keys()):
            if key.startswith('q[') and key.endswith(']'):
                unwrapped[key[2:-1]] = data.get(key)
        return unwrapped

    def filter_by_firstname(self, queryset, name, value):
        return queryset.filter(
            Q(first_name__icontains=value)
            | Q(bill_address__firstname__icontains=value)
            | Q(ship_address__firstname__icontains=value)
        ).distinct()

    def filter_by_lastname(self, queryset, name, value):
        return queryset.filter(
            Q(last_name__icontains=value)
            | Q(bill_address__lastname__icontains=value)
            | Q(ship_address__lastname__icontains=value)
        ).distinct()
