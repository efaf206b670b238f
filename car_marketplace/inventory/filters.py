import django_filters
from django.db.models import Q

from .models import Car


class CarFilter(django_filters.FilterSet):
    q = django_filters.CharFilter(method='filter_search', label='Search')
    brand = django_filters.CharFilter(field_name='brand', lookup_expr='iexact')
    category = django_filters.ChoiceFilter(choices=Car.CATEGORIES)
    condition = django_filters.ChoiceFilter(choices=Car.CONDITIONS)
    fuel_type = django_filters.ChoiceFilter(choices=Car.FUEL_TYPES)
    min_price = django_filters.NumberFilter(field_name='price', lookup_expr='gte', min_value=0)
    max_price = django_filters.NumberFilter(field_name='price', lookup_expr='lte', min_value=0)
    featured = django_filters.BooleanFilter(field_name='is_featured')

    class Meta:
        model = Car
        fields = ['q', 'brand', 'category', 'condition', 'fuel_type', 'min_price', 'max_price', 'featured']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value)
            | Q(brand__icontains=value)
            | Q(model__icontains=value)
            | Q(description__icontains=value)
        )
