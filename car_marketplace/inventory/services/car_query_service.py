from django.db.models import F, Max, Min, Q
from car_marketplace.inventory.models import Car
from car_marketplace.users.permissions import is_admin

FEATURED_LIMIT = 6
SUGGESTION_LIMIT = 5
POPULAR_LIMIT = 10
SUGGESTION_FIELDS = ("name", "brand", "model")


class CarQueryService:

    @staticmethod
    def base_queryset():
        """Active listings, the only ones the public can see."""
        return Car.objects.filter(is_active=True)

    @staticmethod
    def get_visible_cars_for_user(user):
        """
        Admins see every listing, including soft-deleted ones.
        Everyone else sees active listings only.
        """
        if is_admin(user):
            return Car.objects.all()
        return CarQueryService.base_queryset()

    @staticmethod
    def get_featured_cars(limit=FEATURED_LIMIT):
        return (
            CarQueryService.base_queryset()
            .filter(is_featured=True)
            .order_by('-created_at')[:limit]
        )

    @staticmethod
    def get_filter_options():
        """
        Values the listing filters can take, computed over active cars.
        """
        qs = CarQueryService.base_queryset()
        price_range = qs.aggregate(min_price=Min('price'), max_price=Max('price'))
        year_range = qs.aggregate(min_year=Min('year'), max_year=Max('year'))
        return {
            'brands': list(qs.order_by('brand').values_list('brand', flat=True).distinct()),
            'categories': [value for value, _ in Car.CATEGORIES],
            'conditions': [value for value, _ in Car.CONDITIONS],
            'fuel_types': [value for value, _ in Car.FUEL_TYPES],
            'price_range': {
                'min': price_range['min_price'] or 0,
                'max': price_range['max_price'] or 0,
            },
            'year_range': {
                'min': year_range['min_year'] or 0,
                'max': year_range['max_year'] or 0,
            },
        }

    @staticmethod
    def increment_views(car):
        """
        Safely increment car view count.
        """
        Car.objects.filter(pk=car.pk).update(views=F('views') + 1)
        car.refresh_from_db(fields=['views'])
        return car

    @staticmethod
    def soft_delete(car):
        car.is_active = False
        car.save(update_fields=['is_active', 'updated_at'])
        return car

    @staticmethod
    def get_search_suggestions(query, limit=SUGGESTION_LIMIT):
        """
        Distinct car names, brands and models of active cars containing
        ``query`` (case-insensitive), names first, at most ``limit`` of them.
        """
        query = query.strip()
        match = Q()
        for field in SUGGESTION_FIELDS:
            match |= Q(**{f'{field}__icontains': query})
        rows = list(CarQueryService.base_queryset().filter(match).values_list(*SUGGESTION_FIELDS))

        needle = query.lower()
        suggestions = []
        for position in range(len(SUGGESTION_FIELDS)):
            for value in sorted({row[position] for row in rows}):
                if needle in value.lower() and value not in suggestions:
                    suggestions.append(value)
        return suggestions[:limit]

    @staticmethod
    def get_popular_cars(limit=POPULAR_LIMIT):
        """Most viewed active cars."""
        return CarQueryService.base_queryset().order_by('-views', '-created_at')[:limit]
