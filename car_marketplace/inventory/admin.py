# inventory/admin.py
from django.contrib import admin, messages
from .models import Car
from car_marketplace.reviews.exceptions import AggregationFailure
from car_marketplace.reviews.services.rating_aggregator import build_rating_aggregator

# --- Car Admin ---
@admin.register(Car)
class CarAdmin(admin.ModelAdmin):
    list_display = ['name', 'brand', 'model', 'year', 'price', 'category', 'average_rating', 'review_count',
                    'is_featured', 'is_active']
    search_fields = ['name', 'brand', 'model']
    list_filter = ['category', 'condition', 'availability', 'fuel_type', 'is_featured', 'is_active']
    # cached from reviews; the aggregator is the only writer
    readonly_fields = ['average_rating', 'review_count', 'views', 'created_at', 'updated_at']
    actions = ['recompute_ratings']

    fieldsets = (
        (None, {'fields': ('name', 'brand', 'model', 'year', 'category', 'condition', 'availability')}),
        ('Pricing', {'fields': ('price', 'original_price', 'discount_percentage')}),
        ('Specifications', {'fields': ('fuel_type', 'transmission', 'engine', 'mileage', 'features')}),
        ('Dealer', {'fields': ('dealer_name', 'dealer_location', 'dealer_phone', 'dealer_email')}),
        ('Listing', {'fields': ('description', 'is_featured', 'is_active')}),
        ('Ratings', {'fields': ('average_rating', 'review_count', 'views')}),
        ('Timestamps', {'fields': ('created_at', 'updated_at')}),
    )

    @admin.action(description="Recompute ratings from active reviews")
    def recompute_ratings(self, request, queryset):
        aggregator = build_rating_aggregator()
        done = 0
        for car_id in queryset.values_list('pk', flat=True):
            try:
                if aggregator.recompute(car_id) is not None:
                    done += 1
            except AggregationFailure as exc:
                self.message_user(request, str(exc), level=messages.ERROR)
        self.message_user(request, f"Recomputed ratings for {done} car(s).")
