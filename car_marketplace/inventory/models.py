from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


def max_model_year():
    return timezone.now().year + 1


class Car(models.Model):
    CATEGORIES = [
        ('new', 'New'),
        ('used', 'Used'),
        ('electric', 'Electric'),
        ('hybrid', 'Hybrid'),
        ('suv', 'SUV'),
        ('hatchback', 'Hatchback'),
        ('saloon', 'Saloon'),
        ('estate', 'Estate'),
        ('coupe', 'Coupe'),
        ('convertible', 'Convertible'),
        ('mpv', 'MPV'),
    ]
    CONDITIONS = [
        ('new', 'New'),
        ('used', 'Used'),
        ('nearly_new', 'Nearly New'),
    ]
    AVAILABILITY = [
        ('available', 'Available'),
        ('reserved', 'Reserved'),
        ('sold', 'Sold'),
    ]
    FUEL_TYPES = (
        ('petrol', 'Petrol'),
        ('diesel', 'Diesel'),
        ('electric', 'Electric'),
        ('hybrid', 'Hybrid'),
        ('plug_in_hybrid', 'Plug-in Hybrid'),
    )
    TRANSMISSIONS = (
        ('manual', 'Manual'),
        ('automatic', 'Automatic'),
        ('cvt', 'CVT'),
    )

    # core fields
    name = models.CharField(max_length=100)
    brand = models.CharField(max_length=100, db_index=True)
    model = models.CharField(max_length=100, db_index=True)
    year = models.IntegerField(validators=[MinValueValidator(1900), MaxValueValidator(max_model_year)])
    price = models.DecimalField(max_digits=12, decimal_places=2, db_index=True)
    original_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    discount_percentage = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(100)])
    description = models.CharField(max_length=500)
    category = models.CharField(max_length=20, choices=CATEGORIES, db_index=True)
    condition = models.CharField(max_length=20, choices=CONDITIONS)
    availability = models.CharField(max_length=20, choices=AVAILABILITY, default='available')
    fuel_type = models.CharField(max_length=20, choices=FUEL_TYPES, blank=True, db_index=True)
    transmission = models.CharField(max_length=20, choices=TRANSMISSIONS, blank=True)
    engine = models.CharField(max_length=100, blank=True)
    mileage = models.PositiveIntegerField(null=True, blank=True)
    features = models.JSONField(default=list, blank=True)

    # dealer contact
    dealer_name = models.CharField(max_length=100)
    dealer_location = models.CharField(max_length=100)
    dealer_phone = models.CharField(max_length=20, blank=True)
    dealer_email = models.EmailField(blank=True)

    # Derived from active reviews; written only by the rating aggregator
    average_rating = models.DecimalField(
        max_digits=2, decimal_places=1, default=Decimal('0.0'),
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    review_count = models.PositiveIntegerField(default=0)

    views = models.PositiveIntegerField(default=0)
    is_featured = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def discount_amount(self):
        if self.original_price and self.discount_percentage > 0:
            return self.original_price - self.price
        return Decimal('0')

    def __str__(self):
        return f"{self.brand} {self.model} ({self.year})"

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(average_rating__gte=0) & models.Q(average_rating__lte=5),
                name='car_average_rating_range',
            ),
        ]
        indexes = [
            models.Index(fields=['is_active', 'category'], name='idx_car_active_category'),
            models.Index(fields=['is_active', 'is_featured'], name='idx_car_active_featured'),
        ]
        ordering = ['-created_at']
        verbose_name = 'Car'
        verbose_name_plural = 'Cars'
