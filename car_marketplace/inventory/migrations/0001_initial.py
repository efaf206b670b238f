import car_marketplace.inventory.models
import django.core.validators
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Car",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("brand", models.CharField(db_index=True, max_length=100)),
                ("model", models.CharField(db_index=True, max_length=100)),
                (
                    "year",
                    models.IntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1900),
                            django.core.validators.MaxValueValidator(car_marketplace.inventory.models.max_model_year),
                        ]
                    ),
                ),
                ("price", models.DecimalField(db_index=True, decimal_places=2, max_digits=12)),
                ("original_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                (
                    "discount_percentage",
                    models.PositiveSmallIntegerField(
                        default=0, validators=[django.core.validators.MaxValueValidator(100)]
                    ),
                ),
                ("description", models.CharField(max_length=500)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("new", "New"),
                            ("used", "Used"),
                            ("electric", "Electric"),
                            ("hybrid", "Hybrid"),
                            ("suv", "SUV"),
                            ("hatchback", "Hatchback"),
                            ("saloon", "Saloon"),
                            ("estate", "Estate"),
                            ("coupe", "Coupe"),
                            ("convertible", "Convertible"),
                            ("mpv", "MPV"),
                        ],
                        db_index=True,
                        max_length=20,
                    ),
                ),
                (
                    "condition",
                    models.CharField(
                        choices=[("new", "New"), ("used", "Used"), ("nearly_new", "Nearly New")], max_length=20
                    ),
                ),
                (
                    "availability",
                    models.CharField(
                        choices=[("available", "Available"), ("reserved", "Reserved"), ("sold", "Sold")],
                        default="available",
                        max_length=20,
                    ),
                ),
                (
                    "fuel_type",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("petrol", "Petrol"),
                            ("diesel", "Diesel"),
                            ("electric", "Electric"),
                            ("hybrid", "Hybrid"),
                            ("plug_in_hybrid", "Plug-in Hybrid"),
                        ],
                        db_index=True,
                        max_length=20,
                    ),
                ),
                (
                    "transmission",
                    models.CharField(
                        blank=True,
                        choices=[("manual", "Manual"), ("automatic", "Automatic"), ("cvt", "CVT")],
                        max_length=20,
                    ),
                ),
                ("engine", models.CharField(blank=True, max_length=100)),
                ("mileage", models.PositiveIntegerField(blank=True, null=True)),
                ("features", models.JSONField(blank=True, default=list)),
                ("dealer_name", models.CharField(max_length=100)),
                ("dealer_location", models.CharField(max_length=100)),
                ("dealer_phone", models.CharField(blank=True, max_length=20)),
                ("dealer_email", models.EmailField(blank=True, max_length=254)),
                (
                    "average_rating",
                    models.DecimalField(
                        decimal_places=1,
                        default=Decimal("0.0"),
                        max_digits=2,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                ("review_count", models.PositiveIntegerField(default=0)),
                ("views", models.PositiveIntegerField(default=0)),
                ("is_featured", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Car",
                "verbose_name_plural": "Cars",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["is_active", "category"], name="idx_car_active_category"),
                    models.Index(fields=["is_active", "is_featured"], name="idx_car_active_featured"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("average_rating__gte", 0), ("average_rating__lte", 5)),
                        name="car_average_rating_range",
                    )
                ],
            },
        ),
    ]
