from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from car_marketplace.inventory.models import Car
from car_marketplace.reviews.models import Review
from car_marketplace.reviews.services.rating_aggregator import build_rating_aggregator

User = get_user_model()

# roles are assigned by the post_save signal on users
USERS = [
    {"email": "admin@carmarket.local", "name": "Admin User", "password": "Admin12345", "is_admin": True},
    {"email": "john@example.com", "name": "John Smith", "password": "Password123", "is_admin": False},
    {"email": "sarah@example.com", "name": "Sarah Johnson", "password": "Password123", "is_admin": False},
    {"email": "mike@example.com", "name": "Mike Wilson", "password": "Password123", "is_admin": False},
]

DEALER = {
    "dealer_name": "Premium Motors",
    "dealer_location": "London",
    "dealer_phone": "020 1234 5678",
    "dealer_email": "sales@premiummotors.example",
}

CARS = [
    {"name": "Jaguar 7", "brand": "Jaguar", "model": "7", "year": 2024, "price": "28623.00",
     "original_price": "30000.00", "discount_percentage": 5, "category": "suv", "condition": "new",
     "fuel_type": "petrol", "transmission": "automatic", "engine": "2.0L Turbo", "mileage": 0,
     "description": "Jaguar SUV with bold styling", "is_featured": True,
     "features": ["Leather seats", "Navigation", "Parking sensors"]},
    {"name": "Tesla Model 3", "brand": "Tesla", "model": "Model 3", "year": 2023, "price": "39990.00",
     "category": "electric", "condition": "used", "fuel_type": "electric", "transmission": "automatic",
     "mileage": 12000, "description": "Long range dual motor electric saloon", "is_featured": True,
     "features": ["Autopilot", "Glass roof"]},
    {"name": "Toyota Corolla Hybrid", "brand": "Toyota", "model": "Corolla", "year": 2022, "price": "21450.00",
     "category": "hybrid", "condition": "nearly_new", "fuel_type": "hybrid", "transmission": "cvt",
     "mileage": 8000, "description": "Efficient family hatchback with a self-charging hybrid"},
    {"name": "Ford Focus Estate", "brand": "Ford", "model": "Focus", "year": 2021, "price": "15995.00",
     "category": "estate", "condition": "used", "fuel_type": "diesel", "transmission": "manual",
     "mileage": 31000, "description": "Practical estate with a large boot"},
]

# (user index, car index, rating, title, text)
REVIEWS = [
    (1, 0, 5, "Fantastic SUV", "Comfortable, quick and looks great."),
    (2, 0, 4, "Very good", "Great to drive, infotainment could be better."),
    (3, 0, 4, "Solid choice", "Good value for the price."),
    (1, 1, 5, "Best car I've owned", "Cheap to run and a joy on the motorway."),
    (2, 2, 3, "Does the job", "Economical but the CVT drones under load."),
]


class Command(BaseCommand):
    help = 'Load sample users, cars and reviews, then compute every car rating'

    def add_arguments(self, parser):
        parser.add_argument('--flush', action='store_true', help='Delete existing cars and reviews first')

    @transaction.atomic
    def handle(self, *args, **options):
        if options['flush']:
            Review.objects.all().delete()
            Car.objects.all().delete()
            self.stdout.write(self.style.WARNING("Deleted existing cars and reviews"))

        users = []
        for entry in USERS:
            user, created = User.objects.get_or_create(
                email=entry["email"],
                defaults={
                    "name": entry["name"],
                    "is_staff": entry["is_admin"],
                    "is_superuser": entry["is_admin"],
                },
            )
            if created:
                user.set_password(entry["password"])
                user.save(update_fields=["password"])
            users.append(user)
        self.stdout.write(self.style.SUCCESS(f"Loaded {len(users)} users"))

        cars = []
        for entry in CARS:
            data = {**DEALER, **entry}
            data["price"] = Decimal(data["price"])
            if "original_price" in data:
                data["original_price"] = Decimal(data["original_price"])
            car, _ = Car.objects.get_or_create(name=data.pop("name"), defaults=data)
            cars.append(car)
        self.stdout.write(self.style.SUCCESS(f"Loaded {len(cars)} cars"))

        # bulk_create skips ReviewService, so ratings are recomputed below
        created = Review.objects.bulk_create(
            [
                Review(user=users[user_index], car=cars[car_index], rating=rating, title=title, text=text)
                for user_index, car_index, rating, title, text in REVIEWS
            ],
            ignore_conflicts=True,
        )
        self.stdout.write(self.style.SUCCESS(f"Loaded {len(created)} reviews"))

        aggregator = build_rating_aggregator()
        for car in cars:
            aggregate = aggregator.recompute(car.pk)
            self.stdout.write(
                f"{car.name}: average_rating={aggregate.average_rating} review_count={aggregate.review_count}"
            )
