"""
Shared fixtures: users for each role, a DRF client and factories for cars
and reviews.
"""
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from car_marketplace.inventory.models import Car
from car_marketplace.reviews.models import Review

User = get_user_model()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client():
    """Return an APIClient authenticated as the given user."""
    def _auth_client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _auth_client


@pytest.fixture
def buyer(db):
    return User.objects.create_user(email="buyer@example.com", password="Password123", name="Buyer One")


@pytest.fixture
def other_buyer(db):
    return User.objects.create_user(email="other@example.com", password="Password123", name="Buyer Two")


@pytest.fixture
def admin_user(db):
    return User.objects.create_superuser(email="admin@example.com", password="Admin12345", name="Admin")


@pytest.fixture
def make_car(db):
    counter = {"n": 0}

    def _make_car(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Test Car {counter['n']}",
            "brand": "Toyota",
            "model": "Corolla",
            "year": 2022,
            "price": Decimal("20000.00"),
            "description": "A reliable hatchback",
            "category": "hatchback",
            "condition": "used",
            "fuel_type": "petrol",
            "dealer_name": "Premium Motors",
            "dealer_location": "London",
        }
        data.update(overrides)
        return Car.objects.create(**data)
    return _make_car


@pytest.fixture
def car(make_car):
    return make_car()


@pytest.fixture
def make_review(db):
    """Insert a review row directly, bypassing ReviewService and aggregation."""
    def _make_review(car, user, rating=4, **overrides):
        data = {"title": "Good car", "text": "Drives well and is cheap to run.", "rating": rating}
        data.update(overrides)
        return Review.objects.create(car=car, user=user, **data)
    return _make_review
