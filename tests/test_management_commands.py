from decimal import Decimal
from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError

from car_marketplace.inventory.models import Car
from car_marketplace.reviews.models import Review

pytestmark = pytest.mark.django_db


def run(*args):
    out, err = StringIO(), StringIO()
    call_command(*args, stdout=out, stderr=err)
    return out.getvalue(), err.getvalue()


class TestRecomputeCarRatings:

    def test_selected_cars(self, make_car, buyer, make_review):
        car = make_car(average_rating=Decimal("1.0"), review_count=5)
        untouched = make_car(average_rating=Decimal("2.0"), review_count=5)
        make_review(car, buyer, rating=4)

        out, _ = run("recompute_car_ratings", str(car.pk))

        car.refresh_from_db()
        untouched.refresh_from_db()
        assert (car.average_rating, car.review_count) == (Decimal("4.0"), 1)
        assert (untouched.average_rating, untouched.review_count) == (Decimal("2.0"), 5)
        assert "Recomputed 1 car(s), 0 failed" in out

    def test_all_cars(self, make_car, buyer, make_review):
        first = make_car(average_rating=Decimal("1.0"), review_count=5)
        second = make_car(average_rating=Decimal("3.0"), review_count=2)
        make_review(first, buyer, rating=5)

        out, _ = run("recompute_car_ratings", "--all")

        first.refresh_from_db()
        second.refresh_from_db()
        assert (first.average_rating, first.review_count) == (Decimal("5.0"), 1)
        assert (second.average_rating, second.review_count) == (Decimal("0.0"), 0)
        assert "Recomputed 2 car(s), 0 failed" in out

    def test_unknown_car_is_skipped(self):
        out, _ = run("recompute_car_ratings", "31337")
        assert "Car 31337 not found, skipped" in out
        assert "Recomputed 0 car(s), 0 failed" in out

    def test_failure_is_reported_and_others_continue(self, make_car):
        cars = [make_car(), make_car()]
        calls = []

        def flaky(car_id):
            calls.append(car_id)
            if car_id == cars[0].pk:
                raise DatabaseError("connection lost")
            return []

        with patch("car_marketplace.reviews.selectors.ReviewStore.find_active_by_car_id", side_effect=flaky):
            out, err = run("recompute_car_ratings", str(cars[0].pk), str(cars[1].pk))

        assert calls == [cars[0].pk, cars[1].pk]
        assert f"Could not recompute rating for car {cars[0].pk}" in err
        assert "Recomputed 1 car(s), 1 failed" in out

    @pytest.mark.parametrize("args", [(), ("1", "--all")])
    def test_requires_ids_or_all(self, args):
        with pytest.raises(CommandError):
            call_command("recompute_car_ratings", *args)


class TestSeedMarketplace:

    def test_seed_loads_data_and_ratings(self):
        out, _ = run("seed_marketplace")

        assert Car.objects.count() == 4
        assert Review.objects.count() == 5
        jaguar = Car.objects.get(name="Jaguar 7")
        assert (jaguar.average_rating, jaguar.review_count) == (Decimal("4.3"), 3)
        assert "Loaded 4 cars" in out

    def test_seed_twice_does_not_duplicate(self):
        run("seed_marketplace")
        run("seed_marketplace")
        assert Car.objects.count() == 4
        assert Review.objects.count() == 5
