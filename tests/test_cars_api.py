from decimal import Decimal

import pytest

from car_marketplace.inventory.models import Car

pytestmark = pytest.mark.django_db

CARS_URL = "/api/inventory/cars/"


def car_url(car, suffix=""):
    return f"{CARS_URL}{car.pk}/{suffix}"


@pytest.fixture
def car_payload():
    return {
        "name": "Jaguar 7",
        "brand": "Jaguar",
        "model": "7",
        "year": 2024,
        "price": "28623.00",
        "original_price": "30000.00",
        "discount_percentage": 5,
        "description": "Jaguar SUV with bold styling",
        "category": "suv",
        "condition": "new",
        "fuel_type": "petrol",
        "transmission": "automatic",
        "features": ["Leather seats", "Navigation"],
        "dealer_name": "Premium Motors",
        "dealer_location": "London",
    }


class TestCarListing:

    def test_list_hides_inactive_cars(self, api_client, make_car):
        visible = make_car()
        make_car(is_active=False)

        response = api_client.get(CARS_URL)

        assert response.status_code == 200
        assert response.data["total"] == 1
        assert response.data["results"][0]["id"] == visible.pk

    def test_admin_sees_inactive_cars(self, auth_client, admin_user, make_car):
        make_car()
        make_car(is_active=False)
        response = auth_client(admin_user).get(CARS_URL)
        assert response.data["total"] == 2

    def test_filters_and_search(self, api_client, make_car):
        make_car(brand="Tesla", model="Model 3", category="electric", fuel_type="electric", price=Decimal("39990"))
        make_car(brand="Ford", model="Focus", category="estate", fuel_type="diesel", price=Decimal("15995"))

        by_category = api_client.get(CARS_URL, {"category": "electric"})
        by_price = api_client.get(CARS_URL, {"max_price": 20000})
        by_search = api_client.get(CARS_URL, {"q": "focus"})

        assert [c["brand"] for c in by_category.data["results"]] == ["Tesla"]
        assert [c["brand"] for c in by_price.data["results"]] == ["Ford"]
        assert [c["brand"] for c in by_search.data["results"]] == ["Ford"]

    def test_order_by_rating(self, api_client, make_car):
        low = make_car(average_rating=Decimal("2.1"), review_count=3)
        high = make_car(average_rating=Decimal("4.8"), review_count=5)

        response = api_client.get(CARS_URL, {"ordering": "-average_rating"})

        assert [c["id"] for c in response.data["results"]] == [high.pk, low.pk]
        assert response.data["results"][0]["average_rating"] == 4.8

    def test_limit_param(self, api_client, make_car):
        for _ in range(3):
            make_car()
        response = api_client.get(CARS_URL, {"limit": 2})
        assert response.data["count"] == 2
        assert response.data["total"] == 3
        assert response.data["next"] is not None

    def test_retrieve_counts_views(self, api_client, car):
        api_client.get(car_url(car))
        response = api_client.get(car_url(car))
        assert response.status_code == 200
        assert response.data["views"] == 2

    def test_featured(self, api_client, make_car):
        featured = make_car(is_featured=True)
        make_car()
        response = api_client.get(f"{CARS_URL}featured/")
        assert [c["id"] for c in response.data] == [featured.pk]

    def test_filter_options(self, api_client, make_car):
        make_car(brand="Tesla", price=Decimal("39990.00"))
        make_car(brand="Ford", price=Decimal("15995.00"))

        response = api_client.get(f"{CARS_URL}filters/")

        assert response.data["brands"] == ["Ford", "Tesla"]
        assert response.data["price_range"] == {"min": "15995.00", "max": "39990.00"}
        assert response.data["year_range"] == {"min": 2022, "max": 2022}
        assert "electric" in response.data["categories"]

    def test_filter_options_year_range_spans_active_cars(self, api_client, make_car):
        make_car(year=2015)
        make_car(year=2024)
        make_car(year=1999, is_active=False)

        response = api_client.get(f"{CARS_URL}filters/")

        assert response.data["year_range"] == {"min": 2015, "max": 2024}


class TestSearchHelpers:

    def test_suggestions_match_names_brands_and_models(self, api_client, make_car):
        make_car(name="Tesla Model 3", brand="Tesla", model="Model 3")
        make_car(name="Ford Mondeo", brand="Ford", model="Mondeo")
        make_car(name="Tesla Model S", brand="Tesla", model="Model S", is_active=False)

        response = api_client.get(f"{CARS_URL}suggestions/", {"q": "mod"})

        assert response.status_code == 200
        assert response.data == {
            "count": 4,
            "results": ["Ford Mondeo", "Tesla Model 3", "Model 3", "Mondeo"],
        }

    def test_suggestions_are_distinct_and_limited(self, api_client, make_car):
        make_car(name="Tesla Model 3", brand="Tesla", model="Model 3")
        make_car(name="Tesla Model Y", brand="Tesla", model="Model Y")

        response = api_client.get(f"{CARS_URL}suggestions/", {"q": "tesla", "limit": 2})

        assert response.data["results"] == ["Tesla Model 3", "Tesla Model Y"]
        unlimited = api_client.get(f"{CARS_URL}suggestions/", {"q": "tesla"})
        assert unlimited.data["results"] == ["Tesla Model 3", "Tesla Model Y", "Tesla"]

    def test_suggestions_require_query(self, api_client):
        assert api_client.get(f"{CARS_URL}suggestions/").status_code == 400
        assert api_client.get(f"{CARS_URL}suggestions/", {"q": "  "}).status_code == 400

    def test_popular_orders_by_views(self, api_client, make_car):
        quiet = make_car(name="Quiet", views=3)
        busy = make_car(name="Busy", views=50)
        make_car(name="Hidden", views=999, is_active=False)

        response = api_client.get(f"{CARS_URL}popular/")

        assert response.status_code == 200
        assert [c["id"] for c in response.data] == [busy.pk, quiet.pk]
        assert response.data[0] == {
            "id": busy.pk, "term": "Busy", "brand": busy.brand, "model": busy.model, "views": 50,
        }

    def test_popular_limit(self, api_client, make_car):
        for views in (1, 2, 3):
            make_car(views=views)
        response = api_client.get(f"{CARS_URL}popular/", {"limit": 2})
        assert [c["views"] for c in response.data] == [3, 2]


class TestCarAdministration:

    def test_admin_creates_car(self, auth_client, admin_user, car_payload):
        response = auth_client(admin_user).post(CARS_URL, car_payload, format="json")
        assert response.status_code == 201
        assert response.data["average_rating"] == 0.0
        assert response.data["review_count"] == 0

    def test_buyer_cannot_create_car(self, auth_client, buyer, car_payload):
        response = auth_client(buyer).post(CARS_URL, car_payload, format="json")
        assert response.status_code == 403

    def test_rating_fields_are_read_only(self, auth_client, admin_user, car):
        response = auth_client(admin_user).patch(
            car_url(car), {"average_rating": 5, "review_count": 99, "price": "18000.00"}, format="json"
        )
        assert response.status_code == 200
        car.refresh_from_db()
        assert car.price == Decimal("18000.00")
        assert (car.average_rating, car.review_count) == (Decimal("0.0"), 0)

    def test_original_price_below_price_rejected(self, auth_client, admin_user, car_payload):
        car_payload["original_price"] = "1000.00"
        response = auth_client(admin_user).post(CARS_URL, car_payload, format="json")
        assert response.status_code == 400
        assert "original_price" in response.data

    def test_delete_is_soft(self, auth_client, admin_user, car):
        response = auth_client(admin_user).delete(car_url(car))
        assert response.status_code == 200
        assert Car.objects.get(pk=car.pk).is_active is False


class TestRecomputeRatingEndpoint:

    def test_admin_repairs_drifted_rating(self, auth_client, admin_user, buyer, other_buyer, make_car, make_review):
        car = make_car(average_rating=Decimal("1.0"), review_count=12)
        make_review(car, buyer, rating=4)
        make_review(car, other_buyer, rating=5)

        response = auth_client(admin_user).post(car_url(car, "recompute-rating/"))

        assert response.status_code == 200
        assert response.data == {"car": car.pk, "average_rating": 4.5, "review_count": 2}
        car.refresh_from_db()
        assert (car.average_rating, car.review_count) == (Decimal("4.5"), 2)

    def test_buyer_forbidden(self, auth_client, buyer, car):
        response = auth_client(buyer).post(car_url(car, "recompute-rating/"))
        assert response.status_code == 403

    def test_unknown_car(self, auth_client, admin_user):
        response = auth_client(admin_user).post(f"{CARS_URL}424242/recompute-rating/")
        assert response.status_code == 404
