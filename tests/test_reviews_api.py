from decimal import Decimal

import pytest

from car_marketplace.reviews.models import Review

pytestmark = pytest.mark.django_db

REVIEWS_URL = "/api/reviews/"


def review_url(review):
    return f"{REVIEWS_URL}{review.pk}/"


class TestCreateReview:

    def test_create_updates_car_rating(self, auth_client, buyer, car, django_capture_on_commit_callbacks):
        payload = {"car": car.pk, "rating": 4, "title": "Great", "text": "Comfortable and quiet."}

        with django_capture_on_commit_callbacks(execute=True):
            response = auth_client(buyer).post(REVIEWS_URL, payload, format="json")

        assert response.status_code == 201
        assert response.data["rating"] == 4
        assert response.data["user"]["name"] == "Buyer One"
        assert response.data["car"]["id"] == car.pk
        car.refresh_from_db()
        assert (car.average_rating, car.review_count) == (Decimal("4.0"), 1)

    def test_anonymous_cannot_review(self, api_client, car):
        payload = {"car": car.pk, "rating": 4, "title": "Great", "text": "Comfortable."}
        response = api_client.post(REVIEWS_URL, payload, format="json")
        assert response.status_code == 401

    def test_duplicate_returns_400(self, auth_client, buyer, car, make_review):
        make_review(car, buyer)
        payload = {"car": car.pk, "rating": 5, "title": "Again", "text": "Second try."}

        response = auth_client(buyer).post(REVIEWS_URL, payload, format="json")

        assert response.status_code == 400
        assert response.data["detail"].code == "duplicate_review"

    @pytest.mark.parametrize("payload", [
        {"rating": 6, "title": "Too good", "text": "Off the scale."},
        {"rating": 0, "title": "Too bad", "text": "Below the scale."},
        {"rating": 3, "title": "", "text": "Missing title."},
        {"rating": 3, "title": "t" * 101, "text": "Long title."},
        {"rating": 3, "title": "Long text", "text": "x" * 1001},
    ])
    def test_invalid_payload(self, auth_client, buyer, car, payload):
        response = auth_client(buyer).post(REVIEWS_URL, {"car": car.pk, **payload}, format="json")
        assert response.status_code == 400
        assert not Review.objects.exists()

    def test_html_is_stripped(self, auth_client, buyer, car):
        payload = {"car": car.pk, "rating": 3, "title": "<b>Bold</b>", "text": "<script>x</script>Fine"}
        response = auth_client(buyer).post(REVIEWS_URL, payload, format="json")
        assert response.status_code == 201
        assert response.data["title"] == "Bold"
        assert "<script>" not in response.data["text"]

    def test_unknown_car_returns_404(self, auth_client, buyer):
        payload = {"car": 98765, "rating": 3, "title": "Ghost", "text": "No such car."}
        response = auth_client(buyer).post(REVIEWS_URL, payload, format="json")
        assert response.status_code == 404


class TestListReviews:

    def test_lists_active_reviews_for_car(self, api_client, make_car, buyer, other_buyer, make_review):
        car, other_car = make_car(), make_car()
        kept = make_review(car, buyer, rating=5)
        make_review(car, other_buyer, rating=1, is_active=False)
        make_review(other_car, buyer, rating=2)

        response = api_client.get(REVIEWS_URL, {"car": car.pk})

        assert response.status_code == 200
        assert response.data["total"] == 1
        assert [item["id"] for item in response.data["results"]] == [kept.pk]

    def test_soft_deleted_review_is_not_found(self, api_client, car, buyer, make_review):
        review = make_review(car, buyer, is_active=False)
        assert api_client.get(review_url(review)).status_code == 404


class TestUpdateAndDelete:

    def test_author_updates_rating(self, auth_client, buyer, car, make_review, django_capture_on_commit_callbacks):
        review = make_review(car, buyer, rating=2)

        with django_capture_on_commit_callbacks(execute=True):
            response = auth_client(buyer).patch(review_url(review), {"rating": 5}, format="json")

        assert response.status_code == 200
        car.refresh_from_db()
        assert (car.average_rating, car.review_count) == (Decimal("5.0"), 1)

    def test_other_user_cannot_update(self, auth_client, buyer, other_buyer, car, make_review):
        review = make_review(car, buyer, rating=2)
        response = auth_client(other_buyer).patch(review_url(review), {"rating": 5}, format="json")
        assert response.status_code == 403

    def test_delete_is_soft(self, auth_client, buyer, car, make_review, django_capture_on_commit_callbacks):
        review = make_review(car, buyer, rating=3)

        with django_capture_on_commit_callbacks(execute=True):
            response = auth_client(buyer).delete(review_url(review))

        assert response.status_code == 200
        review.refresh_from_db()
        assert review.is_active is False
        car.refresh_from_db()
        assert (car.average_rating, car.review_count) == (Decimal("0.0"), 0)

    def test_admin_deletes_any_review(self, auth_client, admin_user, buyer, car, make_review):
        review = make_review(car, buyer)
        assert auth_client(admin_user).delete(review_url(review)).status_code == 200


class TestHelpfulAndReport:

    def test_helpful_counts_up(self, auth_client, buyer, other_buyer, make_car, make_review):
        car = make_car(average_rating=Decimal("2.5"), review_count=2)
        review = make_review(car, buyer, rating=5)

        response = auth_client(other_buyer).post(f"{review_url(review)}helpful/")

        assert response.status_code == 200
        assert response.data == {"helpful_count": 1}
        car.refresh_from_db()
        assert (car.average_rating, car.review_count) == (Decimal("2.5"), 2)

    def test_report(self, auth_client, buyer, other_buyer, car, make_review):
        review = make_review(car, buyer)
        response = auth_client(other_buyer).post(f"{review_url(review)}report/")
        assert response.status_code == 200
        review.refresh_from_db()
        assert review.report_count == 1

    def test_helpful_requires_login(self, api_client, buyer, car, make_review):
        review = make_review(car, buyer)
        assert api_client.post(f"{review_url(review)}helpful/").status_code == 401


class TestRatingStats:

    def test_stats(self, api_client, car, make_review, buyer, other_buyer, admin_user):
        make_review(car, buyer, rating=5)
        make_review(car, other_buyer, rating=4)
        make_review(car, admin_user, rating=1, is_active=False)

        response = api_client.get(f"{REVIEWS_URL}stats/{car.pk}/")

        assert response.status_code == 200
        assert response.data["total_reviews"] == 2
        assert response.data["average_rating"] == 4.5
        assert response.data["rating_counts"] == {"5": 1, "4": 1, "3": 0, "2": 0, "1": 0}

    def test_stats_without_reviews(self, api_client, car):
        response = api_client.get(f"{REVIEWS_URL}stats/{car.pk}/")
        assert response.data["total_reviews"] == 0
        assert response.data["average_rating"] == 0.0

    def test_stats_unknown_car(self, api_client):
        assert api_client.get(f"{REVIEWS_URL}stats/424242/").status_code == 404
