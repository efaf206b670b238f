from django.db.models import Count

from car_marketplace.reviews.exceptions import NotFoundError
from car_marketplace.reviews.models import Review
from car_marketplace.reviews.services.rating_aggregator import compute_aggregate


class ReviewStore:
    """Read side of reviews used by the rating aggregator and review service."""

    @staticmethod
    def find_active_by_car_id(car_id) -> list[int]:
        return list(
            Review.objects.filter(car_id=car_id, is_active=True).values_list('rating', flat=True)
        )

    @staticmethod
    def exists_for_user_and_car(user_id, car_id) -> bool:
        # soft-deleted reviews count: a user gets one review per car, ever
        return Review.objects.filter(user_id=user_id, car_id=car_id).exists()

    @staticmethod
    def get_active(review_id) -> Review:
        try:
            return Review.objects.select_related('car', 'user').get(pk=review_id, is_active=True)
        except (Review.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Review not found.")


def active_reviews():
    return Review.objects.filter(is_active=True).select_related('car', 'user')


def get_rating_stats(car_id):
    """
    Totals and per-star counts over a car's active reviews.

    ``average_rating`` is rounded the same way as the cached car field.
    """
    rows = (
        Review.objects.filter(car_id=car_id, is_active=True)
        .values('rating')
        .annotate(total=Count('id'))
        .order_by()
    )
    rating_counts = {star: 0 for star in range(Review.MAX_RATING, Review.MIN_RATING - 1, -1)}
    ratings = []
    for row in rows:
        rating_counts[row['rating']] = row['total']
        ratings.extend([row['rating']] * row['total'])

    aggregate = compute_aggregate(ratings)
    return {
        'total_reviews': aggregate.review_count,
        'average_rating': aggregate.average_rating,
        'rating_counts': rating_counts,
    }
