import logging

from django.db import IntegrityError, transaction
from django.db.models import F
from rest_framework.exceptions import PermissionDenied

from car_marketplace.inventory.models import Car
from car_marketplace.reviews.exceptions import DuplicateReviewError, NotFoundError, ValidationError
from car_marketplace.reviews.models import Review
from car_marketplace.reviews.selectors import ReviewStore
from car_marketplace.reviews.services.rating_aggregator import build_rating_aggregator
from car_marketplace.users.permissions import is_admin

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('title', 'text', 'rating')


def validate_review_fields(data, partial=False):
    """
    Check rating, title and text; raise ``ValidationError`` listing every bad field.

    With ``partial=True`` only the fields present in ``data`` are checked.
    Returns the cleaned values.
    """
    errors = {}
    cleaned = {}

    if 'rating' in data or not partial:
        rating = data.get('rating')
        if isinstance(rating, bool) or not isinstance(rating, int):
            errors['rating'] = ["Rating must be a whole number between 1 and 5."]
        elif not Review.MIN_RATING <= rating <= Review.MAX_RATING:
            errors['rating'] = ["Rating must be between 1 and 5."]
        else:
            cleaned['rating'] = rating

    for field, max_length in (('title', Review.TITLE_MAX_LENGTH), ('text', Review.TEXT_MAX_LENGTH)):
        if field not in data and partial:
            continue
        value = data.get(field)
        value = value.strip() if isinstance(value, str) else ''
        if not value:
            errors[field] = [f"{field.capitalize()} is required."]
        elif len(value) > max_length:
            errors[field] = [f"{field.capitalize()} cannot be more than {max_length} characters."]
        else:
            cleaned[field] = value

    if errors:
        raise ValidationError(errors)
    return cleaned


class ReviewService:
    """
    Every review write goes through here.

    Each logical mutation that can change a car's rating schedules exactly one
    ``RatingAggregator.refresh`` for the car, run once the write has committed.
    Helpful votes, reports and title/text edits leave the rating alone.
    """

    def __init__(self, aggregator=None, review_store=None):
        self.aggregator = aggregator or build_rating_aggregator()
        self.review_store = review_store or ReviewStore()

    def schedule_rating_refresh(self, car_id):
        # robust: nothing raised by the recompute can fail the committed review write
        transaction.on_commit(lambda: self.aggregator.refresh(car_id), robust=True)

    @staticmethod
    def _ensure_active(review):
        if not review.is_active:
            raise NotFoundError("Review not found.")

    def create_review(self, user, car_id, rating, title, text):
        cleaned = validate_review_fields({'rating': rating, 'title': title, 'text': text})

        if not Car.objects.filter(pk=car_id, is_active=True).exists():
            raise NotFoundError("Car not found.")

        if self.review_store.exists_for_user_and_car(user.pk, car_id):
            raise DuplicateReviewError()

        try:
            with transaction.atomic():
                review = Review.objects.create(car_id=car_id, user=user, **cleaned)
        except IntegrityError:
            # lost a race with a concurrent create for the same pair
            raise DuplicateReviewError()

        self.schedule_rating_refresh(car_id)
        logger.info(f"Review {review.pk} created by {user.email} for car {car_id}")
        return review

    def update_review(self, review, user, data):
        self._ensure_active(review)
        if review.user_id != user.pk:
            raise PermissionDenied("You can only edit your own review.")

        changes = validate_review_fields(
            {key: value for key, value in data.items() if key in EDITABLE_FIELDS},
            partial=True,
        )
        changed_fields = [field for field, value in changes.items() if getattr(review, field) != value]
        if not changed_fields:
            return review

        rating_changed = 'rating' in changed_fields
        for field in changed_fields:
            setattr(review, field, changes[field])
        review.save(update_fields=[*changed_fields, 'updated_at'])

        if rating_changed:
            self.schedule_rating_refresh(review.car_id)
        logger.info(f"Review {review.pk} updated by {user.email}: {', '.join(changed_fields)}")
        return review

    def delete_review(self, review, user):
        """Soft delete: the row stays, ``is_active`` becomes False."""
        self._ensure_active(review)
        if review.user_id != user.pk and not is_admin(user):
            raise PermissionDenied("You can only delete your own review.")

        review.is_active = False
        review.save(update_fields=['is_active', 'updated_at'])

        self.schedule_rating_refresh(review.car_id)
        logger.info(f"Review {review.pk} deleted by {user.email}")
        return review

    def hard_delete_review(self, review):
        car_id = review.car_id
        review_id = review.pk
        review.delete()

        self.schedule_rating_refresh(car_id)
        logger.info(f"Review {review_id} permanently removed from car {car_id}")

    def mark_helpful(self, review):
        return self._increment(review, 'helpful_count')

    def report_review(self, review):
        review = self._increment(review, 'report_count')
        logger.info(f"Review {review.pk} reported ({review.report_count} reports)")
        return review

    def _increment(self, review, field):
        self._ensure_active(review)
        Review.objects.filter(pk=review.pk).update(**{field: F(field) + 1})
        review.refresh_from_db(fields=[field])
        return review
