"""
Keeps ``Car.average_rating`` / ``Car.review_count`` in step with the car's
active reviews.

The two fields are a cache: they can always be rebuilt from the review rows,
so no locking is done. Two mutations racing on the same car may leave the
aggregate one review behind until the next recompute for that car.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
import logging

from django.db import DatabaseError

from car_marketplace.reviews.exceptions import AggregationFailure

logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal('0.1')


@dataclass(frozen=True)
class RatingAggregate:
    average_rating: Decimal
    review_count: int

    @classmethod
    def empty(cls):
        return cls(average_rating=Decimal('0.0'), review_count=0)


def round_rating(mean: Decimal) -> Decimal:
    """Round to one decimal place, halves away from zero (4.25 -> 4.3, 4.15 -> 4.2)."""
    return mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def compute_aggregate(ratings) -> RatingAggregate:
    ratings = list(ratings)
    if not ratings:
        return RatingAggregate.empty()
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return RatingAggregate(average_rating=round_rating(mean), review_count=len(ratings))


class RatingAggregator:
    """
    Recompute a car's cached rating from its active reviews.

    ``review_store`` must provide ``find_active_by_car_id(car_id)``;
    ``car_store`` must provide ``exists(car_id)`` and
    ``update_rating_fields(car_id, average_rating, review_count)``.
    """

    def __init__(self, review_store, car_store):
        self.review_store = review_store
        self.car_store = car_store

    def recompute(self, car_id):
        """
        Read the active ratings, write the aggregate back to the car.

        Returns the stored ``RatingAggregate``, or ``None`` when the car no
        longer exists. Storage errors are raised as ``AggregationFailure``.
        """
        try:
            if not self.car_store.exists(car_id):
                logger.warning(f"Skipping rating recompute: car {car_id} does not exist")
                return None
            aggregate = compute_aggregate(self.review_store.find_active_by_car_id(car_id))
            updated = self.car_store.update_rating_fields(
                car_id, aggregate.average_rating, aggregate.review_count
            )
        except DatabaseError as exc:
            raise AggregationFailure(car_id) from exc

        if not updated:
            # deleted between the read and the write
            logger.warning(f"Skipping rating recompute: car {car_id} was deleted")
            return None

        logger.debug(
            f"Car {car_id} rating recomputed: average={aggregate.average_rating} "
            f"count={aggregate.review_count}"
        )
        return aggregate

    def refresh(self, car_id):
        """
        ``recompute`` for review mutations: a failure is logged, never raised.

        The review write has already succeeded; a stale aggregate is repaired
        by the next mutation on the car or by ``recompute_car_ratings``.
        """
        try:
            return self.recompute(car_id)
        except AggregationFailure:
            logger.exception(f"Rating recompute failed for car {car_id}; cached rating may be stale")
            return None


def build_rating_aggregator():
    from car_marketplace.inventory.services.car_rating_store import CarRatingStore
    from car_marketplace.reviews.selectors import ReviewStore

    return RatingAggregator(review_store=ReviewStore(), car_store=CarRatingStore())
