from decimal import Decimal

from car_marketplace.inventory.models import Car


class CarRatingStore:
    """
    Write side of a car's cached rating fields.

    ``update_rating_fields`` goes through ``QuerySet.update()`` so only the two
    columns are written: no ``save()``, no ``full_clean()``, no ``auto_now``
    bump of ``updated_at``. A recompute never fails because some unrelated
    car field is invalid.
    """

    @staticmethod
    def exists(car_id) -> bool:
        return Car.objects.filter(pk=car_id).exists()

    @staticmethod
    def update_rating_fields(car_id, average_rating: Decimal, review_count: int) -> bool:
        """Return ``True`` when the car was updated, ``False`` when it is gone."""
        updated = Car.objects.filter(pk=car_id).update(
            average_rating=average_rating,
            review_count=review_count,
        )
        return updated > 0
