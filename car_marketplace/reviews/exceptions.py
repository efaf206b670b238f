from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError

__all__ = ["ValidationError", "DuplicateReviewError", "NotFoundError", "AggregationFailure"]


class DuplicateReviewError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "You have already reviewed this car."
    default_code = "duplicate_review"


class NotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class AggregationFailure(Exception):
    """
    Reading a car's active reviews or writing its cached rating failed.

    Caught where the recompute was triggered; never reaches the API.
    """

    def __init__(self, car_id):
        self.car_id = car_id
        super().__init__(f"Could not recompute rating for car {car_id}")
