import logging

from django.db import transaction
from rest_framework import status, viewsets
from rest_framework.exceptions import NotFound
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import (extend_schema, extend_schema_view, OpenApiExample, OpenApiResponse)

from ..filters import CarFilter
from ..services.car_query_service import CarQueryService
from .serializers import (CarSerializer, FilterOptionsSerializer, PopularCarSerializer, PopularQuerySerializer,
                          RatingAggregateSerializer, SuggestionQuerySerializer, SuggestionsSerializer)
from car_marketplace.reviews.exceptions import AggregationFailure
from car_marketplace.reviews.services.rating_aggregator import build_rating_aggregator
from car_marketplace.users.permissions import IsAdmin, IsAdminOrReadOnly

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(
        tags=["Cars"],
        description=(
            "List active cars. Filter by `category`, `condition`, `brand`, `fuel_type`, "
            "`min_price`, `max_price`, `featured`; search with `q`; order with `ordering` "
            "(`price`, `year`, `name`, `created_at`, `average_rating`, prefix `-` for descending)."
        ),
        responses={200: CarSerializer(many=True)},
    ),
    retrieve=extend_schema(
        tags=["Cars"],
        description="Retrieve an active car. Each retrieval counts as a view.",
        responses={
            200: CarSerializer,
            404: OpenApiResponse(
                response={"type": "object", "properties": {"detail": {"type": "string"}}},
                description="Car not found.",
                examples=[OpenApiExample("Not Found", value={"detail": "No Car matches the given query."})]
            )
        }
    ),
    create=extend_schema(
        tags=["Cars"],
        description="Create a car listing (admin only).",
        request=CarSerializer,
        responses={201: CarSerializer}
    ),
    update=extend_schema(
        tags=["Cars"],
        description="Update a car listing (admin only). Rating fields are read-only.",
        request=CarSerializer,
        responses={200: CarSerializer}
    ),
    partial_update=extend_schema(
        tags=["Cars"],
        description="Partially update a car listing (admin only).",
        request=CarSerializer,
        responses={200: CarSerializer}
    ),
    destroy=extend_schema(
        tags=["Cars"],
        description="Soft-delete a car listing (admin only).",
        responses={200: OpenApiResponse(description="Car deleted successfully")}
    ),
)
class CarViewSet(viewsets.ModelViewSet):
    serializer_class = CarSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_class = CarFilter
    ordering_fields = ['price', 'year', 'name', 'created_at', 'average_rating']
    ordering = ['-created_at']

    def get_queryset(self):
        return CarQueryService.get_visible_cars_for_user(self.request.user)

    def retrieve(self, request, *args, **kwargs):
        car = CarQueryService.increment_views(self.get_object())
        return Response(self.get_serializer(car).data)

    def perform_create(self, serializer):
        car = serializer.save()
        logger.info(f"Car {car.pk} created by {self.request.user.email}")

    def perform_update(self, serializer):
        car = serializer.save()
        logger.info(f"Car {car.pk} updated by {self.request.user.email}")

    def destroy(self, request, *args, **kwargs):
        car = CarQueryService.soft_delete(self.get_object())
        logger.info(f"Car {car.pk} deleted by {request.user.email}")
        return Response({"detail": "Car deleted successfully."}, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Cars"],
        description="Up to six featured active cars, newest first.",
        responses={200: CarSerializer(many=True)}
    )
    @action(detail=False, methods=['get'], pagination_class=None, filter_backends=[])
    def featured(self, request):
        cars = CarQueryService.get_featured_cars()
        return Response(self.get_serializer(cars, many=True).data)

    @extend_schema(
        tags=["Cars"],
        description="Brands, categories, conditions, fuel types, price range and year range available for filtering.",
        responses={200: FilterOptionsSerializer}
    )
    @action(detail=False, methods=['get'], pagination_class=None, filter_backends=[])
    def filters(self, request):
        return Response(FilterOptionsSerializer(CarQueryService.get_filter_options()).data)

    @extend_schema(
        tags=["Cars"],
        description="Car names, brands and models containing `q`, for search-as-you-type.",
        parameters=[SuggestionQuerySerializer],
        responses={200: SuggestionsSerializer}
    )
    @action(detail=False, methods=['get'], pagination_class=None, filter_backends=[])
    def suggestions(self, request):
        params = SuggestionQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        suggestions = CarQueryService.get_search_suggestions(
            params.validated_data['q'], limit=params.validated_data['limit']
        )
        return Response(SuggestionsSerializer({"count": len(suggestions), "results": suggestions}).data)

    @extend_schema(
        tags=["Cars"],
        description="Most viewed active cars.",
        parameters=[PopularQuerySerializer],
        responses={200: PopularCarSerializer(many=True)}
    )
    @action(detail=False, methods=['get'], pagination_class=None, filter_backends=[])
    def popular(self, request):
        params = PopularQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        cars = CarQueryService.get_popular_cars(limit=params.validated_data['limit'])
        return Response(PopularCarSerializer(cars, many=True).data)

    @extend_schema(
        tags=["Cars"],
        description=(
            "Recompute the car's average rating and review count from its active reviews (admin only). "
            "Repairs a cached rating that drifted, e.g. after a bulk import."
        ),
        request=None,
        responses={
            200: RatingAggregateSerializer,
            503: OpenApiResponse(description="Storage unavailable, try again"),
        }
    )
    @action(detail=True, methods=['post'], url_path='recompute-rating', permission_classes=[IsAdmin])
    def recompute_rating(self, request, pk=None):
        car = self.get_object()
        try:
            with transaction.atomic():
                aggregate = build_rating_aggregator().recompute(car.pk)
        except AggregationFailure:
            logger.exception(f"Manual rating recompute failed for car {car.pk}")
            return Response(
                {"detail": "Could not recompute the rating, try again later."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        if aggregate is None:
            raise NotFound("Car not found.")
        logger.info(f"Car {car.pk} rating recomputed by {request.user.email}")
        return Response(RatingAggregateSerializer({
            "car": car.pk,
            "average_rating": aggregate.average_rating,
            "review_count": aggregate.review_count,
        }).data)
