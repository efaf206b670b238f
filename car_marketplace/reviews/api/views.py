from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly, AllowAny
from rest_framework.response import Response
from rest_framework.viewsets import ModelViewSet
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiParameter, OpenApiResponse, OpenApiTypes

from car_marketplace.inventory.models import Car
from ..selectors import active_reviews, get_rating_stats
from ..services.review_service import ReviewService
from .serializers import (ReviewSerializer, ReviewUpdateSerializer, ReviewReadSerializer,
                          HelpfulCountSerializer, RatingStatsSerializer)


@extend_schema_view(
    list=extend_schema(
        tags=["Reviews"],
        summary="List reviews",
        description="Active reviews, newest first. Filter by `car`; order by `rating`, `created_at` or `helpful_count`.",
        responses=ReviewReadSerializer(many=True),
    ),
    retrieve=extend_schema(
        tags=["Reviews"],
        summary="Retrieve a review",
        responses={200: ReviewReadSerializer, 404: OpenApiResponse(description="Review not found")},
    ),
    create=extend_schema(
        tags=["Reviews"],
        summary="Create a review",
        description="Authenticated users can review a car once. The car's average rating and review count are updated.",
        request=ReviewSerializer,
        responses={
            201: ReviewReadSerializer,
            400: OpenApiResponse(description="Validation error or car already reviewed by this user"),
            404: OpenApiResponse(description="Car not found"),
        },
    ),
    update=extend_schema(
        tags=["Reviews"],
        summary="Update a review",
        description="Users can update their own review. Changing the rating updates the car's average rating.",
        request=ReviewUpdateSerializer,
        responses={
            200: ReviewReadSerializer,
            403: OpenApiResponse(description="Forbidden: cannot edit others' reviews"),
        },
    ),
    partial_update=extend_schema(
        tags=["Reviews"],
        summary="Partially update a review",
        request=ReviewUpdateSerializer,
        responses={
            200: ReviewReadSerializer,
            403: OpenApiResponse(description="Forbidden: cannot edit others' reviews"),
        },
    ),
    destroy=extend_schema(
        tags=["Reviews"],
        summary="Delete a review",
        description="Soft-deletes the review. Authors can delete their own reviews; admins can delete any.",
        responses={
            200: OpenApiResponse(description="Review deleted successfully"),
            403: OpenApiResponse(description="Forbidden: cannot delete others' reviews"),
        },
    ),
)
class ReviewViewSet(ModelViewSet):
    permission_classes = [IsAuthenticatedOrReadOnly]
    filterset_fields = ['car']
    ordering_fields = ['rating', 'created_at', 'helpful_count']
    ordering = ['-created_at']

    def get_queryset(self):
        return active_reviews()

    def get_serializer_class(self):
        if self.action in ['update', 'partial_update']:
            return ReviewUpdateSerializer
        if self.action in ['create']:
            return ReviewSerializer
        return ReviewReadSerializer

    def get_review_service(self):
        return ReviewService()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = self.get_review_service().create_review(
            user=request.user,
            car_id=serializer.validated_data['car'],
            rating=serializer.validated_data['rating'],
            title=serializer.validated_data['title'],
            text=serializer.validated_data['text'],
        )
        return Response(ReviewReadSerializer(review).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        review = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        review = self.get_review_service().update_review(review, request.user, serializer.validated_data)
        return Response(ReviewReadSerializer(review).data)

    def destroy(self, request, *args, **kwargs):
        review = self.get_object()
        self.get_review_service().delete_review(review, request.user)
        return Response({"detail": "Review deleted successfully."}, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Reviews"],
        summary="Mark a review as helpful",
        request=None,
        responses={200: HelpfulCountSerializer},
    )
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def helpful(self, request, pk=None):
        review = self.get_review_service().mark_helpful(self.get_object())
        return Response({"helpful_count": review.helpful_count})

    @extend_schema(
        tags=["Reviews"],
        summary="Report a review",
        request=None,
        responses={200: OpenApiResponse(description="Review reported successfully")},
    )
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def report(self, request, pk=None):
        self.get_review_service().report_review(self.get_object())
        return Response({"detail": "Review reported successfully."})

    @extend_schema(
        tags=["Reviews"],
        summary="Rating statistics for a car",
        description="Total active reviews, average rating and the count for each star value.",
        parameters=[
            OpenApiParameter(name="car_id", type=OpenApiTypes.INT, location="path", description="Car ID"),
        ],
        responses={200: RatingStatsSerializer, 404: OpenApiResponse(description="Car not found")},
    )
    @action(detail=False, methods=['get'], url_path=r'stats/(?P<car_id>\d+)', permission_classes=[AllowAny],
            filter_backends=[], pagination_class=None)
    def stats(self, request, car_id=None):
        if not Car.objects.filter(pk=car_id, is_active=True).exists():
            raise NotFound("Car not found.")
        return Response(RatingStatsSerializer(get_rating_stats(car_id)).data)
