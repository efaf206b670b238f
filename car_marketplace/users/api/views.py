from rest_framework import status
from rest_framework.generics import CreateAPIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema
from .serializers import UserRegistrationSerializer, UserSerializer
import logging

logger = logging.getLogger(__name__)


@extend_schema(
    tags=["Authentication & Users"],
    summary="Register a new user",
    description="Create an account. New users get the buyer role.",
    request=UserRegistrationSerializer,
    responses={201: UserSerializer},
)
class RegisterView(CreateAPIView):
    serializer_class = UserRegistrationSerializer
    permission_classes = [AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Authentication & Users"],
        summary="Get your own account",
        responses=UserSerializer,
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        tags=["Authentication & Users"],
        summary="Update your own name or avatar",
        request=UserSerializer,
        responses=UserSerializer,
    )
    def patch(self, request):
        serializer = UserSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"Account updated for {request.user.email}")
        return Response(serializer.data)
