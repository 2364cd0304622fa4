from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema
from .authentication import set_session_cookie, clear_session_cookie
from .serializers import (
    UserSerializer,
    UserLoginSerializer,
    PasswordChangeSerializer,
)
from .services import (
    authenticate_staff,
    change_password as change_user_password,
    InvalidCredentialsError,
    InactiveAccountError,
    SignInNotAllowedError,
    PasswordConfirmationError,
    InvalidAccountDataError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class LoginDataSerializer(serializers.Serializer):
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class LoginResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    data = LoginDataSerializer()


class SuccessResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()


class ErrorResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    error = serializers.CharField()


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: LoginResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Sign in with email and password. Sets the HTTP-only session cookie and also returns JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Staff login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_staff(**serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response({'success': False, 'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except (InactiveAccountError, SignInNotAllowedError) as e:
        return Response({'success': False, 'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    refresh = RefreshToken.for_user(user)
    response = Response({
        'success': True,
        'data': {
            'user': UserSerializer(user).data,
            'tokens': {
                'refresh': str(refresh),
                'access': str(refresh.access_token),
            },
        },
    })
    return set_session_cookie(response, refresh.access_token)


@extend_schema(
    request=None,
    responses={200: SuccessResponseSerializer},
    description="Clear the session cookie.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def logout(request):
    """Logout by dropping the session cookie."""
    response = Response({'success': True})
    return clear_session_cookie(response)


@extend_schema(
    responses={200: UserSerializer},
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current user profile."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    request=PasswordChangeSerializer,
    responses={
        200: SuccessResponseSerializer,
        400: ErrorResponseSerializer,
    },
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password(request):
    """Change the current user's password."""
    serializer = PasswordChangeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        change_user_password(user=request.user, **serializer.validated_data)
    except (InvalidCredentialsError, PasswordConfirmationError, InvalidAccountDataError) as e:
        return Response({'success': False, 'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'success': True})
