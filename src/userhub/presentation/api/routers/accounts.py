"""Account router for registration, login, and credential management."""

import logging

from fastapi import APIRouter, status

from userhub.presentation.api.dependencies import (
    AuthService,
    CurrentAccount,
    ResetService,
)
from userhub.presentation.api.schemas.accounts import (
    AccountDataResponse,
    AccountResponse,
    AuthResponse,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateProfileImageRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

FORGOT_PASSWORD_MESSAGE = (
    "If an account exists for this email address, a password reset email "
    "has been sent. Check your mail box and reset the password"
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
    summary="Register a new account",
    responses={
        201: {"description": "Account created and signed in"},
        400: {"description": "Invalid registration data"},
        409: {"description": "User name, phone or email already taken"},
    },
)
async def register(request: RegisterRequest, auth_service: AuthService):
    """Create an account and return an access token for it."""
    token, account = await auth_service.register(request.to_domain())
    return AuthResponse(
        message="User created successfully.",
        token=token,
        data=AccountResponse.from_domain(account),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with email and password",
    responses={401: {"description": "Invalid credentials"}},
)
async def login(request: LoginRequest, auth_service: AuthService):
    token, account = await auth_service.login(request.email, request.password)
    return AuthResponse(
        message="Logged in successfully.",
        token=token,
        data=AccountResponse.from_domain(account),
    )


@router.post(
    "/updatepassword",
    response_model=MessageResponse,
    summary="Change the current account's password",
    responses={
        400: {"description": "Missing fields, mismatch or weak password"},
        401: {"description": "Not authenticated or wrong current password"},
    },
)
async def update_password(
    request: ChangePasswordRequest,
    current_account: CurrentAccount,
    auth_service: AuthService,
):
    await auth_service.change_password(
        account_id=current_account.id,
        current_password=request.current_password,
        new_password=request.new_password,
        confirm_new_password=request.confirm_new_password,
    )
    return MessageResponse(message="Password update successfully")


@router.post(
    "/forgotpassword",
    response_model=MessageResponse,
    summary="Request a password reset email",
)
async def forgot_password(request: ForgotPasswordRequest, reset_service: ResetService):
    """Send a reset link if the email belongs to an account.

    The response is the same whether or not the account exists.
    """
    await reset_service.request_reset(request.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post(
    "/resetpassword/{token}",
    response_model=MessageResponse,
    summary="Set a new password with a reset token",
    responses={400: {"description": "Weak password or invalid/expired token"}},
)
async def reset_password(
    token: str,
    request: ResetPasswordRequest,
    reset_service: ResetService,
):
    await reset_service.reset_password(token, request.password)
    return MessageResponse(message="Password Reset successfully")


@router.get(
    "/get-current-user",
    response_model=AccountDataResponse,
    summary="Get the current account",
)
async def get_current_user(current_account: CurrentAccount):
    return AccountDataResponse(data=AccountResponse.from_domain(current_account))


@router.patch(
    "/update-user-profile-image",
    response_model=AccountDataResponse,
    summary="Replace the current account's profile image reference",
)
async def update_profile_image(
    request: UpdateProfileImageRequest,
    current_account: CurrentAccount,
    auth_service: AuthService,
):
    image = request.profile_image.to_domain() if request.profile_image else None
    account = await auth_service.update_profile_image(current_account.id, image)
    return AccountDataResponse(data=AccountResponse.from_domain(account))
