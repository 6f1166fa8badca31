"""Authentication API routes."""

import logging

from fastapi import APIRouter

from src.api.deps import AuthServiceDep
from src.models.auth import LoginRequest, LoginResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(login_request: LoginRequest, service: AuthServiceDep) -> LoginResponse:
    """Log in with email and password, or sign up when ``isSignup`` is true.

    Returns:
        ``{userId, email, subscriptions}`` where subscriptions maps every
        agent the user may use to true.
    """
    return await service.login(login_request)
