"""Registration and login routes. Both return the access token to present on writes."""

from fastapi import APIRouter, Depends

from happythoughts.dependencies import get_user_store
from happythoughts.schemas.common import ErrorResponse
from happythoughts.schemas.user import AuthResponse, CredentialsRequest
from happythoughts.services.credential_service import credential_service
from happythoughts.stores.base import UserStore

router = APIRouter(tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResponse,
    responses={400: {"description": "Invalid input or username taken", "model": ErrorResponse}},
    summary="Create an account",
)
async def register(
    body: CredentialsRequest,
    users: UserStore = Depends(get_user_store),
) -> AuthResponse:
    user = await credential_service.register(users, body.username, body.password)
    return AuthResponse.model_validate(user)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={400: {"description": "Invalid username or password", "model": ErrorResponse}},
    summary="Exchange username and password for the access token",
)
async def login(
    body: CredentialsRequest,
    users: UserStore = Depends(get_user_store),
) -> AuthResponse:
    user = await credential_service.verify_login(users, body.username, body.password)
    return AuthResponse.model_validate(user)
