from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from typing import Optional
import logging

from ngohub.core.dependencies import get_auth_service
from ngohub.core.errors import AuthError, NgoHubError
from ngohub.core.security import decode_access_token
from ngohub.api.schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from ngohub.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])
security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


class TokenUser(BaseModel):
    user_id: str
    email: str


def to_http_exception(error: NgoHubError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Access token required")
    try:
        claims = decode_access_token(credentials.credentials)
    except AuthError as e:
        raise to_http_exception(e)
    return TokenUser(user_id=claims["sub"], email=claims.get("email", ""))


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[TokenUser]:
    """Anonymous callers are fine; a bad token is ignored rather than rejected."""
    if credentials is None:
        return None
    try:
        claims = decode_access_token(credentials.credentials)
    except AuthError:
        logger.info("Ignoring invalid bearer token on public route")
        return None
    return TokenUser(user_id=claims["sub"], email=claims.get("email", ""))


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def register(body: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)):
    try:
        user, token = auth_service.register(
            name=body.name,
            email=body.email,
            password=body.password,
            phone=body.phone
        )
    except NgoHubError as e:
        raise to_http_exception(e)

    return AuthResponse(
        message="User registered successfully",
        token=token,
        user=UserResponse.from_user(user)
    )


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    try:
        user, token = auth_service.login(email=body.email, password=body.password)
    except NgoHubError as e:
        raise to_http_exception(e)

    return AuthResponse(message="Login successful", token=token, user=UserResponse.from_user(user))
