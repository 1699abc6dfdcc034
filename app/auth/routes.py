"""
Authentication routes.

Provides endpoints for:
- Login for each principal kind (tourist, business admin, super admin)
- Tourist self-registration
- Current principal info
"""

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Request
from pydantic import BaseModel, EmailStr, Field

from turismo_core.auth.authenticator import Authenticator
from turismo_core.auth.dependencies import get_authenticator, require_authenticated
from turismo_core.auth.exceptions import InactiveAccount, InvalidCredentials
from turismo_core.config import settings
from turismo_core.domain.auth import AuthContext, Role, TouristProfile
from turismo_core.infrastructure.rate_limiter import limiter


router = APIRouter(prefix="/auth", tags=["auth"])


# =============================================================================
# Request/Response Schemas
# =============================================================================


class LoginRequest(BaseModel):
    """Email/password login request."""

    email: EmailStr
    password: str = Field(..., min_length=6)


class SuperAdminLoginRequest(BaseModel):
    """Username/password login request."""

    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)


class LoginResponse(BaseModel):
    token: str
    expires_in: int
    user: dict


class RegisterRequest(BaseModel):
    """Tourist registration request."""

    first_name: str = Field(..., min_length=2)
    last_name: str = Field(..., min_length=2)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: str | None = None
    origin_country: str | None = None
    origin_city: str | None = None


class RegisterResponse(BaseModel):
    id: int


class MeResponse(BaseModel):
    id: int
    role: str
    identifier: str
    business_id: int | None = None
    access_level: str | None = None


# =============================================================================
# Routes
# =============================================================================


def _login(
    authenticator: Authenticator,
    role: Role,
    identifier: str,
    password: str,
    background_tasks: BackgroundTasks,
) -> LoginResponse:
    try:
        result = authenticator.login(role, identifier, password, defer=background_tasks.add_task)
    except InactiveAccount:
        if not settings.EXPOSE_INACTIVE_ACCOUNT:
            raise InvalidCredentials() from None
        raise
    return LoginResponse(token=result.token, expires_in=result.expires_in, user=result.profile)


@router.post("/tourist/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def tourist_login(
    request: Request,
    background_tasks: BackgroundTasks,
    login_request: LoginRequest = Body(...),
    authenticator: Authenticator = Depends(get_authenticator),
):
    """Authenticate a tourist by email and password."""
    return _login(
        authenticator, Role.TOURIST, login_request.email, login_request.password, background_tasks
    )


@router.post("/business-admin/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def business_admin_login(
    request: Request,
    background_tasks: BackgroundTasks,
    login_request: LoginRequest = Body(...),
    authenticator: Authenticator = Depends(get_authenticator),
):
    """Authenticate a business admin. The token carries its business id."""
    return _login(
        authenticator,
        Role.BUSINESS_ADMIN,
        login_request.email,
        login_request.password,
        background_tasks,
    )


@router.post("/super-admin/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def super_admin_login(
    request: Request,
    background_tasks: BackgroundTasks,
    login_request: SuperAdminLoginRequest = Body(...),
    authenticator: Authenticator = Depends(get_authenticator),
):
    """Authenticate a super admin by username."""
    return _login(
        authenticator,
        Role.SUPER_ADMIN,
        login_request.username,
        login_request.password,
        background_tasks,
    )


@router.post("/tourist/register", response_model=RegisterResponse, status_code=201)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def register_tourist(
    request: Request,
    register_request: RegisterRequest = Body(...),
    authenticator: Authenticator = Depends(get_authenticator),
):
    """Register a new tourist. The tourist logs in separately afterwards."""
    profile = TouristProfile(
        first_name=register_request.first_name,
        last_name=register_request.last_name,
        email=register_request.email,
        phone=register_request.phone,
        origin_country=register_request.origin_country,
        origin_city=register_request.origin_city,
    )
    new_id = authenticator.register_tourist(profile, register_request.password)
    return RegisterResponse(id=new_id)


@router.get("/me", response_model=MeResponse)
def get_current_principal(auth: AuthContext = Depends(require_authenticated)):
    """Claims of the authenticated caller, as bound from the token."""
    claims = auth.claims
    return MeResponse(
        id=claims.principal_id,
        role=claims.role.value,
        identifier=claims.identifier,
        business_id=claims.business_id,
        access_level=claims.access_level,
    )
