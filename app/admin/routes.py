"""
Administration routes.

Business admins are never self-registered: a super admin creates them and
binds each one to a single business.
"""

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, EmailStr, Field

from turismo_core.auth.authenticator import Authenticator
from turismo_core.auth.dependencies import (
    get_authenticator,
    require_business_access,
    require_super_admin,
)
from turismo_core.domain.auth import AuthContext, BusinessAdminProfile


router = APIRouter(prefix="/admin", tags=["admin"])


class CreateBusinessAdminRequest(BaseModel):
    business_id: int = Field(..., ge=1)
    first_name: str = Field(..., min_length=2)
    last_name: str = Field(..., min_length=2)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: str | None = None
    position: str | None = None


class CreatedResponse(BaseModel):
    id: int


class BusinessAccessResponse(BaseModel):
    business_id: int
    role: str
    principal_id: int


@router.post("/business-admins", response_model=CreatedResponse, status_code=201)
def create_business_admin(
    create_request: CreateBusinessAdminRequest = Body(...),
    auth: AuthContext = Depends(require_super_admin),
    authenticator: Authenticator = Depends(get_authenticator),
):
    """Create a business admin bound to `business_id` (super admin only)."""
    profile = BusinessAdminProfile(
        business_id=create_request.business_id,
        first_name=create_request.first_name,
        last_name=create_request.last_name,
        email=create_request.email,
        phone=create_request.phone,
        position=create_request.position,
    )
    new_id = authenticator.create_business_admin(profile, create_request.password)
    return CreatedResponse(id=new_id)


@router.get("/businesses/{business_id}/access", response_model=BusinessAccessResponse)
def check_business_access(
    business_id: int,
    auth: AuthContext = Depends(require_business_access),
):
    """Confirm the caller may manage `business_id`; 403 otherwise."""
    return BusinessAccessResponse(
        business_id=business_id,
        role=auth.role.value,
        principal_id=auth.principal_id,
    )
