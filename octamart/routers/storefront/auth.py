"""Storefront Auth Router"""
from fastapi import APIRouter, Depends

from octamart.auth import get_access_token, verify_user
from octamart.services.domains.users import user_to_dict
from octamart.services.models import UserProfile
from octamart.routers.deps import get_auth_service, get_customer_service, service_errors
from .models import LoginRequest, RegisterRequest, UpdateProfileRequest

router = APIRouter(prefix="/auth", tags=["storefront-auth"])


@router.post("/register", status_code=201)
async def register(request: RegisterRequest):
    """Create an account (Supabase Auth user + customer profile)."""
    with service_errors("Register"):
        user = await get_auth_service().register(request.email, request.password, request.name)
    return {"success": True, "data": user, "message": "Registration successful"}


@router.post("/login")
async def login(request: LoginRequest):
    with service_errors("Login"):
        session = await get_auth_service().login(request.email, request.password)
    return {"success": True, "data": session, "message": "Login successful"}


@router.post("/logout")
async def logout(token: str = Depends(get_access_token)):
    with service_errors("Logout"):
        await get_auth_service().logout(token)
    return {"success": True, "message": "Logged out"}


@router.get("/me")
async def me(user: UserProfile = Depends(verify_user)):
    return {"success": True, "data": user_to_dict(user)}


@router.put("/me")
async def update_me(request: UpdateProfileRequest, user: UserProfile = Depends(verify_user)):
    """Edit the caller's own name, phone and address."""
    with service_errors("Update profile"):
        updated = await get_customer_service().update_profile(
            user, name=request.name, phone=request.phone, address=request.address
        )
    return {"success": True, "data": user_to_dict(updated), "message": "Profile updated successfully"}
