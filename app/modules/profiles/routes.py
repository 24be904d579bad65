from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_claims
from app.core.security import TokenClaims
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import MessageResponse
from app.modules.profiles.schemas import ProfileRequest, ProfileEnvelope
from app.modules.profiles.service import ProfileService
from supabase import Client

router = APIRouter(prefix="/profile", tags=["profile"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/get", response_model=ProfileEnvelope)
async def get_profile(
    claims: TokenClaims = Depends(get_current_claims),
    service: ProfileService = Depends(get_profile_service)
):
    """Current user's profile; 404 means onboarding is not finished yet"""
    return ProfileEnvelope(profile=service.get_profile(claims.user_id))


@router.post("/save", response_model=MessageResponse, status_code=201)
async def save_profile(
    profile_data: ProfileRequest,
    claims: TokenClaims = Depends(get_current_claims),
    service: ProfileService = Depends(get_profile_service)
):
    """Create the current user's profile"""
    service.save_profile(claims.user_id, profile_data)
    return MessageResponse(message="profile saved")


@router.put("/update", response_model=MessageResponse)
async def update_profile(
    profile_data: ProfileRequest,
    claims: TokenClaims = Depends(get_current_claims),
    service: ProfileService = Depends(get_profile_service)
):
    """Replace the current user's profile"""
    service.update_profile(claims.user_id, profile_data)
    return MessageResponse(message="profile updated")
