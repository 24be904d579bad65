import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException
from supabase import Client

from app.core.errors import INTERNAL_ERROR
from app.core.validation import is_missing
from app.modules.profiles.schemas import ProfileRequest, ProfileResponse

logger = logging.getLogger(__name__)

NO_PROFILE = "user does not have a profile"

REQUIRED_FIELDS = (
    "first_name", "last_name", "age", "height", "weight", "gender", "goal",
    "level", "place", "able", "session_time", "days", "equipment",
)

GENDERS = {"male", "female", "other"}
GOALS = {"weight-loss", "muscle-gain", "general-fitness", "strength", "endurance"}
LEVELS = {"beginner", "intermediate", "advanced"}
PLACES = {"gym", "home", "outdoor", "hybrid"}


def _to_number(value: Any) -> Optional[float]:
    """Numbers and numeric strings; None for anything else (bools included)"""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).strip())
    except (ValueError, OverflowError):
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def _parse_json_field(value: Any) -> Any:
    """Objects and arrays pass through; strings are decoded. Raises ValueError otherwise."""
    if isinstance(value, (dict, list)):
        return value
    if isinstance(value, str):
        parsed = json.loads(value)
        if isinstance(parsed, (dict, list)):
            return parsed
    raise ValueError("not a JSON object or array")


def validate_profile(profile_data: ProfileRequest) -> Dict[str, Any]:
    """Check a profile payload and return the row to store. Raises HTTPException(400) on the first problem."""
    for field in REQUIRED_FIELDS:
        if is_missing(getattr(profile_data, field)):
            raise HTTPException(status_code=400, detail="data is missing")

    numbers = {}
    for field in ("age", "height", "weight", "days", "session_time"):
        number = _to_number(getattr(profile_data, field))
        if number is None:
            raise HTTPException(status_code=400, detail=f"invalid {field.replace('_', ' ')}")
        numbers[field] = number

    for field in ("age", "days", "session_time"):
        if not numbers[field].is_integer():
            raise HTTPException(status_code=400, detail=f"invalid {field.replace('_', ' ')}")

    if numbers["age"] > 100 or numbers["age"] < 0:
        raise HTTPException(status_code=400, detail="invalid age")
    if numbers["days"] > 7 or numbers["days"] < 0:
        raise HTTPException(status_code=400, detail="invalid days")
    if numbers["height"] < 0:
        raise HTTPException(status_code=400, detail="invalid height")
    if numbers["weight"] < 0:
        raise HTTPException(status_code=400, detail="invalid weight")
    if numbers["session_time"] <= 0:
        raise HTTPException(status_code=400, detail="invalid session time")

    json_fields = {}
    for field in ("equipment", "injuries", "others"):
        value = getattr(profile_data, field)
        if is_missing(value):
            json_fields[field] = None
            continue
        try:
            json_fields[field] = _parse_json_field(value)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"invalid {field}")

    for field, allowed in (("gender", GENDERS), ("goal", GOALS), ("level", LEVELS), ("place", PLACES)):
        if getattr(profile_data, field) not in allowed:
            raise HTTPException(status_code=400, detail=f"invalid {field}")

    return {
        "first_name": profile_data.first_name.strip(),
        "last_name": profile_data.last_name.strip(),
        "age": int(numbers["age"]),
        "gender": profile_data.gender,
        "height": numbers["height"],
        "weight": numbers["weight"],
        "goal": profile_data.goal,
        "level": profile_data.level,
        "place": profile_data.place,
        "equipment": json_fields["equipment"],
        "injuries": json_fields["injuries"],
        "others": json_fields["others"],
        "days": int(numbers["days"]),
        "session_time": int(numbers["session_time"]),
        "able": profile_data.able,
    }


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def find_profile(self, user_id: int) -> Optional[ProfileResponse]:
        """Profile for a user, or None while onboarding is incomplete"""
        result = self.supabase.table("profiles")\
            .select("*")\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return ProfileResponse(**result.data[0])

    def get_profile(self, user_id: int) -> ProfileResponse:
        try:
            profile = self.find_profile(user_id)
            if profile is None:
                raise HTTPException(status_code=404, detail=NO_PROFILE)
            return profile
        except HTTPException:
            raise
        except Exception:
            logger.exception("Error loading profile")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    def save_profile(self, user_id: int, profile_data: ProfileRequest) -> ProfileResponse:
        """Create the user's profile. A second save fails; there is no upsert."""
        row = validate_profile(profile_data)
        try:
            if self.find_profile(user_id) is not None:
                raise HTTPException(status_code=409, detail="profile already exists")

            row["user_id"] = user_id
            result = self.supabase.table("profiles").insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
            logger.info(f"Saved profile for user {user_id}")
            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            # Read-then-insert is not atomic; the primary key rejects the loser of a race
            error_message = str(e).lower()
            if "duplicate" in error_message or "23505" in error_message:
                raise HTTPException(status_code=409, detail="profile already exists")
            logger.exception("Error creating profile")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    def update_profile(self, user_id: int, profile_data: ProfileRequest) -> ProfileResponse:
        """Replace every field of an existing profile"""
        row = validate_profile(profile_data)
        try:
            row["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("profiles")\
                .update(row)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail=NO_PROFILE)
            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception:
            logger.exception("Error updating profile")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
