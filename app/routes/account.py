import logging
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.auth_utils import get_current_user
from core.database import get_preferences, save_preferences, set_user_role
from core.preferences import normalise_record

log = logging.getLogger("app")

router = APIRouter()


class PreferencesIn(BaseModel):
    answersByQuestionId: Dict[str, List[str]] = {}
    selectedCategory: Optional[str] = None


class RoleIn(BaseModel):
    role: Literal["user", "employer"]


def _unauthorized() -> JSONResponse:
    return JSONResponse({"error": "Unauthorized"}, status_code=401)


@router.get("/api/user/preferences")
def read_preferences(request: Request):
    user, _ = get_current_user(request)
    if not user:
        return _unauthorized()
    return {"preferences": get_preferences(user["id"])}


@router.post("/api/user/preferences")
def write_preferences(payload: PreferencesIn, request: Request):
    user, _ = get_current_user(request)
    if not user:
        return _unauthorized()
    # Whole-record replace; stored shape is always the normalised one.
    record = normalise_record(payload.model_dump())
    save_preferences(user["id"], record)
    log.info("Preferences saved", extra={"user_id": user["id"]})
    return {"ok": True, "preferences": record}


@router.post("/api/user/role")
def choose_role(payload: RoleIn, request: Request):
    user, _ = get_current_user(request)
    if not user:
        return _unauthorized()
    if user.get("role") == "admin":
        return JSONResponse({"error": "Admin role cannot be changed here"}, status_code=403)
    set_user_role(user["id"], payload.role)
    return {"ok": True, "role": payload.role}
