import logging
from typing import Literal, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.auth_utils import clear_session_cookie, get_current_user, set_session_cookie
from app.security import allow_request_with_remaining, is_valid_email, is_valid_password
from core.database import (
    create_session,
    create_user,
    delete_session,
    get_user_by_email,
    get_user_by_id,
    set_user_password,
    set_user_role,
    verify_password,
)

log = logging.getLogger("app")

router = APIRouter()


class SignUpIn(BaseModel):
    email: str
    password: str
    name: Optional[str] = None
    role: Literal["user", "employer"] = "user"


class SignInIn(BaseModel):
    email: str
    password: str


def _public_user(user: dict) -> dict:
    return {"id": user["id"], "email": user["email"], "name": user.get("name"), "role": user.get("role")}


@router.post("/api/auth/sign-up", status_code=201)
def sign_up(payload: SignUpIn):
    email = payload.email.strip().lower()
    if not is_valid_email(email):
        return JSONResponse({"error": "Please enter a valid email address."}, status_code=400)
    if not is_valid_password(payload.password):
        return JSONResponse(
            {"error": "Password must be 8-25 characters and include a letter and a number."},
            status_code=400,
        )
    existing = get_user_by_email(email)
    if existing and existing.get("password_hash"):
        return JSONResponse({"error": "An account with this email already exists."}, status_code=409)

    if existing:
        # Row was created by an alert sign-up; claim it instead of inserting.
        user_id = existing["id"]
        set_user_password(user_id, payload.password)
        set_user_role(user_id, payload.role)
    else:
        user_id = create_user(email, payload.password, role=payload.role, name=payload.name)
    token = create_session(user_id)
    log.info("User signed up", extra={"user_id": user_id})

    resp = JSONResponse({"user": _public_user(get_user_by_id(user_id))}, status_code=201)
    set_session_cookie(resp, token)
    return resp


@router.post("/api/auth/sign-in")
def sign_in(payload: SignInIn, request: Request):
    email = payload.email.strip().lower()
    client_ip = request.client.host if request.client else "unknown"
    allowed, remaining = allow_request_with_remaining(f"login:{client_ip}:{email}", limit=5, window_seconds=60)
    if not allowed:
        return JSONResponse({"error": "Too many login attempts. Please wait a minute."}, status_code=429)

    user = get_user_by_email(email)
    if not user or not verify_password(payload.password, user.get("password_hash")):
        return JSONResponse(
            {"error": "Invalid email or password.", "remainingAttempts": remaining},
            status_code=401,
        )

    token = create_session(user["id"])
    resp = JSONResponse({"user": _public_user(user)})
    set_session_cookie(resp, token)
    return resp


@router.post("/api/auth/sign-out")
def sign_out(request: Request):
    _, token = get_current_user(request)
    if token:
        delete_session(token)
    resp = JSONResponse({"ok": True})
    clear_session_cookie(resp)
    return resp


@router.get("/api/auth/me")
def me(request: Request):
    user, _ = get_current_user(request)
    if not user:
        return JSONResponse({"user": None}, status_code=401)
    return {"user": _public_user(user)}
