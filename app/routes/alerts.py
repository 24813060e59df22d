import logging
from typing import Literal

from fastapi import APIRouter, BackgroundTasks, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from app.email_utils import send_html_email
from app.security import allow_request, is_valid_email
from core.database import (
    add_subscription,
    deactivate_subscription,
    get_or_create_user,
    get_subscriptions_for_email,
)
from worker.digest import render_confirmation

log = logging.getLogger("app")

router = APIRouter()


class AlertIn(BaseModel):
    email: str = Field(max_length=254)
    keyword: str = Field(min_length=2, max_length=100)
    frequency: Literal["daily", "weekly"] = "daily"

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        if not is_valid_email(value):
            raise ValueError("invalid email address")
        return value.strip().lower()

    @field_validator("keyword")
    @classmethod
    def _keyword(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("keyword must be at least 2 characters")
        return value


def _send_confirmation(email: str, keyword: str, frequency: str) -> None:
    subject, body = render_confirmation(keyword, frequency)
    try:
        send_html_email(email, subject, body)
    except Exception as e:
        log.error("Failed to send alert confirmation", extra={"to": email, "error": str(e)})


@router.get("/api/alerts")
def list_alerts(email: str = ""):
    email = email.strip().lower()
    if not email:
        return JSONResponse({"error": "email is required"}, status_code=400)
    return {"alerts": get_subscriptions_for_email(email)}


@router.post("/api/alerts", status_code=201)
def create_alert(payload: AlertIn, request: Request, background_tasks: BackgroundTasks):
    client_ip = request.client.host if request.client else "unknown"
    if not allow_request(f"alerts:{client_ip}", limit=10, window_seconds=60):
        return JSONResponse({"error": "Too many requests. Please wait a minute."}, status_code=429)

    user = get_or_create_user(payload.email)
    alert = add_subscription(
        payload.email,
        payload.keyword,
        frequency=payload.frequency,
        user_id=user["id"] if user else None,
    )
    log.info("Alert created", extra={"alert_id": alert["id"], "frequency": alert["frequency"]})
    background_tasks.add_task(_send_confirmation, payload.email, payload.keyword, payload.frequency)
    return {"alert": alert}


@router.delete("/api/alerts/{alert_id}")
def delete_alert(alert_id: int, email: str = ""):
    """Unsubscribe; the caller must name the address the alert belongs to."""
    email = email.strip().lower()
    owned = {a["id"] for a in get_subscriptions_for_email(email)} if email else set()
    if alert_id not in owned:
        return JSONResponse({"error": "Alert not found"}, status_code=404)
    deactivate_subscription(alert_id)
    return {"ok": True}
