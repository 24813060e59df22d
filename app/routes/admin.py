import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.auth_utils import get_current_user
from core.database import create_job, get_category_by_slug, get_stats
from core.vocabulary import JOB_TYPES, REMOTE_SCOPES
from worker import main as alert_worker

log = logging.getLogger("app")

router = APIRouter()


class JobIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=2, max_length=200)
    company_name: str = Field(alias="companyName", min_length=1, max_length=200)
    category_slug: str = Field(alias="categorySlug")
    location: str = "Remote"
    apply_url: str = Field(alias="applyUrl", min_length=1)
    description_html: str = Field(alias="descriptionHtml", default="")
    job_type: str = Field(alias="jobType", default="full_time")
    remote_scope: str = Field(alias="remoteScope", default="worldwide")
    salary_min: Optional[Decimal] = Field(alias="salaryMin", default=None, ge=0)
    salary_max: Optional[Decimal] = Field(alias="salaryMax", default=None, ge=0)
    salary_currency: str = Field(alias="salaryCurrency", default="USD", max_length=3)
    tags: List[str] = []
    is_featured: bool = Field(alias="isFeatured", default=False)
    is_premium: bool = Field(alias="isPremium", default=False)

    @field_validator("job_type")
    @classmethod
    def _job_type(cls, value: str) -> str:
        if value not in JOB_TYPES:
            raise ValueError(f"job type must be one of {', '.join(JOB_TYPES)}")
        return value

    @field_validator("remote_scope")
    @classmethod
    def _remote_scope(cls, value: str) -> str:
        if value not in REMOTE_SCOPES:
            raise ValueError(f"remote scope must be one of {', '.join(REMOTE_SCOPES)}")
        return value


def _require_admin(request: Request):
    user, _ = get_current_user(request)
    if not user:
        return None, JSONResponse({"error": "Unauthorized"}, status_code=401)
    if user.get("role") != "admin":
        return None, JSONResponse({"error": "Forbidden"}, status_code=403)
    return user, None


async def _notify_subscribers(job: dict) -> None:
    # Best effort: the listing is already stored.
    try:
        await alert_worker.notify_new_job(job)
    except Exception as e:
        log.exception("New job notification failed", extra={"job_id": job.get("id"), "error": str(e)})


@router.post("/api/admin/jobs", status_code=201)
def publish_job(payload: JobIn, request: Request, background_tasks: BackgroundTasks):
    _, denied = _require_admin(request)
    if denied:
        return denied

    category = get_category_by_slug(payload.category_slug)
    if not category:
        return JSONResponse({"error": "Unknown category"}, status_code=400)
    if payload.salary_min is not None and payload.salary_max is not None and payload.salary_max < payload.salary_min:
        return JSONResponse({"error": "salaryMax must not be below salaryMin"}, status_code=400)

    job = create_job(
        title=payload.title,
        company_name=payload.company_name,
        category_id=category["id"],
        location=payload.location,
        apply_url=payload.apply_url,
        description_html=payload.description_html,
        job_type=payload.job_type,
        remote_scope=payload.remote_scope,
        salary_min=payload.salary_min,
        salary_max=payload.salary_max,
        salary_currency=payload.salary_currency,
        tags=payload.tags,
        is_featured=payload.is_featured,
        is_premium=payload.is_premium,
    )
    background_tasks.add_task(_notify_subscribers, job)
    return {"job": job}


@router.get("/api/admin/stats")
def admin_stats(request: Request):
    _, denied = _require_admin(request)
    if denied:
        return denied
    return get_stats()
