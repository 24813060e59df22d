"""
Listing and company search endpoints, including the preference-driven feed.
"""
import logging

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.auth_utils import get_current_user
from core.database import (
    find_companies_by_name,
    get_job_by_slug,
    get_preferences,
    get_similar_jobs,
    search_companies,
    search_jobs,
)
from core.preferences import translate_preferences
from core.search import FilterSet, parse_company_filters, parse_job_filters

log = logging.getLogger("app")

router = APIRouter()


def _job_page(result: dict) -> dict:
    return {
        "page": result["page"],
        "pageSize": result["pageSize"],
        "total": result["total"],
        "totalPages": result["totalPages"],
        "jobs": result["items"],
    }


def _search_failed(filters, key: str, error: Exception, **extra) -> JSONResponse:
    log.exception("Search failed", extra={"error": str(error)})
    body = {
        "page": filters.page,
        "pageSize": filters.page_size,
        "total": 0,
        "totalPages": 0,
        key: [],
        "error": "Search is temporarily unavailable",
    }
    body.update(extra)
    return JSONResponse(jsonable_encoder(body), status_code=500)


@router.get("/api/jobs")
def list_jobs(request: Request):
    filters = parse_job_filters(request.query_params)
    try:
        result = search_jobs(filters)
    except Exception as e:
        return _search_failed(filters, "jobs", e)
    return _job_page(result)


@router.get("/api/jobs/optimised")
def optimised_jobs(request: Request):
    user, _ = get_current_user(request)
    if not user:
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    # Paging follows the request; everything else comes from the stored answers.
    requested = parse_job_filters(request.query_params)
    try:
        filters = translate_preferences(get_preferences(user["id"]))
        if not filters.has_constraints():
            filters = FilterSet()
        filters.page = requested.page
        filters.page_size = requested.page_size
        result = search_jobs(filters)
    except Exception as e:
        return _search_failed(requested, "jobs", e, optimised=False, filters={})

    body = _job_page(result)
    body["optimised"] = filters.optimised
    body["filters"] = filters.as_params()
    return body


@router.get("/api/jobs/{slug}")
def job_detail(slug: str):
    try:
        job = get_job_by_slug(slug)
        if not job:
            return JSONResponse({"error": "Not found"}, status_code=404)
        similar = get_similar_jobs(job["category_id"], slug)
    except Exception as e:
        log.exception("Job lookup failed", extra={"slug": slug, "error": str(e)})
        return JSONResponse({"error": "Job lookup failed"}, status_code=500)
    return {"job": job, "similar": similar}


@router.get("/api/companies")
def list_companies(request: Request):
    filters = parse_company_filters(request.query_params)
    try:
        result = search_companies(filters)
    except Exception as e:
        return _search_failed(filters, "companies", e)
    return {
        "page": result["page"],
        "pageSize": result["pageSize"],
        "total": result["total"],
        "totalPages": result["totalPages"],
        "companies": result["items"],
    }


@router.get("/api/companies/search")
def company_lookup(q: str = ""):
    try:
        companies = find_companies_by_name(q)
    except Exception as e:
        log.exception("Company lookup failed", extra={"error": str(e)})
        return JSONResponse({"companies": [], "error": "Lookup failed"}, status_code=500)
    return {"companies": companies}
