import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.database import get_stats
from core.vocabulary import get_join_questions

log = logging.getLogger("app")

router = APIRouter()


@router.get("/health")
def health():
    try:
        stats = get_stats()
    except Exception as e:
        log.exception("Health check failed", extra={"error": str(e)})
        return JSONResponse({"status": "error", "error": "database unavailable"}, status_code=503)
    return {"status": "ok", **stats}


@router.get("/api/join/questions")
def join_questions(category: Optional[str] = None):
    return {"questions": get_join_questions(category)}
