import logging
import os
import secrets

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from worker import main as alert_worker

log = logging.getLogger("app")

router = APIRouter()


def _secret_ok(given: str) -> bool:
    expected = os.getenv("CRON_SECRET", "")
    if not expected or not given:
        return False
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


@router.get("/api/cron/alerts")
async def run_alerts(secret: str = ""):
    if not _secret_ok(secret):
        return JSONResponse({"ok": False, "error": "Unauthorized"}, status_code=401)
    try:
        sent = await alert_worker.run_once()
    except Exception as e:
        log.exception("Alert run failed", extra={"error": str(e)})
        return JSONResponse({"ok": False, "error": "Alert run failed"}, status_code=500)
    return {"ok": True, "sent": sent}
