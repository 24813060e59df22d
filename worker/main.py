import asyncio
import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from dotenv import load_dotenv

from app.email_utils import send_html_email
from core.database import get_active_subscriptions, get_jobs_posted_since, init_db
from worker.digest import SEND_DELAY_SECONDS, dispatch_digests
from worker.matching import match_alerts

# Load `.env` for local/dev runs (override=True so updates take effect after restart).
load_dotenv(override=True)

# -------- CONFIG --------
ALERT_WINDOW_HOURS = int(os.getenv("ALERT_WINDOW_HOURS", "24"))
# Seconds between runs when looping; 0 means a single run (cron-style).
CHECK_INTERVAL = int(os.getenv("CHECK_INTERVAL", "0"))
# ------------------------

log = logging.getLogger("worker")


def send_email(to_email: str, subject: str, html: str) -> None:
    """Mail capability used by both the digest and the on-publish notifier."""
    send_html_email(to_email, subject, html)


async def run_once(now: Optional[datetime] = None) -> int:
    """
    One digest run:
    - load listings posted inside the window (stop early if there are none)
    - match them against every active keyword alert
    - send one email per recipient, sequentially
    Store reads run in a worker thread off the caller's event loop.
    Returns number of emails sent. Store errors propagate.
    """
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(hours=ALERT_WINDOW_HOURS)

    recent_jobs = await asyncio.to_thread(get_jobs_posted_since, since)
    if not recent_jobs:
        log.info("No new jobs in window.", extra={"since": since.isoformat()})
        return 0

    subs = await asyncio.to_thread(get_active_subscriptions)
    if not subs:
        log.info("No active alerts. Nothing to send.")
        return 0

    batch = match_alerts(subs, recent_jobs)
    log.info(
        "Matched alerts",
        extra={"jobs": len(recent_jobs), "alerts": len(subs), "recipients": len(batch)},
    )

    sent_count = await dispatch_digests(batch, send=send_email, delay=SEND_DELAY_SECONDS)
    log.info("Cycle complete", extra={"sent_emails": sent_count})
    return sent_count


async def notify_new_job(job: Dict) -> int:
    """
    Real-time notify for one freshly created listing; same matching and the same
    sequential send discipline as the digest.
    """
    subs = await asyncio.to_thread(get_active_subscriptions)
    batch = match_alerts(subs, [job])
    if not batch:
        return 0
    sent_count = await dispatch_digests(batch, send=send_email, delay=SEND_DELAY_SECONDS)
    log.info("New job notifications sent", extra={"job_id": job.get("id"), "sent_emails": sent_count})
    return sent_count


async def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    init_db()

    while True:
        try:
            await run_once()
        except Exception as e:
            log.exception("Error during run", extra={"error": str(e)})

        if CHECK_INTERVAL <= 0:
            break

        log.info("Sleeping", extra={"seconds": CHECK_INTERVAL})
        await asyncio.sleep(CHECK_INTERVAL)


if __name__ == "__main__":
    asyncio.run(main())
