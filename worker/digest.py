"""
Digest rendering and rate-limited dispatch.

Sends go through a single-worker asyncio queue: one message in flight, with a
fixed pause between messages to stay under the mail provider's per-second budget.
"""
from __future__ import annotations

import asyncio
import html
import logging
import os
from typing import Callable, Dict, Optional, Tuple

from app.email_utils import send_html_email
from worker.matching import DigestEntry

MAX_TITLES_PER_DIGEST = 10
SEND_DELAY_SECONDS = int(os.getenv("ALERT_SEND_DELAY_MS", "500")) / 1000

log = logging.getLogger("worker")

Sender = Callable[[str, str, str], None]


def render_digest(entry: DigestEntry) -> Tuple[str, str]:
    """Return (subject, html) for one recipient. Titles beyond the cap are dropped."""
    keywords = ", ".join(sorted(entry.keywords))
    titles = sorted(entry.titles)[:MAX_TITLES_PER_DIGEST]

    subject = f'New remote jobs for "{keywords}"'
    if titles:
        items = "".join(f"<li>{html.escape(t)}</li>" for t in titles)
        list_html = f"<ul>{items}</ul>"
    else:
        list_html = "<p>No new jobs today, but we'll keep watching.</p>"

    body = f"""
    <div style="font-family: Arial, sans-serif; line-height: 1.5;">
      <h2>Your alert for "{html.escape(keywords)}"</h2>
      <p>Here are some recent matching jobs:</p>
      {list_html}
      <p style="color:#666;">Thanks for using WorkIsWork.</p>
    </div>
    """
    return subject, body


def render_confirmation(keyword: str, frequency: str) -> Tuple[str, str]:
    """Return (subject, html) for the message sent when an alert is created."""
    subject = f'Your {frequency} alert for "{keyword}" is active'
    body = f"""
    <div style="font-family: Arial, sans-serif; line-height: 1.5;">
      <h2>Your {html.escape(frequency)} alert for "{html.escape(keyword)}"</h2>
      <p>We'll email you when new remote jobs match this keyword.</p>
      <p style="color:#666;">Thanks for using WorkIsWork.</p>
    </div>
    """
    return subject, body


class DigestDispatcher:
    """Drain recipient digests sequentially; count successful sends."""

    def __init__(self, send: Optional[Sender] = None, delay: float = SEND_DELAY_SECONDS):
        self._send = send or send_html_email
        self._delay = delay
        self._queue: asyncio.Queue = asyncio.Queue()

    async def _send_one(self, email: str, entry: DigestEntry) -> bool:
        subject, body = render_digest(entry)
        try:
            await asyncio.to_thread(self._send, email, subject, body)
        except Exception as e:
            log.error("Failed to send email", extra={"to": email, "error": str(e)})
            return False
        log.info("Digest sent", extra={"to": email, "keywords": len(entry.keywords)})
        return True

    async def _worker(self) -> int:
        sent = 0
        first = True
        while not self._queue.empty():
            email, entry = self._queue.get_nowait()
            try:
                if not first and self._delay > 0:
                    await asyncio.sleep(self._delay)
                first = False
                if await self._send_one(email, entry):
                    sent += 1
            finally:
                self._queue.task_done()
        return sent

    async def dispatch(self, batch: Dict[str, DigestEntry]) -> int:
        for email, entry in batch.items():
            self._queue.put_nowait((email, entry))
        if self._queue.empty():
            return 0
        return await asyncio.create_task(self._worker())


async def dispatch_digests(
    batch: Dict[str, DigestEntry],
    send: Optional[Sender] = None,
    delay: float = SEND_DELAY_SECONDS,
) -> int:
    return await DigestDispatcher(send=send, delay=delay).dispatch(batch)


__all__ = [
    "MAX_TITLES_PER_DIGEST",
    "SEND_DELAY_SECONDS",
    "render_digest",
    "render_confirmation",
    "DigestDispatcher",
    "dispatch_digests",
]
