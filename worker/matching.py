"""
Keyword alert matching.

One fold over (alerts x candidate listings) shared by the daily digest and the
on-publish notifier. Candidates are either the recent window or a single new listing.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Set

log = logging.getLogger("worker")


@dataclass
class DigestEntry:
    keywords: Set[str] = field(default_factory=set)
    titles: Set[str] = field(default_factory=set)


def keyword_matches(job: Dict, keyword: str) -> bool:
    """Case-insensitive substring of the title or of any tag."""
    kw = (keyword or "").strip().lower()
    if not kw:
        return False
    if kw in (job.get("title") or "").lower():
        return True
    return any(kw in (tag or "").lower() for tag in job.get("tags") or [])


def match_alerts(alerts: Iterable[Dict], jobs: Iterable[Dict]) -> Dict[str, DigestEntry]:
    """
    Group matches by recipient email (not by alert id), so two alerts that share an
    address end up in one digest. Alerts without a keyword never match.
    """
    jobs = list(jobs)
    batch: Dict[str, DigestEntry] = {}
    if not jobs:
        return batch

    for alert in alerts:
        keyword = (alert.get("keyword") or "").strip()
        if not keyword:
            continue
        email = (alert.get("email") or "").strip().lower()
        if not email or "@" not in email:
            log.warning("Skipping alert with invalid email", extra={"alert_id": alert.get("id")})
            continue

        matched = [job for job in jobs if keyword_matches(job, keyword)]
        if not matched:
            continue

        entry = batch.setdefault(email, DigestEntry())
        entry.keywords.add(keyword.lower())
        entry.titles.update(job.get("title") or "" for job in matched)

    return batch


__all__ = ["DigestEntry", "keyword_matches", "match_alerts"]
