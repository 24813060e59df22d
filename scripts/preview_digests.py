"""
Preview the digests the next alert run would send, without sending email.

Reads recent jobs and active alerts from the DB, runs the same matching as the
worker and prints each rendered message.

Usage:
  python -m scripts.preview_digests                       # all recipients
  python -m scripts.preview_digests --email user@example.com
  python -m scripts.preview_digests --hours 72            # wider window
"""
from __future__ import annotations

import argparse
from datetime import datetime, timedelta, timezone

from core.database import get_active_subscriptions, get_jobs_posted_since
from worker.digest import render_digest
from worker.matching import match_alerts


def main():
    parser = argparse.ArgumentParser(description="Print the digests the alert worker would send.")
    parser.add_argument("--email", help="Only show this recipient", default=None)
    parser.add_argument("--hours", type=int, help="Look-back window in hours", default=24)
    args = parser.parse_args()

    since = datetime.now(timezone.utc) - timedelta(hours=args.hours)
    jobs = get_jobs_posted_since(since)
    if not jobs:
        print(f"No jobs posted in the last {args.hours}h.")
        return

    subs = get_active_subscriptions()
    if args.email:
        subs = [s for s in subs if (s.get("email") or "").lower() == args.email.strip().lower()]

    batch = match_alerts(subs, jobs)
    if not batch:
        print("No matching jobs for any subscriber.")
        return

    for email, entry in batch.items():
        subject, _ = render_digest(entry)
        print(f"\n=== {email} ===")
        print(f"Subject: {subject}")
        for title in sorted(entry.titles):
            print(f"  - {title}")


if __name__ == "__main__":
    main()
