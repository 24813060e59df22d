# Quick reference commands (run from repo root). These are comments only; copy/paste as needed.

# Install the project with test dependencies (includes httpx for TestClient)
# python -m pip install -e ".[test]"

# Run the full test suite (Postgres-backed tests under tests/db are skipped without DATABASE_URL)
# python -m pytest

# Run focused test files
# python -m pytest tests/test_search_parsing.py
# python -m pytest tests/test_preferences.py tests/test_vocabulary.py
# python -m pytest tests/test_matching.py tests/test_digest.py tests/test_worker_alerts.py
# python -m pytest tests/test_routes.py tests/test_security_headers.py
# DATABASE_URL=postgresql://... python -m pytest tests/db

# Start the API locally (with env vars loaded)
# python -m dotenv run -- python -m uvicorn app.api:app --reload

# Run one alert digest cycle (set CHECK_INTERVAL=3600 to keep looping)
# python -m dotenv run -- python -m worker.main

# Trigger the digest through the API (what the scheduler calls)
# curl "http://localhost:8000/api/cron/alerts?secret=$CRON_SECRET"

# Inspect alerts and preview what the next run would send
# python -m scripts.check_user_alerts you@example.com
# python -m scripts.preview_digests --hours 72
