from datetime import datetime, timedelta, timezone
from decimal import Decimal

from core.database import (
    create_job,
    find_companies_by_name,
    get_category_by_slug,
    get_job_by_slug,
    get_jobs_posted_since,
    get_or_create_company,
    get_similar_jobs,
    search_companies,
    search_jobs,
)
from core.search import CompanyFilters, FilterSet

NOW = datetime.now(timezone.utc)


def _post(title, category="software-development", hours_ago=1, **kw):
    kw.setdefault("company_name", "Acme")
    kw.setdefault("location", "Remote")
    kw.setdefault("apply_url", "https://acme.example/apply")
    kw.setdefault("description_html", "<p>Remote role</p>")
    return create_job(
        title=title,
        category_id=get_category_by_slug(category)["id"],
        posted_at=NOW - timedelta(hours=hours_ago),
        **kw,
    )


def _titles(result):
    return [row["title"] for row in result["items"]]


def test_values_within_a_dimension_are_unioned():
    _post("Frontend Dev", category="software-development")
    _post("Brand Designer", category="design")
    _post("Growth Marketer", category="marketing")

    result = search_jobs(FilterSet(categories=["software-development", "design"]))

    assert sorted(_titles(result)) == ["Brand Designer", "Frontend Dev"]
    assert result["total"] == 2


def test_dimensions_are_intersected():
    _post("Contract Designer", category="design", job_type="contract")
    _post("Staff Designer", category="design", job_type="full_time")
    _post("Contract Dev", category="software-development", job_type="contract")

    result = search_jobs(FilterSet(categories=["design"], job_types=["contract"]))

    assert _titles(result) == ["Contract Designer"]


def test_salary_floor_excludes_unset_salaries():
    _post("Well Paid", salary_min=Decimal("120000"))
    _post("Underpaid", salary_min=Decimal("60000"))
    _post("Undisclosed")

    result = search_jobs(FilterSet(min_salary=Decimal("90000")))

    assert _titles(result) == ["Well Paid"]


def test_relevance_orders_featured_then_premium_then_recent():
    _post("Designer", is_featured=True, hours_ago=30)
    _post("Product Designer", is_premium=True, hours_ago=20)
    _post("Designer II", hours_ago=1)

    result = search_jobs(FilterSet(q="design", sort="relevance"))

    assert _titles(result) == ["Designer", "Product Designer", "Designer II"]


def test_date_order_and_pagination():
    for i in range(5):
        _post(f"Job {i}", hours_ago=i + 1)

    first = search_jobs(FilterSet(page=1, page_size=2))
    last = search_jobs(FilterSet(page=3, page_size=2))

    assert _titles(first) == ["Job 0", "Job 1"]
    assert _titles(last) == ["Job 4"]
    assert first["total"] == 5
    assert first["totalPages"] == 3


def test_free_text_matches_company_name():
    _post("Engineer", company_name="Globex")
    _post("Engineer", company_name="Initech")

    result = search_jobs(FilterSet(q="globex"))

    assert [row["company_name"] for row in result["items"]] == ["Globex"]


def test_job_by_slug_and_similar_from_same_category():
    viewed = _post("Backend Engineer", category="software-development", hours_ago=3)
    _post("API Engineer", category="software-development", hours_ago=2)
    _post("Frontend Engineer", category="software-development", hours_ago=1)
    _post("Brand Designer", category="design")

    job = get_job_by_slug(viewed["slug"])

    assert job["title"] == "Backend Engineer"
    assert job["company_name"] == "Acme"
    assert job["category_slug"] == "software-development"
    similar = get_similar_jobs(job["category_id"], job["slug"])
    assert [s["title"] for s in similar] == ["Frontend Engineer", "API Engineer"]
    assert get_job_by_slug("no-such-job") is None


def test_posted_since_window():
    _post("Fresh", hours_ago=2)
    _post("Stale", hours_ago=48)

    rows = get_jobs_posted_since(NOW - timedelta(hours=24))

    assert [r["title"] for r in rows] == ["Fresh"]


def test_company_lookup_and_listing():
    for name in ("Acme", "Acme Labs", "Globex"):
        get_or_create_company(name)
    get_or_create_company("Acme")

    assert find_companies_by_name("a") == []
    assert {c["name"] for c in find_companies_by_name("acme")} == {"Acme", "Acme Labs"}

    listing = search_companies(CompanyFilters(page_size=2))
    assert listing["total"] == 3
    assert len(listing["items"]) == 2
