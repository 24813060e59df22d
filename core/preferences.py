"""
Optimise: translate stored onboarding answers into a FilterSet.

Pure function over the preference record and the vocabulary tables. Unmapped
answers are dropped; a record that maps to nothing yields a FilterSet whose only
set field is `optimised`, which callers treat as a no-op.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from core.search import FilterSet
from core.vocabulary import (
    CATEGORY_BY_LABEL,
    JOB_TYPE_BY_LABEL,
    OTHER_NOT_LISTED,
    Q_CATEGORY,
    Q_JOB_TYPE,
    Q_ROLE,
    Q_SALARY,
    Q_SKILLS,
    Q_TIMEZONES,
    Q_WORK_LOCATION,
    REMOTE_SCOPE_BY_LABEL,
    SALARY_FLOOR_BY_BAND,
    SALARY_SENTINELS,
    lookup,
)


def normalise_record(payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Coerce a stored/posted payload into {answersByQuestionId: {str: [str]}, selectedCategory}.
    Anything malformed is dropped rather than raised.
    """
    payload = payload or {}
    raw_answers = payload.get("answersByQuestionId") or {}
    answers: Dict[str, List[str]] = {}
    if isinstance(raw_answers, Mapping):
        for qid, values in raw_answers.items():
            if isinstance(values, str):
                values = [values]
            if not isinstance(values, (list, tuple)):
                continue
            cleaned = [str(v).strip() for v in values if v is not None and str(v).strip()]
            answers[str(qid)] = cleaned

    selected = payload.get("selectedCategory")
    selected = selected.strip() if isinstance(selected, str) and selected.strip() else None
    return {"answersByQuestionId": answers, "selectedCategory": selected}


def _answers(record: Mapping[str, Any], question_id: int) -> List[str]:
    return list(record["answersByQuestionId"].get(str(question_id), []))


def _first(record: Mapping[str, Any], question_id: int) -> Optional[str]:
    values = _answers(record, question_id)
    return values[0] if values else None


def translate_preferences(payload: Optional[Mapping[str, Any]]) -> FilterSet:
    record = normalise_record(payload)
    filters = FilterSet(optimised=True)

    category_label = record["selectedCategory"] or _first(record, Q_CATEGORY)
    category_slug = lookup(CATEGORY_BY_LABEL, category_label)
    if category_slug:
        filters.categories = [category_slug]

    terms = [
        a
        for a in _answers(record, Q_ROLE) + _answers(record, Q_SKILLS)
        if a != OTHER_NOT_LISTED
    ]
    q = " ".join(terms).strip()
    if q:
        filters.q = q

    job_types: List[str] = []
    for label in _answers(record, Q_JOB_TYPE):
        job_type = lookup(JOB_TYPE_BY_LABEL, label)
        if job_type and job_type not in job_types:
            job_types.append(job_type)
    filters.job_types = job_types

    # Remote scope is single-valued in search; the first answer wins
    filters.remote_scope = lookup(REMOTE_SCOPE_BY_LABEL, _first(record, Q_TIMEZONES))

    location = _first(record, Q_WORK_LOCATION)
    if location and location != OTHER_NOT_LISTED:
        filters.location = location

    band = _first(record, Q_SALARY)
    if band and band not in SALARY_SENTINELS:
        floor = lookup(SALARY_FLOOR_BY_BAND, band)
        if floor is not None:
            filters.min_salary = Decimal(floor)

    return filters


__all__ = ["normalise_record", "translate_preferences"]
