from core.vocabulary import (
    CATEGORY_BY_LABEL,
    JOB_TYPES,
    REMOTE_SCOPE_BY_LABEL,
    REMOTE_SCOPES,
    JOB_TYPE_BY_LABEL,
    get_join_questions,
    lookup,
)


def test_lookup_is_case_insensitive_and_none_for_unknown():
    assert lookup(CATEGORY_BY_LABEL, "design") == "design"
    assert lookup(CATEGORY_BY_LABEL, "Customer Service") == "customer-support"
    assert lookup(CATEGORY_BY_LABEL, "Astronaut") is None
    assert lookup(CATEGORY_BY_LABEL, None) is None


def test_tables_only_map_to_known_values():
    assert set(JOB_TYPE_BY_LABEL.values()) <= set(JOB_TYPES)
    assert set(REMOTE_SCOPE_BY_LABEL.values()) <= set(REMOTE_SCOPES)


def test_join_questions_follow_selected_category():
    generic = get_join_questions()
    design = get_join_questions("Design")
    assert [q["id"] for q in generic] == list(range(9))
    role_options = next(q for q in design if q["id"] == 1)["options"]
    assert "Product Designer" in role_options
