from admin_console.utils.filters import filtered_view, full_name, match_field, search

STUDENTS = [
    {"id": 1, "first_name": "Alice", "last_name": "Mokoena", "student_id": "S001", "class_id": 2},
    {"id": 2, "first_name": "Bongani", "last_name": "Dlamini", "student_id": "S002", "class_id": 3},
    {"id": 3, "first_name": "Alicia", "last_name": None, "student_id": None, "class_id": 2},
]


def test_full_name_skips_missing_parts():
    assert full_name(STUDENTS[0]) == "Alice Mokoena"
    assert full_name(STUDENTS[2]) == "Alicia"
    assert full_name({}) == ""


def test_search_is_case_insensitive_substring():
    result = search(STUDENTS, "ALI", ["full_name"])
    assert [s["id"] for s in result] == [1, 3]


def test_search_matches_any_field_and_ignores_none():
    result = search(STUDENTS, "s002", ["first_name", "student_id"])
    assert [s["id"] for s in result] == [2]


def test_search_spans_first_and_last_name():
    assert [s["id"] for s in search(STUDENTS, "alice mok", ["full_name"])] == [1]


def test_blank_search_returns_everything():
    assert search(STUDENTS, "", ["full_name"]) is STUDENTS
    assert search(STUDENTS, "   ", ["full_name"]) is STUDENTS
    assert search(STUDENTS, None, ["full_name"]) is STUDENTS


def test_match_field_compares_string_forms():
    assert [s["id"] for s in match_field(STUDENTS, "class_id", "2")] == [1, 3]
    assert match_field(STUDENTS, "class_id", "all") is STUDENTS
    assert match_field(STUDENTS, "class_id", "") is STUDENTS


def test_filtered_view_reports_counts():
    view = filtered_view(STUDENTS[:1], len(STUDENTS))
    assert view["showing"] == 1
    assert view["total"] == 3
