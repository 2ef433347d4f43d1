from datetime import date

from admin_console.services import summaries

STUDENTS = [
    {"id": 1, "student_id": "S001", "first_name": "Alice", "last_name": "Mokoena", "class_name": "7A",
     "gender": "Female", "date_of_birth": "2012-01-10"},
    {"id": 2, "student_id": "S002", "first_name": "Bongani", "last_name": "Dlamini", "class_name": "7A",
     "gender": "male", "date_of_birth": "2011-05-01"},
    {"id": 3, "student_id": "S003", "first_name": "Chloe", "last_name": "Naidoo", "class_name": None,
     "gender": None, "date_of_birth": None},
]

MERITS = [
    {"student_id": 1, "points": 6, "merit_type": "Effort"},
    {"student_id": 1, "points": 6, "merit_type": "Kindness"},
    {"student_id": 2, "points": 4, "merit_type": "Effort"},
    {"student_id": 3, "points": 10, "merit_type": None},
]

INCIDENTS = [
    {"student_id": 1, "points": 2, "points_deducted": 3, "severity": "low", "incident_type": "Late"},
    {"student_id": 3, "points": 1, "points_deducted": 1, "severity": "high", "incident_type": "Fighting"},
    {"student_id": 3, "points": None, "points_deducted": None, "severity": "medium", "incident_type": "Late"},
]


def test_tally_is_zero_filled_and_ordered():
    counts = summaries.tally(INCIDENTS, "severity", ("high", "medium", "low", "critical"))
    assert list(counts.items()) == [("high", 1), ("medium", 1), ("low", 1), ("critical", 0)]


def test_count_by_uses_default_bucket():
    assert summaries.count_by(MERITS, "merit_type") == {"Effort": 2, "Kindness": 1, "Other": 1}


def test_sum_points_treats_none_as_zero():
    assert summaries.sum_points(INCIDENTS) == 3


def test_sum_points_coerces_numeric_strings():
    records = [{"points": "2"}, {"points": "1.5"}, {"points": "n/a"}, {"points": None}, {}]
    assert summaries.sum_points(records) == 3.5
    assert summaries.sum_points([{"class_count": "4"}], "class_count") == 4


def test_percentage():
    assert summaries.percentage(1, 3) == 33
    assert summaries.percentage(1, 3, digits=1) == 33.3
    assert summaries.percentage(5, 0) == 0


def test_attendance_summary_and_chart():
    records = [{"status": "present"}, {"status": "present"}, {"status": "late"}, {"status": "unknown"}]
    result = summaries.attendance_summary(records)
    assert result["summary"] == {"total": 4, "present": 2, "absent": 0, "late": 1, "excused": 0}
    assert result["chart"][0] == {"name": "Present", "value": 2}
    assert [d["name"] for d in result["chart"]] == ["Present", "Absent", "Late", "Excused"]


def test_attendance_trend_uses_last_records():
    records = [
        {"attendance_date": "2024-03-01", "status": "absent"},
        {"attendance_date": "2024-03-04", "status": "present"},
        {"attendance_date": "2024-03-04", "status": "absent"},
        {"attendance_date": "2024-03-05", "status": "present"},
    ]
    trend = summaries.attendance_trend(records, days=3)
    assert trend == [
        {"date": "Mar 4", "present": 1, "total": 2, "rate": 50},
        {"date": "Mar 5", "present": 1, "total": 1, "rate": 100},
    ]


def test_daily_trend_sorts_by_date_and_skips_bad_dates():
    records = [
        {"incident_date": "2024-03-05T09:00:00"},
        {"incident_date": "2024-03-04"},
        {"incident_date": "2024-03-05"},
        {"incident_date": "nonsense"},
        {"incident_date": None},
    ]
    assert summaries.daily_trend(records, "incident_date") == [
        {"date": "Mar 4", "count": 1},
        {"date": "Mar 5", "count": 2},
    ]
    assert summaries.daily_trend(records, "incident_date", days=1) == [{"date": "Mar 5", "count": 2}]


def test_student_stats():
    attendance = [{"status": "present"}, {"status": "present"}, {"status": "absent"}]
    stats = summaries.student_stats(MERITS[:2], INCIDENTS[:1], attendance)
    assert stats == {
        "total_merits": 2,
        "total_merit_points": 12,
        "total_incidents": 1,
        "total_demerit_points": 2,
        "attendance_rate": 66.7,
    }


def test_class_stats():
    attendance = [{"status": "present"}, {"status": "absent"}]
    stats = summaries.class_stats(STUDENTS, attendance, INCIDENTS, MERITS, on=date(2024, 6, 1))
    assert stats["total_students"] == 3
    assert stats["male_count"] == 1
    assert stats["female_count"] == 1
    # ages 12 and 13, the student without a birth date is left out
    assert stats["average_age"] == 12
    assert stats["attendance_rate"] == 50
    assert stats["incident_count"] == 3
    assert stats["merit_count"] == 4


def test_class_stats_keeps_newborn_ages():
    students = [{"date_of_birth": "2024-06-01"}, {"date_of_birth": "2022-06-01"}]
    stats = summaries.class_stats(students, [], [], [], on=date(2024, 6, 1))
    assert stats["average_age"] == 1


def test_goldie_leaderboard_filters_and_ranks_by_clean_points():
    leaders = summaries.goldie_leaderboard(STUDENTS, INCIDENTS, MERITS, min_merits=10, size=5)
    assert [s["id"] for s in leaders] == [1, 3]
    assert leaders[0]["total_merits"] == 12
    assert leaders[0]["total_demerits"] == 3
    assert leaders[0]["clean_points"] == 9
    assert leaders[1]["clean_points"] == 9


def test_goldie_leaderboard_respects_size():
    leaders = summaries.goldie_leaderboard(STUDENTS, INCIDENTS, MERITS, min_merits=1, size=1)
    assert len(leaders) == 1


def test_class_analytics_groups_unassigned():
    rows = summaries.class_analytics(STUDENTS, INCIDENTS, MERITS)
    assert rows == [
        {"class_name": "7A", "students": 2, "incidents": 1, "merits": 3, "incident_rate": 0.5},
        {"class_name": "Unassigned", "students": 1, "incidents": 2, "merits": 1, "incident_rate": 2.0},
    ]


def test_teacher_and_user_stats():
    teachers = [{"class_count": 2}, {"class_count": 1}, {"class_count": None}]
    assert summaries.teacher_stats(teachers) == {"total_teachers": 3, "total_classes": 3, "average_classes": 1.0}
    assert summaries.teacher_stats([])["average_classes"] == 0

    users = [{"role": "admin"}, {"role": "teacher"}, {"role": "teacher"}, {"role": "parent"}]
    assert summaries.user_role_stats(users) == {"total": 4, "admins": 1, "teachers": 2, "parents": 1}


def test_detention_attendance_tally():
    assignments = [{"status": "present"}, {"status": "attended"}, {"status": "absent"}, {"status": "assigned"}, {}]
    assert summaries.detention_attendance(assignments) == (2, 1, 2)
