"""
In-memory aggregation of fetched records into stat cards and chart series.

All functions here are pure: they take lists of API records and return
plain dicts/lists ready to be serialised.
"""

from collections import OrderedDict
import math
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from admin_console.utils.dates import calculate_age, parse_date, trend_label
from admin_console.utils.filters import full_name

Record = Dict[str, Any]

ATTENDANCE_STATUSES = ("present", "absent", "late", "excused")
SEVERITIES = ("high", "medium", "low")
DETENTION_STATUSES = ("scheduled", "in_progress", "completed")
INTERVENTION_STATUSES = ("active", "completed", "cancelled")
CONSEQUENCE_STATUSES = ("pending", "completed", "cancelled")


def count_by(records: Iterable[Record], key: str, default: str = "Other") -> Dict[str, int]:
    counts: Dict[str, int] = OrderedDict()
    for record in records:
        value = record.get(key) or default
        counts[value] = counts.get(value, 0) + 1
    return counts


def tally(records: Iterable[Record], key: str, values: Sequence[str]) -> Dict[str, int]:
    counts = {value: 0 for value in values}
    for record in records:
        value = record.get(key)
        if value in counts:
            counts[value] += 1
    return counts


def as_number(value: Any) -> float:
    # Postgres COUNT and SUM arrive as strings
    try:
        number = float(value or 0)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def sum_points(records: Iterable[Record], key: str = "points") -> float:
    total = 0
    for record in records:
        total += as_number(record.get(key))
    return total


def percentage(part: float, whole: float, digits: Optional[int] = 0):
    if not whole:
        return 0
    value = part / whole * 100
    if digits is None:
        return value
    if digits == 0:
        return round(value)
    return round(value, digits)


def label(value: str) -> str:
    return value.replace("_", " ").title()


def series(counts: Dict[str, int], labels: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
    labels = labels or {}
    return [{"name": labels.get(k, label(k)), "value": v} for k, v in counts.items()]


def daily_trend(records: Iterable[Record], date_key: str, days: int = 14) -> List[Dict[str, Any]]:
    """Count records per calendar day and keep the latest ``days`` buckets."""
    buckets: Dict[date, int] = {}
    for record in records:
        day = parse_date(record.get(date_key))
        if day is None:
            continue
        buckets[day] = buckets.get(day, 0) + 1
    ordered = sorted(buckets.items())[-days:] if days > 0 else []
    return [{"date": trend_label(day), "count": count} for day, count in ordered]


def for_student(records: Iterable[Record], student_id: Any) -> List[Record]:
    return [r for r in records if r.get("student_id") == student_id]


# -------- Attendance --------

def attendance_summary(records: List[Record]) -> Dict[str, Any]:
    counts = tally(records, "status", ATTENDANCE_STATUSES)
    return {
        "summary": {"total": len(records), **counts},
        "chart": series(counts),
    }


def attendance_rate(records: List[Record], digits: int = 0):
    present = sum(1 for r in records if r.get("status") == "present")
    return percentage(present, len(records), digits)


def attendance_trend(records: List[Record], days: int = 14) -> List[Dict[str, Any]]:
    # uses the last ``days`` records, as fetched, not the last ``days`` dates
    daily: Dict[date, Dict[str, int]] = {}
    for record in records[-days:] if days > 0 else []:
        day = parse_date(record.get("attendance_date"))
        if day is None:
            continue
        bucket = daily.setdefault(day, {"present": 0, "total": 0})
        bucket["total"] += 1
        if record.get("status") == "present":
            bucket["present"] += 1
    return [
        {
            "date": trend_label(day),
            "present": bucket["present"],
            "total": bucket["total"],
            "rate": percentage(bucket["present"], bucket["total"]),
        }
        for day, bucket in sorted(daily.items())
    ]


# -------- Students & classes --------

def student_stats(merits: List[Record], incidents: List[Record], attendance: List[Record]) -> Dict[str, Any]:
    return {
        "total_merits": len(merits),
        "total_merit_points": sum_points(merits),
        "total_incidents": len(incidents),
        "total_demerit_points": sum_points(incidents),
        "attendance_rate": attendance_rate(attendance, digits=1),
    }


def class_stats(students: List[Record], attendance: List[Record], incidents: List[Record],
                merits: List[Record], on: Optional[date] = None) -> Dict[str, Any]:
    genders = [str(s.get("gender") or "").lower() for s in students]
    ages = [calculate_age(s.get("date_of_birth"), on) for s in students]
    ages = [a for a in ages if a is not None]
    return {
        "total_students": len(students),
        "male_count": genders.count("male"),
        "female_count": genders.count("female"),
        "average_age": round(sum(ages) / len(ages)) if ages else 0,
        "attendance_rate": attendance_rate(attendance),
        "incident_count": len(incidents),
        "merit_count": len(merits),
    }


def student_points(students: List[Record], incidents: List[Record], merits: List[Record],
                   demerit_key: str = "points") -> List[Dict[str, Any]]:
    """Per-student incident/merit counts and net points."""
    rows = []
    for student in students:
        student_incidents = for_student(incidents, student.get("id"))
        student_merits = for_student(merits, student.get("id"))
        incident_points = sum_points(student_incidents, demerit_key)
        merit_points = sum_points(student_merits)
        rows.append({
            "id": student.get("id"),
            "student_id": student.get("student_id"),
            "name": full_name(student),
            "class_name": student.get("class_name"),
            "incidents": len(student_incidents),
            "incident_points": incident_points,
            "merits": len(student_merits),
            "merit_points": merit_points,
            "net_points": merit_points - incident_points,
        })
    return rows


def goldie_leaderboard(students: List[Record], incidents: List[Record], merits: List[Record],
                       min_merits: int = 10, size: int = 5) -> List[Dict[str, Any]]:
    ranked = []
    for row, student in zip(student_points(students, incidents, merits, "points_deducted"), students):
        if row["merit_points"] < min_merits:
            continue
        ranked.append({
            **student,
            "total_merits": row["merit_points"],
            "total_demerits": row["incident_points"],
            "clean_points": row["net_points"],
        })
    ranked.sort(key=lambda s: s["clean_points"], reverse=True)
    return ranked[:size]


def class_analytics(students: List[Record], incidents: List[Record], merits: List[Record]) -> List[Dict[str, Any]]:
    summary: Dict[str, Dict[str, int]] = OrderedDict()
    for student in students:
        name = student.get("class_name") or "Unassigned"
        stats = summary.setdefault(name, {"students": 0, "incidents": 0, "merits": 0})
        stats["students"] += 1
        stats["incidents"] += len(for_student(incidents, student.get("id")))
        stats["merits"] += len(for_student(merits, student.get("id")))
    return [
        {
            "class_name": name,
            **stats,
            "incident_rate": round(stats["incidents"] / stats["students"], 2) if stats["students"] else 0,
        }
        for name, stats in summary.items()
    ]


# -------- Staff & users --------

def teacher_stats(teachers: List[Record]) -> Dict[str, Any]:
    total_classes = sum_points(teachers, "class_count")
    return {
        "total_teachers": len(teachers),
        "total_classes": total_classes,
        "average_classes": round(total_classes / len(teachers), 1) if teachers else 0,
    }


def user_role_stats(users: List[Record]) -> Dict[str, int]:
    roles = tally(users, "role", ("admin", "teacher", "parent"))
    return {
        "total": len(users),
        "admins": roles["admin"],
        "teachers": roles["teacher"],
        "parents": roles["parent"],
    }


# -------- Behaviour & detentions --------

def severity_chart(incidents: List[Record]) -> List[Dict[str, Any]]:
    return series(tally(incidents, "severity", SEVERITIES))


def severity_counts(incidents: List[Record]) -> Dict[str, int]:
    return tally(incidents, "severity", SEVERITIES)


def type_chart(records: List[Record], key: str) -> List[Dict[str, Any]]:
    return [{"name": k, "value": v} for k, v in count_by(records, key).items()]


def detention_status_chart(detentions: List[Record]) -> List[Dict[str, Any]]:
    return series(tally(detentions, "status", DETENTION_STATUSES))


def detention_attendance(assignments: Iterable[Record]) -> Tuple[int, int, int]:
    present = absent = pending = 0
    for assignment in assignments:
        status = assignment.get("status")
        if status in ("present", "attended"):
            present += 1
        elif status == "absent":
            absent += 1
        else:
            pending += 1
    return present, absent, pending


# -------- Interventions & consequences --------

def intervention_stats(interventions: List[Record]) -> Dict[str, int]:
    return {"total": len(interventions), **tally(interventions, "status", INTERVENTION_STATUSES)}


def consequence_summary(consequences: List[Record]) -> Dict[str, int]:
    return {"total": len(consequences), **tally(consequences, "status", CONSEQUENCE_STATUSES)}


def consequence_severity_chart(consequences: List[Record]) -> List[Dict[str, Any]]:
    # definitions without a severity count as low
    rows = [{"severity": c.get("severity") or "low"} for c in consequences]
    return severity_chart(rows)


def completion_by_month(consequences: List[Record], months: int = 6) -> List[Dict[str, Any]]:
    """Assigned vs completed per month of ``assigned_date``, latest ``months`` only."""
    buckets: Dict[Tuple[int, int], Dict[str, int]] = {}
    for consequence in consequences:
        day = parse_date(consequence.get("assigned_date"))
        if day is None:
            continue
        bucket = buckets.setdefault((day.year, day.month), {"assigned": 0, "completed": 0})
        bucket["assigned"] += 1
        if consequence.get("status") == "completed":
            bucket["completed"] += 1

    ordered = sorted(buckets.items())[-months:] if months > 0 else []
    return [
        {
            "month": date(year, month, 1).strftime("%b %Y"),
            "assigned": counts["assigned"],
            "completed": counts["completed"],
            "rate": percentage(counts["completed"], counts["assigned"], 1),
        }
        for (year, month), counts in ordered
    ]
