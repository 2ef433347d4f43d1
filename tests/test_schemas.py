from datetime import date

import pytest
from pydantic import ValidationError

from admin_console.schemas.behaviour import IncidentTypeForm, IncidentUpdate, MeritTypeForm
from admin_console.schemas.bulk_import import ImportOptions
from admin_console.schemas.consequence import ConsequenceDefinitionForm, ConsequenceUpdate
from admin_console.schemas.detention import DetentionForm, DetentionRuleForm
from admin_console.schemas.intervention import InterventionTypeForm, InterventionUpdate
from admin_console.schemas.school_class import ClassForm
from admin_console.schemas.student import StudentForm
from admin_console.schemas.teacher import TeacherForm
from admin_console.schemas.timetable import SlotRows, TimeSlotUpdate, TimetableTemplateForm
from admin_console.schemas.user import PasswordChange, RoleUpdate, UserCreate
from admin_console.utils.dates import academic_year

VALID_USER = {"name": "Thandi Nkosi", "email": "Thandi@School.test", "password": "secret1", "role": "teacher"}


def test_user_create_lowercases_email():
    assert UserCreate(**VALID_USER).email == "thandi@school.test"


@pytest.mark.parametrize("email", ["thandi", "thandi@school", "thandi @school.test", "@school.test", ""])
def test_user_create_rejects_malformed_email(email):
    with pytest.raises(ValidationError):
        UserCreate(**{**VALID_USER, "email": email})


@pytest.mark.parametrize("password", ["", "12345", "x" * 129])
def test_user_create_rejects_bad_password_length(password):
    with pytest.raises(ValidationError):
        UserCreate(**{**VALID_USER, "password": password})


def test_user_create_rejects_unknown_role():
    with pytest.raises(ValidationError) as exc:
        UserCreate(**{**VALID_USER, "role": "principal"})
    assert "Invalid role" in str(exc.value)


def test_user_create_checks_confirmation():
    with pytest.raises(ValidationError) as exc:
        UserCreate(**VALID_USER, confirm_password="secret2")
    assert "Passwords do not match" in str(exc.value)
    assert UserCreate(**VALID_USER, confirm_password="secret1").confirm_password == "secret1"


def test_role_update():
    assert RoleUpdate(role="parent").role == "parent"
    with pytest.raises(ValidationError):
        RoleUpdate(role="Admin")


@pytest.mark.parametrize("fields, message", [
    ({"current_password": "", "new_password": "newpass", "confirm_password": "newpass"},
     "All password fields are required"),
    ({"current_password": "oldpass", "new_password": "short", "confirm_password": "short"},
     "at least 6 characters"),
    ({"current_password": "oldpass", "new_password": "newpass", "confirm_password": "newpas5"},
     "New passwords do not match"),
    ({"current_password": "samepass", "new_password": "samepass", "confirm_password": "samepass"},
     "must be different"),
])
def test_password_change_rules(fields, message):
    with pytest.raises(ValidationError) as exc:
        PasswordChange(**fields)
    assert message in str(exc.value)


def test_teacher_form_validation():
    teacher = TeacherForm(name="Mr Botha", email="botha@school.test", phone="(082) 555-1234", employee_id="")
    assert teacher.employee_id is None
    with pytest.raises(ValidationError):
        TeacherForm(name="B", email="botha@school.test")
    with pytest.raises(ValidationError):
        TeacherForm(name="Mr Botha", email="botha@school.test", phone="555-1234")
    with pytest.raises(ValidationError):
        TeacherForm(name="Mr Botha", email="botha@school.test", employee_id="E" * 51)


def test_student_form_requires_names_and_blanks_optionals():
    student = StudentForm(student_id="S001", first_name=" Alice ", last_name="Mokoena",
                          date_of_birth="2012-01-10", class_id="", gender="")
    assert student.first_name == "Alice"
    assert student.date_of_birth == date(2012, 1, 10)
    assert student.class_id is None
    with pytest.raises(ValidationError) as exc:
        StudentForm(student_id="S001", first_name="   ", last_name="Mokoena")
    assert "First Name is required" in str(exc.value)


def test_class_and_template_default_academic_year():
    assert ClassForm(class_name="7A").academic_year == academic_year()
    assert ClassForm(class_name="7A", academic_year="").academic_year
    assert TimetableTemplateForm(name="Monday Timetable", academic_year="2030-2031").academic_year == "2030-2031"
    with pytest.raises(ValidationError):
        ClassForm(class_name=" ")


def test_slot_rows_are_numbered_in_order():
    rows = SlotRows(slots=[
        {"period_name": "Registration", "slot_type": "registration"},
        {"period_name": " Period 1 ", "slot_type": "lesson", "start_time": "08:00"},
    ])
    assert rows.numbered() == [
        {"period_number": 1, "period_name": "Registration", "slot_type": "registration"},
        {"period_number": 2, "period_name": "Period 1", "slot_type": "lesson", "start_time": "08:00"},
    ]


def test_slot_rows_need_names_and_known_types():
    with pytest.raises(ValidationError) as exc:
        SlotRows(slots=[{"period_name": "Period 1"}, {"period_name": ""}])
    assert "Please enter a name for each period" in str(exc.value)
    with pytest.raises(ValidationError):
        SlotRows(slots=[{"period_name": "Period 1", "slot_type": "nap"}])
    with pytest.raises(ValidationError):
        SlotRows(slots=[])


def test_time_slot_update_times():
    slot = TimeSlotUpdate(period_name="Period 1", start_time="08:00", end_time="")
    assert slot.end_time is None
    with pytest.raises(ValidationError) as exc:
        TimeSlotUpdate(period_name="Period 1", start_time="09:00", end_time="08:45")
    assert "Start time must be before end time" in str(exc.value)
    with pytest.raises(ValidationError):
        TimeSlotUpdate(period_name="Period 1", start_time="9am")


def test_type_forms_send_is_active_as_int():
    incident_type = IncidentTypeForm(name="Late", default_points=2, default_severity="medium", is_active=False)
    assert incident_type.payload()["is_active"] == 0
    assert MeritTypeForm(name="Effort").payload() == {
        "name": "Effort", "default_points": 1, "description": None, "is_active": 1,
    }
    with pytest.raises(ValidationError):
        IncidentTypeForm(name="Late", default_points=-1)
    with pytest.raises(ValidationError):
        IncidentTypeForm(name="Late", default_severity="critical")


def test_detention_form():
    detention = DetentionForm(detention_date="2024-03-05", detention_time="15:00:00", teacher_on_duty_id="")
    assert detention.duration == 60
    assert detention.detention_time == "15:00"
    assert detention.payload()["detention_date"] == "2024-03-05"
    with pytest.raises(ValidationError):
        DetentionForm(detention_date="2024-03-05", detention_time="3pm")
    with pytest.raises(ValidationError):
        DetentionForm(detention_date="2024-03-05", detention_time="15:00", duration=0)


def test_detention_rule_range():
    rule = DetentionRuleForm(min_points=5, max_points=10, is_active=True)
    assert rule.payload() == {
        "action_type": "detention", "min_points": 5, "max_points": 10, "detention_duration": 60, "is_active": 1,
    }
    with pytest.raises(ValidationError):
        DetentionRuleForm(min_points=10, max_points=5)


def test_import_options_per_kind():
    options = ImportOptions(academicYear="2025-2026", autoCreateClasses=False)
    assert options.as_form("students") == {
        "mode": "upsert", "autoCreateClasses": "false", "useSheetNames": "true", "academicYear": "2025-2026",
    }
    assert options.as_form("teachers") == {"mode": "upsert"}
    assert options.as_form("classes") == {"mode": "upsert", "academicYear": "2025-2026"}
    with pytest.raises(ValidationError):
        ImportOptions(mode="merge")


@pytest.mark.parametrize("value", ["15:301", "15:30:99", "1530", "15:30:00:00"])
def test_detention_time_rejects_malformed_values(value):
    with pytest.raises(ValidationError):
        DetentionForm(detention_date="2024-03-05", detention_time=value)


def test_incident_update_sends_only_submitted_fields():
    update = IncidentUpdate(severity="high", points=7, admin_notes="", incident_date="2024-03-05")
    assert update.changes() == {"severity": "high", "points": 7, "admin_notes": "", "incident_date": "2024-03-05"}
    assert IncidentUpdate(points=0).changes() == {"points": 0}
    assert IncidentUpdate(status="").changes() == {}
    with pytest.raises(ValidationError):
        IncidentUpdate(points=-1)
    with pytest.raises(ValidationError):
        IncidentUpdate(incident_time="25:00")


def test_intervention_forms():
    intervention = InterventionUpdate(type="Mentoring", start_date="2024-03-01", end_date="", notes="")
    assert intervention.payload() == {
        "type": "Mentoring", "description": None, "start_date": "2024-03-01", "end_date": None,
        "status": "active", "notes": None,
    }
    with pytest.raises(ValidationError):
        InterventionUpdate(type="Mentoring", status="paused")
    with pytest.raises(ValidationError):
        InterventionUpdate(type="Mentoring", start_date="2024-03-10", end_date="2024-03-01")

    assert InterventionTypeForm(name="Counselling", default_duration="").payload() == {
        "name": "Counselling", "description": None, "default_duration": None, "is_active": 1,
    }
    with pytest.raises(ValidationError):
        InterventionTypeForm(name="Counselling", default_duration=0)


def test_consequence_forms():
    definition = ConsequenceDefinitionForm(name="Community service", default_duration="2 hours", is_active=False)
    assert definition.payload()["severity"] == "low"
    assert definition.payload()["is_active"] == 0
    with pytest.raises(ValidationError):
        ConsequenceDefinitionForm(name="Community service", severity="critical")

    assert ConsequenceUpdate(status="completed").changes() == {"status": "completed"}
    assert ConsequenceUpdate(notes="", due_date="").changes() == {"notes": "", "due_date": None}
    assert ConsequenceUpdate().changes() == {}
    with pytest.raises(ValidationError):
        ConsequenceUpdate(status="waived")
