"""
Client for the school REST API.

Every admin page talks to the backend through this module. The backend owns
all records and business rules; this client only shapes requests, attaches
the caller's bearer token and school scope, and turns error responses into
``SchoolApiError``.
"""

import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

Blob = Tuple[bytes, str, Optional[str]]

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)

# requests.Session pools 10 connections per host
MAX_WORKERS = 8


class SchoolApiError(Exception):
    """A failed call to the school API, carrying the upstream status."""

    def __init__(self, status_code: int, message: str, details: Optional[List[Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details or []


def _clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None and v != ""}


def _error_from_response(response: requests.Response) -> SchoolApiError:
    message = response.reason or f"HTTP {response.status_code}"
    details = []
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("error") or body.get("message") or message
        raw_details = body.get("details")
        if isinstance(raw_details, list):
            details = raw_details
        elif raw_details:
            details = [raw_details]
    return SchoolApiError(response.status_code, str(message), details)


class SchoolApi:
    def __init__(
        self,
        base_url: str,
        token: str,
        school_id: Optional[str] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.school_id = school_id
        self.session = session or requests.Session()
        self.session.headers["Authorization"] = f"Bearer {token}"
        if school_id:
            self.session.headers["x-school-id"] = str(school_id)

    def close(self):
        self.session.close()

    # -------- Transport --------

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        if "params" in kwargs:
            kwargs["params"] = _clean_params(kwargs["params"])
        logger.debug(f"{method} {path} params={kwargs.get('params')}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout:
            logger.error(f"{method} {path} timed out after {self.timeout}s")
            raise SchoolApiError(504, "School API timed out. Please try again later.")
        except requests.exceptions.ConnectionError as e:
            logger.error(f"{method} {path} connection error: {str(e)}")
            raise SchoolApiError(502, "School API is unreachable")

        if not response.ok:
            error = _error_from_response(response)
            logger.error(f"{method} {path} failed: {error.status_code} {error.message}")
            raise error
        return response

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self._send(method, path, **kwargs)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _list(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        data = self._request("GET", path, params=params)
        return data or []

    def _blob(self, method: str, path: str, **kwargs) -> Blob:
        response = self._send(method, path, **kwargs)
        content_type = response.headers.get("Content-Type", "application/octet-stream")
        filename = None
        match = _FILENAME_RE.search(response.headers.get("Content-Disposition", ""))
        if match:
            filename = match.group(1)
        return response.content, content_type, filename

    def _upload(self, path: str, field: str, filename: str, content: bytes,
                content_type: Optional[str], form: Optional[Dict[str, str]] = None) -> Any:
        files = {field: (filename, content, content_type or "application/octet-stream")}
        return self._request("POST", path, files=files, data=form or {})

    # -------- Auth --------

    def get_me(self):
        return self._request("GET", "/api/auth/me")

    def update_profile(self, data: Dict[str, Any]):
        return self._request("PUT", "/api/auth/profile", json=data)

    def change_password(self, current_password: str, new_password: str):
        return self._request("PUT", "/api/auth/change-password", json={
            "currentPassword": current_password,
            "newPassword": new_password,
        })

    # -------- Students --------

    def get_students(self, params: Optional[Dict[str, Any]] = None):
        return self._list("/api/students", params)

    def get_student(self, id: int):
        return self._request("GET", f"/api/students/{id}")

    def create_student(self, data: Dict[str, Any]):
        return self._request("POST", "/api/students", json=data)

    def update_student(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/students/{id}", json=data)

    def delete_student(self, id: int):
        return self._request("DELETE", f"/api/students/{id}")

    def generate_link_code(self, id: int):
        return self._request("POST", f"/api/students/{id}/generate-link")

    def assign_student_to_class(self, id: int, class_id: Optional[int], grade_level: str):
        return self._request("PUT", f"/api/students/{id}", json={
            "class_id": class_id,
            "grade_level": grade_level,
        })

    def upload_student_photo(self, id: int, filename: str, content: bytes, content_type: Optional[str]):
        return self._upload(f"/api/students/{id}/photo", "photo", filename, content, content_type)

    # -------- Classes --------

    def get_classes(self):
        return self._list("/api/classes")

    def get_class(self, id: int):
        return self._request("GET", f"/api/classes/{id}")

    def create_class(self, data: Dict[str, Any]):
        return self._request("POST", "/api/classes", json=data)

    def update_class(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/classes/{id}", json=data)

    def delete_class(self, id: int):
        return self._request("DELETE", f"/api/classes/{id}")

    # -------- Teachers --------

    def get_teachers(self):
        return self._list("/api/teachers")

    def get_teacher(self, id: int):
        return self._request("GET", f"/api/teachers/{id}")

    def create_teacher(self, data: Dict[str, Any]):
        return self._request("POST", "/api/teachers", json=data)

    def update_teacher(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/teachers/{id}", json=data)

    def delete_teacher(self, id: int):
        return self._request("DELETE", f"/api/teachers/{id}")

    def upload_teacher_photo(self, id: int, filename: str, content: bytes, content_type: Optional[str]):
        return self._upload(f"/api/teachers/{id}/photo", "photo", filename, content, content_type)

    # -------- Parents --------

    def get_parents(self):
        return self._list("/api/parents")

    def get_parent(self, id: int):
        return self._request("GET", f"/api/parents/{id}")

    # -------- Behaviour --------

    def get_incidents(self, params: Optional[Dict[str, Any]] = None):
        return self._list("/api/behaviour", params)

    def get_incident(self, id: int):
        return self._request("GET", f"/api/behaviour/{id}")

    def update_incident(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/behaviour/{id}", json=data)

    def delete_incident(self, id: int):
        return self._request("DELETE", f"/api/behaviour/{id}")

    # -------- Attendance --------

    def get_attendance(self, params: Optional[Dict[str, Any]] = None):
        return self._list("/api/attendance", params)

    # -------- Analytics & notifications --------

    def get_dashboard_stats(self):
        return self._request("GET", "/api/analytics/dashboard") or {}

    def get_notifications(self, params: Optional[Dict[str, Any]] = None):
        return self._list("/api/notifications", params)

    def get_unread_count(self):
        return self._request("GET", "/api/notifications/unread-count") or {}

    # -------- Detentions --------

    def get_detention_rules(self):
        return self._list("/api/detentions/rules")

    def save_detention_rule(self, data: Dict[str, Any]):
        return self._request("POST", "/api/detentions/rules", json=data)

    def get_detentions(self, params: Optional[Dict[str, Any]] = None):
        return self._list("/api/detentions", params)

    def get_detention(self, id: int):
        return self._request("GET", f"/api/detentions/{id}")

    def create_detention(self, data: Dict[str, Any]):
        return self._request("POST", "/api/detentions", json=data)

    def update_detention(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/detentions/{id}", json=data)

    def delete_detention(self, id: int):
        return self._request("DELETE", f"/api/detentions/{id}")

    def assign_to_detention(self, id: int, data: Dict[str, Any]):
        return self._request("POST", f"/api/detentions/{id}/assign", json=data)

    def auto_assign_detention(self, data: Dict[str, Any]):
        return self._request("POST", "/api/detentions/auto-assign", json=data)

    def update_detention_session_status(self, session_id: int, status: str):
        return self._request("PUT", f"/api/detentions/sessions/{session_id}/status", json={"status": status})

    def mark_detention_attendance(self, assignment_id: int, attendance_status: str, notes: Optional[str] = None):
        return self._request("PUT", f"/api/detentions/assignments/{assignment_id}/attendance", json={
            "attendance_status": attendance_status,
            "notes": notes,
        })

    def get_student_detention_history(self, student_id: int):
        return self._list(f"/api/detentions/student/{student_id}/history")

    def get_detention_queue(self):
        return self._list("/api/detentions/queue")

    # -------- Merits --------

    def get_merits(self, params: Optional[Dict[str, Any]] = None):
        return self._list("/api/merits", params)

    def create_merit(self, data: Dict[str, Any]):
        return self._request("POST", "/api/merits", json=data)

    def update_merit(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/merits/{id}", json=data)

    def delete_merit(self, id: int):
        return self._request("DELETE", f"/api/merits/{id}")

    # -------- Exports --------

    def export_student_record(self, id: int, format: str = "excel") -> Blob:
        return self._blob("GET", f"/api/exports/students/{id}", params={"format": format})

    def export_class_records(self, id: int, format: str = "excel") -> Blob:
        return self._blob("GET", f"/api/exports/class/{id}", params={"format": format})

    # -------- Bulk import --------

    def bulk_import(self, kind: str, filename: str, content: bytes, content_type: Optional[str]):
        return self._upload(f"/api/bulk-import/{kind}", "file", filename, content, content_type)

    def download_import_template(self, kind: str) -> Blob:
        return self._blob("GET", f"/api/bulk-import/template/{kind}")

    def validate_import_v2(self, kind: str, filename: str, content: bytes, content_type: Optional[str]):
        return self._upload(f"/api/bulk-import-v2/{kind}/validate", "file", filename, content, content_type)

    def import_v2(self, kind: str, filename: str, content: bytes, content_type: Optional[str],
                  options: Dict[str, str]):
        return self._upload(f"/api/bulk-import-v2/{kind}", "file", filename, content, content_type, options)

    def download_import_template_v2(self, kind: str) -> Blob:
        return self._blob("GET", f"/api/bulk-import-v2/template/{kind}")

    def export_import_errors(self, errors: List[Any], kind: str) -> Blob:
        return self._blob("POST", "/api/bulk-import-v2/export-errors", json={"errors": errors, "type": kind})

    def get_import_history(self, limit: int = 20, offset: int = 0):
        return self._request("GET", "/api/bulk-import-v2/history", params={"limit": limit, "offset": offset})

    def get_import_history_detail(self, id: int):
        return self._request("GET", f"/api/bulk-import-v2/history/{id}")

    # -------- Users --------

    def get_users(self):
        return self._list("/api/users")

    def get_user(self, id: int):
        return self._request("GET", f"/api/users/{id}")

    def create_user(self, data: Dict[str, Any]):
        return self._request("POST", "/api/users", json=data)

    def update_user_role(self, id: int, role: str):
        return self._request("PUT", f"/api/users/{id}/role", json={"role": role})

    def delete_user(self, id: int):
        return self._request("DELETE", f"/api/users/{id}")

    # -------- Incident & merit types --------

    def get_incident_types(self, params: Optional[Dict[str, Any]] = None):
        return self._list("/api/incident-types", params)

    def create_incident_type(self, data: Dict[str, Any]):
        return self._request("POST", "/api/incident-types", json=data)

    def update_incident_type(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/incident-types/{id}", json=data)

    def delete_incident_type(self, id: int):
        return self._request("DELETE", f"/api/incident-types/{id}")

    def get_merit_types(self, params: Optional[Dict[str, Any]] = None):
        return self._list("/api/merit-types", params)

    def create_merit_type(self, data: Dict[str, Any]):
        return self._request("POST", "/api/merit-types", json=data)

    def update_merit_type(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/merit-types/{id}", json=data)

    def delete_merit_type(self, id: int):
        return self._request("DELETE", f"/api/merit-types/{id}")

    # -------- Interventions --------

    def get_interventions(self, params: Optional[Dict[str, Any]] = None):
        return self._list("/api/interventions", params)

    def get_intervention(self, id: int):
        return self._request("GET", f"/api/interventions/{id}")

    def update_intervention(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/interventions/{id}", json=data)

    def delete_intervention(self, id: int):
        return self._request("DELETE", f"/api/interventions/{id}")

    def get_intervention_types(self):
        return self._list("/api/interventions/types/list")

    def create_intervention_type(self, data: Dict[str, Any]):
        return self._request("POST", "/api/interventions/types", json=data)

    def update_intervention_type(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/interventions/types/{id}", json=data)

    def delete_intervention_type(self, id: int):
        return self._request("DELETE", f"/api/interventions/types/{id}")

    # -------- Consequences --------

    def get_consequence_definitions(self):
        return self._list("/api/consequences/definitions")

    def create_consequence_definition(self, data: Dict[str, Any]):
        return self._request("POST", "/api/consequences/definitions", json=data)

    def update_consequence_definition(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/consequences/definitions/{id}", json=data)

    def delete_consequence_definition(self, id: int):
        return self._request("DELETE", f"/api/consequences/definitions/{id}")

    def get_consequences(self, params: Optional[Dict[str, Any]] = None):
        return self._list("/api/consequences", params)

    def get_consequence(self, id: int):
        return self._request("GET", f"/api/consequences/{id}")

    def update_consequence(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/consequences/{id}", json=data)

    def complete_consequence(self, id: int):
        return self._request("PUT", f"/api/consequences/{id}/complete")

    def delete_consequence(self, id: int):
        return self._request("DELETE", f"/api/consequences/{id}")

    # -------- Period timetables --------

    def get_timetable_templates(self):
        return self._list("/api/period-timetables/templates")

    def get_timetable_template(self, id: int):
        return self._request("GET", f"/api/period-timetables/templates/{id}")

    def create_timetable_template(self, data: Dict[str, Any]):
        return self._request("POST", "/api/period-timetables/templates", json=data)

    def update_timetable_template(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/period-timetables/templates/{id}", json=data)

    def delete_timetable_template(self, id: int):
        return self._request("DELETE", f"/api/period-timetables/templates/{id}")

    def get_time_slots(self, template_id: int):
        return self._list(f"/api/period-timetables/templates/{template_id}/slots")

    def bulk_create_time_slots(self, template_id: int, slots: List[Dict[str, Any]]):
        return self._request("POST", f"/api/period-timetables/templates/{template_id}/slots/bulk",
                             json={"slots": slots})

    def update_time_slot(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/period-timetables/slots/{id}", json=data)

    def delete_time_slot(self, id: int):
        return self._request("DELETE", f"/api/period-timetables/slots/{id}")

    def get_subjects(self):
        return self._list("/api/subjects")

    def create_subject(self, data: Dict[str, Any]):
        return self._request("POST", "/api/subjects", json=data)

    def delete_subject(self, id: int):
        return self._request("DELETE", f"/api/subjects/{id}")

    def get_classrooms(self):
        return self._list("/api/period-timetables/classrooms")

    def create_classroom(self, data: Dict[str, Any]):
        return self._request("POST", "/api/period-timetables/classrooms", json=data)

    def get_class_timetable(self, class_id: int):
        return self._list(f"/api/period-timetables/class/{class_id}")

    def get_teacher_timetable(self, teacher_id: int):
        return self._list(f"/api/period-timetables/teacher/{teacher_id}")

    def assign_class_period(self, class_id: int, data: Dict[str, Any]):
        return self._request("POST", f"/api/period-timetables/class/{class_id}/assign", json=data)

    def update_class_timetable(self, id: int, data: Dict[str, Any]):
        return self._request("PUT", f"/api/period-timetables/class-timetable/{id}", json=data)

    def delete_class_timetable(self, id: int):
        return self._request("DELETE", f"/api/period-timetables/class-timetable/{id}")


def settle_all(calls: Dict[str, Callable[[], Any]]) -> Tuple[Dict[str, Any], Dict[str, SchoolApiError]]:
    """
    Run independent API calls concurrently and wait for all of them.

    Returns ``(results, errors)`` keyed like ``calls``. Pool size is capped at
    ``MAX_WORKERS`` to stay inside the session's connection pool.
    """
    results: Dict[str, Any] = {}
    errors: Dict[str, SchoolApiError] = {}
    with ThreadPoolExecutor(max_workers=max(min(len(calls), MAX_WORKERS), 1)) as pool:
        futures = {key: pool.submit(call) for key, call in calls.items()}
        for key, future in futures.items():
            try:
                results[key] = future.result()
            except SchoolApiError as e:
                errors[key] = e
    return results, errors


def fetch_all(calls: Dict[str, Callable[[], Any]], tolerate: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Run independent API calls concurrently and collect their results by key.

    Keys listed in ``tolerate`` fall back to an empty list when their call
    fails; any other failure is re-raised once every call has settled.
    """
    tolerate = set(tolerate)
    start_time = time.time()
    results, errors = settle_all(calls)

    for key, error in errors.items():
        if key not in tolerate:
            raise error
        logger.error(f"Error fetching {key}, using empty data: {error.message}")
        results[key] = []

    logger.info(f"Fetched {', '.join(calls)} in {time.time() - start_time:.2f} seconds")
    return results
