import json
import threading
import time

import pytest
import requests

from admin_console.services.school_api import MAX_WORKERS, SchoolApi, SchoolApiError, fetch_all, settle_all


def make_response(status=200, body=None, content=None, headers=None, reason="OK"):
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response.url = "http://school.test/api"
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = content or b""
    response.headers.update(headers or {})
    return response


class Recorder:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def __call__(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def api_with(monkeypatch):
    def build(response=None, error=None, school_id="7"):
        session = requests.Session()
        recorder = Recorder(response, error)
        monkeypatch.setattr(session, "request", recorder)
        api = SchoolApi("http://school.test/", "tok123", school_id=school_id, timeout=5, session=session)
        return api, recorder
    return build


def test_headers_and_url(api_with):
    api, recorder = api_with(make_response(body={"id": 4}))
    assert api.get_student(4) == {"id": 4}
    method, url, kwargs = recorder.calls[0]
    assert (method, url) == ("GET", "http://school.test/api/students/4")
    assert kwargs["timeout"] == 5
    assert api.session.headers["Authorization"] == "Bearer tok123"
    assert api.session.headers["x-school-id"] == "7"


def test_no_school_header_without_school(api_with):
    api, _ = api_with(make_response(body=[]), school_id=None)
    assert "x-school-id" not in api.session.headers


def test_blank_params_are_dropped(api_with):
    api, recorder = api_with(make_response(body=[]))
    api.get_students({"class_id": None, "search": "", "grade_level": "7"})
    assert recorder.calls[0][2]["params"] == {"grade_level": "7"}


def test_null_list_becomes_empty(api_with):
    api, _ = api_with(make_response(content=b"null"))
    assert api.get_classes() == []


def test_json_body_is_sent(api_with):
    api, recorder = api_with(make_response(body={"message": "ok"}))
    api.change_password("old-secret", "new-secret")
    method, url, kwargs = recorder.calls[0]
    assert method == "PUT"
    assert url.endswith("/api/auth/change-password")
    assert kwargs["json"] == {"currentPassword": "old-secret", "newPassword": "new-secret"}


def test_error_body_becomes_school_api_error(api_with):
    body = {"error": "Validation failed", "details": ["email taken"]}
    api, _ = api_with(make_response(status=400, body=body, reason="Bad Request"))
    with pytest.raises(SchoolApiError) as exc:
        api.create_user({"email": "a@b.co"})
    assert exc.value.status_code == 400
    assert exc.value.message == "Validation failed"
    assert exc.value.details == ["email taken"]


def test_error_without_body_uses_reason(api_with):
    api, _ = api_with(make_response(status=503, content=b"<html>down</html>", reason="Service Unavailable"))
    with pytest.raises(SchoolApiError) as exc:
        api.get_teachers()
    assert exc.value.status_code == 503
    assert exc.value.message == "Service Unavailable"


def test_timeouts_and_connection_errors(api_with):
    api, _ = api_with(error=requests.exceptions.Timeout())
    with pytest.raises(SchoolApiError) as exc:
        api.get_merits()
    assert exc.value.status_code == 504

    api, _ = api_with(error=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(SchoolApiError) as exc:
        api.get_merits()
    assert exc.value.status_code == 502


def test_blob_reads_filename(api_with):
    response = make_response(
        content=b"PK\x03\x04",
        headers={
            "Content-Type": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "Content-Disposition": 'attachment; filename="class_records_3.xlsx"',
        },
    )
    api, recorder = api_with(response)
    content, content_type, filename = api.export_class_records(3)
    assert content == b"PK\x03\x04"
    assert content_type.endswith("spreadsheetml.sheet")
    assert filename == "class_records_3.xlsx"
    assert recorder.calls[0][2]["params"] == {"format": "excel"}


def test_upload_sends_multipart(api_with):
    api, recorder = api_with(make_response(body={"summary": {"created": 1}}))
    api.import_v2("classes", "classes.csv", b"name\n7A\n", "text/csv", {"mode": "create"})
    method, url, kwargs = recorder.calls[0]
    assert url.endswith("/api/bulk-import-v2/classes")
    assert kwargs["files"] == {"file": ("classes.csv", b"name\n7A\n", "text/csv")}
    assert kwargs["data"] == {"mode": "create"}


def test_fetch_all_collects_by_key():
    assert fetch_all({"a": lambda: [1], "b": lambda: {"x": 2}}) == {"a": [1], "b": {"x": 2}}


def test_fetch_all_tolerates_listed_failures():
    def broken():
        raise SchoolApiError(500, "boom")

    result = fetch_all({"students": lambda: [1], "merits": broken}, tolerate=("merits",))
    assert result == {"students": [1], "merits": []}


def test_fetch_all_raises_untolerated_failure():
    def broken():
        raise SchoolApiError(404, "Class not found")

    with pytest.raises(SchoolApiError) as exc:
        fetch_all({"class": broken, "students": lambda: []})
    assert exc.value.message == "Class not found"


def test_settle_all_caps_concurrency_and_keeps_failures():
    lock = threading.Lock()
    running = {"now": 0, "peak": 0}

    def call(n):
        with lock:
            running["now"] += 1
            running["peak"] = max(running["peak"], running["now"])
        time.sleep(0.01)
        with lock:
            running["now"] -= 1
        if n == 3:
            raise SchoolApiError(409, "Already assigned")
        return n

    calls = {str(n): (lambda n=n: call(n)) for n in range(20)}
    results, errors = settle_all(calls)

    assert running["peak"] <= MAX_WORKERS
    assert len(results) == 19
    assert errors["3"].message == "Already assigned"
