CSV_FILE = ("students.csv", b"student_id,first_name,last_name\nS001,Alice,Mokoena\n", "text/csv")


def test_v1_import_normalises_results(client, fake_api):
    fake_api.responses["bulk_import"] = {
        "message": "Import completed",
        "results": {"total": 2, "successful": 1, "failed": 1, "errors": [{"row": 3, "error": "Missing name"}]},
    }
    response = client.post("/bulk-import/students", files={"file": CSV_FILE})
    assert response.status_code == 200
    assert response.json() == {
        "total": 2, "successful": 1, "failed": 1, "errors": [{"row": 3, "error": "Missing name"}],
    }
    (args, _), = fake_api.called("bulk_import")
    assert args[:2] == ("students", "students.csv")


def test_import_rejects_unknown_kind_and_bad_files(client, fake_api):
    assert client.post("/bulk-import/parents", files={"file": CSV_FILE}).status_code == 404

    response = client.post("/bulk-import/students", files={"file": ("report.pdf", b"%PDF", "application/pdf")})
    assert response.status_code == 400

    response = client.post("/bulk-import/students", files={"file": ("empty.csv", b"", "text/csv")})
    assert response.status_code == 400
    assert response.json()["detail"] == "File is empty. Please choose a valid file."
    assert fake_api.called("bulk_import") == []


def test_v2_import_sends_options_for_kind(client, fake_api):
    fake_api.responses["import_v2"] = {"summary": {"created": 1, "updated": 0}, "errors": []}

    response = client.post("/bulk-import/v2/students", files={"file": CSV_FILE}, data={
        "mode": "create", "autoCreateClasses": "false", "academicYear": "2025-2026",
    })
    assert response.json()["summary"]["created"] == 1
    client.post("/bulk-import/v2/teachers", files={"file": CSV_FILE})

    calls = fake_api.called("import_v2")
    assert calls[0][0][4] == {
        "mode": "create", "autoCreateClasses": "false", "useSheetNames": "true", "academicYear": "2025-2026",
    }
    assert calls[1][0][0] == "teachers"
    assert calls[1][0][4] == {"mode": "upsert"}


def test_v2_import_rejects_unknown_mode(client, fake_api):
    response = client.post("/bulk-import/v2/students", files={"file": CSV_FILE}, data={"mode": "merge"})
    assert response.status_code == 400
    assert "Mode must be one of" in response.json()["detail"]


def test_v2_validate_and_history(client, fake_api):
    fake_api.responses["validate_import_v2"] = {"valid": True, "summary": {"totalRows": 1}}
    assert client.post("/bulk-import/v2/classes/validate", files={"file": CSV_FILE}).json()["valid"] is True

    client.get("/bulk-import/v2/history", params={"limit": 5})
    assert fake_api.called("get_import_history")[0][0] == (5, 0)


def test_error_report_and_templates_stream_backend_files(client, fake_api):
    fake_api.responses["export_import_errors"] = (b"PK", "application/octet-stream", "errors.xlsx")
    response = client.post("/bulk-import/v2/errors", params={"kind": "students"}, json={"errors": [{"row": 2}]})
    assert 'filename="errors.xlsx"' in response.headers["content-disposition"]
    assert fake_api.called("export_import_errors")[0][0] == ([{"row": 2}], "students")

    fake_api.responses["download_import_template"] = (b"PK", "application/octet-stream", None)
    response = client.get("/bulk-import/teachers/template")
    assert 'filename="teachers_template.xlsx"' in response.headers["content-disposition"]
