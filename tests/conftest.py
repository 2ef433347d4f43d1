import pytest
from fastapi.testclient import TestClient

from admin_console.dependencies.auth import admin_context
from admin_console.main import app


class FakeSchoolApi:
    """Stands in for SchoolApi: every method records its call and returns a canned response.

    ``responses[name]`` may be a value, an exception instance to raise, or a
    callable that receives the call's arguments. Unset methods return ``[]``.
    """

    def __init__(self):
        self.responses = {}
        self.calls = []

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def call(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            result = self.responses.get(name, [])
            if isinstance(result, Exception):
                raise result
            if callable(result):
                return result(*args, **kwargs)
            return result

        return call

    def called(self, name):
        return [(args, kwargs) for call_name, args, kwargs in self.calls if call_name == name]


@pytest.fixture
def fake_api():
    return FakeSchoolApi()


@pytest.fixture
def admin_user():
    return {"id": 1, "name": "Head Office", "email": "office@school.test", "role": "admin", "school_id": 7}


@pytest.fixture
def client(fake_api, admin_user):
    def override():
        return {
            "api": fake_api,
            "user": admin_user,
            "user_id": admin_user["id"],
            "school_id": admin_user["school_id"],
        }

    app.dependency_overrides[admin_context] = override
    yield TestClient(app)
    app.dependency_overrides.clear()
