"""
App wiring tests: liveness, CORS, stub resources, configuration, bootstrap.

Run: pytest phoenix/test_app.py -v
"""

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from phoenix.config import ConfigError, Settings
from phoenix.main import LIVENESS_TEXT, create_app, run
from phoenix.models import Handoff, Project, ProjectStatus, SubTask, Task, TaskStatus

REQUIRED_ENV = {
    "MONGO_URI": "mongodb://db.internal:27017/phoenix",
    "JWT_SECRET": "env-secret",
    "CORS_ORIGIN": "https://cloudphoenix.example.com",
}


class TestLiveness:
    def test_root_is_plain_text(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.text == LIVENESS_TEXT
        assert resp.headers["content-type"].startswith("text/plain")

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestCors:
    def test_configured_origin_is_allowed(self, client, settings):
        resp = client.options(
            "/api/assets",
            headers={"Origin": settings.cors_origin, "Access-Control-Request-Method": "GET"},
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == settings.cors_origin

    def test_other_origin_is_refused(self, client):
        resp = client.get("/", headers={"Origin": "https://evil.example.net"})
        assert "access-control-allow-origin" not in resp.headers


class TestStubResources:
    @pytest.mark.parametrize("prefix", ["/api/projects", "/api/tasks", "/api/handoffs"])
    def test_requires_token(self, client, prefix):
        resp = client.get(prefix)
        assert resp.status_code == 401

    @pytest.mark.parametrize("prefix,resource", [
        ("/api/projects", "Projects"),
        ("/api/tasks", "Tasks"),
        ("/api/handoffs", "Handoffs"),
    ])
    def test_answers_not_implemented(self, client, auth_headers, prefix, resource):
        resp = client.get(prefix, headers=auth_headers)
        assert resp.status_code == 501
        assert resp.json() == {"msg": f"{resource} routes are not implemented"}

    @pytest.mark.parametrize("method,path", [
        ("GET", "/api/projects/"),
        ("GET", "/api/projects/abc123/members"),
        ("POST", "/api/tasks"),
        ("PUT", "/api/tasks/abc123"),
        ("DELETE", "/api/handoffs/abc123"),
    ])
    def test_subpaths_and_verbs(self, client, auth_headers, method, path):
        resp = client.request(method, path, headers=auth_headers)
        assert resp.status_code == 501


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env(REQUIRED_ENV)
        assert settings.port == 5001
        assert settings.token_expires_hours == 5
        assert settings.bcrypt_rounds == 10
        assert settings.mongo_db_name is None
        assert settings.env == "dev"

    @pytest.mark.parametrize("missing", sorted(REQUIRED_ENV))
    def test_required_variables(self, missing):
        env = {k: v for k, v in REQUIRED_ENV.items() if k != missing}
        with pytest.raises(ConfigError, match=missing):
            Settings.from_env(env)

    def test_blank_counts_as_missing(self):
        with pytest.raises(ConfigError, match="JWT_SECRET"):
            Settings.from_env({**REQUIRED_ENV, "JWT_SECRET": "  "})

    def test_port_override(self):
        assert Settings.from_env({**REQUIRED_ENV, "PORT": "8080"}).port == 8080

    def test_bad_port(self):
        with pytest.raises(ConfigError):
            Settings.from_env({**REQUIRED_ENV, "PORT": "not-a-port"})

    def test_create_app_reads_environment(self, monkeypatch):
        for key in REQUIRED_ENV:
            monkeypatch.delenv(key, raising=False)
        with pytest.raises(ConfigError):
            create_app()


class TestBootstrap:
    def test_unreachable_store_aborts_startup(self, settings, monkeypatch):
        def unreachable(_settings):
            raise ServerSelectionTimeoutError("no servers")

        monkeypatch.setattr("phoenix.main.connect", unreachable)
        app = create_app(settings=settings)

        with pytest.raises(ServerSelectionTimeoutError):
            with TestClient(app):
                pass

    def test_run_exits_non_zero_when_store_unreachable(self, monkeypatch):
        for key, value in REQUIRED_ENV.items():
            monkeypatch.setenv(key, value)
        monkeypatch.setattr("phoenix.main.load_dotenv", lambda: None)
        monkeypatch.setattr("phoenix.main.configure_logging", lambda *args, **kwargs: None)

        def unreachable(_settings):
            raise ServerSelectionTimeoutError("no servers")

        monkeypatch.setattr("phoenix.main.connect", unreachable)

        with pytest.raises(SystemExit) as exc_info:
            run()
        assert exc_info.value.code == 1


class TestEntityModels:
    def test_project_defaults(self):
        project = Project(name="Migration", owner="u1")
        assert project.status == ProjectStatus.not_started
        assert project.members == []

    def test_task_subtasks_keep_order(self):
        task = Task(
            project="p1",
            title="Patch firewalls",
            subTasks=[SubTask(title="edge"), SubTask(title="core", completed=True)],
        )
        assert task.status == TaskStatus.todo
        assert [s.title for s in task.subTasks] == ["edge", "core"]

    def test_task_status_enum(self):
        with pytest.raises(ValueError):
            Task(project="p1", title="x", status="Someday")

    def test_handoff_requires_both_users(self):
        with pytest.raises(ValueError):
            Handoff(fromUser="u1", summary="night shift")
