# tests/test_main.py
import pytest
from fastapi.testclient import TestClient

from appbuilder.config import Configuration
from appbuilder.errors import ConfigurationMissingError, InvalidEnumValueError
import appbuilder.main as main_module
from appbuilder.main import create_app
from appbuilder.middleware import AuthorizationPolicy
from appbuilder.pipeline import (
    AUTHENTICATION,
    AUTHORIZATION,
    CORS,
    DEVELOPER_EXCEPTION_PAGE,
    HSTS,
    HTTPS_REDIRECTION,
)
from tests.conftest import TokenBackend


class TestCreateApp:
    @pytest.mark.unit
    def test_production_pipeline(self):
        app = create_app(Configuration({"Environment": "Production"}))

        assert app.state.pipeline_stages == (HSTS, HTTPS_REDIRECTION, AUTHENTICATION, AUTHORIZATION, CORS)

    @pytest.mark.unit
    def test_local_pipeline_with_developer_page(self):
        app = create_app(Configuration({"Environment": "Local", "DeveloperExceptionPage": "true"}))

        assert app.state.pipeline_stages == (DEVELOPER_EXCEPTION_PAGE, AUTHENTICATION, AUTHORIZATION, CORS)

    @pytest.mark.unit
    def test_missing_environment_fails_startup(self):
        with pytest.raises(ConfigurationMissingError):
            create_app(Configuration({}))

    @pytest.mark.unit
    def test_unknown_environment_fails_startup(self):
        with pytest.raises(InvalidEnumValueError):
            create_app(Configuration({"Environment": "Moon"}))

    @pytest.mark.unit
    def test_reads_process_environment_by_default(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "Test")

        app = create_app()

        assert HSTS not in app.state.pipeline_stages

    @pytest.mark.integration
    def test_health_reports_pipeline(self):
        app = create_app(Configuration({"Environment": "Local"}))

        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "pipeline": [AUTHENTICATION, AUTHORIZATION, CORS]}

    @pytest.mark.integration
    def test_production_redirects_and_sets_hsts(self):
        app = create_app(Configuration({"Environment": "Production"}))

        plain = TestClient(app).get("/health", follow_redirects=False)
        secure = TestClient(app, base_url="https://api.example.com").get("/health")

        assert plain.status_code == 307
        assert secure.status_code == 200
        assert secure.headers["strict-transport-security"].startswith("max-age=")

    @pytest.mark.integration
    def test_authorization_policy_applies(self):
        app = create_app(
            Configuration({"Environment": "Local"}),
            auth_backend=TokenBackend(),
            authorization_policy=AuthorizationPolicy(require_authenticated=True, exempt_paths=["/health"]),
        )
        client = TestClient(app)

        assert client.get("/health").status_code == 200
        assert client.get("/").status_code == 401
        assert client.get("/", headers={"Authorization": "Bearer good"}).status_code == 200

    @pytest.mark.integration
    def test_unhandled_errors_are_json_without_developer_page(self):
        app = create_app(Configuration({"Environment": "Local"}))

        @app.get("/boom")
        async def boom():
            raise RuntimeError("kaboom")

        response = TestClient(app, raise_server_exceptions=False).get("/boom")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal Server Error", "status_code": 500}

    @pytest.mark.integration
    def test_developer_page_renders_traceback_through_full_app(self):
        app = create_app(Configuration({"Environment": "Local", "DeveloperExceptionPage": True}))

        @app.get("/boom")
        async def boom():
            raise RuntimeError("kaboom")

        response = TestClient(app, raise_server_exceptions=False).get("/boom")

        assert response.status_code == 500
        assert "RuntimeError: kaboom" in response.text
        assert app.state.pipeline_stages[0] == DEVELOPER_EXCEPTION_PAGE

    @pytest.mark.integration
    def test_lifespan_configures_logging(self, monkeypatch):
        calls = []
        monkeypatch.setattr(main_module, "setup_logging", lambda: calls.append(True))
        app = create_app(Configuration({"Environment": "Local"}))

        with TestClient(app) as client:
            client.get("/health")

        assert calls == [True]
