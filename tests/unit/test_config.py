import pytest

from domain.errors import ConfigurationError
from infrastructure.config import DEFAULT_API_URL, DEFAULT_LOGIN_URL, ClientSettings

BASE_ENV = {
    "UBIFLOW_CLIENT_ID": "42",
    "UBIFLOW_CLIENT_CODE": "ag123",
    "UBIFLOW_CLIENT_LOGIN": "ag123-login",
    "UBIFLOW_CLIENT_SECRET": "s3cret",
}


@pytest.mark.unit
def test_from_env_defaults() -> None:
    settings = ClientSettings.from_env(BASE_ENV)

    assert settings.client_id == "42"
    assert settings.client_code == "ag123"
    assert settings.client_login == "ag123-login"
    assert settings.client_secret == "s3cret"
    assert settings.api_url == DEFAULT_API_URL
    assert settings.login_url == DEFAULT_LOGIN_URL
    assert settings.http_timeout == 30
    assert settings.cache_dir is None


@pytest.mark.unit
def test_from_env_overrides() -> None:
    settings = ClientSettings.from_env(
        {
            **BASE_ENV,
            "UBIFLOW_API_URL": "https://sandbox.example.test/api",
            "UBIFLOW_HTTP_TIMEOUT": "5",
            "UBIFLOW_CACHE_DIR": "/tmp/ubiflow",
        }
    )

    assert settings.api_url == "https://sandbox.example.test/api/"
    assert settings.http_timeout == 5
    assert settings.cache_dir == "/tmp/ubiflow"


@pytest.mark.unit
def test_missing_variables_are_reported() -> None:
    env = dict(BASE_ENV)
    del env["UBIFLOW_CLIENT_SECRET"]
    env["UBIFLOW_CLIENT_CODE"] = ""

    with pytest.raises(ConfigurationError) as excinfo:
        ClientSettings.from_env(env)

    assert excinfo.value.detail == ["UBIFLOW_CLIENT_CODE", "UBIFLOW_CLIENT_SECRET"]


@pytest.mark.unit
def test_invalid_timeout() -> None:
    with pytest.raises(ConfigurationError, match="UBIFLOW_HTTP_TIMEOUT"):
        ClientSettings.from_env({**BASE_ENV, "UBIFLOW_HTTP_TIMEOUT": "soon"})


@pytest.mark.unit
def test_repr_hides_secret() -> None:
    assert "s3cret" not in repr(ClientSettings.from_env(BASE_ENV))
