# tests/test_config.py
import pytest

from sdk.http_transport import HttpTransport
from stocktask.config import ConfigurationError, build_transport, get_settings
from stocktask.endpoint import MockResourceEndpoint


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("STOCKTASK_MOCK_API", "STOCKTASK_API_URL", "STOCKTASK_API_TIMEOUT", "STOCKTASK_PORT",
                 "STOCKTASK_API_KEY", "STOCKTASK_PAGE_SIZE"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_to_mock():
    settings = get_settings()
    assert settings.mock_api is True
    assert settings.page_size == 6
    assert isinstance(build_transport(settings), MockResourceEndpoint)


def test_flag_is_read_on_every_call(monkeypatch):
    monkeypatch.setenv("STOCKTASK_MOCK_API", "false")
    assert get_settings().mock_api is False
    monkeypatch.setenv("STOCKTASK_MOCK_API", "1")
    assert get_settings().mock_api is True


def test_real_transport_from_env(monkeypatch):
    monkeypatch.setenv("STOCKTASK_MOCK_API", "no")
    monkeypatch.setenv("STOCKTASK_API_URL", "http://inventory.local:9000/")
    monkeypatch.setenv("STOCKTASK_API_KEY", "secret")
    monkeypatch.setenv("STOCKTASK_PAGE_SIZE", "12")

    settings = get_settings()
    assert settings.page_size == 12
    transport = build_transport(settings)
    assert isinstance(transport, HttpTransport)
    assert transport.base_url == "http://inventory.local:9000"
    assert transport.client.headers["Authorization"] == "Bearer secret"
    assert transport.assigns_defaults is False


@pytest.mark.parametrize("variable, value", [
    ("STOCKTASK_PAGE_SIZE", "zero"),
    ("STOCKTASK_PAGE_SIZE", "0"),
    ("STOCKTASK_PORT", "http"),
    ("STOCKTASK_API_TIMEOUT", "-1"),
])
def test_bad_values_name_the_variable(monkeypatch, variable, value):
    monkeypatch.setenv(variable, value)
    with pytest.raises(ConfigurationError) as exc:
        get_settings()
    assert exc.value.variable == variable
    assert str(exc.value).startswith(variable)
