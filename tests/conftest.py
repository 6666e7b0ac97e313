import pytest

from common import secrets as secrets_module


def pytest_configure(config):
    """If pytest-socket is installed, disable sockets for the whole run."""
    try:
        import pytest_socket

        pytest_socket.disable_socket()
    except ImportError:
        pass


# ---------------------------------------------------------------------------
# Default credentials for gateway tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _secrets() -> None:
    """Provide default secrets for tests via the secrets manager."""

    secrets_module.secrets.set_override(
        {"XERO_ACCESS_TOKEN": "testtoken", "XERO_TENANT_ID": "tenant-1"}
    )
    yield
    secrets_module.secrets.reset()


@pytest.fixture()
def invoice_guid() -> str:
    return "4ae2c6e9-6b9e-4d1a-9c2f-0d3c6b9a7e11"


@pytest.fixture()
def account_guid() -> str:
    return "297c2dc5-cc47-4afd-8ec8-74990b8761e9"
