import pytest

from hibachi_signing.env_setup import setup_environment
from hibachi_signing.errors import ValidationError
from hibachi_signing.helpers import DEFAULT_API_URL
from tests.unit.conftest import (
    COMPRESSED_PUBLIC_KEY_TWO,
    PRIVATE_KEY_ONE,
    PUBLIC_KEY_ONE,
)

VARIABLES = (
    "ENVIRONMENT",
    "HIBACHI_API_ENDPOINT_PRODUCTION",
    "HIBACHI_API_KEY_PRODUCTION",
    "HIBACHI_ACCOUNT_ID_PRODUCTION",
    "HIBACHI_PRIVATE_KEY_PRODUCTION",
    "HIBACHI_PUBLIC_KEY_PRODUCTION",
    "HIBACHI_TRANSFER_DST_ACCOUNT_PUBLIC_KEY_PRODUCTION",
    "HIBACHI_API_KEY_STAGING",
    "HIBACHI_ACCOUNT_ID_STAGING",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in VARIABLES:
        monkeypatch.delenv(name, raising=False)


def test_setup_environment_from_env_file(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "\n".join(
            [
                "HIBACHI_API_ENDPOINT_PRODUCTION=https://api.hibachi.test",
                "HIBACHI_API_KEY_PRODUCTION=FOO",
                "HIBACHI_ACCOUNT_ID_PRODUCTION=128",
                f"HIBACHI_PRIVATE_KEY_PRODUCTION={PRIVATE_KEY_ONE}",
                f"HIBACHI_PUBLIC_KEY_PRODUCTION={PUBLIC_KEY_ONE}",
                f"HIBACHI_TRANSFER_DST_ACCOUNT_PUBLIC_KEY_PRODUCTION={COMPRESSED_PUBLIC_KEY_TWO}",
            ]
        )
    )
    # load_dotenv writes into os.environ, make monkeypatch remove the keys afterwards
    for name in VARIABLES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

    config = setup_environment(env_file)

    assert config.api_endpoint == "https://api.hibachi.test"
    assert config.api_key == "FOO"
    assert config.account_id == 128
    assert config.private_key == PRIVATE_KEY_ONE
    assert config.public_key == PUBLIC_KEY_ONE
    assert config.dst_public_key == COMPRESSED_PUBLIC_KEY_TWO


def test_setup_environment_selects_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "staging")
    monkeypatch.setenv("HIBACHI_API_KEY_STAGING", "BAR")
    monkeypatch.setenv("HIBACHI_ACCOUNT_ID_STAGING", "7")

    config = setup_environment(tmp_path / "missing.env")

    assert config.api_key == "BAR"
    assert config.account_id == 7
    assert config.api_endpoint == DEFAULT_API_URL
    assert config.private_key == ""


def test_setup_environment_invalid_account_id(tmp_path, monkeypatch):
    monkeypatch.setenv("HIBACHI_ACCOUNT_ID_PRODUCTION", "abc")

    with pytest.raises(ValidationError):
        setup_environment(tmp_path / "missing.env")
