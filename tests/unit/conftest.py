import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Generator

import orjson
import pytest

from hibachi_signing.client import HibachiSigningClient
from hibachi_signing.signers import EcdsaSigner, HmacSigner
from hibachi_signing.types import ContractSpec
from tests.mock_executors import MockHttpExecutor, MockOutputNotExhausted

DATA_DIR = Path(__file__).parent.joinpath("data")

log = logging.getLogger(__name__)

# NOTE: well-known test keys (private keys 1 and 2), never use for real funds
PRIVATE_KEY_ONE = "0x" + "00" * 31 + "01"
PUBLIC_KEY_ONE = (
    "79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
)
COMPRESSED_PUBLIC_KEY_ONE = (
    "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
)
PRIVATE_KEY_TWO = "0x" + "00" * 31 + "02"
PUBLIC_KEY_TWO = (
    "c6047f9441ed7d6d3045406e95c07cd85c778e4b8cef3ca7abac09b95c709ee5"
    "1ae168fea63dc339a3c58419466ceaeef7f632653266d0e1236431a950cfe52a"
)
COMPRESSED_PUBLIC_KEY_TWO = (
    "02c6047f9441ed7d6d3045406e95c07cd85c778e4b8cef3ca7abac09b95c709ee5"
)

HMAC_SECRET = "BAR"

BTC_CONTRACT = ContractSpec(id=2, symbol="BTC/USDT-P", underlying_decimals=8)
ETH_CONTRACT = ContractSpec(id=1, symbol="ETH/USDT-P", underlying_decimals=9)


@pytest.fixture
def ecdsa_signer() -> EcdsaSigner:
    return EcdsaSigner(PRIVATE_KEY_ONE, "0x04" + PUBLIC_KEY_ONE)


@pytest.fixture
def hmac_signer() -> HmacSigner:
    return HmacSigner(HMAC_SECRET)


@pytest.fixture
def mock_http_client() -> Generator[
    tuple[HibachiSigningClient, MockHttpExecutor], None, None
]:
    mock_http = MockHttpExecutor()
    client = HibachiSigningClient(
        # not used with the mock in place
        api_url="api.gaierror.xyz",
        account_id=1,
        api_key="FOO",
        private_key=PRIVATE_KEY_ONE,
        public_key=COMPRESSED_PUBLIC_KEY_ONE,
        # replace real network requests with our mock
        executor=mock_http,
    )

    yield (client, mock_http)

    if len(mock_http.staged_outputs) > 0:
        raise MockOutputNotExhausted(mock_http.staged_outputs)


@lru_cache(maxsize=1)
def data_files() -> list[Path]:
    return list(DATA_DIR.iterdir())


def json_data_files(name: str) -> list[Path]:
    return list(
        sorted(path for path in data_files() if path.match(f"{name}.*.json"))
    )


def load_json(name: str, case: int | None = None) -> dict[str, Any]:
    case_part = f"{case}." if case else ""
    path = DATA_DIR / f"{name}.{case_part}json"
    with open(path, "rb") as fh:
        return orjson.loads(fh.read())


def load_json_all_cases(name: str) -> list[tuple[dict[str, Any], Path]]:
    """Load all json payloads for a given base name (case 1, case 2, ...)."""
    results = []
    for path in json_data_files(name):
        with open(path, "rb") as fh:
            payload = orjson.loads(fh.read())
            results.append((payload, path))
    return results
