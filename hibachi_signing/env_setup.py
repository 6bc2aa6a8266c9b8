"""Environment configuration setup utilities.

This module loads credentials from a .env file or the process environment.
"""

import logging
import os
from pathlib import Path
from typing import NamedTuple

from dotenv import load_dotenv

from hibachi_signing.errors import ValidationError
from hibachi_signing.helpers import DEFAULT_API_URL

log = logging.getLogger(__name__)


class EnvironmentConfig(NamedTuple):
    api_endpoint: str
    api_key: str
    account_id: int
    private_key: str
    public_key: str
    dst_public_key: str


def setup_environment(env_file: str | Path = ".env") -> EnvironmentConfig:
    """Load the Hibachi API configuration from the environment.

    Loads environment variables from a .env file if present, otherwise falls
    back to system environment variables. Reads environment-specific variables
    based on the ENVIRONMENT variable (defaults to 'production').

    Returns:
        EnvironmentConfig: endpoint, API key, account id, signing keys and the
            destination public key used for transfers

    Raises:
        ValidationError: If the account id is not an integer

    """
    env_file_path = Path(env_file)
    if env_file_path.exists():
        log.info("Loading environment variables from %s", env_file_path)
        load_dotenv(env_file_path)
    else:
        log.info("%s not found. Falling back to process environment.", env_file_path)

    environment = os.getenv("ENVIRONMENT", "production").upper()
    log.info("Using %s environment", environment.lower())

    api_endpoint = os.environ.get(f"HIBACHI_API_ENDPOINT_{environment}", DEFAULT_API_URL)
    api_key = os.environ.get(f"HIBACHI_API_KEY_{environment}", "")
    try:
        account_id = int(os.environ.get(f"HIBACHI_ACCOUNT_ID_{environment}", "0"))
    except ValueError as e:
        raise ValidationError(f"Invalid HIBACHI_ACCOUNT_ID_{environment}: {e}") from e
    private_key = os.environ.get(f"HIBACHI_PRIVATE_KEY_{environment}", "")
    public_key = os.environ.get(f"HIBACHI_PUBLIC_KEY_{environment}", "")
    dst_public_key = os.environ.get(
        f"HIBACHI_TRANSFER_DST_ACCOUNT_PUBLIC_KEY_{environment}", ""
    )

    return EnvironmentConfig(
        api_endpoint=api_endpoint,
        api_key=api_key,
        account_id=account_id,
        private_key=private_key,
        public_key=public_key,
        dst_public_key=dst_public_key,
    )
