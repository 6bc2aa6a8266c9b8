"""Default executor configuration.

Defines the HTTP executor implementation used when no custom executor is provided.
"""

from typing import Type

from hibachi_signing.executors.httpx import HttpxHttpExecutor
from hibachi_signing.executors.interface import HttpExecutor

DEFAULT_HTTP_EXECUTOR: Type[HttpExecutor] = HttpxHttpExecutor
