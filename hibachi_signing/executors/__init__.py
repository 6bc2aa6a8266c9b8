from hibachi_signing.executors.defaults import DEFAULT_HTTP_EXECUTOR
from hibachi_signing.executors.httpx import HttpxHttpExecutor
from hibachi_signing.executors.interface import HttpExecutor, HttpResponse
from hibachi_signing.executors.requests import RequestsHttpExecutor

__all__ = [
    "HttpExecutor",
    "HttpResponse",
    "HttpxHttpExecutor",
    "RequestsHttpExecutor",
    "DEFAULT_HTTP_EXECUTOR",
]
