from typing import Any, Protocol, runtime_checkable

from httpx import Request


@runtime_checkable
class I_SalesforceTransport(Protocol):
    """
    What an API resource needs from a client: build a request, then execute it
    into a destination. Authentication, retries, status handling and decoding
    all happen behind `execute`.
    """

    @property
    def tooling_url(self) -> str: ...

    def build_request(self, method: str, url: str, **kwargs: Any) -> Request: ...

    def execute(
        self, request: Request, destination: Any = None, resource_name: str = ""
    ) -> Any: ...


@runtime_checkable
class I_AsyncSalesforceTransport(Protocol):
    """Async counterpart of `I_SalesforceTransport`; only `execute` is awaited."""

    @property
    def tooling_url(self) -> str: ...

    def build_request(self, method: str, url: str, **kwargs: Any) -> Request: ...

    async def execute(
        self, request: Request, destination: Any = None, resource_name: str = ""
    ) -> Any: ...
