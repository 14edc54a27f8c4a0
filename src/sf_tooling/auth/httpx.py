import typing

import httpx

from .types import SalesforceToken


class SalesforceAuth(httpx.Auth):
    """Attaches an already-issued session token to every outgoing request."""

    token: SalesforceToken

    def __init__(self, session_token: SalesforceToken):
        self.token = session_token

    def auth_flow(
        self, request: httpx.Request
    ) -> typing.Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self.token.token}"
        yield request
