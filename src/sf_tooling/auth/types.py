import typing
import httpx


class SalesforceToken(typing.NamedTuple):
    instance: httpx.URL
    token: str


__all__ = ["SalesforceToken"]
