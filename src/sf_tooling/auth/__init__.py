from .httpx import SalesforceAuth
from .types import SalesforceToken


__all__ = [
    "SalesforceAuth",
    "SalesforceToken",
]
