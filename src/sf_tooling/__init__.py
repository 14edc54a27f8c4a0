from .client import SalesforceClient, AsyncSalesforceClient
from .auth import SalesforceToken, SalesforceAuth
from .exceptions import SalesforceError
from .resources.tooling import ToolingResource, AsyncToolingResource

__all__ = [
    "SalesforceClient",
    "AsyncSalesforceClient",
    "SalesforceAuth",
    "SalesforceToken",
    "SalesforceError",
    "ToolingResource",
    "AsyncToolingResource",
]
