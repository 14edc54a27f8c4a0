from typing import Any, ClassVar

from ..client import SalesforceClient, SalesforceClientBase


class ApiResource:
    """
    A group of endpoints bound to one client. The client is fixed at
    construction; a connection name is resolved once through the registry
    of `_client_type`.
    """

    client: Any
    _client_type: ClassVar[type[SalesforceClientBase]] = SalesforceClient

    def __init__(self, client: Any | str | None = None):
        if not client or isinstance(client, str):
            self.client = self._client_type.get_connection(client)
        else:
            self.client = client
