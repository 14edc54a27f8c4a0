from functools import cached_property
from types import TracebackType
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar
from typing_extensions import override

from httpx import AsyncClient, Client, Request, Response

from .logger import getLogger
from .metrics import LIMIT_INFO_HEADER, ApiUsage, parse_api_usage
from .exceptions import raise_for_status
from .auth import SalesforceAuth, SalesforceToken
from .apimodels import ApiVersion
from .data.fields import decode_into

if TYPE_CHECKING:
    from .resources.tooling import AsyncToolingResource, ToolingResource

LOGGER = getLogger("client")

_SCB = TypeVar("_SCB", bound="SalesforceClientBase")

DEFAULT_HEADERS = {"Accept": "application/json"}


class SalesforceClientBase:
    api_version: ApiVersion
    api_usage: ApiUsage | None = None
    connection_name: str

    DEFAULT_CONNECTION_NAME: ClassVar[str] = "default"
    DEFAULT_API_VERSION: ClassVar[float] = 63.0

    def __init__(
        self,
        api_version: ApiVersion | int | float | str | None = None,
        connection_name: str = DEFAULT_CONNECTION_NAME,
    ):
        self.api_version = ApiVersion.lazy_build(
            self.DEFAULT_API_VERSION if api_version is None else api_version
        )
        self.connection_name = connection_name
        self.register_connection(connection_name, self)

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls._connections: dict[str, "SalesforceClientBase"] = {}

    @property
    def data_url(self) -> str:
        return self.api_version.url

    @property
    def tooling_url(self) -> str:
        return f"{self.data_url}/tooling"

    @classmethod
    def get_connection(cls: type[_SCB], name: str | None = None) -> _SCB:
        return cls._connections[name or cls.DEFAULT_CONNECTION_NAME]  # type: ignore

    @classmethod
    def register_connection(cls: type[_SCB], connection_name: str, instance: _SCB):
        if connection_name in cls._connections:
            raise KeyError(
                f"SalesforceClient connection '{connection_name}' has already been registered."
            )
        cls._connections[connection_name] = instance

    @classmethod
    def unregister_connection(cls: type[_SCB], name_or_instance: str | _SCB):
        if isinstance(name_or_instance, str):
            names_to_unregister = [name_or_instance]
        else:
            names_to_unregister = [
                name
                for name, instance in cls._connections.items()
                if instance is name_or_instance
            ]
        for name in names_to_unregister:
            if name in cls._connections:
                del cls._connections[name]

    def _handle_response(self, response: Response, resource_name: str = ""):
        LOGGER.debug(
            "%s %s -> %d",
            response.request.method,
            response.request.url.path,
            response.status_code,
        )
        raise_for_status(response, resource_name)

        limit_info = response.headers.get(LIMIT_INFO_HEADER)
        if limit_info:
            self.api_usage = parse_api_usage(limit_info, resource_name)
            if org := self.api_usage.org:
                LOGGER.debug(
                    "%s (%s): %d of %d API requests used",
                    resource_name or response.request.url.path,
                    self.connection_name,
                    org.used,
                    org.limit,
                )


class AsyncSalesforceClient(AsyncClient, SalesforceClientBase):
    _auth: SalesforceAuth

    def __init__(
        self,
        token: SalesforceToken,
        api_version: ApiVersion | int | float | str | None = None,
        connection_name: str = SalesforceClientBase.DEFAULT_CONNECTION_NAME,
        headers: dict[str, str] | None = None,
        **kwargs,
    ):
        AsyncClient.__init__(
            self,
            auth=SalesforceAuth(token),
            base_url=token.instance,
            headers={**DEFAULT_HEADERS, **(headers or {})},
            **kwargs,
        )
        SalesforceClientBase.__init__(self, api_version, connection_name)

    def __str__(self):
        return f"{type(self).__name__} ({self.connection_name}) -> {self.base_url.host}"

    @override
    async def aclose(self) -> None:
        self.unregister_connection(self)
        await super().aclose()

    @override
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None = None,
        exc_value: BaseException | None = None,
        traceback: TracebackType | None = None,
    ) -> None:
        self.unregister_connection(self)
        await super().__aexit__(exc_type, exc_value, traceback)

    async def execute(
        self, request: Request, destination: Any = None, resource_name: str = ""
    ) -> Any:
        response = await self.send(request)
        self._handle_response(response, resource_name)
        return decode_into(response.json(), destination)

    @cached_property
    def tooling(self) -> "AsyncToolingResource":
        from .resources.tooling import AsyncToolingResource

        return AsyncToolingResource(self)


class SalesforceClient(Client, SalesforceClientBase):
    _auth: SalesforceAuth

    def __init__(
        self,
        token: SalesforceToken,
        api_version: ApiVersion | int | float | str | None = None,
        connection_name: str = SalesforceClientBase.DEFAULT_CONNECTION_NAME,
        headers: dict[str, str] | None = None,
        **kwargs,
    ):
        super().__init__(
            auth=SalesforceAuth(token),
            base_url=token.instance,
            headers={**DEFAULT_HEADERS, **(headers or {})},
            **kwargs,
        )
        SalesforceClientBase.__init__(
            self, connection_name=connection_name, api_version=api_version
        )

    def __str__(self):
        return f"{type(self).__name__} ({self.connection_name}) -> {self.base_url.host}"

    @override
    def close(self) -> None:
        self.unregister_connection(self)
        super().close()

    @override
    def __exit__(
        self,
        exc_type: type[BaseException] | None = None,
        exc_value: BaseException | None = None,
        traceback: TracebackType | None = None,
    ) -> None:
        self.unregister_connection(self)
        super().__exit__(exc_type, exc_value, traceback)

    def execute(
        self, request: Request, destination: Any = None, resource_name: str = ""
    ) -> Any:
        """
        Send a request built with `build_request` and decode its JSON body
        into `destination` (see `data.fields.decode_into`).
        Raises a `SalesforceError` subclass for unsuccessful responses.
        """
        response = self.send(request)
        self._handle_response(response, resource_name)
        return decode_into(response.json(), destination)

    # resources for the client
    @cached_property
    def tooling(self) -> "ToolingResource":
        from .resources.tooling import ToolingResource

        return ToolingResource(self)
