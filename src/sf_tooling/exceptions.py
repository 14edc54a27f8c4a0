"""
Exceptions raised for unsuccessful Salesforce REST responses.

https://developer.salesforce.com/docs/atlas.en-us.api_rest.meta/api_rest/errorcodes.htm
"""

from typing import ClassVar

from httpx import Response


class SalesforceError(Exception):
    """Base Salesforce API exception"""

    message: ClassVar[str] = "Unknown error occurred for {url}. Response content: {content}"

    status_code: int
    resource_name: str
    url_path: str
    content: str
    method: str

    def __init__(self, response: Response, resource_name: str = ""):
        self.response = response
        self.status_code = response.status_code
        self.resource_name = resource_name
        self.url_path = response.url.path
        self.content = response.text
        self.method = response.request.method
        super().__init__(str(self))

    def __str__(self):
        return (
            f"[{self.status_code}] "
            + self.message.format(
                url=self.url_path,
                content=self.content,
                name=self.resource_name,
            )
        )

    def __repr__(self):
        return f"{type(self).__name__}({str(self)!r})"


class SalesforceMoreThanOneRecord(SalesforceError):
    message = "More than one record for {url}. Response content: {content}"


class SalesforceRecordNotModifiedSince(SalesforceError):
    message = "Record not modified since {since} for {url}."

    def __init__(self, response: Response, resource_name: str = ""):
        self.if_modified_since = response.headers.get("If-Modified-Since", "")
        super().__init__(response, resource_name)

    def __str__(self):
        return f"[{self.status_code}] " + self.message.format(
            since=self.if_modified_since, url=self.url_path
        )


class SalesforceMalformedRequest(SalesforceError):
    message = "Malformed request {url}. Response content: {content}"


class SalesforceExpiredSession(SalesforceError):
    message = "Expired session for {url}. Response content: {content}"


class SalesforceRefusedRequest(SalesforceError):
    message = "Request refused for {url}. Response content: {content}"


class SalesforceResourceNotFound(SalesforceError):
    message = "Resource {name} Not Found at {url}. Response content: {content}"


class SalesforceMethodNotAllowedForResource(SalesforceError):
    message = "HTTP method not allowed for {url}. Response content: {content}"


class SalesforceApiVersionIncompatible(SalesforceError):
    message = "API version incompatible or record conflict for {url}. Response content: {content}"


class SalesforceResourceRemoved(SalesforceError):
    message = "Resource {name} has been removed from {url}. Response content: {content}"


class SalesforceInvalidHeaderPreconditions(SalesforceError):
    message = "Header preconditions not met for {url}. Response content: {content}"


class SalesforceUriLimitExceeded(SalesforceError):
    message = "URI length limit exceeded for {url}. Response content: {content}"


class SalesforceUnsupportedFormat(SalesforceError):
    message = "Unsupported content format for {url}. Response content: {content}"


class SalesforceEdgeRoutingUnavailable(SalesforceError):
    message = "Salesforce Edge unable to route request for {url}. Response content: {content}"


class SalesforceMissingConditionalHeader(SalesforceError):
    message = "Missing conditional header for {url}. Response content: {content}"


class SalesforceHeaderLimitExceeded(SalesforceError):
    message = "Header length limit exceeded for {url}. Response content: {content}"


class SalesforceServerError(SalesforceError):
    message = "Internal server error for {url}. Response content: {content}"


class SalesforceEdgeCommFailure(SalesforceError):
    message = "Salesforce Edge communication failure for {url}. Response content: {content}"


class SalesforceServerUnavailable(SalesforceError):
    message = "Server unavailable for {url}. Response content: {content}"


class SalesforceGeneralError(SalesforceError):
    message = "Error Code {status}. Response content: {content}"

    def __str__(self):
        url = self.url_path
        if len(url) > 255:
            url = url[:252] + "..."
        return (
            f"[{self.status_code}] {self.method.upper()} {url} "
            + self.message.format(status=self.status_code, content=self.content)
        )


STATUS_EXCEPTIONS: dict[int, type[SalesforceError]] = {
    300: SalesforceMoreThanOneRecord,
    304: SalesforceRecordNotModifiedSince,
    400: SalesforceMalformedRequest,
    401: SalesforceExpiredSession,
    403: SalesforceRefusedRequest,
    404: SalesforceResourceNotFound,
    405: SalesforceMethodNotAllowedForResource,
    409: SalesforceApiVersionIncompatible,
    410: SalesforceResourceRemoved,
    412: SalesforceInvalidHeaderPreconditions,
    414: SalesforceUriLimitExceeded,
    415: SalesforceUnsupportedFormat,
    420: SalesforceEdgeRoutingUnavailable,
    428: SalesforceMissingConditionalHeader,
    431: SalesforceHeaderLimitExceeded,
    500: SalesforceServerError,
    502: SalesforceEdgeCommFailure,
    503: SalesforceServerUnavailable,
}


def raise_for_status(response: Response, resource_name: str = ""):
    if response.is_success:
        return
    exc_type = STATUS_EXCEPTIONS.get(response.status_code, SalesforceGeneralError)
    raise exc_type(response, resource_name)
