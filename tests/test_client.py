import json
import logging

import httpx
import pytest

from sf_tooling.apimodels import ApiVersion
from sf_tooling.auth.types import SalesforceToken
from sf_tooling.client import AsyncSalesforceClient, SalesforceClient
from sf_tooling.exceptions import SalesforceExpiredSession, SalesforceResourceNotFound
from sf_tooling.metrics import ApiUsage, Usage
from sf_tooling.resources.tooling import (
    AsyncToolingResource,
    ExecuteAnonymousResult,
    ToolingResource,
)

TOKEN = SalesforceToken(httpx.URL("https://test.my.salesforce.com"), "mock_access_token")


def test_api_urls():
    with SalesforceClient(token=TOKEN, api_version=60.0) as client:
        assert client.api_version == ApiVersion.lazy_build(60.0)
        assert client.data_url == "/services/data/v60.0"
        assert client.tooling_url == "/services/data/v60.0/tooling"


def test_default_api_version():
    with SalesforceClient(token=TOKEN) as client:
        assert client.api_version.version == SalesforceClient.DEFAULT_API_VERSION
        assert client.tooling_url == "/services/data/v63.0/tooling"


def test_api_resource_helpers():
    with SalesforceClient(token=TOKEN) as client:
        assert isinstance(client.tooling, ToolingResource)
        assert client.tooling.client is client
        assert client.tooling is client.tooling


def test_connection_registry():
    client = SalesforceClient(token=TOKEN, connection_name="registry_test")
    try:
        assert SalesforceClient.get_connection("registry_test") is client
        assert ToolingResource("registry_test").client is client

        with pytest.raises(KeyError, match="already been registered"):
            SalesforceClient(token=TOKEN, connection_name="registry_test")
    finally:
        client.close()

    with pytest.raises(KeyError):
        SalesforceClient.get_connection("registry_test")


def test_context_exit_unregisters():
    with SalesforceClient(token=TOKEN, connection_name="exit_test") as client:
        assert SalesforceClient.get_connection("exit_test") is client
    assert "exit_test" not in SalesforceClient._connections


def test_execute_sends_bearer_token(sf_client, handler):
    handler.respond(json={"success": True, "compiled": True})

    request = sf_client.build_request("GET", sf_client.tooling_url + "/executeAnonymous/")
    result = sf_client.execute(request, ExecuteAnonymousResult)

    sent = handler.requests[0]
    assert sent.headers["Authorization"] == "Bearer mock_access_token"
    assert sent.headers["Accept"] == "application/json"
    assert sent.url.host == "example.my.salesforce.com"
    assert isinstance(result, ExecuteAnonymousResult)
    assert result.success


def test_execute_without_destination_returns_json(sf_client, handler):
    handler.respond(json=[1, 2, 3])

    request = sf_client.build_request("GET", "/services/data")

    assert sf_client.execute(request) == [1, 2, 3]


def test_execute_raises_for_status(sf_client, handler):
    handler.respond(404, json=[{"errorCode": "NOT_FOUND", "message": "The requested resource does not exist"}])

    request = sf_client.build_request("GET", sf_client.tooling_url + "/sobjects/")
    with pytest.raises(SalesforceResourceNotFound) as excinfo:
        sf_client.execute(request, dict, "DescribeGlobal")

    assert excinfo.value.status_code == 404
    assert excinfo.value.resource_name == "DescribeGlobal"
    assert "NOT_FOUND" in excinfo.value.content


def test_execute_expired_session(sf_client, handler):
    handler.respond(401, json=[{"errorCode": "INVALID_SESSION_ID"}])

    with pytest.raises(SalesforceExpiredSession):
        sf_client.tooling.describe_global()


def test_execute_decode_error(sf_client, handler):
    handler.respond(200, content=b"<html>maintenance</html>")

    request = sf_client.build_request("GET", sf_client.tooling_url + "/sobjects/")
    with pytest.raises(json.JSONDecodeError):
        sf_client.execute(request, dict)


def test_execute_records_api_usage(sf_client, handler):
    handler.respond(json={}, headers={"Sforce-Limit-Info": "api-usage=18/5000"})

    assert sf_client.api_usage is None
    sf_client.execute(sf_client.build_request("GET", "/services/data/v63.0/limits"))

    assert sf_client.api_usage == ApiUsage("", Usage(18, 5000), None)


def test_tooling_call_records_api_usage(sf_client, handler, caplog):
    handler.respond(
        json={"totalSize": 0, "done": True, "records": []},
        headers={
            "Sforce-Limit-Info": "api-usage=40/5000; per-app-api-usage=2/100(appName=ci)"
        },
    )

    with caplog.at_level(logging.DEBUG, logger="sf_tooling.client"):
        sf_client.tooling.query("SELECT Id FROM ApexClass")

    assert sf_client.api_usage.resource_name == "Query"
    assert sf_client.api_usage.org.remaining == 4960
    assert sf_client.api_usage.per_app == Usage(2, 100, "ci")
    assert "Query (default): 40 of 5000 API requests used" in caplog.text


def test_api_usage_kept_when_header_absent(sf_client, handler):
    handler.respond(json={}, headers={"Sforce-Limit-Info": "api-usage=7/5000"})
    handler.respond(json={})

    sf_client.tooling.describe_global()
    sf_client.tooling.search("FIND {x}")

    assert sf_client.api_usage == ApiUsage("DescribeGlobal", Usage(7, 5000), None)


def test_custom_headers_keep_json_accept(handler):
    with SalesforceClient(
        token=TOKEN,
        connection_name="headers_test",
        headers={"Sforce-Call-Options": "client=ci"},
        transport=httpx.MockTransport(handler),
    ) as client:
        handler.respond(json={})
        client.execute(client.build_request("GET", client.tooling_url + "/sobjects/"))

    sent = handler.requests[0]
    assert sent.headers["Accept"] == "application/json"
    assert sent.headers["Sforce-Call-Options"] == "client=ci"


@pytest.mark.asyncio
async def test_async_client(async_sf_client, handler):
    handler.respond(json="707xx0000000001AAA", headers={"Sforce-Limit-Info": "api-usage=19/5000"})

    request = async_sf_client.build_request(
        "POST", async_sf_client.tooling_url + "/runTestsAsynchronous/", json={}
    )
    result = await async_sf_client.execute(request, str)

    assert result == "707xx0000000001AAA"
    assert async_sf_client.api_usage.org == Usage(19, 5000)
    assert isinstance(async_sf_client.tooling, AsyncToolingResource)
    assert AsyncSalesforceClient.get_connection() is async_sf_client


def test_str():
    with SalesforceClient(token=TOKEN, connection_name="str_test") as client:
        assert str(client) == "SalesforceClient (str_test) -> test.my.salesforce.com"


def test_tooling_calls_go_through_send(mocker):
    request = httpx.Request("GET", "https://test.my.salesforce.com/services/data/v63.0/tooling/sobjects/")
    mock_send = mocker.patch.object(SalesforceClient, "send")
    mock_send.return_value = httpx.Response(200, json={"encoding": "UTF-8"}, request=request)

    with SalesforceClient(token=TOKEN, connection_name="send_test") as client:
        result = client.tooling.describe_global()

    assert mock_send.call_count == 1
    sent: httpx.Request = mock_send.call_args[0][0]
    assert sent.method == "GET"
    assert sent.url.path == "/services/data/v63.0/tooling/sobjects/"
    assert result.encoding == "UTF-8"
