"""
Salesforce Tooling API resources
https://developer.salesforce.com/docs/atlas.en-us.api_tooling.meta/api_tooling/intro_rest_resources.htm
"""

from collections.abc import Iterable
from typing import Literal, TypeVar

from httpx import Request

from ..client import AsyncSalesforceClient
from ..data import fields
from ..data.fields import Destination
from ..interfaces import I_AsyncSalesforceTransport, I_SalesforceTransport
from ..logger import getLogger
from .base import ApiResource

_logger = getLogger("tooling")
_T = TypeVar("_T")

TestLevel = Literal["RunSpecifiedTests", "RunLocalTests", "RunAllTestsInOrg"]


class DescribeGlobalSObjectResult(fields.FieldConfigurableObject):
    activateable = fields.CheckboxField()
    createable = fields.CheckboxField()
    custom = fields.CheckboxField()
    customSetting = fields.CheckboxField()
    deletable = fields.CheckboxField()
    deprecatedAndHidden = fields.CheckboxField()
    feedEnabled = fields.CheckboxField()
    keyPrefix = fields.TextField()
    label = fields.TextField()
    labelPlural = fields.TextField()
    layoutable = fields.CheckboxField()
    mergeable = fields.CheckboxField()
    name = fields.TextField()
    queryable = fields.CheckboxField()
    replicateable = fields.CheckboxField()
    retrieveable = fields.CheckboxField()
    searchable = fields.CheckboxField()
    triggerable = fields.CheckboxField()
    undeletable = fields.CheckboxField()
    updateable = fields.CheckboxField()


class DescribeGlobalResult(fields.FieldConfigurableObject):
    """
    https://developer.salesforce.com/docs/atlas.en-us.api_tooling.meta/api_tooling/intro_rest_resources.htm
    """
    encoding = fields.TextField()
    maxBatchSize = fields.IntField()
    sobjects = fields.ListField(DescribeGlobalSObjectResult)


class ExecuteAnonymousResult(fields.FieldConfigurableObject):
    """
    Outcome of compiling and running a block of anonymous Apex.
    A compile or runtime failure is reported here, not raised;
    check `compiled` and `success`.
    """
    column = fields.IntField()
    compileProblem = fields.TextField()
    compiled = fields.CheckboxField()
    exceptionMessage = fields.TextField()
    exceptionStackTrace = fields.TextField()
    line = fields.IntField()
    success = fields.CheckboxField()


class CodeLocation(fields.FieldConfigurableObject):
    column = fields.IntField()
    line = fields.IntField()
    numExecutions = fields.IntField()
    time = fields.NumberField()


class CodeCoverageResult(fields.FieldConfigurableObject):
    dmlInfo = fields.ListField(CodeLocation)
    id = fields.TextField()
    locationsNotCovered = fields.ListField(CodeLocation)
    methodInfo = fields.ListField(CodeLocation)
    name = fields.TextField()
    namespace = fields.TextField()
    numLocations = fields.IntField()
    numLocationsNotCovered = fields.IntField()
    soqlInfo = fields.ListField(CodeLocation)
    soslInfo = fields.ListField(CodeLocation)
    type = fields.TextField()


class CodeCoverageWarning(fields.FieldConfigurableObject):
    id = fields.TextField()
    message = fields.TextField()
    name = fields.TextField()
    namespace = fields.TextField()


class RunTestSuccess(fields.FieldConfigurableObject):
    id = fields.TextField()
    methodName = fields.TextField()
    name = fields.TextField()
    namespace = fields.TextField()
    seeAllData = fields.CheckboxField()
    time = fields.NumberField()


class RunTestFailure(fields.FieldConfigurableObject):
    id = fields.TextField()
    message = fields.TextField()
    methodName = fields.TextField()
    name = fields.TextField()
    namespace = fields.TextField()
    seeAllData = fields.CheckboxField()
    stackTrace = fields.TextField()
    time = fields.NumberField()
    type = fields.TextField()


class RunTestsResult(fields.FieldConfigurableObject):
    """
    https://developer.salesforce.com/docs/atlas.en-us.api_tooling.meta/api_tooling/intro_rest_resources_runtestssynchronous.htm
    """
    apexLogId = fields.TextField()
    codeCoverage = fields.ListField(CodeCoverageResult)
    codeCoverageWarnings = fields.ListField(CodeCoverageWarning)
    failures = fields.ListField(RunTestFailure)
    numFailures = fields.IntField()
    numTestsRun = fields.IntField()
    successes = fields.ListField(RunTestSuccess)
    totalTime = fields.NumberField()


class RunTestsAsynchronousRequest(fields.FieldConfigurableObject):
    """
    Body of a runTestsAsynchronous request. Unset fields are left out of
    the payload so the server applies its own defaults.
    https://developer.salesforce.com/docs/atlas.en-us.api_tooling.meta/api_tooling/intro_rest_resources_runtestsasynchronous.htm
    """
    classids = fields.TextField()
    suiteids = fields.TextField()
    maxFailedTests = fields.TextField()
    testLevel = fields.TextField()

    @classmethod
    def build(
        cls,
        classids: Iterable[str] | str = (),
        suiteids: Iterable[str] | str = (),
        max_failed_tests: int | str | None = "",
        test_level: TestLevel | Literal[""] = "",
    ) -> "RunTestsAsynchronousRequest":
        # empty values are indistinguishable from absent ones for the server
        values = {
            "classids": _join_ids(classids),
            "suiteids": _join_ids(suiteids),
            "maxFailedTests": "" if max_failed_tests is None else str(max_failed_tests),
            "testLevel": test_level,
        }
        return cls(**{key: value for key, value in values.items() if value})


def _join_ids(ids: Iterable[str] | str) -> str:
    if isinstance(ids, str):
        return ids
    return ",".join(ids)


class _ToolingRequests:
    """Builds the request for each Tooling endpoint through the bound client."""

    client: I_SalesforceTransport | I_AsyncSalesforceTransport

    def _describe_global_request(self) -> Request:
        return self.client.build_request("GET", f"{self.client.tooling_url}/sobjects/")

    def _execute_anonymous_request(self, code: str) -> Request:
        return self.client.build_request(
            "GET",
            f"{self.client.tooling_url}/executeAnonymous/",
            params={"anonymousBody": code},
        )

    def _query_request(self, soql: str) -> Request:
        return self.client.build_request(
            "GET", f"{self.client.tooling_url}/query/", params={"q": soql}
        )

    def _search_request(self, sosl: str) -> Request:
        return self.client.build_request(
            "GET", f"{self.client.tooling_url}/search/", params={"q": sosl}
        )

    def _run_tests_request(self, classnames: Iterable[str]) -> Request:
        return self.client.build_request(
            "GET",
            f"{self.client.tooling_url}/runTestsSynchronous/",
            params={"classnames": ",".join(classnames)},
        )

    def _run_tests_asynchronous_request(
        self, body: RunTestsAsynchronousRequest
    ) -> Request:
        return self.client.build_request(
            "POST",
            f"{self.client.tooling_url}/runTestsAsynchronous/",
            json=body.serialize(),
        )


class ToolingResource(_ToolingRequests, ApiResource):
    client: I_SalesforceTransport

    def describe_global(self) -> DescribeGlobalResult:
        """Lists the available Tooling API objects and their metadata."""
        request = self._describe_global_request()
        return self.client.execute(request, DescribeGlobalResult, "DescribeGlobal")

    def execute_anonymous(self, code: str) -> ExecuteAnonymousResult:
        """
        Compiles and runs a block of Apex without saving it.
        Compile problems and uncaught exceptions are returned on the
        result, with `success` set to False.
        """
        request = self._execute_anonymous_request(code)
        _logger.debug("Executing %d characters of anonymous Apex", len(code))
        return self.client.execute(request, ExecuteAnonymousResult, "ExecuteAnonymous")

    def query(self, soql: str, destination: Destination[_T] = dict) -> _T:
        """
        Runs a SOQL query against Tooling API objects.
        The decoded response is placed into `destination`, a type to build
        or an instance to populate (see `sf_tooling.data.fields.decode_into`).
        """
        request = self._query_request(soql)
        return self.client.execute(request, destination, "Query")

    def search(self, sosl: str, destination: Destination[_T] = dict) -> _T:
        """Runs a SOSL search; `destination` works as it does for `query`."""
        request = self._search_request(sosl)
        return self.client.execute(request, destination, "Search")

    def run_tests(self, classnames: Iterable[str]) -> RunTestsResult:
        """
        Runs the tests in the named classes synchronously.
        Test failures are reported on the result, not raised.
        """
        classnames = list(classnames)
        request = self._run_tests_request(classnames)
        _logger.debug("Running tests synchronously for %d classes", len(classnames))
        return self.client.execute(request, RunTestsResult, "RunTestsSynchronous")

    def run_tests_asynchronous(
        self,
        classids: Iterable[str] | str = (),
        suiteids: Iterable[str] | str = (),
        max_failed_tests: int | str | None = "",
        test_level: TestLevel | Literal[""] = "",
        *,
        request: RunTestsAsynchronousRequest | None = None,
    ) -> str:
        """
        Queues a test run and returns the id of the AsyncApexJob.
        Pass either the individual parameters or a prebuilt `request`.
        """
        if request is None:
            request = RunTestsAsynchronousRequest.build(
                classids, suiteids, max_failed_tests, test_level
            )
        http_request = self._run_tests_asynchronous_request(request)
        return self.client.execute(http_request, str, "RunTestsAsynchronous")


class AsyncToolingResource(_ToolingRequests, ApiResource):
    client: I_AsyncSalesforceTransport
    _client_type = AsyncSalesforceClient

    async def describe_global(self) -> DescribeGlobalResult:
        request = self._describe_global_request()
        return await self.client.execute(request, DescribeGlobalResult, "DescribeGlobal")

    async def execute_anonymous(self, code: str) -> ExecuteAnonymousResult:
        request = self._execute_anonymous_request(code)
        _logger.debug("Executing %d characters of anonymous Apex", len(code))
        return await self.client.execute(
            request, ExecuteAnonymousResult, "ExecuteAnonymous"
        )

    async def query(self, soql: str, destination: Destination[_T] = dict) -> _T:
        request = self._query_request(soql)
        return await self.client.execute(request, destination, "Query")

    async def search(self, sosl: str, destination: Destination[_T] = dict) -> _T:
        request = self._search_request(sosl)
        return await self.client.execute(request, destination, "Search")

    async def run_tests(self, classnames: Iterable[str]) -> RunTestsResult:
        classnames = list(classnames)
        request = self._run_tests_request(classnames)
        _logger.debug("Running tests synchronously for %d classes", len(classnames))
        return await self.client.execute(request, RunTestsResult, "RunTestsSynchronous")

    async def run_tests_asynchronous(
        self,
        classids: Iterable[str] | str = (),
        suiteids: Iterable[str] | str = (),
        max_failed_tests: int | str | None = "",
        test_level: TestLevel | Literal[""] = "",
        *,
        request: RunTestsAsynchronousRequest | None = None,
    ) -> str:
        if request is None:
            request = RunTestsAsynchronousRequest.build(
                classids, suiteids, max_failed_tests, test_level
            )
        http_request = self._run_tests_asynchronous_request(request)
        return await self.client.execute(http_request, str, "RunTestsAsynchronous")
