"""
API request consumption, as Salesforce reports it on every REST response
in the Sforce-Limit-Info header, e.g.
    'api-usage=25/5000; per-app-api-usage=17/250(appName=sample-connected-app)'
"""

from typing import NamedTuple
import re

LIMIT_INFO_HEADER = "Sforce-Limit-Info"

_usage_entry = re.compile(
    r"(?P<scope>(?:per-app-)?api-usage)=(?P<used>\d+)/(?P<limit>\d+)"
    r"(?:\(appName=(?P<app>[^)]*)\))?"
)


class Usage(NamedTuple):
    used: int
    limit: int
    app_name: str | None = None

    @property
    def remaining(self) -> int:
        return max(self.limit - self.used, 0)


class ApiUsage(NamedTuple):
    """Org-wide and connected-app usage reported after a call to `resource_name`"""

    resource_name: str
    org: Usage | None
    per_app: Usage | None


def parse_api_usage(limit_info: str, resource_name: str = "") -> ApiUsage:
    org, per_app = None, None
    for match in _usage_entry.finditer(limit_info):
        usage = Usage(int(match["used"]), int(match["limit"]), match["app"])
        if match["scope"] == "api-usage":
            org = usage
        else:
            per_app = usage
    return ApiUsage(resource_name, org, per_app)
