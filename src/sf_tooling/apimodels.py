import re


class ApiVersion:
    """
    Data structure representing a Salesforce API version.
    https://developer.salesforce.com/docs/atlas.en-us.api_rest.meta/api_rest/resources_versions.htm
    """

    version: float
    label: str
    url: str

    _url_pattern = re.compile(r"/services/data/v(?P<version>\d+\.\d+)/?$")

    def __init__(self, version: float | str, label: str, url: str):
        self.version = float(version)
        self.label = label
        self.url = url

    @classmethod
    def lazy_build(cls, value) -> "ApiVersion":
        if isinstance(value, ApiVersion):
            return value
        if isinstance(value, str) and (match := cls._url_pattern.search(value)):
            value = match.group("version")
        if isinstance(value, (int, float, str)) and not isinstance(value, bool):
            try:
                version = float(value)
            except ValueError:
                pass
            else:
                return cls(version, f"v{version:.1f}", f"/services/data/v{version:.1f}")
        raise TypeError(f"Unable to build an ApiVersion from value {value!r}")

    def __str__(self) -> str:
        return f"Salesforce API Version {self.label} ({self.version:.1f})"

    def __repr__(self) -> str:
        return f"ApiVersion(version={self.version:.1f}, label='{self.label}')"

    def __float__(self) -> float:
        return self.version

    def __eq__(self, other) -> bool:
        if isinstance(other, ApiVersion):
            return self.version == other.version
        if isinstance(other, (int, float)):
            return self.version == float(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.version)
