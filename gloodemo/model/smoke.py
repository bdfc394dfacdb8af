"""Smoke test models."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class SmokeCheck(BaseModel):
    """A single HTTP request with the status code the gateway should answer."""

    name: str
    description: str = ""
    method: str = "GET"
    path: str = "/api/pets/1"
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None
    expected_status: int = 200


class SmokeResult(BaseModel):
    """Outcome of running a smoke check."""

    check: SmokeCheck
    status_code: Optional[int] = None
    body: str = ""
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.error is None and self.status_code == self.check.expected_status


def default_waf_checks() -> List[SmokeCheck]:
    """Requests that exercise the petstore route and the WAF rule set."""
    return [
        SmokeCheck(
            name="baseline",
            description="Unfiltered request reaches petstore",
            expected_status=200,
        ),
        # Triggers two rules: no host header and unsupported content type
        SmokeCheck(
            name="rule-920420",
            description="Request content type is not allowed by policy",
            method="POST",
            headers={"Content-Type": "application/foo"},
            body="blah",
            expected_status=403,
        ),
        SmokeCheck(
            name="rule-913100",
            description="Security scanner user agent",
            headers={"User-Agent": "Mozilla/5.00 (Nikto/2.1.6) (Evasions:None) (Test:000126)"},
            expected_status=403,
        ),
        SmokeCheck(
            name="rule-932160",
            description="Remote command execution: Unix shell code",
            path="/api/pets/1?exec=/bin/bash",
            expected_status=403,
        ),
        SmokeCheck(
            name="rule-900250-proxy",
            description="Restricted header from the default list",
            headers={"proxy": "true"},
            expected_status=403,
        ),
        SmokeCheck(
            name="rule-900250-custom",
            description="Restricted header added in the virtual service config",
            headers={"bar": "baz"},
            expected_status=403,
        ),
        SmokeCheck(
            name="rule-942500",
            description="MySQL in-line comment detected",
            path=(
                "/api/pets/1?id=9999+or+{if+length((/*!5000select+username"
                "/*!50000from*/user+where+id=1))>0}"
            ),
            expected_status=403,
        ),
    ]
