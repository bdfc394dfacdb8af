"""HTTP smoke tests against the forwarded gateway."""

from typing import List, Optional

import httpx

from ..model.smoke import SmokeCheck, SmokeResult
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080"


class SmokeTester:
    """Sends each check's request and compares the response status."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(timeout=timeout)

    def url_for(self, check: SmokeCheck) -> httpx.URL:
        # "+" stays literal; only characters illegal in a URL get percent-encoded
        return httpx.URL(self.base_url + check.path)

    def run_check(self, check: SmokeCheck) -> SmokeResult:
        logger.debug(f"Running smoke check {check.name}")
        try:
            response = self.client.request(
                check.method,
                self.url_for(check),
                headers=check.headers,
                content=check.body,
            )
        except httpx.HTTPError as e:
            logger.error(f"Smoke check {check.name} failed: {e}")
            return SmokeResult(check=check, error=str(e) or type(e).__name__)

        result = SmokeResult(check=check, status_code=response.status_code, body=response.text)
        if result.passed:
            logger.info(f"{check.name}: got {response.status_code} as expected")
        else:
            logger.warning(
                f"{check.name}: expected {check.expected_status}, got {response.status_code}"
            )
        return result

    def run(self, checks: List[SmokeCheck]) -> List[SmokeResult]:
        return [self.run_check(check) for check in checks]

    def close(self):
        self.client.close()
