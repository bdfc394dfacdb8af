"""Test HTTP smoke tests against a mocked gateway."""

import httpx

from gloodemo.core.smoke import SmokeTester
from gloodemo.model.smoke import SmokeCheck, default_waf_checks


def waf_gateway(request: httpx.Request) -> httpx.Response:
    """Behaves like a gateway that blocks every request except a clean GET."""
    blocked_header = "proxy" in request.headers or "bar" in request.headers
    scanner = "Nikto" in request.headers.get("user-agent", "")
    if request.method == "GET" and not request.url.query and not blocked_header and not scanner:
        return httpx.Response(200, json={"id": 1, "name": "Dog", "status": "available"})
    return httpx.Response(403, text="RBAC: access denied")


def make_tester(handler) -> SmokeTester:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return SmokeTester("http://localhost:8080/", client=client)


class TestSmokeTester:
    def test_all_default_checks_pass_against_waf(self):
        tester = make_tester(waf_gateway)

        results = tester.run(default_waf_checks())

        assert [r.passed for r in results] == [True] * 7
        assert results[0].status_code == 200
        assert '"name":"Dog"' in results[0].body.replace(" ", "")

    def test_unprotected_gateway_fails_attack_checks(self):
        tester = make_tester(lambda request: httpx.Response(200, text="[]"))

        results = tester.run(default_waf_checks())

        assert results[0].passed is True
        assert not any(r.passed for r in results[1:])

    def test_request_details(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(403)

        check = SmokeCheck(
            name="post",
            method="POST",
            path="/api/pets/1?exec=/bin/bash",
            headers={"Content-Type": "application/foo"},
            body="blah",
            expected_status=403,
        )
        make_tester(handler).run_check(check)

        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/api/pets/1"
        assert request.url.params["exec"] == "/bin/bash"
        assert request.headers["content-type"] == "application/foo"
        assert request.content == b"blah"

    def test_connection_error_is_a_failed_result(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = make_tester(handler).run_check(SmokeCheck(name="baseline"))

        assert result.passed is False
        assert result.status_code is None
        assert "connection refused" in result.error
