"""Test smoke check models."""

from gloodemo.model.smoke import SmokeCheck, SmokeResult, default_waf_checks


class TestSmokeResult:
    def test_passed_when_status_matches(self):
        check = SmokeCheck(name="blocked", expected_status=403)
        assert SmokeResult(check=check, status_code=403).passed is True

    def test_failed_when_status_differs(self):
        check = SmokeCheck(name="blocked", expected_status=403)
        assert SmokeResult(check=check, status_code=200).passed is False

    def test_failed_on_error(self):
        check = SmokeCheck(name="baseline")
        assert SmokeResult(check=check, error="connection refused").passed is False


class TestDefaultChecks:
    def test_only_baseline_expects_success(self):
        checks = default_waf_checks()

        assert [c.name for c in checks if c.expected_status == 200] == ["baseline"]
        assert all(c.expected_status == 403 for c in checks[1:])
        assert len(checks) == 7

    def test_unsupported_content_type_posts_a_body(self):
        check = next(c for c in default_waf_checks() if c.name == "rule-920420")

        assert check.method == "POST"
        assert check.body == "blah"
        assert check.headers == {"Content-Type": "application/foo"}

    def test_names_are_unique(self):
        names = [c.name for c in default_waf_checks()]
        assert len(names) == len(set(names))
