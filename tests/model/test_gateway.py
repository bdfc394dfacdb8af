"""Test virtual service manifest rendering."""

import yaml

from gloodemo.model.gateway import VirtualService, UpstreamRef, WafSettings, petstore_virtual_service

EXPECTED_WAF_SETTINGS = """# default rules section
SecRuleEngine On
SecRequestBodyAccess On
# CRS section
SecDefaultAction "phase:1,log,auditlog,deny,status:403"
SecDefaultAction "phase:2,log,auditlog,deny,status:403"
SecAction "id:900000,phase:1,pass,nolog,setvar:tx.paranoia_level=1"
SecAction "id:900250,phase:1,nolog,pass,t:none,setvar:'tx.restricted_headers=/proxy/ /lock-token/ /content-range/ /translate/ /if/ /bar/'"
SecAction "id:900990,phase:1,nolog,pass,t:none,setvar:tx.crs_setup_version=310"
"""


class TestWafSettings:
    def test_default_rule_set(self):
        assert WafSettings().custom_settings_string() == EXPECTED_WAF_SETTINGS

    def test_custom_paranoia_and_headers(self):
        settings = WafSettings(paranoia_level=3, restricted_headers=["x-debug"])
        rendered = settings.custom_settings_string()

        assert "setvar:tx.paranoia_level=3" in rendered
        assert "tx.restricted_headers=/x-debug/'" in rendered


class TestVirtualService:
    def test_petstore_route(self):
        manifest = petstore_virtual_service("gloo-system").to_manifest()

        assert manifest["apiVersion"] == "gateway.solo.io/v1"
        assert manifest["kind"] == "VirtualService"
        assert manifest["metadata"] == {"name": "default", "namespace": "gloo-system"}

        virtual_host = manifest["spec"]["virtualHost"]
        assert manifest["spec"]["displayName"] == "default"
        assert virtual_host["domains"] == ["*"]

        route = virtual_host["routes"][0]
        assert route["matcher"] == {"prefix": "/"}
        assert route["routeAction"]["single"]["upstream"] == {
            "name": "default-petstore-8080",
            "namespace": "gloo-system",
        }

    def test_yaml_round_trips_waf_settings(self):
        """Test the rule set survives YAML rendering as a literal block."""
        service = VirtualService(
            namespace="gloo",
            upstream=UpstreamRef(name="default-petstore-8080", namespace="gloo"),
        )
        rendered = service.to_yaml()

        assert "customSettingsString: |" in rendered

        parsed = yaml.safe_load(rendered)
        waf = parsed["spec"]["virtualHost"]["virtualHostPlugins"]["extensions"]["configs"]["waf"]
        assert waf["settings"]["coreRuleSet"]["customSettingsString"] == EXPECTED_WAF_SETTINGS
        assert parsed["metadata"]["namespace"] == "gloo"
