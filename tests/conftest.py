"""Test configuration and fixtures."""

from typing import Dict, List, Optional, Tuple

import pytest

from gloodemo.config import DemoEnvironment
from gloodemo.errors import CommandError
from gloodemo.k8s.client import K8sClient
from gloodemo.tools.runner import CommandRunner


class ScriptedRunner(CommandRunner):
    """Command runner that records commands and answers from a script.

    Responses are keyed by a command prefix; the longest matching prefix wins.
    A response that is an int is treated as a failing exit code.
    """

    def __init__(self, responses: Optional[Dict[Tuple[str, ...], object]] = None):
        super().__init__(dry_run=False, env={"PATH": "/usr/bin"})
        self.responses = dict(responses or {})
        self.inputs: List[Optional[str]] = []
        self.spawned: List[List[str]] = []
        self.next_pid = 4242

    def _response_for(self, args: List[str]):
        best = None
        for prefix, response in self.responses.items():
            if tuple(args[: len(prefix)]) == prefix:
                if best is None or len(prefix) > len(best[0]):
                    best = (prefix, response)
        return best[1] if best else ""

    def run(self, args: List[str], input: Optional[str] = None) -> str:
        self.history.append(list(args))
        self.inputs.append(input)
        response = self._response_for(args)
        if isinstance(response, int):
            raise CommandError(args, response, "scripted failure")
        return response

    def spawn(self, args: List[str]) -> Optional[int]:
        self.history.append(list(args))
        self.spawned.append(list(args))
        return self.next_pid

    def which(self, tool: str) -> str:
        return f"/usr/bin/{tool}"


@pytest.fixture
def scripted_runner():
    """Runner with no scripted responses; tests add entries to .responses."""
    return ScriptedRunner()


@pytest.fixture
def k8s_client(scripted_runner):
    return K8sClient(scripted_runner)


@pytest.fixture
def demo_env(tmp_path):
    """Environment for a kind cluster with resources in a temp directory."""
    (tmp_path / "petstore.yaml").write_text("kind: Deployment\n")
    return DemoEnvironment(
        k8s_tool="kind",
        gloo_namespace="gloo-system",
        resources_home=tmp_path,
    )


@pytest.fixture(autouse=True)
def clean_demo_env(monkeypatch):
    """Keep the developer's shell settings out of the tests."""
    for name in (
        "K8S_TOOL",
        "DEMO_CLUSTER_NAME",
        "GLOO_NAMESPACE",
        "KUBECONFIG",
        "K8S_VERSION",
        "GLOO_DEMO_RESOURCES_HOME",
        "GLOO_DEMO_DRY_RUN",
    ):
        monkeypatch.delenv(name, raising=False)
