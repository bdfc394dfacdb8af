"""Test external command runner."""

from subprocess import CalledProcessError
from unittest.mock import MagicMock, patch

import pytest

from gloodemo.errors import CommandError, ToolNotFoundError
from gloodemo.tools.runner import CommandRunner


class TestCommandRunner:
    @patch("subprocess.run")
    def test_run_returns_stdout(self, mock_run):
        mock_run.return_value = MagicMock(stdout="kind\n", stderr="", returncode=0)

        runner = CommandRunner(env={"PATH": "/usr/bin"})
        assert runner.run(["kind", "get", "clusters"]) == "kind\n"
        assert runner.history == [["kind", "get", "clusters"]]

        _, kwargs = mock_run.call_args
        assert kwargs["env"] == {"PATH": "/usr/bin"}
        assert kwargs["check"] is True

    @patch("subprocess.run")
    def test_run_failure_raises_command_error(self, mock_run):
        """Test non-zero exit is fatal."""
        mock_run.side_effect = CalledProcessError(2, "kind", stderr="boom\n")

        runner = CommandRunner()
        with pytest.raises(CommandError) as exc_info:
            runner.run(["kind", "create", "cluster"])

        assert exc_info.value.returncode == 2
        assert exc_info.value.stderr == "boom"
        assert exc_info.value.command_line == "kind create cluster"

    @patch("subprocess.run")
    def test_missing_binary_raises_tool_not_found(self, mock_run):
        mock_run.side_effect = FileNotFoundError()

        with pytest.raises(ToolNotFoundError, match="eksctl command not found"):
            CommandRunner().run(["eksctl", "create", "cluster"])

    @patch("subprocess.run")
    def test_execute_returns_status_tuple(self, mock_run):
        mock_run.side_effect = CalledProcessError(1, "kubectl", stderr="Error message")

        success, output = CommandRunner().execute(["kubectl", "get", "pods"])

        assert success is False
        assert "Error message" in output

    @patch("subprocess.run")
    def test_run_ignoring_errors_never_raises(self, mock_run):
        """Test the delete-if-present pattern tolerates failures."""
        mock_run.side_effect = CalledProcessError(1, "minikube", stderr="not found")

        assert CommandRunner().run_ignoring_errors(["minikube", "delete"]) is False

    @patch("subprocess.run")
    def test_dry_run_does_not_execute(self, mock_run):
        runner = CommandRunner(dry_run=True)

        assert runner.run(["kind", "create", "cluster"]) == ""
        assert runner.spawn(["kubectl", "port-forward"]) is None
        mock_run.assert_not_called()
        assert runner.history == [["kind", "create", "cluster"], ["kubectl", "port-forward"]]

    @patch("subprocess.Popen")
    def test_spawn_detaches_and_returns_pid(self, mock_popen):
        mock_popen.return_value = MagicMock(pid=1234)

        pid = CommandRunner().spawn(["kubectl", "port-forward", "svc/x", "8080:80"])

        assert pid == 1234
        _, kwargs = mock_popen.call_args
        assert kwargs["start_new_session"] is True

    def test_update_env_affects_later_commands(self):
        runner = CommandRunner(env={"PATH": "/usr/bin"})
        runner.update_env({"KUBECONFIG": "/tmp/k3d.yaml"})
        assert runner.env["KUBECONFIG"] == "/tmp/k3d.yaml"

    def test_which_missing_tool(self):
        runner = CommandRunner(env={"PATH": ""})
        with pytest.raises(ToolNotFoundError):
            runner.which("definitely-not-a-real-tool")
