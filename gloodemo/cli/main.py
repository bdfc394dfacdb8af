"""Main CLI interface using Typer."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from ..config import DemoEnvironment, current_user
from ..core.portforward import DEFAULT_PID_FILE
from ..core.smoke import DEFAULT_BASE_URL, SmokeTester
from ..demos import WafDemo
from ..errors import CommandError, DemoError
from ..k8s import K8sClient
from ..model.cluster import K8sTool
from ..model.gateway import petstore_virtual_service
from ..model.smoke import SmokeResult, default_waf_checks
from ..provisioners import get_provisioner
from ..tools import CommandRunner
from ..utils.logger import get_logger, set_verbose

# Create CLI app
app = typer.Typer(
    name="gloo-demo",
    help="Provision demo Kubernetes clusters and run the Gloo Enterprise WAF demo",
    add_completion=True,
)

console = Console()
logger = get_logger(__name__)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every command executed"),
):
    """Gloo Enterprise demo tooling."""
    set_verbose(verbose)


def _load_env(**overrides) -> DemoEnvironment:
    """Read the environment and apply command line overrides."""
    return DemoEnvironment.from_env().override(**overrides)


def _build_client(env: DemoEnvironment) -> K8sClient:
    runner = CommandRunner(dry_run=env.dry_run)
    return K8sClient(runner)


def _print_error(error: Exception) -> None:
    """Report a failure, naming the command that failed when there is one."""
    if isinstance(error, CommandError):
        console.print(f"[red]Error:[/red] command exited with status {error.returncode}:")
        console.print(f"  {error.command_line}", style="bold", markup=False, highlight=False)
        if error.stderr:
            console.print(error.stderr, markup=False, highlight=False)
    else:
        console.print(f"[red]Error:[/red] {escape(str(error))}")


def _print_smoke_results(results: List[SmokeResult]) -> None:
    table = Table(title="WAF smoke tests", show_header=True, header_style="bold magenta")
    table.add_column("Check", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Expected", style="dim")
    table.add_column("Got")
    table.add_column("Result")

    for result in results:
        got = str(result.status_code) if result.status_code is not None else (result.error or "-")
        outcome = "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]"
        table.add_row(
            result.check.name,
            result.check.description,
            str(result.check.expected_status),
            got,
            outcome,
        )

    console.print(table)


def _failed(results: List[SmokeResult]) -> int:
    return sum(1 for result in results if not result.passed)


@app.command("start-cluster")
def start_cluster(
    tool: Optional[K8sTool] = typer.Option(
        None, "--tool", "-t", help="Cluster tool (default: $K8S_TOOL or kind)"
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Cluster name (default: $DEMO_CLUSTER_NAME or tool default)"
    ),
    k8s_version: Optional[str] = typer.Option(
        None, "--k8s-version", help="Kubernetes version, or 'latest' for the tool default"
    ),
    dry_run: Optional[bool] = typer.Option(
        None, "--dry-run/--no-dry-run", help="Print commands instead of running them"
    ),
):
    """Delete any cluster with the same name and create a fresh one."""
    try:
        env = _load_env(
            k8s_tool=tool, cluster_name=name, k8s_version=k8s_version, dry_run=dry_run
        )
        user = current_user()
        settings = env.cluster_settings(user)
        client = _build_client(env)
        provisioner = get_provisioner(settings, client.runner, client, user)

        with console.status(f"[bold green]Starting {settings.tool.value} cluster {settings.name}..."):
            provisioner.provision()

        console.print(
            f"[green]✓[/green] Cluster [cyan]{settings.name}[/cyan] ({settings.tool.value}) is ready"
        )
        if client.runner.env.get("KUBECONFIG") and settings.tool == K8sTool.K3D:
            console.print(f"export KUBECONFIG={client.runner.env['KUBECONFIG']}")

    except DemoError as e:
        _print_error(e)
        raise typer.Exit(1)


@app.command("delete-cluster")
def delete_cluster(
    tool: Optional[K8sTool] = typer.Option(
        None, "--tool", "-t", help="Cluster tool (default: $K8S_TOOL or kind)"
    ),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Cluster name"),
    dry_run: Optional[bool] = typer.Option(
        None, "--dry-run/--no-dry-run", help="Print commands instead of running them"
    ),
):
    """Delete the demo cluster."""
    try:
        env = _load_env(k8s_tool=tool, cluster_name=name, dry_run=dry_run)
        user = current_user()
        settings = env.cluster_settings(user)
        client = _build_client(env)
        provisioner = get_provisioner(settings, client.runner, client, user)

        with console.status(f"[bold green]Deleting cluster {settings.name}..."):
            provisioner.teardown()

        console.print(f"[green]✓[/green] Cluster [cyan]{settings.name}[/cyan] deleted")

    except DemoError as e:
        _print_error(e)
        raise typer.Exit(1)


@app.command("waf-demo")
def waf_demo(
    settle_seconds: float = typer.Option(
        10, "--settle-seconds", help="Pause after configuration changes"
    ),
    skip_smoke: bool = typer.Option(False, "--skip-smoke", help="Deploy only, do not send requests"),
    fail: bool = typer.Option(
        True, "--fail/--no-fail", help="Exit non-zero when a smoke check fails"
    ),
    pid_file: Path = typer.Option(
        DEFAULT_PID_FILE, "--pid-file", help="Where to record the port-forward process ID"
    ),
    dry_run: Optional[bool] = typer.Option(
        None, "--dry-run/--no-dry-run", help="Print commands instead of running them"
    ),
):
    """Deploy petstore behind a WAF-protected virtual service and smoke test it."""
    try:
        env = _load_env(dry_run=dry_run)
        client = _build_client(env)
        demo = WafDemo(env, client, pid_file=pid_file, settle_seconds=settle_seconds)

        with console.status("[bold green]Deploying WAF demo..."):
            results = demo.run(skip_smoke=skip_smoke)

        console.print("[green]✓[/green] Gateway forwarded to [cyan]http://localhost:8080[/cyan]")

    except DemoError as e:
        _print_error(e)
        raise typer.Exit(1)

    if results:
        _print_smoke_results(results)
        if fail and _failed(results):
            raise typer.Exit(1)


@app.command("smoke-test")
def smoke_test(
    base_url: str = typer.Option(DEFAULT_BASE_URL, "--base-url", help="Gateway address"),
    fail: bool = typer.Option(
        True, "--fail/--no-fail", help="Exit non-zero when a smoke check fails"
    ),
):
    """Send the WAF smoke test requests to an already running gateway."""
    tester = SmokeTester(base_url)
    try:
        results = tester.run(default_waf_checks())
    finally:
        tester.close()

    _print_smoke_results(results)
    failed = _failed(results)
    if failed:
        console.print(f"[yellow]{failed} of {len(results)} checks failed[/yellow]")
        if fail:
            raise typer.Exit(1)


@app.command()
def cleanup(
    pid_file: Path = typer.Option(
        DEFAULT_PID_FILE, "--pid-file", help="Port-forward process ID file"
    ),
    dry_run: Optional[bool] = typer.Option(
        None, "--dry-run/--no-dry-run", help="Print commands instead of running them"
    ),
):
    """Stop the port-forward and remove the demo resources."""
    try:
        env = _load_env(dry_run=dry_run)
        client = _build_client(env)
        WafDemo(env, client, pid_file=pid_file).cleanup()
        console.print("[green]✓[/green] Demo resources removed")

    except DemoError as e:
        _print_error(e)
        raise typer.Exit(1)


@app.command("render-virtualservice")
def render_virtualservice(
    namespace: Optional[str] = typer.Option(
        None, "--namespace", help="Gloo namespace (default: $GLOO_NAMESPACE or gloo-system)"
    ),
):
    """Print the WAF virtual service manifest."""
    try:
        env = _load_env(gloo_namespace=namespace)
    except DemoError as e:
        _print_error(e)
        raise typer.Exit(1)

    manifest = petstore_virtual_service(env.gloo_namespace).to_yaml()
    console.print(Syntax(manifest, "yaml"))


@app.command("env")
def show_env():
    """Show the resolved demo environment."""
    try:
        env = _load_env()
        settings = env.cluster_settings(current_user())
    except DemoError as e:
        _print_error(e)
        raise typer.Exit(1)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Cluster tool", settings.tool.value)
    table.add_row("Cluster name", settings.name)
    table.add_row("Kubernetes version", settings.k8s_version)
    table.add_row("Gloo namespace", env.gloo_namespace)
    table.add_row("Kubeconfig", env.kubeconfig or "(default)")
    table.add_row("Resources", str(env.resources_home))
    table.add_row("Dry run", "yes" if env.dry_run else "no")

    console.print(table)


if __name__ == "__main__":
    app()
