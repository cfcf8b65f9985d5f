#!/usr/bin/env python3
"""
K3s cluster monitor - command line entry point

Commands:
- serve: run the HTTP API and dashboard
- check: one-shot health check printed to the terminal
- components: list the monitored components
"""

import asyncio
import json
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from k3s_monitor import __version__
from k3s_monitor.collectors.aggregator import build_aggregator
from k3s_monitor.collectors.models import ClusterHealth, HealthStatus
from k3s_monitor.config import MonitorSettings
from k3s_monitor.utils.errors import MonitorError


console = Console()

STATUS_STYLES = {
    "healthy": "green",
    "degraded": "yellow",
    "unhealthy": "red",
    "Ready": "green",
    "NotReady": "red",
}

EXIT_CODES = {
    HealthStatus.HEALTHY: 0,
    HealthStatus.DEGRADED: 1,
    HealthStatus.UNHEALTHY: 2,
}


def setup_logging(level: str) -> None:
    """Route logging through rich"""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def styled(status: str) -> str:
    style = STATUS_STYLES.get(status, "dim")
    return f"[{style}]{status}[/{style}]"


def print_cluster_health(health: ClusterHealth) -> None:
    """Render a ClusterHealth snapshot as tables"""
    console.print()
    console.print(Panel(
        f"[bold]Overall Status:[/bold] {styled(health.status.value)}",
        expand=False,
    ))
    console.print(
        f"[dim]Nodes ready: {health.cluster.ready_nodes}/{health.cluster.total_nodes}  "
        f"Components healthy: {health.healthy_components}/{len(health.components)}[/dim]"
    )
    console.print()

    components = Table(title="Components")
    for column in ("Component", "Status", "Namespace", "Replicas", "Pods", "Message"):
        components.add_column(column)
    for name, comp in health.components.items():
        components.add_row(
            name,
            styled(comp.status.value),
            comp.namespace,
            f"{comp.ready_replicas}/{comp.desired_replicas}",
            str(len(comp.pods)),
            comp.message or "-",
        )
    console.print(components)

    nodes = Table(title="Nodes")
    for column in ("Name", "Status", "Roles", "Internal IP", "OS", "Age"):
        nodes.add_column(column)
    for node in health.cluster.nodes:
        nodes.add_row(
            node.name,
            styled(node.status.value),
            ", ".join(node.roles),
            node.internal_ip,
            node.os_image,
            node.age,
        )
    console.print(nodes)
    console.print(f"[dim]Last updated: {health.timestamp}[/dim]")


async def run_check(settings: MonitorSettings, as_json: bool = False) -> int:
    """One-shot check; the exit code reflects the overall status"""
    aggregator = build_aggregator(settings)
    health = await aggregator.get_cluster_health()

    if as_json:
        print(json.dumps(
            health.model_dump(mode="json", by_alias=True, exclude_none=True),
            indent=2,
        ))
    else:
        print_cluster_health(health)

    return EXIT_CODES[health.status]


def run_components(settings: MonitorSettings) -> int:
    aggregator = build_aggregator(settings)
    for config in aggregator.registry:
        console.print(
            f"[bold]{config.name}[/bold]  "
            f"[dim]{config.namespace} {config.workload.kind.value}/{config.workload.name}[/dim]"
        )
    return 0


def run_server(settings: MonitorSettings) -> int:
    import uvicorn

    from k3s_monitor.api.app import create_app

    console.print(f"[bold]K3s Cluster Monitor[/bold] v{__version__}")
    console.print(f"  Dashboard: http://localhost:{settings.port}/")
    console.print(f"  API: http://localhost:{settings.port}/api/health")

    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        prog="k3s-monitor",
        description="K3s cluster health monitor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s serve --port 3000
  %(prog)s check
  %(prog)s check --json
  %(prog)s components
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--components-file", help="YAML component registry")
    parser.add_argument("--context", help="kubeconfig context")
    parser.add_argument("--log-level", help="log level (default: INFO)")

    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="run the API and dashboard")
    serve.add_argument("--host", help="bind address")
    serve.add_argument("--port", type=int, help="listen port")

    check = subparsers.add_parser("check", help="print cluster health once")
    check.add_argument("--json", action="store_true", help="print JSON instead of tables")

    subparsers.add_parser("components", help="list monitored components")
    return parser


def apply_overrides(settings: MonitorSettings, args) -> MonitorSettings:
    for attr, arg in (
        ("components_file", "components_file"),
        ("kubectl_context", "context"),
        ("log_level", "log_level"),
        ("host", "host"),
        ("port", "port"),
    ):
        value = getattr(args, arg, None)
        if value is not None:
            setattr(settings, attr, value)
    settings.validate()
    return settings


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point"""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or "serve"

    try:
        settings = apply_overrides(MonitorSettings.from_env(), args)
        setup_logging(settings.log_level)

        if command == "check":
            exit_code = asyncio.run(run_check(settings, as_json=args.json))
        elif command == "components":
            exit_code = run_components(settings)
        else:
            exit_code = run_server(settings)
    except MonitorError as e:
        console.print(f"[red]Error: {e}[/red]")
        exit_code = 3
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        exit_code = 130

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
