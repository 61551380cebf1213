"""
Main CLI module with argument parsing and command execution.

Resources and actions:
- serve                      Run the REST API
- requests submit|inquire|list|show|reconcile
"""
import argparse
import asyncio
import json
import os
import sys
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

from integration_service import __version__
from integration_service.application.dto.commands import (
    AddRequestCommand,
    ReconcileStaleRequestsCommand,
)
from integration_service.application.dto.queries import (
    GetRequestQuery,
    InquireRequestQuery,
    ListRequestsQuery,
)
from integration_service.cli.formatters import format_output
from integration_service.config.manager import ConfigurationManager
from integration_service.config.schemas import AppConfig
from integration_service.domain.base.exceptions import DomainException
from integration_service.domain.base.result import Result
from integration_service.domain.request.value_objects import RequestStatus
from integration_service.infrastructure.di.container import ServiceContainer
from integration_service.infrastructure.logging.logger import get_logger, setup_logging

FORMAT_CHOICES = ["json", "yaml", "table"]


class CommandFailedError(Exception):
    """Raised when a command or query returns a failed Result."""

    def __init__(self, result: Result):
        super().__init__(result.error)
        self.result = result


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments with resource-action structure."""
    parser = argparse.ArgumentParser(
        prog=os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "integration-service",
        description="Integration Service - submit requests to an external system and track them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s serve --port 8080
  %(prog)s requests submit Payment "amount=50" --metadata source=cli
  %(prog)s requests inquire --external-request-id EXT-1
  %(prog)s requests list --status Pending --format table
  %(prog)s requests reconcile --older-than 600
        """,
    )

    parser.add_argument("--config", help="Configuration file path")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Override the configured logging level")
    parser.add_argument("--format", choices=FORMAT_CHOICES, default="json", help="Output format")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="resource", help="Available resources")

    # Serve
    serve_parser = subparsers.add_parser("serve", help="Run the REST API server")
    serve_parser.add_argument("--host", help="Bind host (overrides configuration)")
    serve_parser.add_argument("--port", type=int, help="Bind port (overrides configuration)")

    # Requests resource
    requests_parser = subparsers.add_parser("requests", help="Submit and track requests")
    requests_subparsers = requests_parser.add_subparsers(dest="action", help="Request actions")

    requests_submit = requests_subparsers.add_parser("submit", help="Submit a new request")
    requests_submit.add_argument("request_type", help="Request type")
    requests_submit.add_argument("request_data", help="Request payload")
    requests_submit.add_argument("--metadata", action="append", default=[], metavar="KEY=VALUE",
                                 help="Metadata entry, may be repeated")

    requests_inquire = requests_subparsers.add_parser("inquire", help="Inquire a request's status")
    requests_inquire.add_argument("--request-id", help="Internal request ID")
    requests_inquire.add_argument("--external-request-id", help="External request ID")

    requests_list = requests_subparsers.add_parser("list", help="List tracked requests")
    requests_list.add_argument("--status", choices=[s.value for s in RequestStatus],
                               help="Filter by request status")
    requests_list.add_argument("--limit", type=int, help="Limit number of results")

    requests_show = requests_subparsers.add_parser("show", help="Show a tracked request")
    requests_show.add_argument("request_id", help="Request ID to show")

    requests_reconcile = requests_subparsers.add_parser(
        "reconcile", help="Refresh stale Pending and Submitted requests"
    )
    requests_reconcile.add_argument("--older-than", type=int, dest="older_than",
                                    help="Age threshold in seconds (defaults to configuration)")
    requests_reconcile.add_argument("--limit", type=int, help="Maximum records to check")

    return parser.parse_args(argv)


def parse_metadata(entries: Sequence[str]) -> Dict[str, str]:
    """Parse ``KEY=VALUE`` entries into a dictionary."""
    metadata = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid metadata entry '{entry}', expected KEY=VALUE")
        metadata[key] = value
    return metadata


def _unwrap(result: Result) -> Any:
    if result.is_failure:
        raise CommandFailedError(result)
    return result.value


async def _submit(args, container: ServiceContainer) -> Dict[str, Any]:
    command = AddRequestCommand(
        request_type=args.request_type,
        request_data=args.request_data,
        metadata=parse_metadata(args.metadata),
    )
    return _unwrap(await container.command_bus.execute(command)).to_dict()


async def _inquire(args, container: ServiceContainer) -> Dict[str, Any]:
    query = InquireRequestQuery(
        request_id=args.request_id, external_request_id=args.external_request_id
    )
    return _unwrap(await container.query_bus.execute(query)).to_dict()


async def _list(args, container: ServiceContainer) -> Dict[str, Any]:
    query = ListRequestsQuery(status=args.status, limit=args.limit)
    requests = _unwrap(await container.query_bus.execute(query))
    return {"requests": [request.to_dict() for request in requests]}


async def _show(args, container: ServiceContainer) -> Dict[str, Any]:
    query = GetRequestQuery(request_id=args.request_id)
    return _unwrap(await container.query_bus.execute(query)).to_dict()


async def _reconcile(args, container: ServiceContainer) -> Dict[str, Any]:
    defaults = container.config.reconciliation
    command = ReconcileStaleRequestsCommand(
        older_than_seconds=args.older_than if args.older_than is not None else defaults.stale_after_seconds,
        limit=args.limit if args.limit is not None else defaults.batch_size,
    )
    return _unwrap(await container.command_bus.execute(command)).to_dict()


COMMAND_HANDLERS: Dict[tuple, Callable[..., Awaitable[Dict[str, Any]]]] = {
    ("requests", "submit"): _submit,
    ("requests", "inquire"): _inquire,
    ("requests", "list"): _list,
    ("requests", "show"): _show,
    ("requests", "reconcile"): _reconcile,
}


async def execute_command(args, config: AppConfig,
                          container: Optional[ServiceContainer] = None) -> Dict[str, Any]:
    """Execute the appropriate command handler inside a container lifecycle."""
    handler_key = (args.resource, args.action)
    if handler_key not in COMMAND_HANDLERS:
        raise ValueError(f"Unknown command: {args.resource} {args.action}")

    async with (container or ServiceContainer(config)) as running:
        return await COMMAND_HANDLERS[handler_key](args, running)


def serve(args, config: AppConfig) -> None:
    """Run the REST API under uvicorn."""
    import uvicorn

    from integration_service.api.server import create_fastapi_app

    logger = get_logger(__name__)
    server_config = config.server.model_copy(
        update={k: v for k, v in {"host": args.host, "port": args.port}.items() if v is not None}
    )
    if server_config.workers > 1:
        logger.warning("Multiple workers are not supported with an in-process app, using 1")

    logger.info(f"Starting REST API server on {server_config.host}:{server_config.port}")
    app = create_fastapi_app(config.model_copy(update={"server": server_config}))
    uvicorn_config = uvicorn.Config(
        app=app,
        host=server_config.host,
        port=server_config.port,
        log_level=server_config.log_level,
        access_log=server_config.access_log,
    )
    uvicorn.Server(uvicorn_config).run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    if not args.resource:
        print("Error: No resource specified. Use --help for usage information.", file=sys.stderr)
        return 1
    if args.resource == "requests" and not args.action:
        print("Error: No action specified for requests. Use --help for usage information.",
              file=sys.stderr)
        return 1

    try:
        config = ConfigurationManager(args.config).app_config
    except DomainException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging_config = config.logging
    if args.log_level:
        logging_config = logging_config.model_copy(update={"level": args.log_level})
    setup_logging(logging_config)
    logger = get_logger(__name__)

    try:
        if args.resource == "serve":
            serve(args, config)
            return 0

        result = asyncio.run(execute_command(args, config))
        print(format_output(result, args.format))
        return 0
    except CommandFailedError as e:
        failure = e.result
        logger.error("Command failed", error=failure.error, error_kind=failure.error_kind.value)
        print(json.dumps({"error": failure.error, "errorKind": failure.error_kind.value}, indent=2),
              file=sys.stderr)
        return 1
    except (DomainException, ValueError) as e:
        logger.error(f"Error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
