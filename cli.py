#!/usr/bin/env python3
"""
Command-line interface for the purchase confirmation notifier.

Usage:
    uv run python cli.py [command] [options]

Commands:
    dispatch    Send confirmations for an order
    sample      Show the most recent paid order
    test        Run the test suite
    serve       Start the API server

Examples:
    uv run python cli.py dispatch 1042
    uv run python cli.py sample
    uv run python cli.py serve --reload
"""

import argparse
import json
import logging
import subprocess
import sys

logger = logging.getLogger("cli")


def run_dispatch(order_id: int) -> int:
    """Dispatch confirmations for one order and print the outcome."""
    from confirmations.bootstrap import build_dispatcher
    from confirmations.context import build_confirmation_context
    from confirmations.errors import OrderNotFoundError
    from shared.data_store import DataStore
    from shared.settings import get_settings

    settings = get_settings()
    data_store = DataStore(data_dir=settings.data_dir)

    try:
        context = build_confirmation_context(data_store, order_id, settings=settings)
    except OrderNotFoundError as e:
        print(str(e))
        return 1
    except Exception:
        logger.exception(f"Failed to prepare confirmations for order {order_id}")
        print("Internal error while preparing order confirmations")
        return 3

    outcome = build_dispatcher(settings).dispatch(context)
    print(json.dumps(
        {"success": outcome.success, "message": outcome.message, "data": outcome.to_payload()},
        indent=2,
    ))
    return 0 if outcome.success else 2


def run_sample() -> int:
    """Print the most recent paid order."""
    from shared.data_store import DataStore
    from shared.settings import get_settings

    order = DataStore(data_dir=get_settings().data_dir).get_latest_paid_order()
    if order is None:
        print("No paid order found")
        return 1

    print(f"Order {order.id} ({order.order_number}) total={order.total_amount:.2f} "
          f"paid_at={order.paid_at.isoformat()}")
    return 0


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    cmd = ["uv", "run", "pytest"] + args
    subprocess.run(cmd)


def run_server(host: str, port: int, reload: bool) -> None:
    """Start the API server."""
    cmd = ["uv", "run", "uvicorn", "api.main:app", f"--host={host}", f"--port={port}"]
    if reload:
        cmd.append("--reload")

    print(f"Starting server at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    subprocess.run(cmd)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Purchase Confirmation Notifier CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s dispatch 1042
  %(prog)s sample
  %(prog)s test -v
  %(prog)s serve --reload
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Dispatch command
    dispatch_parser = subparsers.add_parser("dispatch", help="Send confirmations for an order")
    dispatch_parser.add_argument("order_id", type=int, help="Order identifier")

    # Sample command
    subparsers.add_parser("sample", help="Show the most recent paid order")

    # Test command
    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    if args.command == "dispatch":
        sys.exit(run_dispatch(args.order_id))
    elif args.command == "sample":
        sys.exit(run_sample())
    elif args.command == "test":
        run_tests(args.pytest_args)
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
