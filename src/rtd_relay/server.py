import argparse
import asyncio
import json
import logging

from rtd_relay.data.config import get_settings


def run_server(host: str, port: int) -> None:
    """Serve the relay with uvicorn."""
    import uvicorn

    from rtd_relay.app import app

    logger = logging.getLogger(__name__)
    logger.info(f"RTD relay running on http://{host}:{port}")
    logger.info(f"Health check: http://{host}:{port}/health")
    logger.info(f"Example: http://{host}:{port}/api/rtd/arrivals/25287")
    uvicorn.run(app, host=host, port=port, log_config=None)


async def run_arrivals(stop_id: str, bus: bool) -> dict:
    """Run the arrivals pipeline once and return the JSON body."""
    from rtd_relay.services.arrivals_service import get_stop_arrivals

    settings = get_settings()
    profile = settings.bus_profile() if bus else settings.rail_profile()
    response = await get_stop_arrivals(stop_id, profile, settings)
    return response.model_dump(mode="json", by_alias=True)


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="rtd-relay",
        description="RTD real-time arrivals relay",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command")

    # serve command (default)
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP relay")
    serve_parser.add_argument(
        "--host",
        default=settings.host,
        help="Bind address (default: 0.0.0.0 or HOST env var)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help="Port (default: 3001 or PORT env var)",
    )

    # arrivals command
    arrivals_parser = subparsers.add_parser(
        "arrivals",
        help="Print arrivals for one stop and exit",
    )
    arrivals_parser.add_argument("stop_id", help="Stop ID, e.g. 25287")
    arrivals_parser.add_argument(
        "--bus",
        action="store_true",
        help="Use bus routes, window and limit",
    )

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "arrivals":
        body = asyncio.run(run_arrivals(args.stop_id, args.bus))
        print(json.dumps(body, indent=2))
    elif args.command == "serve":
        run_server(args.host, args.port)
    else:
        run_server(settings.host, settings.port)


if __name__ == "__main__":
    main()
