"""Entry point: python -m temporal_tui"""

import argparse
import logging
import sys
from pathlib import Path

from .app import TemporalDashboard
from .config import ConfigError, load_settings
from .sdk import TemporalSDK


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="temporal-tui",
        description="Read-only terminal dashboard for a Temporal namespace",
    )
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--server", dest="server_url", help="Temporal HTTP API URL")
    parser.add_argument("--namespace", "-n", help="Namespace to inspect")
    parser.add_argument("--page-size", type=int, help="Executions per page")
    parser.add_argument("--debug", action="store_true", default=None, help="Log at DEBUG level")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        settings = load_settings(
            config_path=args.config,
            overrides={
                "server_url": args.server_url,
                "namespace": args.namespace,
                "page_size": args.page_size,
                "debug": args.debug,
            },
        )
        cert = settings.tls_cert()
    except ConfigError as e:
        print(f"temporal-tui: {e}", file=sys.stderr)
        sys.exit(2)

    settings.log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(settings.log_path),
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("temporal_tui")
    logger.debug("Connecting to %s (namespace %s)", settings.server_url, settings.namespace)

    sdk = TemporalSDK(
        server_url=settings.server_url,
        namespace=settings.namespace,
        api_key=settings.api_key,
        timeout=settings.timeout,
        cert=cert,
        verify=settings.tls_verify(),
    )
    try:
        app = TemporalDashboard(sdk, namespace=settings.namespace, page_size=settings.page_size)
        app.run()
    except Exception:
        logger.exception("Dashboard crashed")
        raise


if __name__ == "__main__":
    main()
