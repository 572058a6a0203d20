"""Bootstrap OAuth client operator entry point.

This module serves as the main entry point for the kopf operator
(``kopf run -m oauth_clients_operator.main``). It imports the controller to
register its handlers with kopf.
"""

import logging

import kopf
from pythonjsonlogger.json import JsonFormatter

# Import controllers to register handlers
from oauth_clients_operator.controllers import oauthclients_controller
from oauth_clients_operator.settings import Settings, get_settings
from oauth_clients_operator.utils.metrics import start_metrics_server

# Re-export to satisfy linters (controllers register via decorators)
__all__ = [
    "oauthclients_controller",
]


def _json_default(obj: object) -> str:
    """Fallback serializer for objects that json can't handle (e.g. kopf settings)."""
    return str(obj)


def configure_logging(settings: Settings) -> None:
    """Configure root logging for all operator output.

    Args:
        settings: The operator settings (log level and format).
    """
    handler = logging.StreamHandler()
    if settings.json_logs:
        handler.setFormatter(
            JsonFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"asctime": "timestamp", "levelname": "level"},
                json_default=_json_default,
            )
        )
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    logging.root.handlers = [handler]
    logging.root.setLevel(settings.log_level.upper())


configure_logging(get_settings())


@kopf.on.startup()
async def startup_handler(logger: kopf.Logger, **_: object) -> None:
    """Handle operator startup."""
    port = get_settings().metrics_port
    start_metrics_server(port)
    logger.info(f"Bootstrap OAuth client operator starting up (metrics on :{port})")


@kopf.on.probe(id="operator")
def probe_operator(**_: object) -> dict[str, str]:
    """Report operator health status."""
    return {"status": "running"}


@kopf.on.cleanup()
async def cleanup_handler(logger: kopf.Logger, **_: object) -> None:
    """Handle operator cleanup."""
    logger.info("Bootstrap OAuth client operator shutting down")
