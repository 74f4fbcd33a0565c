"""
Logging and tracing for the catalog service.

Every module logs through a child of the "catalog_api" logger and opens
spans on the shared tracer. Telemetry is exported to Azure Monitor only
when running inside Azure Functions.
"""
import logging
import os

import opentelemetry.trace
from azure.monitor.opentelemetry import configure_azure_monitor

LOGGER_NAME = "catalog_api"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_LEVEL = "INFO"


def configure_monitoring() -> bool:
    """Send traces and logs to Application Insights when hosted in Azure."""
    if not os.environ.get("FUNCTIONS_WORKER_RUNTIME"):
        return False
    try:
        configure_azure_monitor(logger_name=LOGGER_NAME)
    except Exception as e:
        logging.getLogger(LOGGER_NAME).error(
            f"Error configuring Azure Monitor: {e}", exc_info=True
        )
        return False
    return True


def resolve_level(name) -> int:
    """Map a level name such as "debug" to its number, INFO when unknown."""
    level = logging.getLevelName(str(name or DEFAULT_LOG_LEVEL).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logger(level=None) -> logging.Logger:
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(resolve_level(level or os.environ.get("CATALOG_LOG_LEVEL")))
    if not package_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(console_handler)
    return package_logger


logger = configure_logger()
if configure_monitoring():
    logger.info("Azure Monitor OpenTelemetry configured")

tracer = opentelemetry.trace.get_tracer(LOGGER_NAME)


def get_child_logger(name):
    """Get a child logger with the given name."""
    return logger.getChild(name)
