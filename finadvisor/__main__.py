# finadvisor/__main__.py
import structlog
import uvicorn

from .config import get_settings
from .log import configure_logging
from .ports import find_available_port

logger = structlog.get_logger(__name__)


def main():
    settings = get_settings()
    configure_logging(settings)

    port = settings.port
    if settings.port_scan:
        port = find_available_port(port, port + settings.port_scan_span, settings.host)
        if port != settings.port:
            logger.warning("port_in_use", requested=settings.port, using=port)

    logger.info("server_starting", host=settings.host, port=port, environment=settings.app_environment)
    uvicorn.run("finadvisor.main:app", host=settings.host, port=port)


if __name__ == "__main__":
    main()
