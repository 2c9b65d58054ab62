import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
PACKAGE_LOGGER = "bh2e"


def setup_logging(level: str = "INFO", debug: bool = False):
    """루트 로거 설정. debug면 bh2e 패키지 로거만 DEBUG로 내린다."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    if resolved == logging.INFO and level.upper() != "INFO":
        logging.getLogger(PACKAGE_LOGGER).warning("Unknown log level %r, using INFO", level)

    if debug:
        logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
