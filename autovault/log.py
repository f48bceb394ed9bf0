import logging
import sys

_root_logger = logging.getLogger()


def setup_logging_to_console(level=logging.INFO, *, logger: logging.Logger = _root_logger):
    if not sys.stderr.isatty():
        logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        return

    from rich.logging import RichHandler

    logger.setLevel(level)
    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            handler.setLevel(level)
            return
    handler = RichHandler(rich_tracebacks=True, level=level, show_time=True)
    logger.addHandler(handler)
