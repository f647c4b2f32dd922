import logging

import configurator
from configurator import build_catalog, coerce, configure_logging
from configurator.logging import get_logger


def test_package_imports() -> None:
    """Importing the package should expose the main APIs."""

    assert callable(build_catalog)
    assert callable(coerce)
    for name in configurator.__all__:
        assert hasattr(configurator, name)


def test_loggers_are_namespaced() -> None:
    assert get_logger("walker").name == "configurator.walker"
    assert get_logger("configurator.coerce").name == "configurator.coerce"
    assert get_logger().name == "configurator"


def test_configure_logging_replaces_handler() -> None:
    logger = configure_logging("DEBUG")
    configure_logging("WARNING")

    handlers = [h for h in logger.handlers if type(h).__name__ == "RichHandler"]
    assert len(handlers) == 1
    assert logger.level == logging.WARNING
    configure_logging()
