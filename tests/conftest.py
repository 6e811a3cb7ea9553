import logging

import pytest

from pos.infrastructure.logging import PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """CLI runs reconfigure the ``pos`` logger; undo that after every test."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield
    for handler in logger.handlers[:]:
        if handler not in handlers:
            handler.close()
            logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
