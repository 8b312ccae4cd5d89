import logging

import pytest


def pytest_configure(config):
    """Register markers for pytest."""
    config.addinivalue_line("markers", "cli: mark test as exercising the command line interface")


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers the CLI attaches so each test logs to its own streams."""
    yield
    package_logger = logging.getLogger("dbmlkeep")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
