import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before any domain module is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("LOG_DIR", str(Path(session.config.rootpath) / "logs"))
    os.environ["PAYMENT_GATEWAY"] = "fake"
    os.environ["BASE_URL"] = "http://testserver"


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def _reset_adapters():
    """Give every test a fresh fake gateway, catalog, profile store and settings."""
    from ordering.catalog import reset_catalog
    from ordering.profiles import reset_profiles
    from payments.config import get_payment_settings
    from payments.gateway import reset_gateway

    get_payment_settings.cache_clear()
    reset_gateway()
    reset_catalog()
    reset_profiles()

    yield

    get_payment_settings.cache_clear()
    reset_gateway()
    reset_catalog()
    reset_profiles()
