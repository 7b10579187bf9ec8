from __future__ import annotations

import logging

import pytest

from locally.hosts_manager import MemoryHostsStore
from locally.models import END_MARKER, START_MARKER
from locally.registry import DomainRegistry

BASE_HOSTS = (
    "127.0.0.1 localhost\n"
    "255.255.255.255 broadcasthost\n"
    "::1 localhost\n"
)


def hosts_text(*region_lines: str, before: str = BASE_HOSTS, after: str = "") -> str:
    body = "".join(f"{line}\n" for line in region_lines)
    return f"{before}\n{START_MARKER}\n{body}{END_MARKER}\n{after}"


@pytest.fixture
def logger():
    return logging.getLogger("locally.tests")


@pytest.fixture
def registry(logger):
    return DomainRegistry(logger)


@pytest.fixture
def empty_region_store():
    return MemoryHostsStore(hosts_text())


@pytest.fixture
def app_store():
    return MemoryHostsStore(hosts_text(
        "#--- app.local: certdir(/proj/_localcerts) ---#",
        "::1 app.local",
        "127.0.0.1 app.local",
    ))


@pytest.fixture(autouse=True)
def reset_locally_logger():
    yield
    logging.getLogger("locally").handlers.clear()
