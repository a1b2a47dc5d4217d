"""conftest.py
Shared pytest logging hooks and fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from api.server import app, get_service
from resume_builder.logging import LoggerFactory
from resume_builder.storage.memory_store import InMemoryDocumentStore
from resume_builder.storage.service import ResumeService
from resume_builder.storage.session import Session

# --------------------------------------------------------------
# SETUP TEST LOGGING
# --------------------------------------------------------------

# Integrate logger with pytest
logger = LoggerFactory().get_logger(
    name="pytest_logger",
    logger_type="pytest",
    console=True
)
current_class = None

@pytest.hookimpl(tryfirst=True)
def pytest_sessionstart(session):
    """Session start header."""
    logger.info("==== PYTEST SESSION START ====")

@pytest.hookimpl(tryfirst=True)
def pytest_runtest_logstart(nodeid, location):
    """Called at the start of each test."""
    global current_class
    class_name = location[0]
    if class_name != current_class:
        current_class = class_name
        logger.info(f"\n---- TestClass: {current_class} ----")

@pytest.hookimpl(tryfirst=True)
def pytest_runtest_logreport(report):
    """Called at the end of each test phase (setup/call/teardown)."""
    if report.when != "call":
        return  # only care about the main call, not setup/teardown

    status = report.outcome.upper()  # PASSED / FAILED / SKIPPED
    if status == "PASSED":
        logger.info(f"PASSED: {report.nodeid}")
    elif status == "FAILED":
        logger.error(f"FAILED: {report.nodeid}\n{report.longreprtext}")
    elif status == "SKIPPED":
        logger.warning(f"SKIPPED: {report.nodeid}\n{report.longreprtext}")

@pytest.hookimpl(tryfirst=True)
def pytest_sessionfinish(session, exitstatus):
    """Session finish footer."""
    logger.info(f"==== PYTEST SESSION END: exitstatus={exitstatus} ====")


# --------------------------------------------------------------
# STORAGE FIXTURES
# --------------------------------------------------------------
@pytest.fixture
def store():
    """Fresh in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def service(store):
    """ResumeService over the `store` fixture."""
    return ResumeService(store)


@pytest.fixture
def owner():
    return Session(user_id="owner-1")


@pytest.fixture
def intruder():
    return Session(user_id="intruder-2")


# --------------------------------------------------------------
# API FIXTURES
# --------------------------------------------------------------
@pytest.fixture
def client(service):
    """
    TestClient whose routes use the `service` fixture instead of the
    SQL-backed default.

    Usage:
        def test_example(client, owner):
            client.get("/api/resumes", headers={"X-User-Id": owner.user_id})
    """
    app.dependency_overrides[get_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
