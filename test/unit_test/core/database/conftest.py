"""Test configuration for database unit tests.

The ``session`` fixture (in-memory SQLite with all tables) comes from the
unit test conftest; this module only adds user id fixtures.
"""

import uuid

import pytest


@pytest.fixture
def owner_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def other_user_id() -> uuid.UUID:
    return uuid.uuid4()
