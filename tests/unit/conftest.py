from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.fixtures.fakes import FakeIdentityProvider, FakeObjectStorage


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def storage():
    return FakeObjectStorage()
