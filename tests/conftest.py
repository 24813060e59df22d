import pytest

from app import security


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    security._rate_state.clear()
    yield
    security._rate_state.clear()
