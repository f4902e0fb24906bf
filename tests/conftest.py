import pytest

from dcache import create_backend


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(params=["ring", "lru"])
def cache(request, clock):
    """A backend of each type with room for 1000 items."""
    return create_backend(request.param, max_items=1000, clock=clock)
