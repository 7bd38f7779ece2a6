import pytest

from shared import codec


@pytest.fixture(autouse=True)
def quiet(monkeypatch):
    monkeypatch.setattr(codec, 'VERBOSITY', 0)
