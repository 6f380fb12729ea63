import os

import pytest

from vaccinate.configuration import reset

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))


@pytest.fixture(autouse=True)
def restore_defaults():
    yield
    reset()


@pytest.fixture
def modules_dir() -> str:
    return os.path.join(TESTS_DIR, "modules")


@pytest.fixture
def other_modules_dir() -> str:
    return os.path.join(TESTS_DIR, "other_modules")


@pytest.fixture
def missing_dir(tmp_path) -> str:
    return str(tmp_path / "missing")
