import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from undercroft import create_app  # noqa: E402
from undercroft.routes.dungeon_api import clear_dungeon_cache  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app({"TESTING": True, "DUNGEON_MAX_SIZE": 128})
    return app


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture(autouse=True)
def _clear_cache():
    """Cached dungeons must not leak between tests that tweak env flags."""
    clear_dungeon_cache()
    yield
    clear_dungeon_cache()
