"""
project: undercroft
module: __init__.py
License: MIT

Flask application factory.

The web surface is a thin JSON/text view over the dungeon generator. Config
is sourced from environment variables (a local `.env` is honoured) with
reasonable defaults for development; an `instance/` directory holds runtime
files such as the rotating server log.
"""

import os

from dotenv import load_dotenv
from flask import Flask

__version__ = "0.3.0"


def create_app(test_config=None):
    """Build the Flask app and register blueprints.

    ``test_config`` (a mapping) is applied last so tests can override anything.
    """
    load_dotenv()
    app = Flask(__name__, instance_relative_config=True)
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        # Read-only checkouts still serve requests; only file logging needs it.
        pass

    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        DUNGEON_CACHE_MAX=int(os.getenv("UNDERCROFT_CACHE_MAX", "8")),
        DUNGEON_MAX_SIZE=int(os.getenv("UNDERCROFT_MAX_SIZE", "256")),
    )
    if test_config:
        app.config.update(test_config)

    from .routes.dungeon_api import bp_dungeon

    app.register_blueprint(bp_dungeon)
    return app


__all__ = ["create_app", "__version__"]
