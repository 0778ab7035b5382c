"""
project: undercroft
module: server.py
License: MIT

Server bootstrap: stdlib logging setup and the development server runner.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from undercroft import create_app

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _configure_logging(app):
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/undercroft.log. Retains a few backups to avoid growth.
    """
    log_dir = app.instance_path
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "undercroft.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(LOG_FORMAT))

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path


def start_server(host="127.0.0.1", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Create the app, configure logging and run the werkzeug server."""
    app = create_app()
    _configure_logging(app)
    try:
        print(f"[INFO] Starting undercroft server on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)
