"""Development entrypoint for running the demo API locally.

Usage:
- FLASK_APP=toolkit.main:app flask run --reload
- python -m toolkit.main
"""

from __future__ import annotations

import logging

from toolkit import create_app
from toolkit.config import Config

logging.basicConfig(level=Config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = create_app()

if __name__ == "__main__":
    # Simple built-in server for quick smoke testing
    app.run(host="127.0.0.1", port=5000, debug=True)
