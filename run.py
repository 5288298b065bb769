#!/usr/bin/env python3
"""Start the WrestleSim server."""

import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).parent
sys.path.insert(0, str(ROOT))

DB_URL = os.environ.get("WRESTLESIM_DB_URL", f"sqlite:///{ROOT / 'wrestlesim.db'}")

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

from api.app import create_app
from simulation.config import DEFAULT_SEED

app = create_app(DB_URL, seed=DEFAULT_SEED)

ctx = app.config["SEASON"]
print(f"Season ready: {len(ctx.roster)} wrestlers, {len(ctx.league)} league teams")

print("\nStarting server at http://127.0.0.1:5000")
app.run(host="127.0.0.1", port=5000, debug=False)
