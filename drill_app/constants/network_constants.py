"""Network configuration constants for the drills API."""

import os

DEFAULT_HOST: str = os.environ.get("NAVDRILLS_HOST", "0.0.0.0")
DEFAULT_PORT: int = int(os.environ.get("NAVDRILLS_PORT", "8000"))
