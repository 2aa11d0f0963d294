"""Locations of the bundled question bank and saved attempts."""

import os
from pathlib import Path

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent

QUESTION_BANK_PATH: Path = Path(
    os.environ.get("NAVDRILLS_QUESTION_BANK", _PACKAGE_ROOT / "data" / "question_bank.json")
)
ATTEMPTS_DIR: Path = Path(
    os.environ.get("NAVDRILLS_ATTEMPTS_DIR", Path.cwd() / "data" / "quiz_attempts")
)

# Navigator and topic ids become part of attempt file names.
SAFE_ID_PATTERN: str = r"^[A-Za-z0-9_.-]+$"
