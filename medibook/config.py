"""Environment configuration, loaded from .env when present."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(override=True)

PACKAGE_DIR = Path(__file__).parent

DB_PATH = Path(os.getenv("MEDIBOOK_DB_PATH", PACKAGE_DIR / "hospital" / "hospital.db"))
DB_BUSY_TIMEOUT = float(os.getenv("DB_BUSY_TIMEOUT", "5"))

UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", PACKAGE_DIR / "uploads"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "5000"))

# Prescription image scanning
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
SCAN_MATCH_CUTOFF = float(os.getenv("SCAN_MATCH_CUTOFF", "0.8"))
