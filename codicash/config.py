import os
from pathlib import Path


SAVES_DIR = Path(os.getenv("CODICASH_SAVES_DIR", "saves"))
LOG_LEVEL = os.getenv("CODICASH_LOG_LEVEL", "WARNING")
DEFAULT_PAGE_LIMIT = int(os.getenv("CODICASH_PAGE_LIMIT", "10"))
