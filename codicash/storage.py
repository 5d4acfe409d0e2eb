import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from codicash import config
from codicash.models import ExpenseRecord


logger = logging.getLogger(__name__)


def _saves_dir(saves_dir: Optional[Path] = None) -> Path:
    directory = Path(saves_dir or config.SAVES_DIR)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def list_save_files(saves_dir: Optional[Path] = None) -> list[str]:
    return sorted(f.stem for f in _saves_dir(saves_dir).glob("*.json"))


def save_expenses(records: list[ExpenseRecord], save_name: str = "default", saves_dir: Optional[Path] = None) -> Path:
    data = {
        "metadata": {
            "version": "1.0",
            "created": date.today().isoformat(),
            "expense_count": len(records)
        },
        "expenses": [record.to_dict() for record in records]
    }

    save_path = _saves_dir(saves_dir) / f"{save_name}.json"
    save_path.write_text(json.dumps(data, indent=2))
    logger.info("Saved %d expenses to %s", len(records), save_path)
    return save_path


def load_expenses(save_name: str = "default", saves_dir: Optional[Path] = None) -> list[ExpenseRecord]:
    filepath = _saves_dir(saves_dir) / f"{save_name}.json"
    if not filepath.exists():
        raise FileNotFoundError(f"Save file '{save_name}' not found")

    data = json.loads(filepath.read_text())
    if not isinstance(data, dict) or not isinstance(data.get("expenses", []), list):
        raise ValueError(f"Save file '{save_name}' is not a Codi Cash save")

    records = []
    for e_data in data.get("expenses", []):
        try:
            records.append(ExpenseRecord.from_dict(e_data))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping invalid expense %s: %s", e_data.get("id") if isinstance(e_data, dict) else None, e)

    logger.info("Loaded %d expenses from %s", len(records), filepath)
    return records
