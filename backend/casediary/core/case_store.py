import json
import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError

from casediary.core import config
from casediary.models.case import Case

logger = logging.getLogger("case_store")


class CaseStore:
    """
    Durable key-value storage for the case collection.

    The whole collection lives under a single key: one JSON file named after
    ``storage_key`` inside ``data_dir``.
    """

    def __init__(self, data_dir: Union[str, Path, None] = None, storage_key: Optional[str] = None):
        self.data_dir = Path(data_dir or config.data_dir)
        self.storage_key = storage_key or config.storage_key
        self.last_error: Optional[str] = None

        # Create directory for storing the collection
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self.data_dir / f"{self.storage_key}.json"

    def load(self) -> List[Case]:
        """
        Load the case collection from disk.

        Anything that does not parse as a list of cases is treated as an empty
        collection; the unreadable file is copied aside first.
        """
        if not self.path.exists():
            logger.info(f"📂 NO STORED CASES: path={self.path}")
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError(f"expected a list of cases, found {type(data).__name__}")
            cases = [Case.model_validate(item) for item in data]
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"⚠️ STORED CASES UNREADABLE, STARTING FRESH: path={self.path}, error={str(e)}")
            self._set_aside()
            return []

        logger.info(f"✅ CASES LOADED: count={len(cases)}")
        return cases

    def save(self, cases: List[Case]) -> bool:
        """
        Save the full case collection to disk.

        Returns:
            True on success, False if the write failed. Failures are logged and
            kept on ``last_error``; they are never raised. The collection is
            written to a temporary file first, so a failed write leaves the
            previous copy in place.
        """
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            payload = [c.to_wire() for c in cases]
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            self.last_error = str(e)
            tmp_path.unlink(missing_ok=True)
            logger.error(f"❌ ERROR SAVING CASES: path={self.path}, error={str(e)}")
            return False

        self.last_error = None
        logger.info(f"✅ CASES SAVED: count={len(cases)}")
        return True

    def _set_aside(self):
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        backup = self.data_dir / f"{self.storage_key}.corrupt-{timestamp}.json"
        try:
            shutil.copyfile(self.path, backup)
            logger.info(f"📦 UNREADABLE STORE COPIED ASIDE: backup={backup}")
        except OSError as e:
            logger.error(f"❌ ERROR COPYING UNREADABLE STORE: error={str(e)}")
