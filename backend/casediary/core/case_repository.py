import logging
import uuid
from datetime import date
from typing import List, Optional

from casediary.core.case_store import CaseStore
from casediary.models.case import Case, CaseNature

logger = logging.getLogger("case_repository")


class CaseRepository:
    """
    The authoritative in-memory case collection.

    Mutations replace whole records and always produce a new list. Each one
    is written through to the store before returning; if that write fails the
    in-memory collection stays authoritative for the rest of the session and
    ``persisted`` reports the failure.
    """

    def __init__(self, store: Optional[CaseStore] = None):
        self.store = store or CaseStore()
        self._cases: List[Case] = self.store.load()
        self.persisted = True
        self.last_error: Optional[str] = None

    @property
    def cases(self) -> List[Case]:
        return list(self._cases)

    def list_cases(self) -> List[Case]:
        return list(self._cases)

    def get(self, case_id: str) -> Optional[Case]:
        for c in self._cases:
            if c.id == case_id:
                return c
        return None

    def upsert(self, case: Case) -> List[Case]:
        """
        Insert or replace a case.

        A case with a matching id is replaced at its original position;
        otherwise the case is appended.
        """
        updated = list(self._cases)
        for i, existing in enumerate(updated):
            if existing.id == case.id:
                updated[i] = case
                logger.info(f"🔄 CASE REPLACED: id={case.id}, position={i}")
                break
        else:
            updated.append(case)
            logger.info(f"✅ CASE ADDED: id={case.id}, total={len(updated)}")

        self._commit(updated)
        return list(self._cases)

    def replace_all(self, cases: List[Case]) -> List[Case]:
        """
        Replace the entire collection (bulk import).

        Raises:
            ValueError: if an element is not a case or ids repeat.
        """
        seen = set()
        for c in cases:
            if not isinstance(c, Case):
                raise ValueError(f"Expected Case records, got {type(c).__name__}")
            if c.id in seen:
                raise ValueError(f"Duplicate case id: {c.id}")
            seen.add(c.id)

        logger.warning(f"⚠️ REPLACING ALL CASES: old={len(self._cases)}, new={len(cases)}")
        self._commit(list(cases))
        return list(self._cases)

    def new_case(self) -> Case:
        """Blank case with a fresh identifier; not added to the collection."""
        return Case(
            id=str(uuid.uuid4()),
            title="",
            case_number="",
            year=date.today().year,
            nature=CaseNature.CIVIL,
            case_type="",
            representing="",
            court_name="",
            history=[],
            status="Pending",
        )

    def _commit(self, cases: List[Case]):
        self._cases = cases
        self.persisted = self.store.save(cases)
        self.last_error = None if self.persisted else self.store.last_error
        if not self.persisted:
            logger.error(f"❌ CHANGES KEPT IN MEMORY ONLY: error={self.last_error}")
