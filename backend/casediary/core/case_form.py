import logging
from datetime import date
from typing import Optional

from casediary.models.case import Case, CaseHistory

logger = logging.getLogger("case_form")

DEFAULT_HEARING_STAGE = "Case Initiation"
MIN_DIARY_LENGTH_FOR_PREDICTION = 10

# Replies from the AI gateway that must never be applied as a stage
NON_STAGE_REPLIES = {
    "Could not predict next stage.",
    "API Key not configured.",
}


def record_hearing(case: Case, stage_of_hearing: Optional[str] = None, today: Optional[date] = None) -> Case:
    """
    Move today's diary note into the case history.

    The new entry is prepended and the diary is cleared. The stage recorded is
    the stage the hearing was fixed for, which defaults to the case's current stage.

    Raises:
        ValueError: if there is no diary note to record.
    """
    if not case.diary_notes.strip():
        raise ValueError("Nothing to record: the diary note is empty")

    entry = CaseHistory(
        date=(today or date.today()).isoformat(),
        proceedings=case.diary_notes,
        stage=stage_of_hearing or case.current_stage or DEFAULT_HEARING_STAGE,
        next_date=case.next_date,
    )
    logger.info(f"📝 HEARING RECORDED: id={case.id}, date={entry.date}, stage={entry.stage!r}")
    return case.model_copy(update={"history": [entry, *case.history], "diary_notes": ""})


def should_predict_stage(case: Case) -> bool:
    return len(case.diary_notes.strip()) > MIN_DIARY_LENGTH_FOR_PREDICTION


def apply_predicted_stage(case: Case, prediction: str) -> Case:
    prediction = (prediction or "").strip()
    if not prediction or prediction in NON_STAGE_REPLIES:
        return case
    return case.model_copy(update={"current_stage": prediction})
