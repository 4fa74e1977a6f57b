import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from casediary.core.case_repository import CaseRepository
from casediary.models.case import Case
from casediary.models.documents import ExportPayload

logger = logging.getLogger("data_transfer")

EXPORT_FORMATS = {
    "json": ("application/json", "json"),
    "yaml": ("application/x-yaml", "yaml"),
}


class ImportValidationError(ValueError):
    """Raised when an import payload is not a valid case export."""


def export_cases(cases: List[Case], fmt: str = "json", today: Optional[date] = None) -> ExportPayload:
    """
    Serialize the whole collection for download.

    Args:
        cases: The case collection
        fmt: "json" or "yaml"
        today: Date stamped into the filename (defaults to today)

    Returns:
        The payload text, its media type and a dated filename.
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")
    media_type, ext = EXPORT_FORMATS[fmt]
    stamp = (today or date.today()).isoformat()

    data = [c.to_wire() for c in cases]
    if fmt == "yaml":
        content = yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
    else:
        content = json.dumps(data, indent=2, ensure_ascii=False)

    logger.info(f"📤 CASES EXPORTED: count={len(cases)}, format={fmt}")
    return ExportPayload(
        filename=f"case-diary-export-{stamp}.{ext}",
        media_type=media_type,
        content=content,
    )


def parse_import(text: str, fmt: str = "json") -> List[Case]:
    """
    Parse and validate an exported collection.

    Every element must carry an id and validate as a complete case; ids must be
    unique. Nothing is returned unless the whole payload is valid.

    Raises:
        ImportValidationError: with a message describing the first problem found.
    """
    try:
        if fmt == "yaml":
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ImportValidationError(f"File is not valid {fmt.upper()}: {str(e)}") from e

    if not isinstance(data, list):
        raise ImportValidationError(
            "Invalid file format. The file does not appear to be a valid case export "
            f"(expected a list of cases, found {type(data).__name__})."
        )

    cases = []
    seen = set()
    for position, item in enumerate(data):
        if not isinstance(item, dict) or not item.get("id"):
            raise ImportValidationError(f"Entry {position + 1} has no case identifier.")
        try:
            case = Case.model_validate(item)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise ImportValidationError(f"Entry {position + 1} (id={item['id']}) is invalid: {fields}") from e
        if case.id in seen:
            raise ImportValidationError(f"Duplicate case id in file: {case.id}")
        seen.add(case.id)
        cases.append(case)

    return cases


def import_cases(repository: CaseRepository, text: str, confirm: bool, fmt: str = "json") -> Dict[str, Any]:
    """
    Validate an import and, only once confirmed, replace the whole collection.

    Without confirmation the repository is left untouched and a preview is returned.
    """
    cases = parse_import(text, fmt)

    if not confirm:
        logger.info(f"📋 IMPORT PREVIEW: count={len(cases)}")
        return {
            "count": len(cases),
            "requires_confirmation": True,
            "imported": False,
            "message": f"Importing {len(cases)} cases will overwrite all existing data.",
        }

    repository.replace_all(cases)
    logger.info(f"✅ CASES IMPORTED: count={len(cases)}, persisted={repository.persisted}")
    return {
        "count": len(cases),
        "requires_confirmation": False,
        "imported": True,
        "persisted": repository.persisted,
        "message": "Data imported successfully!",
    }


def format_for_filename(filename: Optional[str]) -> str:
    """Pick the parser from an uploaded file's extension."""
    if filename and filename.lower().endswith((".yaml", ".yml")):
        return "yaml"
    return "json"
