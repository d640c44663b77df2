"""
Sheet-to-Firestore reconciliation for one sector.

`reconcile` is a pure function: it compares the rows read from a sector's
spreadsheet with the installations stored for that sector and returns the
inserts, updates and terminations to apply. Fetching and writing live in
`services.sync_service`.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Set

from jdc_portal.models.sectors import (
    DATE_FIELDS,
    STATUS_AWAITING,
    TERMINAL_STATUS,
    get_sector,
)
from jdc_portal.utils.date_utils import normalize_sheet_date

logger = logging.getLogger(__name__)

# Owned by the portal once a record exists; the sheet never overwrites them
PROTECTED_FIELDS = frozenset({"status", "tech", "dateInstall", "id", "createdAt", "updatedAt"})


class SyncPlan:
    """Writes computed for one sector."""

    def __init__(self, secteur: str):
        self.secteur = secteur
        self.to_insert: List[Dict[str, Any]] = []
        self.to_update: List[Dict[str, Any]] = []
        self.to_terminate: List[Dict[str, Any]] = []
        self.seen: Set[str] = set()
        self.skipped = 0

    @property
    def operation_count(self) -> int:
        return len(self.to_insert) + len(self.to_update) + len(self.to_terminate)

    def is_empty(self) -> bool:
        return self.operation_count == 0


def _cell_text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def build_candidate(sector, row: Sequence) -> Dict[str, Any]:
    """Map a raw sheet row to an installation record for `sector`."""
    schema = get_sector(sector)
    candidate: Dict[str, Any] = {"secteur": schema.secteur}
    for field in schema.fields():
        raw = schema.cell(row, field)
        if field in DATE_FIELDS:
            candidate[field] = normalize_sheet_date(raw)
        else:
            candidate[field] = _cell_text(raw)
    candidate["codeClient"] = schema.code_client(row)
    return candidate


def diff_record(candidate: Mapping[str, Any], existing: Mapping[str, Any]) -> Dict[str, Any]:
    """Fields of `candidate` that differ from `existing`, protected fields excluded."""
    patch = {}
    for field, value in candidate.items():
        if field in PROTECTED_FIELDS:
            continue
        if existing.get(field) != value:
            patch[field] = value
    return patch


def index_by_code_client(records: Iterable[Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Key stored records by codeClient. The first record for a code wins."""
    indexed: Dict[str, Dict[str, Any]] = {}
    for record in records:
        code = _cell_text(record.get("codeClient"))
        if not code:
            continue
        if code in indexed:
            logger.warning(
                f"Duplicate stored installation for codeClient {code}: "
                f"keeping {indexed[code].get('id')}, ignoring {record.get('id')}"
            )
            continue
        indexed[code] = dict(record)
    return indexed


def reconcile(sector, external_rows: Iterable[Sequence], stored_records: Mapping[str, Mapping[str, Any]]) -> SyncPlan:
    """
    Compute the writes that bring a sector's stored installations in line
    with its spreadsheet.

    Args:
        sector: sector name or schema class
        external_rows: raw cell lists, in sheet order
        stored_records: existing installations of the sector keyed by codeClient,
            each carrying its document `id`

    Returns:
        SyncPlan with inserts (new codes), updates (changed sheet-owned fields)
        and terminations (codes no longer in the sheet)
    """
    schema = get_sector(sector)
    plan = SyncPlan(schema.secteur)

    for position, row in enumerate(external_rows):
        if not row:
            plan.skipped += 1
            logger.warning(f"[{schema.secteur}] Row {position} is empty, skipped")
            continue

        code = schema.code_client(row)
        if not code:
            plan.skipped += 1
            logger.warning(f"[{schema.secteur}] Row {position} has no codeClient, skipped")
            continue

        if code in plan.seen:
            logger.warning(f"[{schema.secteur}] codeClient {code} appears more than once, keeping the first row")
            continue
        plan.seen.add(code)

        candidate = build_candidate(schema, row)
        existing = stored_records.get(code)

        if existing is None:
            candidate["status"] = STATUS_AWAITING
            plan.to_insert.append(candidate)
            continue

        patch = diff_record(candidate, existing)
        if patch:
            plan.to_update.append({"id": existing["id"], "patch": patch})

    for code, existing in stored_records.items():
        if code in plan.seen:
            continue
        if existing.get("status") == TERMINAL_STATUS:
            continue
        plan.to_terminate.append({"id": existing["id"]})

    logger.info(
        f"[{schema.secteur}] plan: {len(plan.to_insert)} to insert, "
        f"{len(plan.to_update)} to update, {len(plan.to_terminate)} to terminate, "
        f"{plan.skipped} skipped"
    )
    return plan
