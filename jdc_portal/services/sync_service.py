"""
Installation sync: reads each sector's spreadsheet, reconciles it with
Firestore and writes the result.

Sectors run one after the other. A sector whose sheet cannot be read is
skipped without writes. A failed insert or batch commit is recorded on the
sector result and does not undo the writes already made for that sector.
"""
import logging
from typing import Any, Dict, List, Optional

from jdc_portal.config.settings import Settings
from jdc_portal.errors import SheetsFetchError, SheetsNotFoundError, SheetsPermissionError
from jdc_portal.models.installation_model import DEFAULT_MAX_BATCH_OPERATIONS, InstallationModel
from jdc_portal.models.sectors import SECTORS, get_sector
from jdc_portal.services.credential_service import build_google_credentials, get_google_refresh_token
from jdc_portal.services.reconciler import reconcile
from jdc_portal.services.sheets_service import SheetsClient

logger = logging.getLogger(__name__)


class SectorSyncResult:
    """Counts for one sector's sync"""

    def __init__(self, secteur: str):
        self.secteur = secteur
        self.added = 0
        self.updated = 0
        self.terminated = 0
        self.skipped = 0
        self.dropped = 0
        self.error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "added": self.added,
            "updated": self.updated,
            "terminated": self.terminated,
            "skipped": self.skipped,
            "dropped": self.dropped,
        }
        if self.error:
            data["error"] = self.error
        return data


class SyncReport:
    """Results of a full sync cycle"""

    def __init__(self):
        self.sectors: List[SectorSyncResult] = []

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.sectors)

    @property
    def failed_sectors(self) -> List[str]:
        return [result.secteur for result in self.sectors if not result.ok]

    def to_dict(self) -> Dict[str, Any]:
        return {result.secteur: result.to_dict() for result in self.sectors}


class InstallationSyncService:
    """Service for syncing installations from the sector spreadsheets"""

    def __init__(self, store: InstallationModel, sheets_client: SheetsClient,
                 max_batch_operations: int = DEFAULT_MAX_BATCH_OPERATIONS):
        self.store = store
        self.sheets_client = sheets_client
        self.max_batch_operations = max_batch_operations

    def _fetch_rows(self, schema) -> List[List[str]]:
        return self.sheets_client.fetch(schema.spreadsheet_id, schema.range)

    def sync_sector(self, sector) -> SectorSyncResult:
        """Sync one sector; sheet fetch errors propagate to the caller"""
        schema = get_sector(sector)
        result = SectorSyncResult(schema.secteur)
        logger.info(f"[{schema.secteur}] Starting sector sync")

        rows = self._fetch_rows(schema)
        logger.info(f"[{schema.secteur}] {len(rows)} rows read from the sheet")
        stored = self.store.get_by_sector(schema.secteur)

        plan = reconcile(schema, rows, stored)
        result.skipped = plan.skipped
        if plan.is_empty():
            logger.info(f"[{schema.secteur}] Sheet and Firestore already in sync")
            return result
        logger.info(f"[{schema.secteur}] {plan.operation_count} writes planned")

        errors = []
        # Batched writes need an existing document, so new records go one by one
        for record in plan.to_insert:
            try:
                self.store.create(record)
            except Exception as e:
                logger.error(f"[{schema.secteur}] Insert failed for codeClient {record.get('codeClient')}: {e}")
                errors.append(f"Insert failed for codeClient {record.get('codeClient')}: {e}")
                continue
            result.added += 1

        try:
            commit = self.store.commit(plan.to_update, plan.to_terminate, self.max_batch_operations)
        except Exception as e:
            logger.error(f"[{schema.secteur}] Batch commit failed after {result.added} inserts: {e}")
            errors.append(f"Batch commit failed: {e}")
        else:
            result.updated = commit.updated
            result.terminated = commit.terminated
            result.dropped = commit.dropped
            logger.info(f"[{schema.secteur}] {commit.committed} batched writes committed")

        if errors:
            result.error = "; ".join(errors)
        logger.info(f"[{schema.secteur}] Sector synced: {result.to_dict()}")
        return result

    def sync_all_sectors(self) -> SyncReport:
        """Sync every sector in order; one sector's failure does not stop the others"""
        report = SyncReport()
        for schema in SECTORS:
            try:
                result = self.sync_sector(schema)
            except SheetsPermissionError as e:
                logger.error(f"[{schema.secteur}] Permission denied reading the sheet: {e}")
                result = SectorSyncResult(schema.secteur)
                result.error = str(e)
            except SheetsNotFoundError as e:
                logger.error(f"[{schema.secteur}] Sheet or range not found: {e}")
                result = SectorSyncResult(schema.secteur)
                result.error = str(e)
            except SheetsFetchError as e:
                logger.error(f"[{schema.secteur}] Failed to read the sheet: {e}")
                result = SectorSyncResult(schema.secteur)
                result.error = str(e)
            report.sectors.append(result)
        return report


def run_installation_sync(db, settings=Settings, sheets_client: Optional[SheetsClient] = None) -> SyncReport:
    """
    Run one full sync cycle against `db`.

    Credential lookup failures are fatal and propagate to the caller.
    """
    if sheets_client is None:
        settings.validate()
        refresh_token = get_google_refresh_token(db)
        sheets_client = SheetsClient(
            credentials=build_google_credentials(refresh_token, settings),
            use_grid_data=settings.SHEETS_USE_GRID_DATA,
        )

    service = InstallationSyncService(
        InstallationModel(db),
        sheets_client,
        max_batch_operations=settings.SYNC_MAX_BATCH_OPERATIONS,
    )
    report = service.sync_all_sectors()
    if report.ok:
        logger.info("Installation sync completed")
    else:
        logger.warning(f"Installation sync completed with errors in: {', '.join(report.failed_sectors)}")
    return report
