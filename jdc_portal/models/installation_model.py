import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from jdc_portal.models.sectors import SECTOR_NAMES, STATUSES, TERMINAL_STATUS, get_sector
from jdc_portal.services.reconciler import index_by_code_client
from jdc_portal.utils.date_utils import to_iso_z

logger = logging.getLogger(__name__)

COLLECTION = "installations"
# Firestore rejects batches above 500 writes
FIRESTORE_BATCH_LIMIT = 500
DEFAULT_MAX_BATCH_OPERATIONS = 490


class CommitResult:
    """Outcome of one batch commit."""

    def __init__(self, updated: int = 0, terminated: int = 0, dropped: int = 0):
        self.updated = updated
        self.terminated = terminated
        self.dropped = dropped

    @property
    def committed(self) -> int:
        return self.updated + self.terminated


class InstallationModel:
    """Installation data model for Firestore operations"""

    def __init__(self, db):
        self.db = db
        self.collection = db.collection(COLLECTION)

    @staticmethod
    def _to_record(doc) -> Dict[str, Any]:
        data = doc.to_dict() or {}
        data["id"] = doc.id
        return data

    def get_by_sector(self, sector) -> Dict[str, Dict[str, Any]]:
        """Stored installations of a sector keyed by codeClient"""
        secteur = get_sector(sector).secteur
        try:
            docs = self.collection.where(filter=FieldFilter("secteur", "==", secteur)).stream()
            records = [self._to_record(doc) for doc in docs]
        except Exception as e:
            raise Exception(f"Failed to get installations for {secteur}: {str(e)}")

        installations = index_by_code_client(records)
        logger.info(f"[{secteur}] {len(installations)} installations found in Firestore")
        return installations

    def create(self, data: Dict[str, Any]) -> str:
        """Create an installation and return its document id"""
        doc = dict(data)
        doc["createdAt"] = firestore.SERVER_TIMESTAMP
        doc["updatedAt"] = firestore.SERVER_TIMESTAMP
        _, doc_ref = self.collection.add(doc)
        return doc_ref.id

    def commit(
        self,
        updates: List[Dict[str, Any]],
        terminations: List[Dict[str, Any]],
        max_operations: int = DEFAULT_MAX_BATCH_OPERATIONS,
    ) -> CommitResult:
        """
        Apply updates and terminations in a single write batch.

        Operations past `max_operations` are dropped with a warning; the next
        sync recomputes them.
        """
        max_operations = max(0, min(max_operations, FIRESTORE_BATCH_LIMIT))
        operations = [(op["id"], op["patch"], False) for op in updates]
        operations += [(op["id"], {"status": TERMINAL_STATUS}, True) for op in terminations]

        if not operations:
            return CommitResult()

        dropped = 0
        if len(operations) > max_operations:
            dropped = len(operations) - max_operations
            logger.warning(
                f"Batch holds {len(operations)} operations, above the limit of {max_operations}: "
                f"{dropped} dropped until the next sync"
            )
            operations = operations[:max_operations]

        batch = self.db.batch()
        result = CommitResult(dropped=dropped)
        for doc_id, patch, is_termination in operations:
            data = dict(patch)
            data["updatedAt"] = firestore.SERVER_TIMESTAMP
            batch.update(self.collection.document(doc_id), data)
            if is_termination:
                result.terminated += 1
            else:
                result.updated += 1

        batch.commit()
        return result

    @staticmethod
    def _serialize(record: Dict[str, Any]) -> Dict[str, Any]:
        for field in ("createdAt", "updatedAt", "dateInstall", "dateCdeMateriel", "dateSignatureCde"):
            value = record.get(field)
            if isinstance(value, datetime):
                record[field] = to_iso_z(value)
        return record

    def list_by_sector(self, sector, status: Optional[str] = None) -> List[Dict[str, Any]]:
        """List a sector's installations, optionally restricted to one status"""
        secteur = get_sector(sector).secteur
        query = self.collection.where(filter=FieldFilter("secteur", "==", secteur))
        if status:
            query = query.where(filter=FieldFilter("status", "==", status))

        installations = []
        for doc in query.stream():
            record = self._serialize(self._to_record(doc))
            record.setdefault("status", STATUSES[0])
            installations.append(record)
        return installations

    def snapshot(self, sectors: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Count installations by status, overall and per sector"""
        wanted = [get_sector(s).secteur for s in sectors] if sectors else list(SECTOR_NAMES)

        def _empty_counts():
            return {status: 0 for status in STATUSES}

        result = {"total": 0, "byStatus": _empty_counts(), "bySector": {}}
        for doc in self.collection.stream():
            data = doc.to_dict() or {}
            secteur = str(data.get("secteur") or "").lower()
            if secteur not in wanted:
                continue
            status = data.get("status") or STATUSES[0]

            result["total"] += 1
            result["byStatus"][status] = result["byStatus"].get(status, 0) + 1

            sector_stats = result["bySector"].setdefault(secteur, {"total": 0, "byStatus": _empty_counts()})
            sector_stats["total"] += 1
            sector_stats["byStatus"][status] = sector_stats["byStatus"].get(status, 0) + 1

        return result
