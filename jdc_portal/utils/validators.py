from typing import Any, Dict, Optional

from jdc_portal.models.sectors import SECTOR_NAMES, STATUSES
from jdc_portal.utils.date_utils import now_iso


class Validators:
    """Input validation utilities"""

    @staticmethod
    def validate_sector(sector: str) -> bool:
        """Validate sector name"""
        return str(sector or "").strip().lower() in SECTOR_NAMES

    @staticmethod
    def validate_status(status: str) -> bool:
        """Validate installation status"""
        return status in STATUSES


class Helpers:
    """Utility helper functions"""

    @staticmethod
    def parse_sector_list(raw: Optional[str]) -> list:
        """Split a comma separated `sectors` query parameter"""
        if not raw:
            return []
        return [s.strip().lower() for s in raw.split(",") if s.strip()]

    @staticmethod
    def build_error_response(message: str, code: str = "ERROR", details: Any = None) -> Dict[str, Any]:
        """Build standardized error response"""
        response = {
            'success': False,
            'error': message,
            'code': code,
            'timestamp': now_iso()
        }
        if details is not None:
            response['details'] = details
        return response
