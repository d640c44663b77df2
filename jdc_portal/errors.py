"""Exceptions raised by the installation sync."""


class SyncError(Exception):
    """Base class for sync failures."""


class UnknownSectorError(SyncError, ValueError):
    """Raised when a sector name is not one of the configured sectors."""

    def __init__(self, sector):
        super().__init__(f"Unknown sector: {sector!r}")
        self.sector = sector


class CredentialNotFoundError(SyncError):
    """No user document carries a usable Google refresh token."""


class SheetsFetchError(SyncError):
    """Reading a spreadsheet range failed."""

    def __init__(self, message: str, spreadsheet_id: str = None, status: int = None):
        super().__init__(message)
        self.spreadsheet_id = spreadsheet_id
        self.status = status


class SheetsPermissionError(SheetsFetchError):
    """The credentials in use cannot read the spreadsheet (HTTP 403)."""


class SheetsNotFoundError(SheetsFetchError):
    """The spreadsheet or range does not exist (HTTP 404)."""
