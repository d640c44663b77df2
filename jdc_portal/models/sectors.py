"""
Sector layouts for the installation spreadsheets.

Each sector has its own spreadsheet, read from the same range, with its own
column order. A sector is a `SectorSchema` subclass keyed on `secteur`; its
`fields` tuple is the full list of fields a sheet row is mapped to.
"""
from typing import Dict, List, Optional, Sequence, Tuple

from jdc_portal.errors import UnknownSectorError

DEFAULT_RANGE = "EN COURS!A2:Z"

COMMON_FIELDS = (
    "codeClient",
    "nom",
    "ville",
    "telephone",
    "commercial",
    "dateCdeMateriel",
)

# Fields normalised to ISO timestamps when a row is mapped
DATE_FIELDS = ("dateCdeMateriel", "dateSignatureCde", "dateInstall")

STATUS_AWAITING = "rendez-vous à prendre"
STATUS_SCHEDULED = "rendez-vous pris"
STATUS_COMPLETE = "installation terminée"
STATUSES = (STATUS_AWAITING, STATUS_SCHEDULED, STATUS_COMPLETE)
TERMINAL_STATUS = STATUS_COMPLETE


class SectorSchema:
    """Layout of one sector's spreadsheet."""

    secteur: str = ""
    spreadsheet_id: str = ""
    range: str = DEFAULT_RANGE
    columns: Dict[str, int] = {}
    specific_fields: Tuple[str, ...] = ()

    @classmethod
    def fields(cls) -> Tuple[str, ...]:
        """Common fields followed by the sector-specific ones."""
        return COMMON_FIELDS + cls.specific_fields

    @classmethod
    def cell(cls, row: Sequence, field: str) -> Optional[object]:
        """Return the raw cell for `field`, or None when the row is too short."""
        index = cls.columns.get(field)
        if index is None or index >= len(row):
            return None
        return row[index]

    @classmethod
    def code_client(cls, row: Sequence) -> str:
        value = cls.cell(row, "codeClient")
        if value is None:
            return ""
        return str(value).strip()


class ChrSector(SectorSchema):
    secteur = "chr"
    spreadsheet_id = "1vnyvpP8uGw0oa9a4j-KI8IUXdc4wW52n_TiQOedw4hk"
    columns = {
        "dateCdeMateriel": 1,
        "codeClient": 3,
        "nom": 4,
        "ville": 5,
        "telephone": 6,
        "commercial": 7,
        "cdc": 9,
        "integrationJalia": 10,
        "dossier": 11,
        "tech": 12,
        "dateInstall": 13,
        "heure": 14,
        "commentaireTech": 16,
        "materielLivre": 17,
        "commentaireEnvoiBT": 18,
        "techSecu": 20,
        "techAffecte": 21,
    }
    specific_fields = (
        "cdc",
        "integrationJalia",
        "dossier",
        "tech",
        "dateInstall",
        "heure",
        "commentaireTech",
        "materielLivre",
        "commentaireEnvoiBT",
        "techSecu",
        "techAffecte",
    )


class HaccpSector(SectorSchema):
    secteur = "haccp"
    spreadsheet_id = "1wP5ixXsDJNmCAzuI2WM8sXAhokoJeEQrUxjNW-Tneq0"
    columns = {
        "dateSignatureCde": 0,
        "dateCdeMateriel": 1,
        "codeClient": 2,
        "nom": 3,
        "ville": 4,
        "telephone": 5,
        "commercial": 6,
        "materielPreParametrage": 7,
        "dossier": 8,
        "dateInstall": 9,
        "commentaire": 10,
        "materielLivre": 11,
        "numeroColis": 12,
        "commentaireInstall": 13,
        "identifiantMotDePasse": 14,
        "numerosSondes": 15,
    }
    specific_fields = (
        "dateSignatureCde",
        "materielPreParametrage",
        "dossier",
        "dateInstall",
        "commentaire",
        "materielLivre",
        "numeroColis",
        "commentaireInstall",
        "identifiantMotDePasse",
        "numerosSondes",
    )


class TabacSector(SectorSchema):
    secteur = "tabac"
    spreadsheet_id = "1Ggm5rnwGmn40JjSN7aB6cs7z-hJiEkdAZLUq6QaQvjg"
    # No dedicated phone column: `telephone` reads the contact column too
    columns = {
        "dateSignatureCde": 0,
        "dateCdeMateriel": 1,
        "codeClient": 2,
        "nom": 3,
        "ville": 4,
        "telephone": 5,
        "coordonneesTel": 5,
        "commercial": 6,
        "materielBalance": 7,
        "offreTpe": 8,
        "cdc": 9,
        "tech": 10,
        "dateInstall": 11,
        "typeInstall": 12,
        "commentaireEtatMateriel": 13,
    }
    specific_fields = (
        "dateSignatureCde",
        "coordonneesTel",
        "materielBalance",
        "offreTpe",
        "cdc",
        "tech",
        "dateInstall",
        "typeInstall",
        "commentaireEtatMateriel",
    )


class KeziaSector(SectorSchema):
    secteur = "kezia"
    spreadsheet_id = "1uzzHN8tzc53mOOpH8WuXJHIUsk9f17eYc0qsod-Yryk"
    columns = {
        "colonne1": 1,
        "dateCdeMateriel": 2,
        "codeClient": 3,
        "nom": 4,
        "ville": 5,
        "personneContact": 6,
        "telephone": 7,
        "commercial": 8,
        "configCaisse": 9,
        "offreTpe": 10,
        "cdc": 11,
        "dossier": 12,
        "tech": 13,
        "dateInstall": 14,
        "commentaire": 15,
        "materielEnvoye": 16,
        "confirmationReception": 17,
    }
    specific_fields = (
        "colonne1",
        "personneContact",
        "configCaisse",
        "offreTpe",
        "cdc",
        "dossier",
        "tech",
        "dateInstall",
        "commentaire",
        "materielEnvoye",
        "confirmationReception",
    )


# Sync order
SECTORS: Tuple[type, ...] = (ChrSector, HaccpSector, TabacSector, KeziaSector)
SECTOR_NAMES: List[str] = [s.secteur for s in SECTORS]
_BY_NAME = {s.secteur: s for s in SECTORS}


def get_sector(name) -> type:
    """Return the schema class for a sector name (case-insensitive)."""
    if isinstance(name, type) and issubclass(name, SectorSchema):
        return name
    schema = _BY_NAME.get(str(name or "").strip().lower())
    if schema is None:
        raise UnknownSectorError(name)
    return schema
