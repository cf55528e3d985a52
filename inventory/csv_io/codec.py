# inventory/csv_io/codec.py
"""
CSV export of an asset view and minimal-column CSV import.

Export writes every fixed column plus one column per custom feature; import
only reads name, category, model and serial number. Import columns are located
by header name when the header row has a name column, so an exported file
imports back with those four fields intact; otherwise the first four columns
are used.
"""
import csv
import io
import logging
import unicodedata
from collections.abc import Iterable
from datetime import date

from pydantic import ValidationError

from core.exceptions import DuplicateIdError
from inventory.store.db_manager import EntityStore
from inventory.store.models import AssetCreate, AssetRead
from .models import ImportResult

logger = logging.getLogger(__name__)

BOM = "\ufeff"

EXPORT_COLUMNS = [
    "ID",
    "Name",
    "Category",
    "Model",
    "Serial Number",
    "Status",
    "Holder",
    "Purchase Date",
    "Description",
]

IMPORT_FIELDS = ("name", "category", "model", "serial_number")

IMPORT_DEFAULTS = {
    "category": "General",
    "model": "Standard",
    "serial_number": "N/A",
}

IMPORT_DESCRIPTION = "CSV Import"

# Header aliases; when the header row names the columns they are read by name,
# otherwise the first four columns are taken positionally.
_HEADERS = {
    "name":          ["name", "asset name", "asset_name", "名称"],
    "category":      ["category", "类别"],
    "model":         ["model", "型号"],
    "serial_number": ["serial", "serial number", "serial_number", "serialnumber", "sn", "序列号"],
}


# ---------- export ----------

def feature_columns(assets: Iterable[AssetRead]) -> list[str]:
    """Distinct custom feature names across `assets`, sorted."""
    keys: set[str] = set()
    for asset in assets:
        keys.update((asset.custom_features or {}).keys())
    return sorted(keys)


def export_rows(assets: Iterable[AssetRead]) -> tuple[list[str], list[list[str]]]:
    assets = list(assets)
    features = feature_columns(assets)
    headers = EXPORT_COLUMNS + features
    rows = []
    for a in assets:
        extra = a.custom_features or {}
        rows.append([
            a.id,
            a.name,
            a.category,
            a.model,
            a.serial_number,
            a.status.value,
            a.current_holder or "",
            a.purchase_date.isoformat(),
            a.description or "",
            *[extra.get(key, "") for key in features],
        ])
    return headers, rows


def export_assets_csv(assets: Iterable[AssetRead]) -> bytes:
    """
    Serialize an asset view to CSV.

    UTF-8 with a leading byte-order mark so spreadsheet tools detect the
    encoding; fields containing the delimiter are quoted.
    """
    headers, rows = export_rows(assets)
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow(headers)
    for r in rows:
        w.writerow(r)
    return buf.getvalue().encode("utf-8-sig")


def export_filename(today: date | None = None) -> str:
    return f"assets_export_{(today or date.today()).isoformat()}.csv"


# ---------- import ----------

def _norm(s: str | None) -> str:
    if s is None:
        return ""
    s = _clean(s)
    s = unicodedata.normalize("NFKC", s)
    return s.lower()


def _clean(value: str) -> str:
    """Trim whitespace and one pair of surrounding quotes."""
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value.strip()


def _split(line: str) -> list[str]:
    return next(csv.reader([line], skipinitialspace=True), [])


def _match_header_map(headers: list[str]) -> dict[str, int] | None:
    """Column index per import field, or None when the header names no `name` column."""
    normalized = [_norm(h) for h in headers]
    out: dict[str, int] = {}
    for field, aliases in _HEADERS.items():
        for alias in aliases:
            if alias in normalized:
                out[field] = normalized.index(alias)
                break
    return out if "name" in out else None


def _positional_map() -> dict[str, int]:
    return {field: index for index, field in enumerate(IMPORT_FIELDS)}


def parse_import_rows(content: str | bytes) -> list[tuple[int, dict[str, str] | None]]:
    """
    Parse CSV text into (line number, fields) pairs.

    The first line is the header. Blank lines are dropped; unusable rows are
    returned with fields=None.
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig", errors="replace")
    content = content.lstrip(BOM)

    lines = content.splitlines()
    if not lines:
        return []

    # Named columns win (exported files); tables without a name header fall back to
    # the first four columns
    columns = _match_header_map(_split(lines[0])) or _positional_map()

    parsed: list[tuple[int, dict[str, str] | None]] = []
    for lineno, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        try:
            cells = [_clean(c) for c in _split(line)]
        except csv.Error as exc:
            logger.warning("CSV line %d unreadable: %s", lineno, exc)
            parsed.append((lineno, None))
            continue
        record = {field: cells[i] if i < len(cells) else "" for field, i in columns.items()}
        if not record.get("name"):
            parsed.append((lineno, None))
            continue
        parsed.append((lineno, record))
    return parsed


def import_assets_csv(
    store: EntityStore,
    content: str | bytes,
    *,
    today: date | None = None,
) -> ImportResult:
    """
    Create one new asset per usable data row.

    Best-effort: rows without a name, rows that fail validation and id
    collisions are skipped and logged; the remaining rows are still committed.
    """
    today = today or date.today()
    result = ImportResult()

    for lineno, record in parse_import_rows(content):
        if record is None:
            logger.warning("CSV line %d skipped: no asset name", lineno)
            result.skipped_rows.append(lineno)
            continue
        try:
            payload = AssetCreate(
                name=record["name"],
                category=record.get("category") or IMPORT_DEFAULTS["category"],
                model=record.get("model") or IMPORT_DEFAULTS["model"],
                serial_number=record.get("serial_number") or IMPORT_DEFAULTS["serial_number"],
                purchase_date=today,
                description=IMPORT_DESCRIPTION,
            )
            result.created.append(store.add_asset(payload))
        except (ValidationError, DuplicateIdError) as exc:
            logger.warning("CSV line %d skipped: %s", lineno, exc)
            result.skipped_rows.append(lineno)

    logger.info("CSV import created %d assets, skipped %d rows", result.created_count, len(result.skipped_rows))
    return result
