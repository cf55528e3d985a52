# inventory/csv_io/models.py
from pydantic import BaseModel, Field

from inventory.store.models import AssetRead


class ImportResult(BaseModel):
    """Outcome of a best-effort CSV import."""
    created: list[AssetRead] = Field(default_factory=list)
    skipped_rows: list[int] = Field(default_factory=list)   # 1-based line numbers

    @property
    def created_count(self) -> int:
        return len(self.created)
