# inventory/dashboard/models.py
from datetime import date

from pydantic import BaseModel, Field, model_validator

from db_models.asset import AssetStatus


class DashboardStats(BaseModel):
    total_assets: int
    available_assets: int
    borrowed_assets: int
    maintenance_assets: int
    lost_assets: int
    category_counts: dict[str, int] = Field(default_factory=dict)


class AssetFilter(BaseModel):
    """
    Asset list filter. `search` matches name, id or serial number
    (case-insensitive); None / "All" disables a criterion. Dates are inclusive.
    """
    search: str = ""
    status: AssetStatus | None = None
    category: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="before")
    @classmethod
    def _all_means_any(cls, data):
        if isinstance(data, dict):
            data = {
                key: (None if value in ("All", "") and key != "search" else value)
                for key, value in data.items()
            }
        return data

    def active_count(self) -> int:
        """Number of criteria besides free-text search."""
        return sum(
            value is not None
            for value in (self.status, self.category, self.start_date, self.end_date)
        )
