# inventory/bulk/models.py
from pydantic import BaseModel, field_validator

from db_models.asset import AssetStatus


class BulkPatch(BaseModel):
    """
    Field-level patch applied to every selected asset.

    Empty strings mean "leave unchanged". Borrowed cannot be bulk-assigned
    because it needs a holder, which goes through the borrow flow.
    """
    status: AssetStatus | None = None
    category: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _blank_status(cls, value):
        if value == "":
            return None
        return value

    @field_validator("status")
    @classmethod
    def _no_borrowed(cls, value):
        if value == AssetStatus.BORROWED:
            raise ValueError("Borrowed cannot be set in bulk; use the borrow flow")
        return value

    @field_validator("category")
    @classmethod
    def _blank_category(cls, value):
        if value is None:
            return None
        value = value.strip()
        return value or None

    def changes(self) -> dict:
        """Only the fields that are present."""
        return {key: value for key, value in (("status", self.status), ("category", self.category)) if value is not None}

    def is_empty(self) -> bool:
        return not self.changes()
