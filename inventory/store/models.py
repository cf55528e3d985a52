# inventory/store/models.py
"""
Pydantic schemas for the entity store.

`*Read` models are detached snapshots handed out by the store; callers never
see ORM rows.
"""
from dataclasses import dataclass
from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from db_models.asset import AssetStatus
from db_models.transaction import TransactionType
from db_models.user import UserRole
from db_models.reservation import ReservationStatus


def clean_custom_features(features: dict[str, str] | None) -> dict[str, str] | None:
    """Trim keys and values, drop blank keys."""
    if features is None:
        return None
    cleaned = {}
    for key, value in features.items():
        key = (key or "").strip()
        if key:
            cleaned[key] = ("" if value is None else str(value)).strip()
    return cleaned


def _check_holder(status: AssetStatus, holder: str | None) -> None:
    if status == AssetStatus.BORROWED and not holder:
        raise ValueError("a Borrowed asset needs a current_holder")
    if status != AssetStatus.BORROWED and holder:
        raise ValueError(f"a {status.value} asset cannot have a current_holder")


# ---------- Assets ----------

class AssetCreate(BaseModel):
    """New asset. Missing optional fields get the catalogue defaults."""
    id: str | None = Field(None, min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    category: str = "General"
    model: str = "Standard"
    serial_number: str = "N/A"
    purchase_date: date | None = None
    status: AssetStatus = AssetStatus.AVAILABLE
    current_holder: str | None = None
    image_url: str | None = None
    description: str | None = None
    custom_features: dict[str, str] | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("custom_features")
    @classmethod
    def _clean_features(cls, value):
        return clean_custom_features(value)

    @model_validator(mode="after")
    def _holder_iff_borrowed(self):
        _check_holder(self.status, self.current_holder)
        return self


class AssetUpdate(BaseModel):
    """Direct edit of an asset. Only fields that are set are applied."""
    name: str | None = Field(None, min_length=1, max_length=255)
    category: str | None = None
    model: str | None = None
    serial_number: str | None = None
    purchase_date: date | None = None
    status: AssetStatus | None = None
    current_holder: str | None = None
    image_url: str | None = None
    description: str | None = None
    custom_features: dict[str, str] | None = None

    @field_validator("name", "category", "model", "serial_number", "purchase_date", "status", "image_url", mode="before")
    @classmethod
    def _not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be cleared")
        return value

    @field_validator("custom_features")
    @classmethod
    def _clean_features(cls, value):
        return clean_custom_features(value)


class AssetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: str
    model: str
    serial_number: str
    purchase_date: date
    status: AssetStatus
    current_holder: str | None = None
    image_url: str
    qr_code: str
    description: str | None = None
    custom_features: dict[str, str] | None = None

    @model_validator(mode="after")
    def _holder_iff_borrowed(self):
        _check_holder(self.status, self.current_holder)
        return self

    def sorted_features(self) -> list[tuple[str, str]]:
        """Custom features ordered by name, for display and export."""
        return sorted((self.custom_features or {}).items())


# ---------- Transactions ----------

class TransactionCreate(BaseModel):
    id: str | None = None
    asset_id: str
    asset_name: str
    user_id: str
    user_name: str
    type: TransactionType
    # Epoch milliseconds; assigned by the store clock when omitted
    timestamp: int | None = None
    signature_url: str = ""
    notes: str | None = None


class TransactionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    asset_id: str
    asset_name: str
    user_id: str
    user_name: str
    type: TransactionType
    timestamp: int
    signature_url: str
    notes: str | None = None


# ---------- Users ----------

class UserCreate(BaseModel):
    id: str | None = None
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    role: UserRole = UserRole.STAFF
    department: str | None = None
    password: str | None = None


class UserUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    role: UserRole | None = None
    department: str | None = None
    password: str | None = None


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    role: UserRole
    email: str
    department: str | None = None


# ---------- Reservations ----------

class ReservationCreate(BaseModel):
    id: str | None = None
    asset_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    status: ReservationStatus = ReservationStatus.CONFIRMED


class ReservationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    asset_id: str
    user_id: str
    start_date: date
    end_date: date
    status: ReservationStatus


# ---------- Change events ----------

@dataclass(frozen=True)
class ChangeEvent:
    """Emitted by the store after every committed write."""
    entity: str          # "asset" | "transaction" | "user" | "reservation"
    action: str          # "insert" | "update"
    ids: tuple[str, ...]
