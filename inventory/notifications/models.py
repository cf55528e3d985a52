# inventory/notifications/models.py
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    WARNING = "warning"
    CRITICAL = "critical"


class AlertKind(str, Enum):
    LOST = "lost"
    OVERDUE = "overdue"


class Notification(BaseModel):
    """Derived alert. Never stored; rebuilt from the store on every change."""
    model_config = ConfigDict(frozen=True)

    id: str            # "<kind>-<asset id>"
    kind: AlertKind
    asset_id: str
    title: str
    message: str
    severity: Severity
    timestamp: int     # generation time, epoch ms
