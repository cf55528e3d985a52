# inventory/qr_export/models.py
from dataclasses import dataclass, field


@dataclass
class QrArchive:
    """Finished zip archive of QR code images."""
    filename: str
    content: bytes
    encoded: list[str] = field(default_factory=list)   # asset ids written
    skipped: list[str] = field(default_factory=list)   # asset ids that failed

    @property
    def count(self) -> int:
        return len(self.encoded)
