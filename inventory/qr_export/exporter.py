# inventory/qr_export/exporter.py
"""
Batch QR export.

Every asset id is encoded to a PNG concurrently (in worker threads); all
encodings are joined before the archive is written, so callers only ever see
the complete archive. A failed encoding is logged and that asset is left out.
"""
import asyncio
import io
import logging
import zipfile
from collections.abc import Callable, Iterable
from datetime import date

import qrcode
from qrcode.exceptions import DataOverflowError

from config import settings
from core.exceptions import EncodingError
from inventory.store.models import AssetRead
from .models import QrArchive

logger = logging.getLogger(__name__)

Encoder = Callable[[str], bytes]


def encode_qr_png(payload: str, box_size: int | None = None, border: int | None = None) -> bytes:
    """
    Render `payload` as a QR code PNG.

    Raises:
        EncodingError: if the payload is empty or cannot be encoded
    """
    if not payload:
        raise EncodingError("Empty QR payload")
    try:
        qr = qrcode.QRCode(
            version=None,
            box_size=box_size or settings.QR_BOX_SIZE,
            border=settings.QR_BORDER if border is None else border,
        )
        qr.add_data(payload)
        qr.make(fit=True)
        qr_img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        qr_img.save(buffer, format="PNG")
        return buffer.getvalue()
    except (DataOverflowError, ValueError, OSError) as exc:
        raise EncodingError(f"Cannot encode QR payload {payload!r}: {exc}") from exc


def entry_name(asset_id: str, folder: str | None = None) -> str:
    return f"{folder or settings.QR_ARCHIVE_FOLDER}/{asset_id}_qr.png"


def archive_filename(today: date | None = None) -> str:
    return f"asset_qrs_{(today or date.today()).isoformat()}.zip"


class QrBatchExporter:
    """
    Generates one archive per run. `in_progress` is True while a run is
    encoding; `on_state` (if given) is called with True at start and False at
    the end. Runs cannot be cancelled.
    """

    def __init__(
        self,
        encoder: Encoder = encode_qr_png,
        *,
        folder: str | None = None,
        on_state: Callable[[bool], None] | None = None,
    ):
        self._encoder = encoder
        self._folder = folder or settings.QR_ARCHIVE_FOLDER
        self._on_state = on_state
        self._in_progress = False

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def _set_state(self, value: bool) -> None:
        self._in_progress = value
        if self._on_state is not None:
            self._on_state(value)

    async def _encode_one(self, asset_id: str) -> bytes | None:
        try:
            return await asyncio.to_thread(self._encoder, asset_id)
        except Exception as exc:
            # One bad item never aborts the batch
            logger.warning("Failed to generate QR for %s: %s", asset_id, exc)
            return None

    async def export(self, assets: Iterable[AssetRead], *, today: date | None = None) -> QrArchive | None:
        """
        Encode every asset id and package the PNGs into one zip.

        Returns None for an empty selection.
        """
        asset_ids = list(dict.fromkeys(a.id for a in assets))
        if not asset_ids:
            return None
        if self._in_progress:
            raise RuntimeError("A QR export is already running")

        self._set_state(True)
        try:
            images = await asyncio.gather(*(self._encode_one(asset_id) for asset_id in asset_ids))

            archive = QrArchive(filename=archive_filename(today), content=b"")
            output = io.BytesIO()
            with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as zf:
                for asset_id, png in zip(asset_ids, images):
                    if png is None:
                        archive.skipped.append(asset_id)
                        continue
                    zf.writestr(entry_name(asset_id, self._folder), png)
                    archive.encoded.append(asset_id)
            archive.content = output.getvalue()
        finally:
            self._set_state(False)

        logger.info("QR archive %s: %d encoded, %d skipped", archive.filename, archive.count, len(archive.skipped))
        return archive


async def export_qr_archive(assets: Iterable[AssetRead], **kwargs) -> QrArchive | None:
    """One-shot export with the default encoder."""
    return await QrBatchExporter(**kwargs).export(assets)
