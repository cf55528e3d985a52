# inventory/bulk/db_manager.py
"""
Bulk edit of status and/or category over a selection of assets.

Each asset is written in its own store transaction. Ids that no longer exist
are skipped, not reported as errors.
"""
import logging
from collections.abc import Iterable

from core.exceptions import NotFoundError
from inventory.store.db_manager import EntityStore
from inventory.store.models import AssetRead
from .models import BulkPatch

logger = logging.getLogger(__name__)


def bulk_update_assets(
    store: EntityStore,
    asset_ids: Iterable[str],
    patch: BulkPatch | dict,
) -> list[AssetRead]:
    """
    Apply `patch` to every selected asset that exists.

    Returns the updated assets; the caller reports len() as the success count.
    """
    if isinstance(patch, dict):
        patch = BulkPatch.model_validate(patch)
    changes = patch.changes()
    if not changes:
        return []

    # dict.fromkeys keeps selection order and drops duplicate ids
    selected = list(dict.fromkeys(asset_ids))
    snapshot = {asset.id: asset for asset in store.list_assets(selected)}

    updated: list[AssetRead] = []
    for asset_id in selected:
        if asset_id not in snapshot:
            logger.debug("Bulk edit skipped unknown asset %s", asset_id)
            continue
        try:
            updated.append(store.update_asset(asset_id, changes))
        except NotFoundError:
            logger.debug("Bulk edit skipped asset %s removed mid-batch", asset_id)

    logger.info("Bulk edit applied %s to %d of %d selected assets", changes, len(updated), len(selected))
    return updated
