# inventory/dashboard/stats.py
"""
Dashboard statistics and asset filtering over store snapshots.
"""
from collections import Counter
from collections.abc import Iterable

from db_models.asset import AssetStatus
from inventory.store.models import AssetRead
from .models import AssetFilter, DashboardStats


def get_dashboard_stats(assets: Iterable[AssetRead]) -> DashboardStats:
    """Counts per status and per category."""
    assets = list(assets)
    by_status = Counter(a.status for a in assets)
    return DashboardStats(
        total_assets=len(assets),
        available_assets=by_status[AssetStatus.AVAILABLE],
        borrowed_assets=by_status[AssetStatus.BORROWED],
        maintenance_assets=by_status[AssetStatus.MAINTENANCE],
        lost_assets=by_status[AssetStatus.LOST],
        category_counts=dict(Counter(a.category for a in assets)),
    )


def list_categories(assets: Iterable[AssetRead]) -> list[str]:
    """Distinct categories, sorted."""
    return sorted({a.category for a in assets})


def matches(asset: AssetRead, f: AssetFilter) -> bool:
    if f.search:
        needle = f.search.lower()
        if not (
            needle in asset.name.lower()
            or needle in asset.id.lower()
            or needle in asset.serial_number.lower()
        ):
            return False
    if f.status is not None and asset.status != f.status:
        return False
    if f.category is not None and asset.category != f.category:
        return False
    if f.start_date is not None and asset.purchase_date < f.start_date:
        return False
    if f.end_date is not None and asset.purchase_date > f.end_date:
        return False
    return True


def filter_assets(assets: Iterable[AssetRead], f: AssetFilter | None = None) -> list[AssetRead]:
    """Assets passing every active criterion, order preserved."""
    if f is None:
        return list(assets)
    return [a for a in assets if matches(a, f)]
