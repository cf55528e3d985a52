# inventory/insights/gemini.py
"""
Asset-health summary from Gemini.

The model only ever sees a read-only JSON snapshot of the store. Every failure
(no credential, empty answer, API error) ends in a placeholder string; nothing
is raised past analyze_asset_health().
"""
import json
import logging
from collections import Counter
from collections.abc import Iterable
from typing import Any

from config import settings
from core.exceptions import ExternalServiceError
from core.ids import ms_to_datetime
from inventory.store.db_manager import EntityStore
from inventory.store.models import AssetRead, TransactionRead

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS = 10

MISSING_KEY_MESSAGE = "API Key not found. Please configure the environment variable."
EMPTY_RESPONSE_MESSAGE = "Unable to generate an analysis right now."
ERROR_MESSAGE = "Error analysing the data. Please try again later."

PROMPT_TEMPLATE = """\
Act as a smart facilities manager. Analyse the following JSON of assets and
transactions. Give a concise summary (at most 3 paragraphs) covering:
1. Current asset utilisation.
2. Any maintenance concerns based on the logs or statuses.
3. Recommendations for optimising asset allocation.

Data:
{data}
"""


def build_health_snapshot(
    assets: Iterable[AssetRead],
    transactions: Iterable[TransactionRead],
) -> dict[str, Any]:
    """
    JSON-serializable snapshot: asset total, count per status, and the 10 most
    recent ledger entries.
    """
    assets = list(assets)
    recent = sorted(transactions, key=lambda t: t.timestamp, reverse=True)[:RECENT_TRANSACTIONS]
    return {
        "totalAssets": len(assets),
        "statusCounts": dict(Counter(a.status.value for a in assets)),
        "recentTransactions": [
            {
                "type": t.type.value,
                "assetName": t.asset_name,
                "date": ms_to_datetime(t.timestamp).date().isoformat(),
                "notes": t.notes,
            }
            for t in recent
        ],
    }


def build_prompt(snapshot: dict[str, Any]) -> str:
    return PROMPT_TEMPLATE.format(data=json.dumps(snapshot, ensure_ascii=False))


def _generate(client, model: str, prompt: str) -> str:
    """Single generate_content call. Raises ExternalServiceError on any API failure."""
    try:
        response = client.models.generate_content(model=model, contents=prompt)
    except Exception as exc:
        raise ExternalServiceError(f"Gemini call failed: {exc}") from exc
    return (getattr(response, "text", None) or "").strip()


def _default_client(api_key: str):
    from google import genai

    try:
        return genai.Client(api_key=api_key.strip())
    except Exception as exc:
        raise ExternalServiceError(f"Gemini client unavailable: {exc}") from exc


def analyze_asset_health(
    store: EntityStore,
    *,
    api_key: str | None = None,
    model: str | None = None,
    client=None,
) -> str:
    """
    Prose summary of fleet health, or a placeholder message.

    `client` defaults to a google-genai Client built from `api_key`
    (settings.API_KEY when omitted).
    """
    api_key = api_key if api_key is not None else settings.API_KEY
    if client is None and not api_key:
        return MISSING_KEY_MESSAGE

    snapshot = build_health_snapshot(store.list_assets(), store.list_transactions())
    try:
        if client is None:
            client = _default_client(api_key)
        text = _generate(client, model or settings.GEMINI_MODEL, build_prompt(snapshot))
    except ExternalServiceError as exc:
        logger.error("Gemini analysis error: %s", exc)
        return ERROR_MESSAGE
    return text or EMPTY_RESPONSE_MESSAGE
