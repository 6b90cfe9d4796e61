"""
Best-effort cloud sync.

The engine never waits on this for correctness: routes schedule sync_now as a
background task, and every failure is folded into a SyncResult instead of
raised.
"""
from typing import Optional

import requests

from faithverse.core.config import CLOUD_SYNC_TIMEOUT, CLOUD_SYNC_URL
from faithverse.core.exceptions import NotFound
from faithverse.core.logging import get_logger
from faithverse.storage.records import Record
from faithverse.transfer.service import TransferService

logger = get_logger(__name__)


class SyncResult(Record):
    success: bool
    message: str
    status_code: Optional[int] = None


def _extract_error(r: requests.Response, fallback: str) -> str:
    """Try to show a useful remote error message."""
    try:
        j = r.json()
        if isinstance(j, dict):
            return j.get("detail") or j.get("message") or fallback
    except ValueError:
        pass
    return fallback


class CloudSyncClient:
    def __init__(self, transfer: TransferService, url: str = CLOUD_SYNC_URL, timeout: float = CLOUD_SYNC_TIMEOUT):
        self.transfer = transfer
        self.url = url.rstrip("/")
        self.timeout = timeout

    def configured(self) -> bool:
        return bool(self.url)

    def sync_now(self, profile_id: str) -> SyncResult:
        if not self.configured():
            return SyncResult(success=True, message="Local sync completed. Cloud sync is not configured.")

        try:
            payload = self.transfer.export_json(profile_id)
        except NotFound as exc:
            return SyncResult(success=False, message=exc.message)
        return self.push(profile_id, payload)

    def push(self, profile_id: str, payload: str) -> SyncResult:
        """POST an already-exported document. Needs no store access."""
        if not self.configured():
            return SyncResult(success=True, message="Local sync completed. Cloud sync is not configured.")

        try:
            r = requests.post(
                f"{self.url}/profiles/{profile_id}",
                data=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning(f"[SYNC] profile={profile_id} network error: {exc!r}")
            return SyncResult(success=False, message="Cloud sync temporarily unavailable.")

        if not (200 <= r.status_code < 300):
            detail = _extract_error(r, "Cloud sync failed")
            logger.warning(f"[SYNC] profile={profile_id} FAILED status={r.status_code} detail={detail}")
            return SyncResult(success=False, message=detail, status_code=r.status_code)

        logger.info(f"[SYNC] profile={profile_id} synced status={r.status_code}")
        return SyncResult(success=True, message="Profile synced to the cloud.", status_code=r.status_code)
