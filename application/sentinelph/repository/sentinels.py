"""
Sentinel Repository

Firestore access for sentinel (community reporter) profiles and admin accounts.
"""
from typing import Dict, Any

from google.cloud.firestore_v1.base_query import FieldFilter

from sentinelph.connections.firebase import get_firestore_client
from sentinelph.core.constants import Collections
from sentinelph.core.exceptions import SentinelNotFoundError, AdminNotFoundError
from sentinelph.logging.utils import get_app_logger

logger = get_app_logger("sentinelph.sentinel_repository")


class SentinelRepository:
    """Repository for sentinel and admin profile operations"""

    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        if self._db is None:
            self._db = get_firestore_client()
        return self._db

    def create(self, sentinel_id: str, data: Dict[str, Any]) -> None:
        self.db.collection(Collections.SENTINELS).document(sentinel_id).set(data)
        logger.info(f"sentinel_created | sentinel_id={sentinel_id} barangay={data.get('barangay')}")

    def get(self, sentinel_id: str) -> Dict[str, Any]:
        snapshot = self.db.collection(Collections.SENTINELS).document(sentinel_id).get()
        if not snapshot.exists:
            logger.warning(f"sentinel_not_found | sentinel_id={sentinel_id}")
            raise SentinelNotFoundError(sentinel_id)
        return snapshot.to_dict() or {}

    def update(self, sentinel_id: str, fields: Dict[str, Any]) -> None:
        self.db.collection(Collections.SENTINELS).document(sentinel_id).update(fields)
        logger.info(f"sentinel_updated | sentinel_id={sentinel_id} fields={sorted(fields)}")

    def find_admin(self, username: str) -> Dict[str, Any]:
        docs = list(
            self.db.collection(Collections.ADMINS)
            .where(filter=FieldFilter("username", "==", username))
            .limit(1)
            .stream()
        )
        if not docs:
            logger.warning(f"admin_not_found | username={username}")
            raise AdminNotFoundError(username)
        return docs[0].to_dict() or {}
