"""
Alert Repository

Firestore access for alerts, their notification logs and the BHW roster
that receives them.
"""
from datetime import datetime
from typing import List

from google.cloud.firestore_v1.base_query import FieldFilter

from sentinelph.connections.firebase import get_firestore_client
from sentinelph.core.constants import Collections
from sentinelph.logging.utils import get_app_logger
from sentinelph.models.alerts import Alert, BHWContact, NotificationResult

logger = get_app_logger("sentinelph.alert_repository")


class AlertRepository:
    """Repository for alert operations"""

    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        if self._db is None:
            self._db = get_firestore_client()
        return self._db

    def create(self, alert: Alert) -> str:
        """Persist a new alert and return its generated id."""
        _, doc_ref = self.db.collection(Collections.ALERTS).add(alert.to_document())
        logger.info(f"alert_created | alert_id={doc_ref.id} barangay={alert.barangay} severity={alert.severity.value}")
        return doc_ref.id

    def record_notifications(self, alert_id: str, results: List[NotificationResult], sent_at: datetime) -> None:
        self.db.collection(Collections.ALERT_NOTIFICATIONS).add({
            "alertId": alert_id,
            "notifications": [
                {
                    "bhwId": r.bhw_id,
                    "phoneNumber": r.phone_number,
                    "status": r.status.value,
                    "error": r.error,
                }
                for r in results
            ],
            "sentAt": sent_at,
        })

    def list_bhws(self, barangay: str) -> List[BHWContact]:
        docs = (
            self.db.collection(Collections.BHW_USERS)
            .where(filter=FieldFilter("barangay", "==", barangay))
            .stream()
        )
        contacts = []
        for doc in docs:
            data = doc.to_dict() or {}
            contacts.append(BHWContact(
                id=doc.id,
                barangay=data.get("barangay", barangay),
                phone_number=data.get("phoneNumber"),
                name=data.get("name"),
            ))
        logger.info(f"list_bhws | barangay={barangay} count={len(contacts)}")
        return contacts
