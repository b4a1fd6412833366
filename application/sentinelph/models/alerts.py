from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from sentinelph.core.constants import AlertSeverity, AlertStatus, NotificationStatus


class Alert(BaseModel):
    """Community alert derived from a cluster of verified observations."""
    id: Optional[str] = None
    barangay: str
    category: str
    observation_ids: List[str]
    sentinel_ids: List[str]
    severity: AlertSeverity
    status: AlertStatus = AlertStatus.ACTIVE
    created_at: datetime

    def to_document(self) -> dict:
        return {
            "barangay": self.barangay,
            "type": self.category,
            "observationIds": list(self.observation_ids),
            "sentinelIds": list(self.sentinel_ids),
            "severity": self.severity.value,
            "status": self.status.value,
            "createdAt": self.created_at,
        }

    def sms_message(self) -> str:
        return (
            f"ALERT [{self.severity.value.upper()}]: {len(self.observation_ids)} "
            f"{self.category.replace('_', ' ')} reports from {len(self.sentinel_ids)} sentinels "
            f"in {self.barangay}. Check dashboard."
        )


class BHWContact(BaseModel):
    id: str
    barangay: str
    phone_number: Optional[str] = None
    name: Optional[str] = None


class NotificationResult(BaseModel):
    bhw_id: str
    phone_number: Optional[str] = None
    status: NotificationStatus
    error: Optional[str] = None


class NotificationSummary(BaseModel):
    results: List[NotificationResult] = Field(default_factory=list)

    @property
    def sent(self) -> int:
        return sum(1 for r in self.results if r.status == NotificationStatus.SENT)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status == NotificationStatus.FAILED)


class AlertEvaluation(BaseModel):
    alert_raised: bool
    alert: Optional[Alert] = None
    notifications: NotificationSummary = Field(default_factory=NotificationSummary)
