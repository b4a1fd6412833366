from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel

from sentinelph.core.constants import ObservationStatus
from sentinelph.utils.datetime_helpers import parse_datetime


class Observation(BaseModel):
    id: str
    sentinel_id: str
    barangay: str
    category: str
    status: ObservationStatus = ObservationStatus.PENDING
    created_at: datetime

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> Optional["Observation"]:
        """Build from a Firestore document; None when required fields are missing."""
        created_at = parse_datetime(data.get("createdAt"))
        sentinel_id = data.get("sentinelId")
        if created_at is None or not sentinel_id:
            return None
        try:
            status = ObservationStatus(data.get("status", ObservationStatus.PENDING.value))
        except ValueError:
            return None
        return cls(
            id=doc_id,
            sentinel_id=sentinel_id,
            barangay=data.get("barangay", ""),
            category=data.get("aiCategory") or data.get("type") or "",
            status=status,
            created_at=created_at,
        )
