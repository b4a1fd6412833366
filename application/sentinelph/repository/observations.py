"""
Observation Repository

Firestore access for observation documents.
"""
from datetime import datetime
from typing import List

from google.cloud.firestore_v1.base_query import FieldFilter

from sentinelph.connections.firebase import get_firestore_client
from sentinelph.core.constants import Collections, ObservationStatus
from sentinelph.core.exceptions import ObservationNotFoundError
from sentinelph.logging.utils import get_app_logger
from sentinelph.models.observations import Observation

logger = get_app_logger("sentinelph.observation_repository")


class ObservationRepository:
    """Repository for observation operations"""

    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        if self._db is None:
            self._db = get_firestore_client()
        return self._db

    def mark_processed(self, observation_id: str, category: str, is_spam: bool, processed_at: datetime) -> dict:
        """
        Record the assigned category and intake status on the observation.

        Returns:
            dict: the stored document merged with the processing fields

        Raises:
            ObservationNotFoundError: no document with that id
        """
        doc_ref = self.db.collection(Collections.OBSERVATIONS).document(observation_id)
        snapshot = doc_ref.get()
        if not snapshot.exists:
            logger.warning(f"observation_not_found | observation_id={observation_id}")
            raise ObservationNotFoundError(observation_id)

        fields = {
            "aiCategory": category,
            "spamScore": 1 if is_spam else 0,
            "status": ObservationStatus.SPAM.value if is_spam else ObservationStatus.PENDING.value,
            "processedAt": processed_at,
            "ragContextUsed": False,
        }
        doc_ref.update(fields)
        logger.info(f"observation_processed | observation_id={observation_id} category={category} is_spam={is_spam}")

        data = snapshot.to_dict() or {}
        data.update(fields)
        return data

    def find_recent_verified(self, barangay: str, category: str, since: datetime) -> List[Observation]:
        """Verified observations of one barangay and category created after `since`."""
        query = (
            self.db.collection(Collections.OBSERVATIONS)
            .where(filter=FieldFilter("barangay", "==", barangay))
            .where(filter=FieldFilter("aiCategory", "==", category))
            .where(filter=FieldFilter("status", "==", ObservationStatus.VERIFIED.value))
            .where(filter=FieldFilter("createdAt", ">", since))
        )
        observations = []
        for doc in query.stream():
            observation = Observation.from_document(doc.id, doc.to_dict() or {})
            if observation is None:
                logger.warning(f"observation_document_incomplete | observation_id={doc.id}")
                continue
            observations.append(observation)

        logger.info(f"find_recent_verified | barangay={barangay} category={category} count={len(observations)}")
        return observations
