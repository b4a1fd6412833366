"""
Core constants for the SentinelPH webhook service

Status values, alert severities, observation categories and the Firestore
collection names shared across repositories and services.
"""
from enum import Enum


class ObservationStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    SPAM = "spam"
    REJECTED = "rejected"


class AlertStatus(str, Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Matching-observation count at which each severity starts, highest first
SEVERITY_THRESHOLDS = (
    (10, AlertSeverity.CRITICAL),
    (7, AlertSeverity.HIGH),
    (5, AlertSeverity.MEDIUM),
)


class SentinelStatus(str, Enum):
    TRIAL = "trial"
    ACTIVE = "active"
    REJECTED = "rejected"


class NotificationStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"


class ObservationCategory:
    MEDICATION_PURCHASE = "medication_purchase"
    ILLNESS_MENTION = "illness_mention"
    ABSENCE_PATTERN = "absence_pattern"
    ENVIRONMENTAL_CONCERN = "environmental_concern"
    OTHER = "other"

    ALL = (MEDICATION_PURCHASE, ILLNESS_MENTION, ABSENCE_PATTERN, ENVIRONMENTAL_CONCERN, OTHER)


# Roles allowed to approve or reject sentinel registrations
REVIEWER_ROLES = ("bhw", "admin")

INITIAL_TRUST_SCORE = 50


class Collections:
    """Firestore collection names"""
    OBSERVATIONS = "observations"
    ALERTS = "alerts"
    ALERT_NOTIFICATIONS = "alert_notifications"
    BHW_USERS = "bhw_users"
    SENTINELS = "sentinels"
    ADMINS = "admins"
