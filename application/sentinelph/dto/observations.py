from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional, Union
from sentinelph.core.constants import AlertSeverity
from sentinelph.dto.validations import require_text


class Location(BaseModel):
    lat: float
    lng: float


class ObservationWebhookRequest(BaseModel):
    """Signed notification that an observation was submitted"""
    model_config = ConfigDict(populate_by_name=True)

    observation_id: str = Field(..., alias="observationId")
    sentinel_id: str = Field(..., alias="sentinelId")
    description: Optional[str] = None
    type: Optional[str] = Field(None, description="Reporter-chosen category, used when AI categorization is off")
    location: Optional[Union[Location, str, Dict[str, Any]]] = Field(None, description="Coordinates or a free-text place; not used for alerting")
    barangay: str

    @field_validator('observation_id', 'sentinel_id', 'barangay')
    @classmethod
    def validate_required(cls, v, info):
        return require_text(v, info.field_name)


class ObservationWebhookResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    observation_id: str = Field(..., alias="observationId")
    category: str
    is_spam: bool = Field(..., alias="isSpam")
    alert_generated: bool = Field(..., alias="alertGenerated")
    alert_id: Optional[str] = Field(None, alias="alertId")
    severity: Optional[AlertSeverity] = None
    notifications_sent: int = Field(0, alias="notificationsSent")
    notifications_failed: int = Field(0, alias="notificationsFailed")


class AlertWebhookRequest(BaseModel):
    """Signed request to (re)notify the BHWs of a barangay about an alert"""
    model_config = ConfigDict(populate_by_name=True)

    alert_id: str = Field(..., alias="alertId")
    barangay: str
    severity: AlertSeverity
    description: Optional[str] = None

    @field_validator('alert_id', 'barangay')
    @classmethod
    def validate_required(cls, v, info):
        return require_text(v, info.field_name)

    def sms_message(self) -> str:
        summary = self.description or "Possible health cluster detected"
        return f"ALERT [{self.severity.value.upper()}]: {summary} in {self.barangay}. Check dashboard."


class AlertWebhookResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    notifications_sent: int = Field(..., alias="notificationsSent")
    notifications_failed: int = Field(..., alias="notificationsFailed")


class SendSMSRequest(BaseModel):
    to: str
    message: str

    @field_validator('to', 'message')
    @classmethod
    def validate_required(cls, v, info):
        return require_text(v, info.field_name)


class SendSMSResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message_sid: Optional[str] = Field(None, alias="messageSid")
    status: Optional[str] = None
    to: str


class BulkSMSRecipient(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: str = Field(..., alias="phoneNumber")


class BulkSMSRequest(BaseModel):
    recipients: List[BulkSMSRecipient] = Field(..., min_length=1)
    message: str

    @field_validator('message')
    @classmethod
    def validate_message(cls, v):
        return require_text(v, "message")


class BulkSMSResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: str = Field(..., alias="phoneNumber")
    status: str
    message_sid: Optional[str] = Field(None, alias="messageSid")
    error: Optional[str] = None


class BulkSMSResponse(BaseModel):
    success: bool
    total: int
    sent: int
    failed: int
    results: List[BulkSMSResult]
