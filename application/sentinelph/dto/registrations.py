from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from sentinelph.dto.validations import require_text


class CompleteTrainingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")

    @field_validator('user_id')
    @classmethod
    def validate_user_id(cls, v):
        return require_text(v, "User ID")


class ApproveRegistrationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sentinel_id: str = Field(..., alias="sentinelId")
    approved_by: str = Field(..., alias="approvedBy")

    @field_validator('sentinel_id', 'approved_by')
    @classmethod
    def validate_required(cls, v, info):
        return require_text(v, info.field_name)


class RejectRegistrationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sentinel_id: str = Field(..., alias="sentinelId")
    rejected_by: str = Field(..., alias="rejectedBy")
    reason: Optional[str] = None

    @field_validator('sentinel_id', 'rejected_by')
    @classmethod
    def validate_required(cls, v, info):
        return require_text(v, info.field_name)


class RegistrationActionResponse(BaseModel):
    success: bool
    message: str


class AdminLoginRequest(BaseModel):
    username: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        return require_text(v, "Username")


class AdminLoginResponse(BaseModel):
    email: Optional[str] = None
    uid: Optional[str] = None
    role: Optional[str] = None
