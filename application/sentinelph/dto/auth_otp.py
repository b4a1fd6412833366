from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from sentinelph.dto.validations import validate_email, validate_phone_number, validate_otp_code, require_text


class SendOTPRequest(BaseModel):
    """Request model for requesting an OTP"""
    email: str = Field(..., description="Email address the OTP is sent to")
    name: str = Field(..., description="Display name carried into the welcome flow")

    @field_validator('email')
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return require_text(v, "Name")


class ResendOTPRequest(BaseModel):
    """Request model for resending an OTP"""
    email: str

    @field_validator('email')
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)


class OTPSentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    expires_in: int = Field(..., alias="expiresIn", description="Seconds until the OTP expires")


class VerifyOTPRequest(BaseModel):
    """Request model for verifying an OTP and registering the sentinel"""
    model_config = ConfigDict(populate_by_name=True)

    email: str
    otp: str = Field(..., description="6-digit OTP code")
    phone_number: Optional[str] = Field(None, alias="phoneNumber", description="Mobile number, +63XXXXXXXXXX")
    role: str = Field("sentinel", description="Sentinel role, e.g. pharmacist or sari-sari store owner")
    barangay: str
    purok: Optional[str] = None

    @field_validator('email')
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator('otp')
    @classmethod
    def validate_otp(cls, v):
        return validate_otp_code(v)

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, v):
        if v is None or not v.strip():
            return None
        return validate_phone_number(v)

    @field_validator('barangay')
    @classmethod
    def validate_barangay(cls, v):
        return require_text(v, "Barangay")


class VerifyOTPResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    user_id: str = Field(..., alias="userId")
