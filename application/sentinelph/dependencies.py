"""
Service providers for route handlers.

Each request gets fresh service objects; Firestore and Redis clients are
resolved lazily by the repositories on first use.
"""
from fastapi import Depends

from sentinelph.integrations.email_service import EmailService
from sentinelph.integrations.openai_categorizer import build_categorizer
from sentinelph.integrations.twilio_sms import TwilioSMSService
from sentinelph.repository.alerts import AlertRepository
from sentinelph.repository.observations import ObservationRepository
from sentinelph.repository.otp import OTPRepository
from sentinelph.repository.sentinels import SentinelRepository
from sentinelph.services.alert_service import AlertService
from sentinelph.services.observation_service import ObservationService
from sentinelph.services.otp_service import OTPService
from sentinelph.services.registration_service import RegistrationService


def get_email_service() -> EmailService:
    return EmailService()


def get_sms_service() -> TwilioSMSService:
    return TwilioSMSService()


def get_otp_service(email_service: EmailService = Depends(get_email_service)) -> OTPService:
    return OTPService(OTPRepository(), email_service)


def get_alert_service(sms_service: TwilioSMSService = Depends(get_sms_service)) -> AlertService:
    return AlertService(ObservationRepository(), AlertRepository(), sms_service)


def get_observation_service(alert_service: AlertService = Depends(get_alert_service)) -> ObservationService:
    return ObservationService(ObservationRepository(), alert_service, build_categorizer())


def get_registration_service(
    otp_service: OTPService = Depends(get_otp_service),
    email_service: EmailService = Depends(get_email_service),
) -> RegistrationService:
    return RegistrationService(otp_service, SentinelRepository(), email_service)
