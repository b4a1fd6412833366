from typing import Dict

from twilio.base.exceptions import TwilioException
from twilio.rest import Client as TwilioClient

from sentinelph.logging.utils import get_app_logger
from sentinelph.config.settings import SentinelConfigs

logger = get_app_logger(__name__)
configs = SentinelConfigs()


class TwilioSMSService:
    """
    Twilio SMS integration.
    Simple wrapper around the Twilio messages API.
    """

    def __init__(self):
        """Initialize with Twilio credentials from config."""
        self.enabled = configs.TWILIO_INTEGRATION_ENABLED
        self.from_number = configs.TWILIO_PHONE_NUMBER
        self.client = None

        if self.enabled:
            if not configs.TWILIO_ACCOUNT_SID or not configs.TWILIO_AUTH_TOKEN or not self.from_number:
                logger.error("twilio_not_configured | missing account sid, auth token or sender number")
            else:
                self.client = TwilioClient(configs.TWILIO_ACCOUNT_SID, configs.TWILIO_AUTH_TOKEN)

    def send_sms(self, to: str, message: str) -> Dict:
        """
        Send a single SMS.

        Args:
            to: Recipient phone number in E.164 format
            message: Message body

        Returns:
            dict: {'success': bool, 'message': str, 'sid': str | None, 'status': str | None}
        """
        if not self.enabled:
            logger.info(f"sms_skipped | reason=disabled to={to}")
            return {'success': False, 'message': 'SMS integration disabled', 'sid': None, 'status': None}

        if self.client is None:
            logger.error(f"sms_send_failed | to={to} error=credentials not configured")
            return {'success': False, 'message': 'Twilio credentials not configured', 'sid': None, 'status': None}

        try:
            result = self.client.messages.create(body=message, from_=self.from_number, to=to)
            logger.info(f"sms_sent | to={to} sid={result.sid} status={result.status}")
            return {'success': True, 'message': 'SMS sent successfully', 'sid': result.sid, 'status': result.status}
        except TwilioException as e:
            logger.error(f"sms_send_failed | to={to} error={e}")
            return {'success': False, 'message': str(e), 'sid': None, 'status': None}
        except Exception as e:
            logger.error(f"sms_send_error | to={to} error={e}", exc_info=True)
            return {'success': False, 'message': 'An error occurred while sending SMS', 'sid': None, 'status': None}
