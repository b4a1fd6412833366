import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape

from sentinelph.core.exceptions import NotificationDeliveryError
from sentinelph.logging.utils import get_app_logger
from sentinelph.config.settings import SentinelConfigs

logger = get_app_logger(__name__)
configs = SentinelConfigs()

_LAYOUT = """<!DOCTYPE html>
<html>
<head>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background: {accent}; color: white; padding: 20px; text-align: center; border-radius: 8px 8px 0 0; }}
    .content {{ background: #f9fafb; padding: 30px; border-radius: 0 0 8px 8px; }}
    .otp-box {{ background: white; border: 2px solid #2563eb; padding: 20px; text-align: center; font-size: 32px; font-weight: bold; letter-spacing: 8px; margin: 20px 0; border-radius: 8px; }}
    .info-box {{ background: white; padding: 15px; border-left: 4px solid {accent}; margin: 20px 0; }}
    .footer {{ text-align: center; margin-top: 20px; color: #6b7280; font-size: 12px; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>SentinelPH</h1>
      <p>{tagline}</p>
    </div>
    <div class="content">
{body}
    </div>
    <div class="footer">
      <p>SentinelPH. Empowering Communities, Protecting Health.</p>
      <p>Questions? Contact your Barangay Health Worker</p>
    </div>
  </div>
</body>
</html>
"""


def render(body: str, tagline: str = "Community Intelligence Network", accent: str = "#2563eb") -> str:
    return _LAYOUT.format(body=body, tagline=tagline, accent=accent)


class EmailService:
    """
    SMTP email dispatcher.
    Every send either hands the message to the SMTP server or raises
    NotificationDeliveryError; retries are left to the caller.
    """

    def __init__(self):
        self.enabled = configs.EMAIL_ENABLED
        self.sender = configs.EMAIL_USER
        self.password = configs.EMAIL_PASSWORD
        self.host = configs.SMTP_HOST
        self.port = configs.SMTP_PORT
        self.timeout = configs.SMTP_TIMEOUT
        self.sender_name = configs.EMAIL_SENDER_NAME

    def send_email(self, to: str, subject: str, html: str) -> None:
        if not self.enabled:
            logger.info(f"email_skipped | reason=disabled to={to} subject={subject}")
            return
        if not self.sender or not self.password:
            logger.error("email_not_configured | missing=EMAIL_USER/EMAIL_PASSWORD")
            raise NotificationDeliveryError("Email service not configured")

        msg = MIMEMultipart()
        msg['From'] = formataddr((self.sender_name, self.sender))
        msg['To'] = to
        msg['Subject'] = subject
        msg.attach(MIMEText(html, 'html'))

        try:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
                server.login(self.sender, self.password)
                server.sendmail(self.sender, [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"email_send_failed | to={to} subject={subject} error={e}", exc_info=True)
            raise NotificationDeliveryError(f"Failed to send email to {to}") from e

        logger.info(f"email_sent | to={to} subject={subject}")

    def send_otp_email(self, email: str, otp: str, name: str, expiry_minutes: int) -> None:
        body = f"""
      <h2>Hello {escape(name)},</h2>
      <p>Your One-Time Password (OTP) for SentinelPH registration is:</p>
      <div class="otp-box">{otp}</div>
      <p><strong>This OTP is valid for {expiry_minutes} minutes.</strong></p>
      <p>If you didn't request this OTP, please ignore this email.</p>"""
        self.send_email(email, "Your SentinelPH OTP Code", render(body))

    def send_registration_confirmation(self, email: str, name: str, role: str) -> None:
        body = f"""
      <h2>Registration Successful!</h2>
      <p>Hello <strong>{escape(name)}</strong>,</p>
      <p>Your registration as a <strong>{escape(role)}</strong> has been confirmed.</p>
      <div class="info-box">
        <h3>What's Next?</h3>
        <ul>
          <li>Complete your 15-minute training module</li>
          <li>Pass the comprehension check</li>
          <li>Start submitting observations</li>
        </ul>
      </div>
      <p><a href="{configs.FRONTEND_URL}/training">Start Training</a></p>
      <p>Your first 5 observations will be reviewed by a Barangay Health Worker as part of your trial period.</p>"""
        self.send_email(email, "Welcome to SentinelPH - Registration Confirmed", render(body, "Welcome to the Community Intelligence Network", "#10b981"))

    def send_welcome_email(self, email: str, name: str, role: str, barangay: str) -> None:
        body = f"""
      <h2>Congratulations, {escape(name)}!</h2>
      <p>You've completed your training and are now an active {escape(role)} in <strong>{escape(barangay)}</strong>.</p>
      <div class="info-box">
        <h3>Quick Tips</h3>
        <ul>
          <li>Submit quality observations to increase your trust score</li>
          <li>Maximum 5 observations per day</li>
          <li>Focus on patterns, not individual cases</li>
        </ul>
      </div>"""
        self.send_email(email, "Welcome to SentinelPH - You're Now Active!", render(body, "You're Now a Community Sentinel!", "#10b981"))

    def send_approval_email(self, email: str, name: str, barangay: str) -> None:
        body = f"""
      <h2>Registration Approved</h2>
      <p>Hello <strong>{escape(name)}</strong>,</p>
      <p>Your sentinel registration for <strong>{escape(barangay)}</strong> has been approved by your Barangay Health Worker.</p>
      <p>You can now submit observations from the SentinelPH app.</p>"""
        self.send_email(email, "SentinelPH - Registration Approved", render(body, accent="#10b981"))

    def send_rejection_email(self, email: str, name: str, reason: str) -> None:
        body = f"""
      <h2>Registration Update</h2>
      <p>Hello <strong>{escape(name)}</strong>,</p>
      <p>Unfortunately your sentinel registration was not approved.</p>
      <div class="info-box"><strong>Reason:</strong> {escape(reason)}</div>
      <p>Please contact your Barangay Health Worker if you have questions.</p>"""
        self.send_email(email, "SentinelPH - Registration Update", render(body, accent="#ef4444"))
