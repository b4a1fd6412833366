import os
from dotenv import load_dotenv
load_dotenv()

class SentinelConfigs:
    def __init__(self):

        # Environment settings
        self.APPLICATION_ENVIRONMENT = os.getenv("APPLICATION_ENVIRONMENT", "UAT")
        self.APP_NAME = os.getenv('APP_NAME', 'sentinelph-webhooks')
        self.APP_VERSION = os.getenv('APP_VERSION', '1.0.0')
        self.DEBUG = os.getenv("DEBUG", "true").lower() == "true"
        self.ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173")
        self.FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

        # Redis settings
        self.REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")
        self.REDIS_CACHE_DB = int(os.getenv("REDIS_CACHE_DB", "3"))
        self.FIREBASE_AUTH_CACHE_ENABLED = os.getenv("FIREBASE_AUTH_CACHE_ENABLED", "true").lower() == "true"
        self.FIREBASE_AUTH_CACHE_TTL_SECONDS = int(os.getenv("FIREBASE_AUTH_CACHE_TTL_SECONDS", "300"))
        self.FIREBASE_AUTH_CACHE_PREFIX = os.getenv("FIREBASE_AUTH_CACHE_PREFIX", "firebase:id_token")

        # Firebase settings
        self.FIREBASE_ENABLED = os.getenv("FIREBASE_ENABLED", "true").lower() == "true"
        self.FIREBASE_CREDENTIALS_PATH = os.getenv("FIREBASE_CREDENTIALS_PATH", "sentinelph/auth/firebase_admin.json")
        self.FIREBASE_APP_NAME = os.getenv("FIREBASE_APP_NAME", "sentinelph")
        self.FIRESTORE_DATABASE = os.getenv("FIRESTORE_DATABASE", "(default)")

        # OTP settings
        self.OTP_LENGTH = int(os.getenv("OTP_LENGTH", "6"))
        self.OTP_EXPIRY_SECONDS = int(os.getenv("OTP_EXPIRY_SECONDS", "600"))
        # Expired records are kept this long so verify can still report them as expired
        self.OTP_RETENTION_SECONDS = int(os.getenv("OTP_RETENTION_SECONDS", "3600"))
        self.OTP_CACHE_PREFIX = os.getenv("OTP_CACHE_PREFIX", "sentinel_otp_")

        # Alert policy settings
        self.ALERT_SENTINEL_THRESHOLD = int(os.getenv("ALERT_SENTINEL_THRESHOLD", "3"))
        self.ALERT_WINDOW_HOURS = int(os.getenv("ALERT_WINDOW_HOURS", "48"))

        # Webhook settings
        self.WEBHOOK_SECRET = os.getenv("WEBHOOK_SECRET", "")

        # Email (SMTP) settings
        self.EMAIL_ENABLED = os.getenv("EMAIL_ENABLED", "true").lower() == "true"
        self.EMAIL_USER = os.getenv("EMAIL_USER", "")
        self.EMAIL_PASSWORD = os.getenv("EMAIL_PASSWORD", "")
        self.SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
        self.SMTP_PORT = int(os.getenv("SMTP_PORT", "465"))
        self.SMTP_TIMEOUT = int(os.getenv("SMTP_TIMEOUT", "20"))
        self.EMAIL_SENDER_NAME = os.getenv("EMAIL_SENDER_NAME", "SentinelPH")

        # Twilio settings
        self.TWILIO_INTEGRATION_ENABLED = os.getenv("TWILIO_INTEGRATION_ENABLED", "true").lower() == "true"
        self.TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID", "")
        self.TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN", "")
        self.TWILIO_PHONE_NUMBER = os.getenv("TWILIO_PHONE_NUMBER", "")

        # OpenAI settings
        self.OPENAI_CATEGORIZATION_ENABLED = os.getenv("OPENAI_CATEGORIZATION_ENABLED", "false").lower() == "true"
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
        self.OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
        self.OPENAI_TIMEOUT = int(os.getenv("OPENAI_TIMEOUT", "20"))

        # Sentry settings
        self.SENTRY_ENABLED = os.getenv("SENTRY_ENABLED", "false").lower() == "true"
        self.SENTRY_DSN = os.getenv("SENTRY_DSN", "")
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
        self.SENTRY_RELEASE = os.getenv("SENTRY_RELEASE", "sentinelph-webhooks@1.0.0")
        self.SENTRY_TRACES_SAMPLE_RATE = os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")
        self.SENTRY_PROFILES_SAMPLE_RATE = os.getenv("SENTRY_PROFILES_SAMPLE_RATE", "0.1")

        # Logging Core settings
        self.FIREHOSE_ENABLED = os.getenv("FIREHOSE_ENABLED", "false").lower() == "true"
        self.AUDIT_LOGGING_ENABLED = os.getenv("AUDIT_LOGGING_ENABLED", "false").lower() == "true"
        self.CAPTURE_RESPONSE_BODY = os.getenv("CAPTURE_RESPONSE_BODY", "false").lower() == "true"
        self.LOG_DIRECTORY = os.getenv("LOG_DIRECTORY", "logs")

        # Logging Stream Names
        self.APP_LOGS_STREAM_NAME = os.getenv("APP_LOGS_STREAM_NAME", "")
        self.AUDIT_LOGS_STREAM_NAME = os.getenv("AUDIT_LOGS_STREAM_NAME", "")
        self.LOG_BUFFER_TIMEOUT = int(os.getenv("LOG_BUFFER_TIMEOUT", "600"))

        # Logging Buffer Sizes
        self.APP_LOGS_CAPACITY = int(os.getenv("APP_LOGS_CAPACITY", "50"))
        self.AUDIT_LOGS_CAPACITY = int(os.getenv("AUDIT_LOGS_CAPACITY", "50"))

        # Firehose settings
        self.FIREHOSE_REGION_NAME = os.getenv("FIREHOSE_REGION_NAME", "ap-southeast-1")
        self.FIREHOSE_ACCESS_KEY_ID = os.getenv("FIREHOSE_ACCESS_KEY_ID", "")
        self.FIREHOSE_SECRET_ACCESS_KEY = os.getenv("FIREHOSE_SECRET_ACCESS_KEY", "")
        self.FIREHOSE_RETRY_COUNT = int(os.getenv("FIREHOSE_RETRY_COUNT", "3"))
        self.FIREHOSE_RETRY_DELAY = int(os.getenv("FIREHOSE_RETRY_DELAY", "1"))

        # Slack error notifications
        self.SLACK_WEBHOOK_URL = os.getenv("SLACK_WEBHOOK_URL", "")
