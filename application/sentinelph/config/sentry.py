import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

import logging

# Logger
from sentinelph.logging.utils import get_app_logger
from sentinelph.middlewares.request_context import request_context
logger = get_app_logger("sentry")

# Settings
from sentinelph.config.settings import SentinelConfigs
configs = SentinelConfigs()

SENSITIVE_HEADERS = ['authorization', 'cookie', 'x-api-key', 'x-webhook-signature']
SENSITIVE_FIELDS = ['password', 'token', 'secret', 'otp', 'auth', 'phone']


def init_sentry():
    """Initialize Sentry SDK with flag-based configuration"""

    if not configs.SENTRY_ENABLED:
        logger.info("Sentry monitoring is disabled")
        return

    if not configs.SENTRY_DSN:
        logger.warning("SENTRY_ENABLED is true but SENTRY_DSN is not configured")
        return

    sentry_sdk.init(
        dsn=configs.SENTRY_DSN,
        environment=configs.ENVIRONMENT,
        release=configs.SENTRY_RELEASE,
        traces_sample_rate=float(configs.SENTRY_TRACES_SAMPLE_RATE),
        profiles_sample_rate=float(configs.SENTRY_PROFILES_SAMPLE_RATE),
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(
                level=logging.INFO,        # Capture info and above as breadcrumbs
                event_level=logging.ERROR  # Send errors as events
            ),
        ],
        send_default_pii=False,
        attach_stacktrace=True,
        sample_rate=1.0,
        max_breadcrumbs=50,
        before_send=before_send_filter,
    )

    logger.info(f"Sentry initialized successfully for environment: {configs.ENVIRONMENT}")


def before_send_filter(event, hint):
    """Filter sensitive data before sending to Sentry"""

    if 'request' in event and 'headers' in event['request']:
        headers = event['request']['headers']
        for header in list(headers.keys()):
            if header.lower() in SENSITIVE_HEADERS:
                headers[header] = '[Filtered]'

    # OTP codes and phone numbers travel in request bodies
    if 'request' in event and 'data' in event['request']:
        data = event['request']['data']
        if isinstance(data, dict):
            for field in SENSITIVE_FIELDS:
                for key in list(data.keys()):
                    if field.lower() in key.lower():
                        data[key] = '[Filtered]'

    # Group events by the barangay and observation being processed
    tags = event.setdefault('tags', {})
    if request_context.barangay:
        tags['barangay'] = request_context.barangay
    if request_context.observation_id:
        tags['observation_id'] = request_context.observation_id

    return event


def capture_exception(exception, **kwargs):
    """Wrapper to capture exceptions only if Sentry is enabled"""
    if configs.SENTRY_ENABLED:
        sentry_sdk.capture_exception(exception, **kwargs)
    logger.error(f"Exception occurred: {exception}", exc_info=True)


def add_breadcrumb(message, category="custom", level="info", data=None):
    """Wrapper to add breadcrumbs only if Sentry is enabled"""
    if configs.SENTRY_ENABLED:
        sentry_sdk.add_breadcrumb(
            message=message,
            category=category,
            level=level,
            data=data or {}
        )
