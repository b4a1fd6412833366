"""
Logging Filters for SentinelPH
"""
import logging
import uuid
from sentinelph.middlewares.request_context import request_context


class RequestContextFilter(logging.Filter):
    def filter(self, record):
        record.request_id = getattr(request_context, 'request_id', None) or str(uuid.uuid4())
        record.request_method = getattr(request_context, 'request_method', '')
        record.request_path = getattr(request_context, 'request_path', '')
        record.user_id = getattr(request_context, 'user_id', '')
        return True


class ObservationContextFilter(logging.Filter):
    def filter(self, record):
        record.barangay = getattr(request_context, 'barangay', '')
        record.observation_id = getattr(request_context, 'observation_id', '')
        return True
