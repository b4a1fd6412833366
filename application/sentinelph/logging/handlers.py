"""
Logging Handlers for SentinelPH
Buffered Firehose shipping; records Firehose will not take land in the local backup file.
"""
import logging
import os
import time
from logging.handlers import MemoryHandler
from typing import List

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from sentinelph.logging.config import LoggingConfig
from sentinelph.logging.formatters import AppLogsJSONFormatter, AuditLogsJSONFormatter


def create_firehose_client():
    return boto3.client(
        "firehose",
        region_name=LoggingConfig.FIREHOSE_REGION_NAME,
        aws_access_key_id=LoggingConfig.FIREHOSE_ACCESS_KEY_ID,
        aws_secret_access_key=LoggingConfig.FIREHOSE_SECRET_ACCESS_KEY,
        config=Config(connect_timeout=10, read_timeout=30, retries={"max_attempts": 2}),
    )


class BufferedFirehoseHandler(MemoryHandler):
    """
    Holds formatted records until the buffer fills or the timeout passes, then
    sends them with put_record_batch. Only the entries Firehose rejected are
    resent; whatever is still rejected after the last attempt goes to the
    fallback handler.
    """

    def __init__(self, stream_name: str, capacity: int, formatter: logging.Formatter,
                 fallback: logging.Handler, client=None, retry_count: int = LoggingConfig.FIREHOSE_RETRY_COUNT,
                 retry_delay: float = LoggingConfig.FIREHOSE_RETRY_DELAY):
        super().__init__(capacity=capacity)
        self.stream_name = stream_name
        self.client = client or create_firehose_client()
        self.fallback = fallback
        self.retry_count = max(retry_count, 1)
        self.retry_delay = retry_delay
        self.buffer_timeout = LoggingConfig.LOG_BUFFER_TIMEOUT
        self.last_flush = time.time()
        self.setFormatter(formatter)

    def shouldFlush(self, record):
        return len(self.buffer) >= self.capacity or time.time() - self.last_flush >= self.buffer_timeout

    def _send(self, records: List[logging.LogRecord]) -> List[logging.LogRecord]:
        """One put_record_batch call; returns the records that were not accepted."""
        try:
            response = self.client.put_record_batch(
                DeliveryStreamName=self.stream_name,
                Records=[{"Data": self.format(record) + "\n"} for record in records],
            )
        except (BotoCoreError, ClientError):
            return records
        if not response.get("FailedPutCount"):
            return []
        results = response.get("RequestResponses", [])
        return [record for record, result in zip(records, results) if result.get("ErrorCode")]

    def flush(self):
        self.acquire()
        try:
            pending = list(self.buffer)
            self.buffer.clear()
            self.last_flush = time.time()
            for attempt in range(self.retry_count):
                if not pending:
                    break
                if attempt:
                    time.sleep(self.retry_delay * (2 ** (attempt - 1)))
                pending = self._send(pending)
            for record in pending:
                self.fallback.handle(record)
        finally:
            self.release()


_handlers = {}

def get_local_file_handler(name: str = 'app'):
    os.makedirs(LoggingConfig.LOG_DIRECTORY, exist_ok=True)
    handler = logging.FileHandler(os.path.join(LoggingConfig.LOG_DIRECTORY, f'{name}.log'))
    formatter = AuditLogsJSONFormatter() if name == 'audit_logs_backup' else AppLogsJSONFormatter()
    handler.setFormatter(formatter)
    return handler


def get_app_handler():
    if LoggingConfig.FIREHOSE_ENABLED:
        if 'app' not in _handlers:
            stream = LoggingConfig.APP_LOGS_STREAM_NAME or 'sentinelph-app-logs'
            _handlers['app'] = BufferedFirehoseHandler(
                stream, LoggingConfig.APP_LOGS_CAPACITY, AppLogsJSONFormatter(), get_local_file_handler('app'),
            )
        return _handlers['app']
    return get_local_file_handler('app')


def get_audit_handler():
    if LoggingConfig.FIREHOSE_ENABLED:
        if 'audit' not in _handlers:
            stream = LoggingConfig.AUDIT_LOGS_STREAM_NAME or 'sentinelph-audit-logs'
            _handlers['audit'] = BufferedFirehoseHandler(
                stream, LoggingConfig.AUDIT_LOGS_CAPACITY, AuditLogsJSONFormatter(), get_local_file_handler('audit_logs_backup'),
            )
        return _handlers['audit']
    return get_local_file_handler('audit_logs_backup')
