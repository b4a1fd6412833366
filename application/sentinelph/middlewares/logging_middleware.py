"""
Audit and Request Logging Middleware for SentinelPH webhooks.
"""
import json
import socket
import time
from datetime import datetime

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from sentinelph.logging.utils import get_app_logger, get_audit_logger
from sentinelph.logging.config import LoggingConfig
from sentinelph.middlewares.request_context import create_request_id, request_context, clear_request_context

# settings
from sentinelph.config.settings import SentinelConfigs
configs = SentinelConfigs()

MASKED_HEADERS = ('authorization', 'x-webhook-signature')
MASKED_BODY_FIELDS = ('otp', 'phoneNumber')


class AuditMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, exclude_paths: list[str] | None = None):
        super().__init__(app)
        self.logger = get_app_logger('sentinelph.requests')
        self.exclude_audit_paths = exclude_paths or ['/health', '/docs', '/redoc']
        self.hostname = socket.gethostname()
        self.app_name = configs.APP_NAME
        self.version = configs.APP_VERSION

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = create_request_id()
        start_time = time.time()
        timestamp = datetime.now().isoformat()

        # read body once; starlette caches it for the endpoint
        body_bytes = await request.body()

        request_context.request_method = request.method
        request_context.request_path = request.url.path

        should_audit = LoggingConfig.AUDIT_LOGGING_ENABLED and not any(
            request.url.path.startswith(p) for p in self.exclude_audit_paths
        )

        try:
            response = await call_next(request)
            duration = (time.time() - start_time) * 1000
            self.logger.info(f"request_completed | method={request.method} path={request.url.path} status_code={response.status_code} duration_ms={duration:.0f}")

            if should_audit:
                audit_data = self._build_audit_data(request, response, body_bytes, duration, request_id, timestamp)
                get_audit_logger().info("Audit log", extra=audit_data)
            return response
        except Exception as exc:
            duration = (time.time() - start_time) * 1000
            self.logger.error(
                f"request_failed | method={request.method} path={request.url.path} error={exc.__class__.__name__} duration_ms={duration:.0f}",
                exc_info=True,
            )
            if should_audit:
                audit_data = self._build_audit_data(request, Response(status_code=500), body_bytes, duration, request_id, timestamp)
                audit_data['exception'] = exc.__class__.__name__
                get_audit_logger().info("Audit log (exception)", extra=audit_data)
            raise
        finally:
            clear_request_context()

    def _mask_headers(self, headers) -> dict:
        return {k: ('****' if k.lower() in MASKED_HEADERS else v) for k, v in headers.items()}

    def _parse_body(self, request: Request, body_bytes: bytes):
        if not body_bytes:
            return {}
        try:
            if 'application/json' in request.headers.get('content-type', ''):
                body_data = json.loads(body_bytes.decode('utf-8'))
                if isinstance(body_data, dict):
                    for field in MASKED_BODY_FIELDS:
                        if field in body_data:
                            body_data[field] = '****'
                return body_data
            return body_bytes.decode('utf-8')[:1000]
        except (ValueError, UnicodeDecodeError):
            return {}

    def _parse_response(self, response: Response):
        status = getattr(response, 'status_code', 0)
        if not LoggingConfig.CAPTURE_RESPONSE_BODY or 200 <= status < 300:
            return ''
        # streamed responses cannot be consumed here
        body = getattr(response, 'body', None)
        if hasattr(response, 'body_iterator') or body is None:
            return ''
        try:
            if 'application/json' in response.headers.get('content-type', ''):
                return json.loads(body.decode('utf-8'))
            return body.decode('utf-8')[:1000]
        except (ValueError, UnicodeDecodeError):
            return ''

    def _build_audit_data(
        self,
        request: Request,
        response: Response,
        body_bytes: bytes,
        duration: float,
        request_id: str,
        timestamp: str,
    ) -> dict:
        body = getattr(response, 'body', None)
        return {
            'duration': round(duration, 2),
            'hostname': self.hostname,
            'app_name': self.app_name,
            'request': {
                "GET": dict(request.query_params),
                "BODY": self._parse_body(request, body_bytes),
                "HEADERS": self._mask_headers(dict(request.headers)),
            },
            'request_id': request_id,
            'request_method': request.method,
            'request_path': request.url.path,
            'response': self._parse_response(response),
            'size_in_bytes': len(body) if body is not None and not hasattr(response, 'body_iterator') else 0,
            'status_code': getattr(response, 'status_code', 0),
            'timestamp': timestamp,
            'version': self.version,
        }
