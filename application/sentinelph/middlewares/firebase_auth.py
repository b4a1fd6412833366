from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from sentinelph.core.constants import REVIEWER_ROLES
from sentinelph.logging.utils import get_app_logger
from sentinelph.middlewares.request_context import request_context
from sentinelph.utils.firebase_utils import extract_bearer_token, verify_id_token_with_cache

logger = get_app_logger(__name__)


class FirebaseReviewerAuthMiddleware(BaseHTTPMiddleware):
    """
    Require a Firebase ID token carrying a reviewer role (BHW or admin) on
    registration review routes. User info is attached to `request.state`.
    """

    protected_paths = ("/webhook/approve-registration", "/webhook/reject-registration")

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS" or request.url.path not in self.protected_paths:
            return await call_next(request)

        token = extract_bearer_token(request.headers.get("authorization"))
        if not token:
            logger.warning(f"auth_token_missing | path={request.url.path}")
            return JSONResponse(status_code=401, content={"success": False, "error": "No token provided"})

        try:
            decoded_token = verify_id_token_with_cache(token)
        except Exception as e:
            logger.warning(f"auth_token_invalid | path={request.url.path} error={type(e).__name__}")
            return JSONResponse(status_code=401, content={"success": False, "error": "Invalid or expired token"})

        role = decoded_token.get("role")
        if role not in REVIEWER_ROLES:
            logger.warning(f"auth_role_denied | uid={decoded_token.get('uid')} role={role}")
            return JSONResponse(status_code=403, content={"success": False, "error": "BHW access required"})

        request.state.user_id = decoded_token.get("uid") or decoded_token.get("user_id")
        request.state.role = role
        request_context.user_id = request.state.user_id
        return await call_next(request)
