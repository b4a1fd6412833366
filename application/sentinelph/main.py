from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sentinelph.logging.utils import initialize_logging, get_app_logger
from sentinelph.middlewares.logging_middleware import AuditMiddleware

load_dotenv()

# Initialize Sentry (must be done early, before other imports)
from sentinelph.config.sentry import init_sentry
init_sentry()

# Initialize structured logging
initialize_logging()
logger = get_app_logger('sentinelph.main')

from sentinelph.config.settings import SentinelConfigs
configs = SentinelConfigs()

# Debug mode detection (DEBUG=false means production)
logger.info(f"Running in {'debug' if configs.DEBUG else 'production'} mode")

if configs.FIREBASE_ENABLED:
    from sentinelph.connections.firebase import init_firebase
    init_firebase()


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info("Starting SentinelPH webhooks")
    yield
    logger.info("Shutting down SentinelPH webhooks")


# Disable docs in production (when DEBUG=false)
docs_url = "/docs" if configs.DEBUG else None
redoc_url = "/redoc" if configs.DEBUG else None

app = FastAPI(
    title="SentinelPH Webhooks",
    version=configs.APP_VERSION,
    lifespan=lifespan,
    docs_url=docs_url,
    redoc_url=redoc_url
)

if configs.ALLOWED_ORIGINS:
    origins = [origin.strip() for origin in configs.ALLOWED_ORIGINS.split(",")]
else:
    origins = ["*"]

# Middlewares (audit is added after these so it runs first)
from sentinelph.middlewares.firebase_auth import FirebaseReviewerAuthMiddleware
app.add_middleware(FirebaseReviewerAuthMiddleware)

# Request/Audit logging middleware
app.add_middleware(AuditMiddleware)

logger.info(f"Configuring CORS with allowed origins: {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register custom exception handlers
from sentinelph.middlewares.handlers import register_exception_handlers
register_exception_handlers(app)


# Routes
from sentinelph.routes.auth_otp import router as auth_otp_router
from sentinelph.routes.registrations import router as registrations_router
from sentinelph.routes.admin_auth import router as admin_auth_router
from sentinelph.routes.health import router as health_router
from sentinelph.routes.webhooks.observation_webhook import observation_webhook_router
from sentinelph.routes.webhooks.sms_webhook import sms_webhook_router

app.include_router(auth_otp_router, prefix="/webhook")
app.include_router(registrations_router, prefix="/webhook")
app.include_router(observation_webhook_router, prefix="/webhook")
app.include_router(sms_webhook_router, prefix="/webhook")
app.include_router(admin_auth_router, prefix="/auth")
app.include_router(health_router, tags=["health"])
