from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from sentinelph.config.settings import SentinelConfigs
from sentinelph.utils.datetime_helpers import get_pht_now

configs = SentinelConfigs()

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):

    details = {
        "status": "healthy",
        "version": configs.APP_VERSION,
        "service": configs.APP_NAME,
        "timestamp": get_pht_now().isoformat(),
    }
    return JSONResponse(content=details)
