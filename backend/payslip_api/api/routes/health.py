import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from payslip_api.domains.payslips.router import get_store
from payslip_api.domains.payslips.store import PayslipStore

router = APIRouter(prefix="/api/health", tags=["health"])

STARTED_AT = time.monotonic()


@router.get("", summary="Service health")
def healthcheck(store: PayslipStore = Depends(get_store)) -> dict[str, object]:
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "dbStatus": "connected" if store.ping() else "disconnected",
        "uptime": round(time.monotonic() - STARTED_AT, 3),
    }
