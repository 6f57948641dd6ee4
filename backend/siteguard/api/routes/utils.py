from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["utils"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
