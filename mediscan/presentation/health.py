# mediscan/presentation/health.py
from fastapi import APIRouter, Depends

from mediscan.container import get_cache, get_history_store, get_record_store

router = APIRouter()

@router.get("/healthz")
async def healthz():
    # liveness: the process is up
    return {"ok": True}

@router.get("/readyz")
async def readyz(
    records = Depends(get_record_store),
    history = Depends(get_history_store),
    cache = Depends(get_cache),
):
    checks = {}; ok = True
    # Mongo (records + history)
    try:
        inner = getattr(records, "inner", records)
        if hasattr(inner, "ping"):
            await inner.ping()
        if hasattr(history, "ensure_indexes"):
            await history.ensure_indexes()
        checks["store"] = True
    except Exception as e:
        checks["store"] = False; checks["store_error"] = str(e); ok = False
    # Redis (optional)
    if cache is None:
        checks["redis"] = "disabled"
    else:
        try:
            pong = await cache.ping()
            checks["redis"] = bool(pong); ok = ok and bool(pong)
        except Exception as e:
            checks["redis"] = False; checks["redis_error"] = str(e); ok = False
    return {"ok": ok, **checks}
