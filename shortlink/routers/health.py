from fastapi import APIRouter
from fastapi.responses import JSONResponse
from shortlink.db.Connection import database

router = APIRouter(tags=["health"])

# simple liveness
@router.get("/health")
def health():
    return {"status": "healthy", "service": "url-shortener"}

# readiness: the database is required, redis only backs the rate limiter
@router.get("/ready")
def readiness():
    details = {
        "db": "ok" if database.verify_database_connection() else "error",
        "redis": "ok" if database.verify_redis_connection() else "degraded",
    }
    ready = details["db"] == "ok"
    return JSONResponse(status_code=200 if ready else 503, content={"ready": ready, "details": details})
