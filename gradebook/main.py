from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, Response

from gradebook.core.config import settings
from gradebook.core.logging import configure_logging, correlation_context, get_logger
from gradebook.core.metrics import get_counters, get_metrics
from gradebook.core.numeric import safe_round
from gradebook.routers.auth import router as auth_router
from gradebook.routers.classes import router as classes_router
from gradebook.routers.exceptions import register_exception_handlers
from gradebook.routers.students import router as students_router


configure_logging(environment=settings.environment)
logger = get_logger("main", component="app")

_app_start_time = datetime.now(timezone.utc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "startup_roster_store",
        extra={
            "structured_data": {
                "mock_store": settings.mock_store_active,
                "roster_store_configured": settings.roster_store_url is not None,
            }
        },
    )
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(classes_router)
app.include_router(students_router)


@app.middleware("http")
async def bind_correlation_id(request: Request, call_next):
    with correlation_context(request.headers.get("X-Correlation-ID")) as cid:
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = cid
        return response


@app.get("/health")
def health():
    """Liveness plus a summary of roster store traffic.

    The remote store is not probed here; its availability shows up in the
    ``roster_store.*`` counters instead.
    """
    uptime = (datetime.now(timezone.utc) - _app_start_time).total_seconds()
    counters = get_counters()
    return {
        "status": "healthy",
        "started_at": _app_start_time.isoformat(),
        "uptime_seconds": safe_round(uptime, decimals=2),
        "environment": settings.environment,
        "roster_store": {
            "mode": "mock" if settings.mock_store_active else "http",
            "load_errors": counters.get("roster_store.http.load_all.errors", 0),
            "save_errors": counters.get("roster_store.http.save_roster.errors", 0),
        },
        "metrics_summary": {
            "tracked_operations": len(get_metrics()),
            "tracked_counters": len(counters),
        },
    }


@app.get("/", include_in_schema=False)
def root():
    return {
        "name": settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/favicon.ico", include_in_schema=False)
def favicon():
    return Response(status_code=204)
