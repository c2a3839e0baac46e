from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.errors import EntityError, NotFound, Conflict, InvalidArgument, StorageError
from app.core.seed_loader import load_seed_data
from app.api import marketplace, chat
from app.models.api_models import bad, ok
from app.services.marketplace import build_marketplace
from app.services.storage import build_storage
from app.core.logger import setup_logging, logger
from contextlib import asynccontextmanager
from datetime import datetime

setup_logging()

ERROR_STATUS = {
    InvalidArgument: 400,
    NotFound: 404,
    Conflict: 409,
    StorageError: 503,
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting DogRoom Backend")
    storage = build_storage(settings)
    app.state.marketplace = build_marketplace(storage, load_seed_data())
    yield
    # Shutdown
    logger.info("🛑 Shutting down backend")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan
)

@app.exception_handler(EntityError)
async def entity_error_handler(request: Request, exc: EntityError):
    status_code = next((code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 500)
    if status_code >= 500:
        logger.error(f"❌ {exc.kind} on {request.method} {request.url.path}: {exc}")
    else:
        logger.info(f"↩️ {exc.kind} on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status_code, content=bad(str(exc)))

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"🔥 UNHANDLED ERROR: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content=bad("Internal Server Error")
    )

# Include routers
app.include_router(marketplace.hosts_router, prefix=settings.API_V1_STR, tags=["Hosts"])
app.include_router(marketplace.search_router, prefix=settings.API_V1_STR, tags=["Hosts"])
app.include_router(marketplace.bookings_router, prefix=settings.API_V1_STR, tags=["Bookings"])
app.include_router(chat.users_router, prefix=settings.API_V1_STR, tags=["Users"])
app.include_router(chat.chats_router, prefix=settings.API_V1_STR, tags=["Chats"])

@app.get(f"{settings.API_V1_STR}/test")
async def api_test():
    return ok({"name": settings.PROJECT_NAME})

@app.get("/health")
async def health_check_std():
    return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
