import logging
import sqlite3
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from translation_desk.config import settings
from translation_desk.errors import DeskError, InternalError, ValidationError
from translation_desk.routers import admin_requests, auth, files, intake, stats, users

logger = logging.getLogger("translation_desk")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create or migrate the database, check integrity, seed the first admin
    from translation_desk.database import SessionLocal, init_db
    from translation_desk.services.auth_service import auth_service
    from translation_desk.utils.filesystem import ensure_data_dirs

    ensure_data_dirs()
    init_db()
    try:
        conn = sqlite3.connect(str(settings.db_path))
        result = conn.execute("PRAGMA integrity_check").fetchone()
        conn.close()
        if result and result[0] == "ok":
            logger.info("Database integrity check passed.")
        else:
            logger.error("DATABASE INTEGRITY CHECK FAILED: %s", result)
    except sqlite3.Error as exc:
        logger.error("Could not run startup integrity check: %s", exc)

    if settings.seed_admin_email and settings.seed_admin_password:
        db = SessionLocal()
        try:
            auth_service.seed_admin(db, settings.seed_admin_email, settings.seed_admin_password)
        finally:
            db.close()
    yield
    # Shutdown: drop staff sessions
    auth_service.clear()


app = FastAPI(
    title="Translation Desk",
    description="Document translation order intake and back-office administration",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DeskError)
async def desk_error_handler(request: Request, exc: DeskError):
    headers = None
    if exc.status_code == 429:
        headers = {"Retry-After": str(int(exc.retry_after_seconds) + 1)}
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_payload()}, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = []
    for err in exc.errors():
        loc = [str(part) for part in err["loc"] if part not in ("body", "query", "path", "header")]
        fields.append({"field": ".".join(loc) or "body", "message": err["msg"]})
    return await desk_error_handler(request, ValidationError(fields))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return await desk_error_handler(request, InternalError("Internal server error"))


app.include_router(intake.router, prefix=settings.api_prefix)
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(admin_requests.router, prefix=settings.api_prefix)
app.include_router(files.router, prefix=settings.api_prefix)
app.include_router(stats.router, prefix=settings.api_prefix)
app.include_router(users.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
