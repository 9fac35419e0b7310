import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI

# Import settings first for logging configuration
from backend.app.core.config import settings as app_settings, APP_VERSION

# Configure logging based on settings
# DEBUG=true -> DEBUG level, else use LOG_LEVEL setting
log_level_str = "DEBUG" if app_settings.debug else app_settings.log_level.upper()
log_level = getattr(logging, log_level_str, logging.INFO)
log_format = '%(asctime)s %(levelname)s [%(name)s] %(message)s'

root_logger = logging.getLogger()
root_logger.setLevel(log_level)

# Console handler - always enabled
console_handler = logging.StreamHandler()
console_handler.setLevel(log_level)
console_handler.setFormatter(logging.Formatter(log_format))
root_logger.addHandler(console_handler)

# File handler - only if enabled
if app_settings.log_to_file:
    log_file = app_settings.log_dir / "spooly.log"
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=5*1024*1024,  # 5MB
        backupCount=3,
        encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(file_handler)
    logging.info(f"Logging to file: {log_file}")

# Reduce noise from third-party libraries in production
if not app_settings.debug:
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

logging.info(f"Spooly starting - debug={app_settings.debug}, log_level={log_level_str}")
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse, JSONResponse

from backend.app.core.store import filament_store
from backend.app.api.routes import filaments


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: make sure the data file exists before the first request
    records = filament_store.load_all()
    logging.getLogger(__name__).info(
        f"Spooly backend running on port {app_settings.port} with {len(records)} filaments in {filament_store.path}"
    )

    yield


app = FastAPI(
    title=app_settings.app_name,
    description="Track 3D printer filament spools",
    version=APP_VERSION,
    lifespan=lifespan,
)

# API routes
app.include_router(filaments.router, prefix=app_settings.api_prefix)


# Serve static files (frontend build)
if (app_settings.static_dir / "assets").is_dir():
    app.mount(
        "/assets",
        StaticFiles(directory=app_settings.static_dir / "assets"),
        name="assets",
    )


@app.get("/")
async def serve_frontend():
    """Serve the frontend."""
    index_file = app_settings.static_dir / "index.html"
    if index_file.exists():
        return FileResponse(index_file)
    return {
        "message": "Spooly API",
        "docs": "/docs",
        "frontend": "Build the frontend into frontend/dist",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Catch-all route for client-side routing (must be last)
@app.get("/{full_path:path}")
async def serve_spa(full_path: str):
    """Serve the frontend for client-side routing, or top-level static files."""
    # Don't intercept API routes
    if full_path.startswith("api/"):
        return JSONResponse(status_code=404, content={"error": "Not found"})

    static_file = (app_settings.static_dir / full_path).resolve()
    if full_path and static_file.is_file() and static_file.is_relative_to(app_settings.static_dir.resolve()):
        return FileResponse(static_file)

    index_file = app_settings.static_dir / "index.html"
    if index_file.exists():
        return FileResponse(index_file)

    return JSONResponse(status_code=404, content={"error": "Frontend not built"})


def run():
    """Start the server on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "backend.app.main:app",
        host=app_settings.host,
        port=app_settings.port,
        loop="asyncio",
        log_level=log_level_str.lower(),
    )


if __name__ == "__main__":
    run()
