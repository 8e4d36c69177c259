# FILE: curations/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse
from fastapi.routing import APIRoute
from fastapi.staticfiles import StaticFiles

from curations import settings
from curations.deps import get_affiliate_store, get_catalog, get_guard, get_subscriber_store
from curations.errors import register_error_handlers
from curations.logger import get_logger, setup_logging
from curations.routers import affiliates, items, notify, subscribers

setup_logging()
logger = get_logger(__name__)

app = FastAPI(
    title="Curations API",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS (the storefront page may be hosted elsewhere) ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1024)

register_error_handlers(app)


# --- Health check ---
@app.get("/api/health", tags=["health"])
def health():
    return {"status": "ok", "service": settings.SERVICE_NAME, "version": settings.VERSION}


# --- Routers ---
app.include_router(items.router)
app.include_router(affiliates.router)
app.include_router(subscribers.router)
app.include_router(notify.router)

# --- Static files ---
# /static/* -> curations/static/* (or STATIC_DIR)
app.mount("/static", StaticFiles(directory=settings.STATIC_DIR, check_dir=False), name="static")


# --- Single-page fallback: any other GET gets the main page ---
@app.get("/{full_path:path}", include_in_schema=False)
def index_page(full_path: str):
    return FileResponse(settings.STATIC_DIR / "index.html", media_type="text/html")


# --- Debug: log registered routes on startup ---
def _dump_routes() -> None:
    lines = []
    for r in app.routes:
        if isinstance(r, APIRoute):
            methods = ",".join(sorted(r.methods))
            lines.append(f"  {methods:15s} {r.path}")
    logger.info("Registered routes:\n%s", "\n".join(lines))


@app.on_event("startup")
def _on_startup():
    # catalog and stores are read once, up front
    catalog = get_catalog()
    subscriber_store = get_subscriber_store()
    affiliate_store = get_affiliate_store()
    get_guard()
    logger.info(
        "Ready: %d items, %d subscribers, %d affiliates",
        len(catalog), subscriber_store.count(), affiliate_store.count(),
    )
    _dump_routes()


def run() -> None:
    import uvicorn

    logger.info("Server running at http://localhost:%d", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
