import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from columns import router as columns_router
from core import db, errors, schema, settings
from core.logging_setup import configure_logging
from ingestion import router as ingestion_router
from schools import router as schools_router
from uploaded_data import router as uploaded_data_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # One pool per process, shared by every request through db.get_pool.
    app.state.pool = await db.create_pool()
    await schema.bootstrap(app.state.pool)
    logger.info("api_started pool_max_size=%s", settings.pool_max_size())
    try:
        yield
    finally:
        await db.close_pool(app.state.pool)
        app.state.pool = None
        logger.info("api_stopped")


app = FastAPI(lifespan=lifespan)

errors.install(app)
# Added last so it wraps the error envelope too.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict:
    return {"status": "ok", "message": "Server is running"}


app.include_router(columns_router.router, tags=["columns"])
app.include_router(ingestion_router.router, tags=["ingestion"])
app.include_router(uploaded_data_router.router, tags=["data"])
app.include_router(schools_router.router, tags=["schools"])


@app.get("/{full_path:path}", include_in_schema=False)
def app_shell(full_path: str) -> FileResponse:
    """
    Serve a built frontend asset if it exists, otherwise the SPA's index.html.
    """
    root = settings.static_dir().resolve()
    candidate = (root / full_path).resolve()
    if full_path and candidate.is_file() and candidate.is_relative_to(root):
        return FileResponse(candidate)

    index = root / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(index)


def run() -> None:
    uvicorn.run(app, host=settings.listen_host(), port=settings.listen_port())


if __name__ == "__main__":
    run()
