# toolshed/main.py
import os

from fastapi import FastAPI

from . import __version__
from .catalog import admin_router, catalog_router
from .logger import get_logger

logger = get_logger(__name__)


app = FastAPI(
    title="Robo AI Tool Shed",
    description=(
        "Curated catalogue of tools: public listing with search and "
        "category filters, plus an admin API for editing and bulk "
        "spreadsheet import/export."
    ),
    version=__version__,
)

app.include_router(catalog_router)
app.include_router(admin_router)


@app.get("/")
def health_check():
    return {"status": "ok", "message": "Tool shed live"}


def run():
    import uvicorn

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    logger.info("Starting tool shed on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)
