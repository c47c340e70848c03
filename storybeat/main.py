from fastapi import FastAPI
import logging

from storybeat import __version__
from storybeat.api.routes import router
from storybeat.runtime import init_engine

app = FastAPI(title="storybeat", version=__version__)
app.include_router(router)
# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    # Runs the transform completeness check when STORYBEAT_DEBUG is set.
    init_engine()


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "storybeat", "version": __version__}
