import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from routers import health, stream

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="HLS Live Simulator",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
)

# Players under test are usually served from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(stream.router)


@app.on_event("startup")
async def startup():
    streams_dir = settings.streams_dir.resolve()
    if not streams_dir.is_dir():
        logger.warning("Streams directory %s does not exist", streams_dir)
    logger.info(
        "Serving %s under /%s (lookahead %.1fs, hold-open %.1fs)",
        streams_dir,
        settings.url_prefix,
        settings.lookahead_seconds,
        settings.hold_open_seconds,
    )


def serve():
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    serve()
