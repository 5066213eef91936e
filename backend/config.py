from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Source manifests and segment files live under this directory
    streams_dir: Path = Path("streams")

    # Requests look like /<url_prefix>/<track_id>/<path inside streams_dir>
    url_prefix: str = "local"

    # Live window timing
    lookahead_seconds: float = 1.0  # encoder buffering latency
    hold_open_seconds: float = 60.0  # simulated hung upstream

    # Server
    host: str = "127.0.0.1"
    port: int = 5173
    log_level: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
