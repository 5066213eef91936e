from pathlib import Path

from config import settings


class MediaNotFoundError(Exception):
    pass


def resolve(resource_path: str) -> Path:
    """
    Map a request path (below the track id) to a file under streams_dir.
    Paths escaping the directory are reported as missing.
    """
    root = settings.streams_dir.resolve()
    path = (root / resource_path).resolve()
    if root != path and root not in path.parents:
        raise MediaNotFoundError(resource_path)
    if not path.is_file():
        raise MediaNotFoundError(resource_path)
    return path


def read_manifest(resource_path: str) -> str:
    # utf-8-sig drops a leading BOM; undecodable bytes become U+FFFD
    return resolve(resource_path).read_text(encoding="utf-8-sig", errors="replace")
