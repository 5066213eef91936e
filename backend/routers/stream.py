import asyncio
import logging
from enum import Enum
from typing import Callable

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse, Response, StreamingResponse

from config import settings
from models.schemas import ActionResponse, ErrorResponse
from services import faults
from services.faults import FaultAction, SegmentFault
from services.live_window import render, render_vod
from services.media import MediaNotFoundError, read_manifest, resolve
from services.playlist_parser import FormatError
from services.track_store import TrackNotFoundError, TrackStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"/{settings.url_prefix}", tags=["stream"])

store = TrackStore()

PLAYLIST_MEDIA_TYPE = "application/vnd.apple.mpegurl"
SEGMENT_MEDIA_TYPE = "audio/mpeg"


class RequestKind(str, Enum):
    ACTION = "action"
    MANIFEST = "manifest"
    SEGMENT = "segment"
    UNKNOWN = "unknown"


def classify(resource_path: str) -> RequestKind:
    """Tell control, manifest and segment requests apart by path shape."""
    name = resource_path.rstrip("/").rsplit("/", 1)[-1]
    if name == "action":
        return RequestKind.ACTION
    if name.endswith(".m3u8"):
        return RequestKind.MANIFEST
    if name.endswith(".mp3"):
        return RequestKind.SEGMENT
    return RequestKind.UNKNOWN


def _flag(request: Request, name: str) -> bool:
    return request.query_params.get(name) == "true"


def _not_found(error: str, code: str = "NOT_FOUND") -> HTTPException:
    return HTTPException(
        status_code=404,
        detail=ErrorResponse(error=error, code=code).model_dump(),
    )


def _held_open(body: Callable[[], str]) -> StreamingResponse:
    """
    Send headers now and the failing body after hold_open_seconds.
    The body is built when the delay fires.
    A client that disconnects meanwhile cancels the pending write.
    """

    async def delayed_body():
        await asyncio.sleep(settings.hold_open_seconds)
        yield body()

    return StreamingResponse(delayed_body(), status_code=200, media_type="text/plain")


def _injected_error(error: str) -> HTTPException:
    return HTTPException(
        status_code=500,
        detail=ErrorResponse(error=error, code="INJECTED_ERROR", retry_after=1).model_dump(),
    )


def handle_action(request: Request, track_id: str, resource_path: str) -> ActionResponse:
    """Apply control flags to a track. Always acknowledged, even for unknown tracks."""
    actions = faults.actions_from_query(request.query_params)
    state = store.get(track_id)
    if state is None:
        return ActionResponse(
            track_id=track_id,
            known=False,
            applied=[],
            message=f"{track_id} unknown, no action performed",
        )

    if FaultAction.RESET in actions:
        store.reset(track_id)
        return ActionResponse(
            track_id=track_id,
            known=True,
            applied=[FaultAction.RESET.value],
            message=f"{track_id} reset",
        )

    faults.apply_all(state, actions, store.now())
    return ActionResponse(
        track_id=track_id,
        known=True,
        applied=[action.value for action in actions],
        message=f"{track_id} action performed",
        stopped=state.stopped,
        pending_timeouts=state.pending_timeouts,
        pending_errors=state.pending_errors,
    )


def handle_manifest(request: Request, track_id: str, resource_path: str) -> Response:
    try:
        state = store.get_or_create(track_id, lambda: read_manifest(resource_path))
    except MediaNotFoundError:
        raise _not_found("Manifest not found")
    except FormatError as e:
        logger.error("Invalid manifest %s for track %s: %s", resource_path, track_id, e)
        raise HTTPException(
            status_code=500,
            detail=ErrorResponse(error=str(e), code="INVALID_MANIFEST").model_dump(),
        )

    # Request flags apply to this request only and leave fault counters alone
    if _flag(request, "vod"):
        return Response(render_vod(state), media_type=PLAYLIST_MEDIA_TYPE)
    if _flag(request, "hlserror"):
        logger.info("Track %s: forced manifest error", track_id)
        raise _injected_error("Forced manifest error")
    if _flag(request, "timeout"):
        logger.info("Track %s: forced manifest timeout", track_id)
        return _held_open(lambda: "Fail")

    manifest = render(state, store.now(), settings.lookahead_seconds)
    return Response(manifest, media_type=PLAYLIST_MEDIA_TYPE)


def handle_segment(request: Request, track_id: str, resource_path: str) -> Response:
    try:
        state = store.require(track_id)
    except TrackNotFoundError as e:
        raise _not_found(str(e), code="UNKNOWN_TRACK")

    fault = faults.consume_segment_fault(state)
    if fault is SegmentFault.TIMEOUT:
        logger.info("Track %s: segment timeout, %d left", track_id, state.pending_timeouts)
        return _held_open(lambda: f"timeoutcount {state.pending_timeouts}")
    if fault is SegmentFault.ERROR:
        logger.info("Track %s: segment error, %d left", track_id, state.pending_errors)
        raise _injected_error(f"failcount {state.pending_errors}")

    try:
        path = resolve(resource_path)
    except MediaNotFoundError:
        raise _not_found("Segment not found")
    return FileResponse(path, media_type=SEGMENT_MEDIA_TYPE)


def handle_unknown(request: Request, track_id: str, resource_path: str) -> Response:
    raise _not_found(f"Unsupported resource: {resource_path}")


HANDLERS = {
    RequestKind.ACTION: handle_action,
    RequestKind.MANIFEST: handle_manifest,
    RequestKind.SEGMENT: handle_segment,
    RequestKind.UNKNOWN: handle_unknown,
}


@router.get("/{track_id}/{resource_path:path}")
async def dispatch(request: Request, track_id: str, resource_path: str):
    """
    Single entry point for simulated tracks.

    - .../action?stop=true|timeout=true|mp3error=true|reset=true: fault control
    - ....m3u8[?vod=true|hlserror=true|timeout=true]: live manifest window
    - ....mp3: segment bytes, unless a fault is pending

    Handlers run synchronously on the event loop, so per-track state is
    never mutated by two requests at once.
    """
    kind = classify(resource_path)
    return HANDLERS[kind](request, track_id, resource_path)
