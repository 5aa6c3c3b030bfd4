"""API endpoints exposing the thread controller."""

from datetime import UTC, datetime
from functools import lru_cache

from fastapi import APIRouter, Depends

from agent_chat import __version__
from agent_chat.clients.langgraph import LangGraphStreamChannel
from agent_chat.config import ClientConfig
from agent_chat.models.api import (
    CancelResponse,
    HealthResponse,
    NewThreadRequest,
    NewThreadResponse,
    SubmitRequest,
    SubmitResponse,
    ThreadStateResponse,
    ViewResponse,
)
from agent_chat.services.thread import ThreadController
from agent_chat.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@lru_cache
def get_thread_controller() -> ThreadController:
    """Controller for the single active thread, created on first use."""
    config = ClientConfig.from_env()
    logger.info(f"Connecting to {config.api_url} (assistant {config.assistant_id})")
    channel = LangGraphStreamChannel(config)
    return ThreadController(channel, full_screen_ui_name=config.full_screen_ui_name)


@router.post("/thread/submit", response_model=SubmitResponse, tags=["Thread"])
async def submit(request: SubmitRequest, controller: ThreadController = Depends(get_thread_controller)) -> SubmitResponse:
    """Submit a human turn. Empty input or a run in progress is ignored."""
    payload = controller.submit(request.text, request.attachments, request.context)
    if payload is None:
        logger.info("Submission rejected: empty input or run in progress")
    return SubmitResponse(accepted=payload is not None, view=ViewResponse.from_state(controller.view_state))


@router.post("/thread/cancel", response_model=CancelResponse, tags=["Thread"])
async def cancel(controller: ThreadController = Depends(get_thread_controller)) -> CancelResponse:
    """Stop the run in progress, if any."""
    cancelled = controller.request_cancel()
    return CancelResponse(cancelled=cancelled, view=ViewResponse.from_state(controller.view_state))


@router.post("/thread/new", response_model=NewThreadResponse, tags=["Thread"])
async def new_thread(
    request: NewThreadRequest, controller: ThreadController = Depends(get_thread_controller)
) -> NewThreadResponse:
    """Switch to an existing thread or start a new one. An existing thread is loaded first."""
    await controller.new_thread(request.thread_id)
    return NewThreadResponse(thread_id=controller.thread_id, view=ViewResponse.from_state(controller.view_state))


@router.get("/thread/state", response_model=ThreadStateResponse, tags=["Thread"])
async def thread_state(controller: ThreadController = Depends(get_thread_controller)) -> ThreadStateResponse:
    """Current thread as the view renders it."""
    snapshot = controller.snapshot
    return ThreadStateResponse(
        thread_id=controller.thread_id,
        messages=controller.visible_messages(),
        ui=snapshot.ui,
        is_loading=snapshot.is_loading,
        error=snapshot.error,
        view=ViewResponse.from_state(controller.view_state),
    )


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
    )
