"""Main view mode and full-screen component selection."""

from dataclasses import dataclass, replace
from enum import Enum

from agent_chat.config import FULL_SCREEN_UI_NAME
from agent_chat.models.snapshot import ConversationSnapshot, UIPayload


class ViewMode(str, Enum):
    """What the main content area shows."""

    EMPTY = "empty"
    AWAITING_FIRST_TOKEN = "awaiting_first_token"
    CONVERSATION = "conversation"
    FULL_SCREEN = "full_screen"


@dataclass(frozen=True)
class ViewState:
    """Resolved view mode plus the bits needed to compute the next one."""

    mode: ViewMode = ViewMode.EMPTY
    first_token_received: bool = False
    full_screen: UIPayload | None = None

    def submitted(self) -> "ViewState":
        """State right after a new turn is submitted."""
        return replace(self, first_token_received=False)


def select_full_screen(snapshot: ConversationSnapshot, marker: str = FULL_SCREEN_UI_NAME) -> UIPayload | None:
    """Return the most recent full-screen UI payload, if any."""
    candidates = [payload for payload in snapshot.ui if payload.name == marker]
    if not candidates:
        return None
    return candidates[-1]


def first_token_arrived(previous: ConversationSnapshot | None, snapshot: ConversationSnapshot) -> bool:
    """Whether `snapshot` delivered a new message that ends the thread with an ai turn."""
    previous_count = len(previous.messages) if previous else 0
    if len(snapshot.messages) == previous_count or not snapshot.messages:
        return False
    return snapshot.messages[-1].type == "ai"


def resolve_view_state(
    state: ViewState,
    previous: ConversationSnapshot | None,
    snapshot: ConversationSnapshot,
    chat_started: bool,
    marker: str = FULL_SCREEN_UI_NAME,
) -> ViewState:
    """Compute the view state after `snapshot` replaces `previous`.

    A full-screen payload overrides every other mode. Otherwise an unstarted
    chat is empty, a loading run without an ai turn yet awaits its first
    token, and anything else shows the conversation.
    """
    first_token_received = state.first_token_received or first_token_arrived(previous, snapshot)
    full_screen = select_full_screen(snapshot, marker)

    if full_screen is not None:
        mode = ViewMode.FULL_SCREEN
    elif not chat_started:
        mode = ViewMode.EMPTY
    elif snapshot.is_loading and not first_token_received:
        mode = ViewMode.AWAITING_FIRST_TOKEN
    else:
        mode = ViewMode.CONVERSATION

    return ViewState(mode=mode, first_token_received=first_token_received, full_screen=full_screen)
