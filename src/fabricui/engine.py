"""Request orchestration: from a submitted form to an updated transcript."""

import enum
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Literal, Optional

from .exceptions import (
    InvalidSelection,
    InvocationFailure,
    InvocationTimeout,
    SubmissionRejected,
)
from .models import (
    ASSISTANT_ROLE,
    FAILED_STATUS,
    USER_ROLE,
    ChatMessage,
    ChatSession,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."
BUSY_MESSAGE = "A request is already running. Wait for it to finish."

FailurePolicy = Literal["discard", "record"]


class EngineState(str, enum.Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


class Engine(ABC):
    """Orchestrates the pillars for a single submission.

    The engine may be created without an app and bound later; FabricUI binds
    itself when constructed.
    """

    def __init__(self, app: Any = None):
        self.app = app

    @abstractmethod
    def handle_submission(
        self,
        raw_input: Optional[str],
        pattern: Optional[str],
        model: Optional[str],
        active_session_id: Optional[str],
        record: Optional[str],
    ) -> Dict[str, Any]:
        """Runs one submission and returns the new UI state."""
        pass


class Synchronous(Engine):
    """Runs one submission at a time, blocking until the tool finishes.

    Parameters
    ----------
    app : FabricUI, optional
        The application whose pillars are used.
    failure_policy : {"discard", "record"}, default="discard"
        ``"discard"`` shows failures without persisting them; ``"record"``
        persists the exchange with the assistant message marked as failed.
    strict_selections : bool, default=False
        Reject patterns and models that are not in the catalog instead of
        letting the external tool fail on them.
    """

    def __init__(
        self,
        app: Any = None,
        failure_policy: FailurePolicy = "discard",
        strict_selections: bool = False,
    ):
        super().__init__(app)
        if failure_policy not in ("discard", "record"):
            raise ValueError(f"Unknown failure policy: {failure_policy!r}")
        self.failure_policy = failure_policy
        self.strict_selections = strict_selections
        self._lock = threading.Lock()

    @property
    def state(self) -> EngineState:
        return EngineState.IN_FLIGHT if self._lock.locked() else EngineState.IDLE

    # --- Submission ---

    def handle_submission(
        self, raw_input, pattern, model, active_session_id, record
    ) -> Dict[str, Any]:
        store = self.app.store(record)
        session = store.get(active_session_id)
        active_id = session.id if session else None

        if not raw_input or not raw_input.strip():
            return self._result(store, session, active_id, output=None, input_value=raw_input)

        try:
            self._begin()
        except SubmissionRejected as exc:
            logger.warning("Rejected a submission while another is in flight")
            return self._result(
                store, session, active_id, output=BUSY_MESSAGE, error=str(exc), input_value=raw_input
            )

        try:
            return self._dispatch(store, session, raw_input, pattern or "", model or "")
        finally:
            self._lock.release()

    def _begin(self) -> None:
        if not self._lock.acquire(blocking=False):
            raise SubmissionRejected(BUSY_MESSAGE)

    def _dispatch(self, store, session, raw_input, pattern, model) -> Dict[str, Any]:
        active_id = session.id if session else None
        try:
            self._check_selection(pattern, model)
            invocation = self.app.builder.build_from(raw_input, pattern, model)
            output = self.app.runner.run(invocation)
        except (InvocationFailure, InvocationTimeout, InvalidSelection) as exc:
            logger.error("Submission failed: %s", exc)
            message = f"Error: {exc}"
            if self.failure_policy == "record":
                session = self._append_exchange(
                    store, session, raw_input, message, status=FAILED_STATUS
                )
                active_id = session.id
            return self._result(
                store, session, active_id, output=message, error=str(exc), input_value=raw_input
            )
        except Exception as exc:
            logger.exception("Unexpected error while processing a submission")
            return self._result(
                store,
                session,
                active_id,
                output=GENERIC_ERROR_MESSAGE,
                error=str(exc),
                input_value=raw_input,
            )

        session = self._append_exchange(store, session, raw_input, output)
        return self._result(store, session, session.id, output=output, input_value="")

    def _check_selection(self, pattern: str, model: str) -> None:
        if not self.strict_selections:
            return
        catalog = self.app.catalog
        if pattern not in catalog.list_patterns():
            raise InvalidSelection(f"Unknown pattern: {pattern!r}")
        if model not in catalog.list_models():
            raise InvalidSelection(f"Unknown model: {model!r}")

    def _append_exchange(
        self,
        store,
        session: Optional[ChatSession],
        raw_input: str,
        reply: str,
        status: Optional[str] = None,
    ) -> ChatSession:
        if session is None:
            title = f"Chat {len(store.load()) + 1}"
            session = ChatSession(id=store.new_session_id(), title=title)
        messages = [
            *session.messages,
            ChatMessage(role=USER_ROLE, content=raw_input),
            ChatMessage(role=ASSISTANT_ROLE, content=reply, status=status),
        ]
        session = session.model_copy(update={"messages": messages})
        store.save(session)
        return session

    # --- Navigation ---

    def new_chat(self) -> Dict[str, Any]:
        """Clears the active session. Nothing is deleted."""
        return {"active_session_id": None, "messages": [], "output": None}

    def select_session(self, session_id: Optional[str], record: Optional[str]) -> Dict[str, Any]:
        """Activates a persisted session; unknown IDs resolve to no session."""
        store = self.app.store(record)
        session = store.get(session_id)
        return {
            "active_session_id": session.id if session else None,
            "messages": self._render(session),
            "output": None,
        }

    # --- Helpers ---

    def _render(self, session: Optional[ChatSession]) -> List[Any]:
        if session is None:
            return []
        return self.app.layout_builder.build_messages(session.messages)

    def _result(
        self,
        store,
        session: Optional[ChatSession],
        active_id: Optional[str],
        output: Optional[str],
        error: Optional[str] = None,
        input_value: Optional[str] = "",
    ) -> Dict[str, Any]:
        return {
            "record": store.record,
            "active_session_id": active_id,
            "messages": self._render(session),
            "output": output,
            "error": error,
            "input_value": input_value,
        }
