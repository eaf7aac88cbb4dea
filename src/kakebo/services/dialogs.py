"""Finite state machine shared by the diagnosis and report dialogs."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger("kakebo.dialogs")


class DialogState(Enum):
    CLOSED = "closed"
    LOADING = "loading"
    READY = "ready"

    @property
    def is_open(self) -> bool:
        return self is not DialogState.CLOSED


DialogListener = Callable[["DialogMachine"], None]


class DialogMachine:
    """``CLOSED -> LOADING -> READY -> CLOSED`` with request tokens.

    Each :meth:`begin` issues a new token. :meth:`resolve` only applies the
    result of the latest token, so a slow earlier request can never overwrite a
    newer one. A result that lands after the dialog was closed only updates the
    content; it never reopens the dialog.
    """

    def __init__(self, name: str, *, restartable: bool = False) -> None:
        self.name = name
        self.restartable = restartable
        self._state = DialogState.CLOSED
        self._content = ""
        self._token = 0
        self._listeners: list[DialogListener] = []

    @property
    def state(self) -> DialogState:
        return self._state

    @property
    def content(self) -> str:
        return self._content

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def is_loading(self) -> bool:
        return self._state is DialogState.LOADING

    @property
    def current_token(self) -> int:
        return self._token

    def subscribe(self, listener: DialogListener) -> Callable[[], None]:
        """Register a transition listener; returns an unsubscribe callable."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def begin(self) -> Optional[int]:
        """Open the dialog in LOADING state and return the request token.

        Returns None when the dialog is already open and not restartable.
        """

        if self.is_open and not self.restartable:
            logger.debug("Dialog already open", extra={"dialog": self.name})
            return None
        self._token += 1
        self._content = ""
        self._transition(DialogState.LOADING)
        return self._token

    def resolve(self, token: int, content: str) -> bool:
        """Apply a collaborator result; returns False for stale tokens."""

        if token != self._token:
            logger.info(
                "Dropped stale dialog result",
                extra={"dialog": self.name, "token": token, "latest": self._token},
            )
            return False
        self._content = content
        if self._state is DialogState.LOADING:
            self._transition(DialogState.READY)
        return True

    def close(self) -> bool:
        """User acknowledgment; closing a closed dialog is a no-op."""

        if not self.is_open:
            logger.debug("Close ignored; dialog not open", extra={"dialog": self.name})
            return False
        self._transition(DialogState.CLOSED)
        return True

    def reset(self) -> None:
        """Close and forget content; results still in flight are discarded.

        Listeners are not notified here so the caller can finish the rest of a
        bulk reset first and then call :meth:`notify`.
        """

        self._token += 1
        self._content = ""
        if self.is_open:
            self._transition(DialogState.CLOSED, notify=False)

    def notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                # listener errors never reach the caller
                logger.exception("Dialog listener failed", extra={"dialog": self.name})

    def _transition(self, new_state: DialogState, *, notify: bool = True) -> None:
        previous, self._state = self._state, new_state
        logger.debug(
            "Dialog transition",
            extra={"dialog": self.name, "from": previous.value, "to": new_state.value},
        )
        if notify:
            self.notify()


__all__ = ["DialogListener", "DialogMachine", "DialogState"]
