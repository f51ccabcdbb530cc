from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

TEXT_INPUT_TARGETS = frozenset({"input", "textarea"})


@dataclass(frozen=True)
class KeyEvent:
    key: str
    target: str | None = None

    @property
    def from_text_input(self) -> bool:
        return (self.target or "").lower() in TEXT_INPUT_TARGETS


KeyHandler = Callable[[KeyEvent], object]
Unsubscribe = Callable[[], None]


class KeyboardSource(Protocol):
    def subscribe(self, handler: KeyHandler) -> Unsubscribe:
        raise NotImplementedError


class KeyboardHub:
    """Keyboard events for one view; each subscriber owns its own registration."""

    def __init__(self) -> None:
        self._handlers: list[KeyHandler] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: KeyHandler) -> Unsubscribe:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def press(self, key: str, target: str | None = None) -> None:
        event = KeyEvent(key=key, target=target)
        for handler in list(self._handlers):
            handler(event)
