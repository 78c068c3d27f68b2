"""
Interactive UI capability contracts.

The agent never renders widgets itself. A front end supplies a WidgetFactory whose
quick picks and input boxes call the fire_* methods when the user acts; the
human query state machine only subscribes to those events.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

Handler = Callable[..., None]


@dataclass
class PickItem:
    """Display wrapper for a selectable entry"""
    label: str
    description: Optional[str] = None
    detail: Optional[str] = None


class _EventSource:
    """Handler lists with subscribe/unsubscribe and synchronous emission"""

    def __init__(self):
        self._handlers = {}

    def _subscribe(self, event: str, handler: Handler) -> Callable[[], None]:
        handlers = self._handlers.setdefault(event, [])
        handlers.append(handler)

        def unsubscribe() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def _emit(self, event: str, *args: Any) -> None:
        for handler in list(self._handlers.get(event, [])):
            handler(*args)


class QuickPick(_EventSource, ABC):
    """Selectable list widget"""

    def __init__(self):
        super().__init__()
        self.title: str = ""
        self.placeholder: str = ""
        self.items: List[PickItem] = []
        self.ignore_focus_out: bool = False
        self.can_select_many: bool = False
        self.selected_items: List[PickItem] = []
        self.active_items: List[PickItem] = []

    def on_did_accept(self, handler: Callable[[], None]) -> Callable[[], None]:
        return self._subscribe("accept", handler)

    def on_did_hide(self, handler: Callable[[], None]) -> Callable[[], None]:
        return self._subscribe("hide", handler)

    def on_did_change_active(self, handler: Callable[[List[PickItem]], None]) -> Callable[[], None]:
        return self._subscribe("change_active", handler)

    def fire_accept(self) -> None:
        self._emit("accept")

    def fire_hide(self) -> None:
        self._emit("hide")

    def fire_change_active(self, items: List[PickItem]) -> None:
        self.active_items = list(items)
        self._emit("change_active", self.active_items)

    @abstractmethod
    def show(self) -> None:
        """Render the widget"""
        pass

    @abstractmethod
    def dispose(self) -> None:
        """Close the widget and release its resources"""
        pass


class InputBox(_EventSource, ABC):
    """Free-text entry widget"""

    def __init__(self):
        super().__init__()
        self.title: str = ""
        self.placeholder: str = ""
        self.ignore_focus_out: bool = False
        self.value: str = ""

    def on_did_accept(self, handler: Callable[[], None]) -> Callable[[], None]:
        return self._subscribe("accept", handler)

    def on_did_hide(self, handler: Callable[[], None]) -> Callable[[], None]:
        return self._subscribe("hide", handler)

    def fire_accept(self) -> None:
        self._emit("accept")

    def fire_hide(self) -> None:
        self._emit("hide")

    @abstractmethod
    def show(self) -> None:
        pass

    @abstractmethod
    def dispose(self) -> None:
        pass


class WidgetFactory(ABC):
    """Creates widgets for one front end"""

    @abstractmethod
    def create_quick_pick(self) -> QuickPick:
        pass

    @abstractmethod
    def create_input_box(self) -> InputBox:
        pass
