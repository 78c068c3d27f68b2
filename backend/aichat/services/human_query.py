"""
Human query state machine.

Shows a deadline-bound quick pick with an extra "Other" entry and resolves to the
item the human picked, to free text typed after choosing "Other", or to
"timeout" / "cancelled".

Accept, hide and the deadline race for a single resolution. Each one goes
through _resolve(), which checks and sets the ``resolved`` guard, so
only the first one acts. Every terminal transition cancels the deadline handle
and disposes the widgets.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import DEFAULT_ENGAGEMENT_GRACE_SECONDS
from ..ui.widgets import InputBox, PickItem, QuickPick, WidgetFactory

logger = logging.getLogger(__name__)

TIMEOUT = "timeout"
CANCELLED = "cancelled"

OTHER_LABEL = "Other"
OTHER_DESCRIPTION = "Enter custom value"


class HumanQueryPhase(Enum):
    """Human query lifecycle phase"""
    IDLE = "idle"
    SHOWN = "shown"
    ANSWERED = "answered"
    TIMED_OUT = "timed-out"
    CANCELLED = "cancelled"
    AWAITING_FREE_TEXT = "awaiting-free-text"


@dataclass
class HumanQueryState:
    phase: HumanQueryPhase = HumanQueryPhase.IDLE
    selection: List[PickItem] = field(default_factory=list)
    engagement_count: int = 0
    resolved: bool = False
    timed_out: bool = False


def _label_of(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, PickItem):
        return item.label
    if isinstance(item, Mapping):
        return str(item.get("label", ""))
    return str(getattr(item, "label", item))


def _to_pick_item(item: Any) -> PickItem:
    if isinstance(item, PickItem):
        return item
    if isinstance(item, Mapping):
        return PickItem(
            label=_label_of(item),
            description=item.get("description"),
            detail=item.get("detail"),
        )
    return PickItem(label=_label_of(item))


def prepare_items(items: Sequence[Any]) -> Tuple[Dict[str, Any], List[PickItem]]:
    """Map labels to caller items and build the display list with the Other sentinel."""
    original_items_map = {_label_of(item): item for item in items}
    display_items = [_to_pick_item(item) for item in items]
    display_items.append(PickItem(label=OTHER_LABEL, description=OTHER_DESCRIPTION))
    return original_items_map, display_items


def is_sentinel(item: PickItem) -> bool:
    return item.label == OTHER_LABEL and item.description == OTHER_DESCRIPTION


class HumanQuery:
    """
    One interactive question. Create a new instance per question.

    Engagement: every active-item change bumps a counter. The first change is the
    widget focusing its first item; once a later change arrives and the grace
    period since display has passed, the deadline is cancelled for good.
    """

    def __init__(self, factory: WidgetFactory, grace_seconds: float = DEFAULT_ENGAGEMENT_GRACE_SECONDS):
        self.factory = factory
        self.grace_seconds = grace_seconds
        self.state = HumanQueryState()
        self._future: Optional[asyncio.Future] = None
        self._deadline: Optional[asyncio.TimerHandle] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._shown_at = 0.0
        self._quick_pick: Optional[QuickPick] = None
        self._input_box: Optional[InputBox] = None
        self._original_items_map: Dict[str, Any] = {}
        self._question = ""
        self._context = ""

    @property
    def deadline_armed(self) -> bool:
        return self._deadline is not None

    async def ask(self, question: str, context: str, items: Sequence[Any], timeout_seconds: float) -> Any:
        """
        Show the question and wait for the first terminal transition.

        Returns:
            The caller's original item, the typed text (or a list of the selected
            items followed by the text), TIMEOUT or CANCELLED.
        """
        if self.state.phase != HumanQueryPhase.IDLE:
            raise RuntimeError("HumanQuery instances are single-use")

        self._loop = asyncio.get_running_loop()
        self._future = self._loop.create_future()
        self._question = question
        self._context = context
        self._original_items_map, display_items = prepare_items(items)

        quick_pick = self.factory.create_quick_pick()
        quick_pick.title = question
        quick_pick.placeholder = context
        quick_pick.items = display_items
        quick_pick.ignore_focus_out = True
        quick_pick.can_select_many = False
        self._quick_pick = quick_pick

        # Handlers go in before show() so no event is missed
        quick_pick.on_did_accept(self._on_quick_pick_accept)
        quick_pick.on_did_hide(self._on_quick_pick_hide)
        quick_pick.on_did_change_active(self._on_change_active)

        quick_pick.show()
        self.state.phase = HumanQueryPhase.SHOWN
        self._shown_at = self._loop.time()
        self._deadline = self._loop.call_later(timeout_seconds, self._on_deadline)
        logger.info(f"Human query shown: {question!r} ({len(display_items)} items, timeout {timeout_seconds}s)")

        try:
            return await self._future
        except asyncio.CancelledError:
            self._resolve(HumanQueryPhase.CANCELLED, CANCELLED)
            raise

    # -----------------------------
    # Terminal transition
    # -----------------------------
    def _resolve(self, phase: HumanQueryPhase, value: Any) -> bool:
        if self.state.resolved:
            return False
        self.state.resolved = True
        self.state.phase = phase
        self._cancel_deadline()

        if self._future is not None and not self._future.done():
            self._future.set_result(value)

        self._dispose_quick_pick()
        self._dispose_input_box()
        logger.info(f"Human query resolved: {phase.value}")
        return True

    def _cancel_deadline(self) -> None:
        if self._deadline is not None:
            self._deadline.cancel()
            self._deadline = None

    def _dispose_quick_pick(self) -> None:
        quick_pick, self._quick_pick = self._quick_pick, None
        if quick_pick is not None:
            quick_pick.dispose()

    def _dispose_input_box(self) -> None:
        input_box, self._input_box = self._input_box, None
        if input_box is not None:
            input_box.dispose()

    # -----------------------------
    # Quick pick events
    # -----------------------------
    def _on_change_active(self, _items: List[PickItem]) -> None:
        if self.state.resolved:
            return
        previous = self.state.engagement_count
        self.state.engagement_count += 1
        if self._deadline is None or previous == 0:
            return
        if self._loop.time() - self._shown_at >= self.grace_seconds:
            self._cancel_deadline()
            logger.debug("Human query: user engaged, timeout disabled")

    def _on_quick_pick_accept(self) -> None:
        if self.state.resolved or self.state.phase != HumanQueryPhase.SHOWN or self._quick_pick is None:
            return
        selected = list(self._quick_pick.selected_items)
        if not selected:
            return
        self.state.selection = selected

        if any(is_sentinel(item) for item in selected):
            self._cancel_deadline()
            self.state.phase = HumanQueryPhase.AWAITING_FREE_TEXT
            self._dispose_quick_pick()
            self._open_input_box()
            return

        answers = [self._original_item(item) for item in selected]
        self._resolve(HumanQueryPhase.ANSWERED, answers[0] if len(answers) == 1 else answers)

    def _on_quick_pick_hide(self) -> None:
        if self.state.resolved or self.state.phase != HumanQueryPhase.SHOWN:
            return
        if self.state.timed_out:
            self._resolve(HumanQueryPhase.TIMED_OUT, TIMEOUT)
        else:
            self._resolve(HumanQueryPhase.CANCELLED, CANCELLED)

    def _on_deadline(self) -> None:
        self._deadline = None
        if self.state.resolved or self.state.phase != HumanQueryPhase.SHOWN:
            return
        self.state.timed_out = True
        self._resolve(HumanQueryPhase.TIMED_OUT, TIMEOUT)

    def _original_item(self, item: PickItem) -> Any:
        return self._original_items_map.get(item.label, item.label)

    # -----------------------------
    # Free-text fallback
    # -----------------------------
    def _open_input_box(self) -> None:
        input_box = self.factory.create_input_box()
        input_box.title = self._question
        input_box.placeholder = self._context
        input_box.ignore_focus_out = True
        self._input_box = input_box

        input_box.on_did_accept(self._on_input_box_accept)
        input_box.on_did_hide(self._on_input_box_hide)
        input_box.show()

    def _on_input_box_accept(self) -> None:
        if self.state.resolved or self._input_box is None:
            return
        typed = self._input_box.value
        chosen = [self._original_item(item) for item in self.state.selection if not is_sentinel(item)]
        self._resolve(HumanQueryPhase.ANSWERED, [*chosen, typed] if chosen else typed)

    def _on_input_box_hide(self) -> None:
        if self.state.resolved:
            return
        self._resolve(HumanQueryPhase.CANCELLED, CANCELLED)


async def ask(
    question: str,
    context: str,
    items: Sequence[Any],
    timeout_seconds: float,
    *,
    factory: WidgetFactory,
    grace_seconds: float = DEFAULT_ENGAGEMENT_GRACE_SECONDS,
) -> Any:
    """Ask the human a question; see HumanQuery.ask()."""
    return await HumanQuery(factory, grace_seconds=grace_seconds).ask(question, context, items, timeout_seconds)
