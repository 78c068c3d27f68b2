"""
Tests for the human query state machine
"""

import asyncio
from dataclasses import fields

import pytest

from aichat.services.human_query import (
    CANCELLED,
    TIMEOUT,
    HumanQuery,
    HumanQueryPhase,
    ask,
    is_sentinel,
    prepare_items,
)
from aichat.ui.widgets import InputBox, PickItem, QuickPick, WidgetFactory


class FakeQuickPick(QuickPick):
    """Disposal hides the widget, as real front ends do"""

    def __init__(self):
        super().__init__()
        self.shown = 0
        self.disposed = 0

    def show(self):
        self.shown += 1

    def dispose(self):
        self.disposed += 1
        self.fire_hide()

    def select(self, *labels):
        self.selected_items = [item for item in self.items if item.label in labels]
        self.fire_accept()


class FakeInputBox(InputBox):
    def __init__(self):
        super().__init__()
        self.shown = 0
        self.disposed = 0

    def show(self):
        self.shown += 1

    def dispose(self):
        self.disposed += 1
        self.fire_hide()

    def submit(self, text):
        self.value = text
        self.fire_accept()


class FakeFactory(WidgetFactory):
    def __init__(self):
        self.quick_picks = []
        self.input_boxes = []

    def create_quick_pick(self):
        quick_pick = FakeQuickPick()
        self.quick_picks.append(quick_pick)
        return quick_pick

    def create_input_box(self):
        input_box = FakeInputBox()
        self.input_boxes.append(input_box)
        return input_box


async def _start(query, items, timeout=5.0, question="Deploy?", context="choose a target"):
    task = asyncio.create_task(query.ask(question, context, items, timeout))
    # let ask() run up to its await
    await asyncio.sleep(0)
    return task


class TestPrepareItems:
    """Test display list construction"""

    def test_sentinel_is_appended(self):
        original, display = prepare_items(["a", PickItem("b", "bee"), {"label": "c", "description": "sea"}])
        assert [item.label for item in display] == ["a", "b", "c", "Other"]
        assert is_sentinel(display[-1])
        assert display[-1].description == "Enter custom value"
        assert display[2].description == "sea"
        assert set(original) == {"a", "b", "c"}

    def test_plain_other_item_is_not_the_sentinel(self):
        _, display = prepare_items(["Other"])
        assert not is_sentinel(display[0])
        assert is_sentinel(display[1])

    def test_display_items_carry_only_label_description_detail(self):
        _, display = prepare_items([{"label": "c", "description": "sea", "detail": "d", "region": "eu"}])
        assert [f.name for f in fields(PickItem)] == ["label", "description", "detail"]
        assert display[0] == PickItem(label="c", description="sea", detail="d")


@pytest.mark.asyncio
class TestAnswer:
    """Accepting an item"""

    async def test_accept_returns_exact_original_item(self):
        factory = FakeFactory()
        items = [{"label": "staging", "region": "eu"}, {"label": "prod", "region": "us"}]
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, items)

        quick_pick = factory.quick_picks[0]
        quick_pick.select("prod")

        assert await task is items[1]
        assert query.state.phase == HumanQueryPhase.ANSWERED
        assert query.deadline_armed is False

    async def test_quick_pick_configuration(self):
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, ["yes", "no"])

        quick_pick = factory.quick_picks[0]
        assert quick_pick.title == "Deploy?"
        assert quick_pick.placeholder == "choose a target"
        assert quick_pick.ignore_focus_out is True
        assert quick_pick.can_select_many is False
        assert quick_pick.shown == 1
        assert query.state.phase == HumanQueryPhase.SHOWN
        assert query.deadline_armed is True

        quick_pick.select("yes")
        assert await task == "yes"
        assert quick_pick.disposed == 1

    async def test_accept_without_selection_is_ignored(self):
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, ["yes"])

        factory.quick_picks[0].fire_accept()
        await asyncio.sleep(0)
        assert not task.done()

        factory.quick_picks[0].select("yes")
        assert await task == "yes"


@pytest.mark.asyncio
class TestTimeoutAndCancel:
    """Deadline and hide"""

    async def test_untouched_deadline_times_out(self):
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, ["yes"], timeout=0.05)

        assert await task == TIMEOUT
        assert query.state.phase == HumanQueryPhase.TIMED_OUT
        assert query.state.timed_out is True
        assert factory.quick_picks[0].disposed == 1

    async def test_hide_without_accept_cancels(self):
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, ["yes"])

        factory.quick_picks[0].fire_hide()

        assert await task == CANCELLED
        assert query.state.phase == HumanQueryPhase.CANCELLED
        assert query.deadline_armed is False

    async def test_first_active_change_does_not_disable_deadline(self):
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, ["yes", "no"], timeout=0.05)

        quick_pick = factory.quick_picks[0]
        quick_pick.fire_change_active(quick_pick.items[:1])
        assert query.deadline_armed is True
        assert await task == TIMEOUT

    async def test_engagement_disables_deadline(self):
        """Test a second active change after the grace period cancels the deadline for good"""
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, ["yes", "no"], timeout=0.05)

        quick_pick = factory.quick_picks[0]
        quick_pick.fire_change_active(quick_pick.items[:1])
        quick_pick.fire_change_active(quick_pick.items[1:2])
        assert query.deadline_armed is False
        assert query.state.engagement_count == 2

        await asyncio.sleep(0.1)
        assert not task.done()

        quick_pick.select("no")
        assert await task == "no"

    async def test_active_changes_inside_grace_keep_deadline(self):
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=30)
        task = await _start(query, ["yes", "no"], timeout=0.05)

        quick_pick = factory.quick_picks[0]
        quick_pick.fire_change_active(quick_pick.items[:1])
        quick_pick.fire_change_active(quick_pick.items[1:2])
        assert query.deadline_armed is True
        assert await task == TIMEOUT


@pytest.mark.asyncio
class TestFreeText:
    """The Other sentinel"""

    async def test_other_then_text_returns_typed_text(self):
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, ["staging", "prod"], timeout=0.05)

        factory.quick_picks[0].select("Other")
        assert query.state.phase == HumanQueryPhase.AWAITING_FREE_TEXT
        assert query.deadline_armed is False
        assert factory.quick_picks[0].disposed == 1

        # the quick pick deadline no longer applies
        await asyncio.sleep(0.1)
        assert not task.done()

        input_box = factory.input_boxes[0]
        assert input_box.title == "Deploy?"
        assert input_box.placeholder == "choose a target"
        assert input_box.ignore_focus_out is True
        assert input_box.shown == 1
        input_box.submit("qa-cluster")

        assert await task == "qa-cluster"
        assert query.state.phase == HumanQueryPhase.ANSWERED
        assert input_box.disposed == 1

    async def test_other_then_hide_cancels(self):
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, ["staging"])

        factory.quick_picks[0].select("Other")
        factory.input_boxes[0].fire_hide()

        assert await task == CANCELLED
        assert query.state.phase == HumanQueryPhase.CANCELLED

    async def test_other_combined_with_selected_items(self):
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, ["staging", "prod"])

        quick_pick = factory.quick_picks[0]
        quick_pick.selected_items = [quick_pick.items[0], quick_pick.items[-1]]
        quick_pick.fire_accept()
        factory.input_boxes[0].submit("canary")

        assert await task == ["staging", "canary"]


@pytest.mark.asyncio
class TestSingleResolution:
    """Exactly one terminal outcome per question"""

    async def test_later_producers_are_ignored(self):
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, ["yes", "no"], timeout=0.05)

        quick_pick = factory.quick_picks[0]
        quick_pick.select("yes")
        quick_pick.select("no")
        quick_pick.fire_hide()
        await asyncio.sleep(0.1)

        assert await task == "yes"
        assert query.state.phase == HumanQueryPhase.ANSWERED
        assert quick_pick.disposed == 1

    async def test_external_cancellation_cleans_up(self):
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, ["yes"])

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert query.state.phase == HumanQueryPhase.CANCELLED
        assert query.deadline_armed is False
        assert factory.quick_picks[0].disposed == 1

    async def test_instances_are_single_use(self):
        factory = FakeFactory()
        query = HumanQuery(factory, grace_seconds=0)
        task = await _start(query, ["yes"])
        factory.quick_picks[0].select("yes")
        await task

        with pytest.raises(RuntimeError):
            await query.ask("again?", "", ["yes"], 1)


@pytest.mark.asyncio
async def test_module_level_ask():
    factory = FakeFactory()
    task = asyncio.create_task(ask("Deploy?", "", [PickItem("prod", "live")], 5, factory=factory, grace_seconds=0))
    await asyncio.sleep(0)
    factory.quick_picks[0].select("prod")
    answer = await task
    assert isinstance(answer, PickItem)
    assert answer.label == "prod"
