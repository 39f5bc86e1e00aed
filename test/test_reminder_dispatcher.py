"""
Тесты рассылки напоминаний: рендеринг писем и изоляция ошибок.
"""

import asyncio
import pytest
import uuid
from datetime import datetime
from types import SimpleNamespace
from zoneinfo import ZoneInfo

from app.models.task import TaskPriority, TaskStatus
from app.schemas.reminder import DeliveryStatus
from app.services.mail_client import MailResult
from app.services.reminder_dispatcher import ReminderDispatcher, ReminderRenderer
from app.services.task_selector import ReminderTarget
from mocks.mail_mock import FakeMailer


UTC = ZoneInfo("UTC")


def make_target(email, title="Complete Project", description="Finish the todo app project"):
    task = SimpleNamespace(
        id=uuid.uuid4(),
        title=title,
        description=description,
        due_date=datetime(2024, 3, 20, 10, 0, tzinfo=UTC),
        priority=TaskPriority.HIGH,
        status=TaskStatus.IN_PROGRESS,
    )
    user = SimpleNamespace(id=uuid.uuid4(), email=email)
    return ReminderTarget(task=task, user=user)


def make_dispatcher(mailer, concurrency=1):
    return ReminderDispatcher(mailer, concurrency=concurrency, renderer=ReminderRenderer(tz=UTC))


class TestRenderer:
    """Тесты формирования письма."""

    def test_subject_references_title(self):
        renderer = ReminderRenderer(tz=UTC)
        assert renderer.subject(make_target("a@example.com")) == "Todo Reminder: Complete Project"

    def test_body_contains_task_details(self):
        body = ReminderRenderer(tz=UTC).body(make_target("a@example.com"))

        assert "2024-03-20" in body
        assert "Finish the todo app project" in body
        assert "High" in body
        assert "In Progress" in body

    def test_missing_description_placeholder(self):
        body = ReminderRenderer(tz=UTC).body(make_target("a@example.com", description=None))
        assert "No description" in body

    def test_user_values_are_html_escaped(self):
        target = make_target("a@example.com", title="<script>alert(1)</script>", description="a & b")
        body = ReminderRenderer(tz=UTC).body(target)

        assert "<script>" not in body
        assert "&lt;script&gt;" in body
        assert "a &amp; b" in body

    def test_due_date_uses_scheduler_timezone(self):
        target = make_target("a@example.com")
        target.task.due_date = datetime(2024, 3, 20, 22, 30, tzinfo=UTC)

        body = ReminderRenderer(tz=ZoneInfo("Asia/Tokyo")).body(target)

        assert "2024-03-21" in body


@pytest.mark.asyncio
async def test_all_pairs_sent():
    mailer = FakeMailer()
    targets = [make_target("a@example.com"), make_target("b@example.com")]

    report = await make_dispatcher(mailer).dispatch(targets)

    assert mailer.attempted_addresses == ["a@example.com", "b@example.com"]
    assert report.sent == 2
    assert report.failed == 0
    assert [o.task_id for o in report.outcomes] == [t.task.id for t in targets]


@pytest.mark.asyncio
@pytest.mark.parametrize("n", [1, 2, 5])
async def test_one_failing_pair_does_not_stop_others(n):
    """Для любого k из N: падающая пара k не мешает остальным N-1 попыткам."""
    for k in range(n):
        emails = [f"user{i}@example.com" for i in range(n)]
        mailer = FakeMailer(failing=[emails[k]])

        report = await make_dispatcher(mailer).dispatch([make_target(e) for e in emails])

        assert mailer.attempted_addresses == emails
        assert report.attempted == n
        assert report.failed == 1
        assert report.sent == n - 1
        assert report.outcomes[k].status == DeliveryStatus.FAILED
        assert "connection refused" in report.outcomes[k].error


@pytest.mark.asyncio
async def test_mixed_outcomes_in_one_run():
    """Почта падает для A и проходит для B: обе попытки записаны, исключения нет."""
    mailer = FakeMailer(failing=["a@example.com"])
    target_a = make_target("a@example.com", title="A")
    target_b = make_target("b@example.com", title="B")

    report = await make_dispatcher(mailer).dispatch([target_a, target_b])

    assert [o.status for o in report.outcomes] == [DeliveryStatus.FAILED, DeliveryStatus.SENT]
    assert report.outcomes[0].task_id == target_a.task.id
    assert report.outcomes[1].error is None


@pytest.mark.asyncio
async def test_rejected_delivery_is_failure():
    mailer = FakeMailer(rejecting=["a@example.com"])

    report = await make_dispatcher(mailer).dispatch([make_target("a@example.com")])

    assert report.outcomes[0].status == DeliveryStatus.FAILED
    assert report.outcomes[0].error == "550 mailbox unavailable"


@pytest.mark.asyncio
async def test_render_error_is_isolated():
    mailer = FakeMailer()
    broken = make_target("broken@example.com", title=None)
    good = make_target("good@example.com")

    report = await make_dispatcher(mailer).dispatch([broken, good])

    assert mailer.attempted_addresses == ["good@example.com"]
    assert [o.status for o in report.outcomes] == [DeliveryStatus.FAILED, DeliveryStatus.SENT]


@pytest.mark.asyncio
async def test_timeout_counts_as_failure():
    class SlowMailer:
        async def send(self, to_address, subject, html_body):
            if to_address == "slow@example.com":
                raise TimeoutError("SMTP timeout")
            return MailResult.ok()

    report = await make_dispatcher(SlowMailer()).dispatch(
        [make_target("slow@example.com"), make_target("fast@example.com")]
    )

    assert report.failed == 1
    assert report.sent == 1
    assert "TimeoutError" in report.outcomes[0].error


@pytest.mark.asyncio
async def test_empty_dispatch_set():
    report = await make_dispatcher(FakeMailer()).dispatch([])

    assert report.attempted == 0
    assert report.outcomes == []


@pytest.mark.asyncio
async def test_new_report_started_at_from_clock():
    started = datetime(2024, 3, 19, 9, 0, tzinfo=UTC)
    dispatcher = ReminderDispatcher(FakeMailer(), renderer=ReminderRenderer(tz=UTC), clock=lambda: started)

    report = await dispatcher.dispatch([make_target("a@example.com")])

    assert report.started_at == started
    assert report.sent == 1


@pytest.mark.asyncio
async def test_concurrent_dispatch_keeps_order_and_limit():
    in_flight = 0
    max_in_flight = 0

    class CountingMailer:
        async def send(self, to_address, subject, html_body):
            nonlocal in_flight, max_in_flight
            in_flight += 1
            max_in_flight = max(max_in_flight, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            if to_address == "user3@example.com":
                raise RuntimeError("boom")
            return MailResult.ok()

    targets = [make_target(f"user{i}@example.com") for i in range(8)]

    report = await make_dispatcher(CountingMailer(), concurrency=3).dispatch(targets)

    assert max_in_flight <= 3
    assert [o.task_id for o in report.outcomes] == [t.task.id for t in targets]
    assert report.outcomes[3].status == DeliveryStatus.FAILED
    assert report.sent == 7
