"""Tests for the task service."""

from datetime import date, datetime, timedelta

import pytest

from conftest import write_file

from mdtask.config import Config, TaskConfig
from mdtask.enums import ReminderState, TaskStatus
from mdtask.errors import InvalidInputError, NotFoundError
from mdtask.models.params import CreateTaskParams, UpdateTaskParams
from mdtask.service import TaskService, parse_status, stats_range, validate_title


def create(service, title, **kwargs):
    task, _ = service.create_task(CreateTaskParams(title=title, **kwargs))
    return task


class TestValidation:
    """Tests for the module-level validators."""

    def test_validate_title(self):
        validate_title("Fine title")
        with pytest.raises(InvalidInputError, match="newlines"):
            validate_title("one\ntwo")
        with pytest.raises(InvalidInputError, match="empty"):
            validate_title("   ")

    def test_parse_status(self):
        assert parse_status("done") == TaskStatus.DONE
        with pytest.raises(InvalidInputError, match="status"):
            parse_status("CANCELLED")


class TestCreateTask:
    """Tests for TaskService.create_task."""

    def test_defaults(self, service, clock, task_dir):
        task, path = service.create_task(CreateTaskParams(title="Write report"))

        assert task.id == "task/20250115103000"
        assert path == task_dir / "20250115103000.md"
        assert task.status == TaskStatus.TODO
        assert task.is_managed_task()
        assert task.created == clock.now
        assert task.tags == ["mdtask", "mdtask/status/TODO"]

    def test_all_fields(self, service):
        task = create(
            service,
            "Ship release",
            description="v1.2",
            content="Checklist",
            tags=["release"],
            status="wip",
            deadline=date(2025, 1, 31),
            reminder=datetime(2025, 1, 30, 9, 0, 30),
            wait_reason="QA",
        )

        stored = service.repo.find_by_id(task.id)
        assert stored.description == "v1.2"
        assert stored.content == "Checklist\n"
        assert stored.user_tags == ["release"]
        assert stored.status == TaskStatus.WIP
        assert stored.deadline == date(2025, 1, 31)
        assert stored.reminder == datetime(2025, 1, 30, 9, 0)
        assert stored.wait_reason == "QA"

    def test_config_defaults(self, repo, clock):
        config = Config(
            task=TaskConfig(
                title_prefix="[Work] ",
                default_status="SCHE",
                content_template="## Notes",
                description_template="from template",
                default_tags=["work"],
            )
        )
        service = TaskService(repo, config, clock=clock)

        task = create(service, "Plan sprint", tags=["planning"])

        assert task.title == "[Work] Plan sprint"
        assert task.status == TaskStatus.SCHE
        assert task.content == "## Notes"
        assert task.description == "from template"
        assert task.user_tags == ["work", "planning"]

    def test_attribute_tags_in_tags_survive(self, service):
        task = create(service, "Ship", tags=["mdtask/deadline/2025-01-31", "mdtask/waitfor/review", "ops"])

        stored = service.repo.find_by_id(task.id)
        assert stored.deadline == date(2025, 1, 31)
        assert stored.wait_reason == "review"
        assert stored.user_tags == ["ops"]

    def test_attribute_default_tags_survive(self, repo, clock):
        config = Config(task=TaskConfig(default_tags=["mdtask/waitfor/review"]))
        service = TaskService(repo, config, clock=clock)

        task = create(service, "Ship")

        assert service.repo.find_by_id(task.id).wait_reason == "review"

    def test_fields_override_attribute_tags(self, service):
        task = create(service, "Ship", tags=["mdtask/deadline/2025-01-31"], deadline=date(2025, 2, 28))
        assert service.repo.find_by_id(task.id).deadline == date(2025, 2, 28)

    def test_explicit_values_beat_templates(self, repo, clock):
        config = Config(task=TaskConfig(content_template="template", description_template="template"))
        service = TaskService(repo, config, clock=clock)

        task = create(service, "t", description="mine", content="mine too")

        assert task.description == "mine"
        assert task.content == "mine too"

    def test_invalid_title(self, service):
        with pytest.raises(InvalidInputError):
            create(service, "line one\nline two")

    def test_invalid_description(self, service):
        with pytest.raises(InvalidInputError):
            create(service, "t", description="a\nb")

    def test_invalid_status(self, service, task_dir):
        with pytest.raises(InvalidInputError):
            create(service, "t", status="LATER")
        assert list(task_dir.iterdir()) == []

    def test_missing_parent(self, service):
        with pytest.raises(NotFoundError, match="parent task not found"):
            create(service, "child", parent_id="task/20990101000000")

    def test_subtask_inherits_parent_status(self, service):
        parent = create(service, "parent", status="WIP")
        child = create(service, "child", parent_id=parent.id)

        assert child.parent_id == parent.id
        assert child.status == TaskStatus.WIP
        assert f"mdtask/parent/{parent.id}" in child.tags

    def test_subtask_explicit_status_wins(self, service):
        parent = create(service, "parent", status="WIP")
        child = create(service, "child", parent_id=parent.id, status="TODO")
        assert child.status == TaskStatus.TODO

    def test_subtask_with_configured_default_status(self, repo, clock):
        service = TaskService(repo, Config(task=TaskConfig(default_status="SCHE")), clock=clock)
        parent = create(service, "parent", status="WIP")
        child = create(service, "child", parent_id=parent.id)
        assert child.status == TaskStatus.SCHE


class TestUpdateTask:
    """Tests for TaskService.update_task."""

    def test_update_fields(self, service):
        task = create(service, "Draft")

        updated = service.update_task(
            task.id, UpdateTaskParams(title="Final", description="done soon", status="done", content="Body")
        )

        stored = service.repo.find_by_id(task.id)
        assert updated.title == stored.title == "Final"
        assert stored.description == "done soon"
        assert stored.status == TaskStatus.DONE
        assert stored.content == "Body\n"

    def test_unset_fields_are_untouched(self, service):
        task = create(service, "Keep", description="same", tags=["x"], deadline=date(2025, 2, 1))

        service.update_task(task.id, UpdateTaskParams(status="WIP"))

        stored = service.repo.find_by_id(task.id)
        assert stored.title == "Keep"
        assert stored.description == "same"
        assert stored.user_tags == ["x"]
        assert stored.deadline == date(2025, 2, 1)

    def test_replacing_tags_preserves_system_tags(self, service):
        task = create(
            service,
            "Tagged",
            tags=["old", "mdtask/custom"],
            status="WAIT",
            deadline=date(2025, 2, 1),
            wait_reason="vendor",
        )

        service.update_task(task.id, UpdateTaskParams(tags=["new", "mdtask/status/DONE", "mdtask"]))

        stored = service.repo.find_by_id(task.id)
        assert stored.user_tags == ["mdtask/custom", "new"]
        assert stored.status == TaskStatus.WAIT
        assert stored.deadline == date(2025, 2, 1)
        assert stored.wait_reason == "vendor"
        assert stored.is_managed_task()

    def test_clear_deadline_and_reminder(self, service):
        task = create(service, "t", deadline=date(2025, 2, 1), reminder=datetime(2025, 1, 31, 8, 0))

        service.update_task(
            task.id,
            UpdateTaskParams(clear_deadline=True, deadline=date(2025, 3, 1), clear_reminder=True),
        )

        stored = service.repo.find_by_id(task.id)
        assert stored.deadline is None
        assert stored.reminder is None

    def test_set_deadline_and_wait_reason(self, service):
        task = create(service, "t", wait_reason="someone")

        service.update_task(task.id, UpdateTaskParams(deadline=date(2025, 3, 1), wait_reason=""))

        stored = service.repo.find_by_id(task.id)
        assert stored.deadline == date(2025, 3, 1)
        assert stored.wait_reason == ""

    def test_update_stamps_updated(self, service, clock):
        task = create(service, "t")
        clock.advance(600)
        updated = service.update_task(task.id, UpdateTaskParams(title="t2"))
        assert updated.updated == clock.now
        assert updated.created < updated.updated

    def test_update_missing(self, service):
        with pytest.raises(NotFoundError):
            service.update_task("task/20990101000000", UpdateTaskParams(title="x"))

    def test_update_invalid_title(self, service):
        task = create(service, "t")
        with pytest.raises(InvalidInputError):
            service.update_task(task.id, UpdateTaskParams(title=""))


class TestArchive:
    """Tests for archiving and unarchiving."""

    @pytest.fixture
    def family(self, service):
        root = create(service, "root")
        child = create(service, "child", parent_id=root.id)
        grandchild = create(service, "grandchild", parent_id=child.id)
        sibling = create(service, "unrelated")
        return root, child, grandchild, sibling

    def test_archive_cascades(self, service, family):
        root, child, grandchild, sibling = family

        result = service.archive_task(root.id)

        assert result.is_archived()
        repo = service.repo
        assert repo.find_by_id(root.id).is_archived()
        assert repo.find_by_id(child.id).is_archived()
        assert repo.find_by_id(grandchild.id).is_archived()
        assert not repo.find_by_id(sibling.id).is_archived()

    def test_archive_keeps_unparsed_attribute_tags(self, service, task_dir):
        write_file(
            task_dir / "20250101120000.md",
            "---\nid: task/20250101120000\ntags:\n"
            "    - mdtask\n    - work\n    - mdtask/status/BLOCKED\n    - mdtask/deadline/next-week\n"
            "title: Legacy\n---\n",
        )

        service.archive_task("task/20250101120000")

        text = (task_dir / "20250101120000.md").read_text(encoding="utf-8")
        for tag in ("work", "mdtask/status/BLOCKED", "mdtask/deadline/next-week", "mdtask/archived"):
            assert f"    - {tag}\n" in text
        assert "mdtask/status/TODO" not in text
        assert service.repo.find_by_status(TaskStatus.TODO) == []

    def test_archive_subtask_only(self, service, family):
        root, child, grandchild, _ = family

        service.archive_task(child.id)

        assert not service.repo.find_by_id(root.id).is_archived()
        assert service.repo.find_by_id(grandchild.id).is_archived()

    def test_archive_twice(self, service, family):
        root = family[0]
        service.archive_task(root.id)
        with pytest.raises(InvalidInputError, match="already archived"):
            service.archive_task(root.id)

    def test_archive_missing(self, service):
        with pytest.raises(NotFoundError):
            service.archive_task("task/20990101000000")

    def test_unarchive_blocked_by_archived_parent(self, service, family):
        root, child, _, _ = family
        service.archive_task(root.id)

        with pytest.raises(InvalidInputError, match="parent"):
            service.unarchive_task(child.id)

    def test_unarchive_does_not_cascade(self, service, family):
        root, child, grandchild, _ = family
        service.archive_task(root.id)

        service.unarchive_task(root.id)
        service.unarchive_task(child.id)

        assert not service.repo.find_by_id(child.id).is_archived()
        assert service.repo.find_by_id(grandchild.id).is_archived()

    def test_unarchive_not_archived(self, service, family):
        with pytest.raises(InvalidInputError, match="not archived"):
            service.unarchive_task(family[0].id)

    def test_unarchive_with_deleted_parent(self, service, family):
        root, child, _, _ = family
        service.archive_task(child.id)
        _, root_path = service.repo.find_by_id_with_path(root.id)
        root_path.unlink()

        restored = service.unarchive_task(child.id)

        assert not restored.is_archived()


class TestSubtasks:
    """Tests for subtask lookups."""

    def test_find_subtasks_direct_only(self, service):
        root = create(service, "root")
        child = create(service, "child", parent_id=root.id)
        create(service, "grandchild", parent_id=child.id)

        assert [t.id for t in service.find_subtasks(root.id)] == [child.id]

    def test_get_task_with_subtasks(self, service):
        root = create(service, "root")
        child = create(service, "child", parent_id=root.id)
        service.archive_task(child.id)

        task, subtasks = service.get_task_with_subtasks(root.id)

        assert task.id == root.id
        assert [t.id for t in subtasks] == [child.id]

    def test_get_task_with_subtasks_missing(self, service):
        with pytest.raises(NotFoundError):
            service.get_task_with_subtasks("task/20990101000000")


class TestStatsRange:
    """Tests for statistics windows."""

    def test_day(self):
        assert stats_range("day", date(2025, 1, 15)) == (date(2025, 1, 15), date(2025, 1, 16))

    def test_week_starts_monday(self):
        assert stats_range("week", date(2025, 1, 15)) == (date(2025, 1, 13), date(2025, 1, 20))
        assert stats_range("week", date(2025, 1, 13)) == (date(2025, 1, 13), date(2025, 1, 20))

    def test_month(self):
        assert stats_range("month", date(2025, 1, 31)) == (date(2025, 1, 1), date(2025, 2, 1))
        assert stats_range("month", date(2024, 12, 5)) == (date(2024, 12, 1), date(2025, 1, 1))
        assert stats_range("month", date(2024, 2, 29)) == (date(2024, 2, 1), date(2024, 3, 1))

    def test_unknown_period(self):
        with pytest.raises(InvalidInputError):
            stats_range("year", date(2025, 1, 15))


class TestStatistics:
    """Tests for TaskService.calculate_stats."""

    def test_counts(self, service, clock):
        create(service, "todo")
        create(service, "wip", status="WIP")
        done = create(service, "done")
        service.update_task(done.id, UpdateTaskParams(status="DONE"))
        create(service, "overdue", deadline=date(2025, 1, 10))
        create(service, "due today", deadline=date(2025, 1, 15))
        create(service, "upcoming", deadline=date(2025, 1, 20))
        create(service, "far", deadline=date(2025, 3, 1))
        archived = create(service, "archived", deadline=date(2025, 1, 1))
        service.archive_task(archived.id)

        stats = service.calculate_stats(date(2025, 1, 15), date(2025, 1, 16))

        assert stats.total == 7
        assert stats.archived == 1
        assert stats.by_status[TaskStatus.TODO] == 5
        assert stats.by_status[TaskStatus.WIP] == 1
        assert stats.by_status[TaskStatus.DONE] == 1
        assert stats.by_status[TaskStatus.WAIT] == 0
        assert stats.activity.created == 7
        assert stats.activity.updated == 7
        assert stats.activity.completed == 1
        assert stats.deadlines.overdue == 2
        assert stats.deadlines.upcoming == 1

    def test_activity_outside_window(self, service):
        create(service, "t")
        stats = service.calculate_stats(date(2025, 1, 16), date(2025, 1, 17))
        assert stats.total == 1
        assert stats.activity.created == 0
        assert stats.activity.updated == 0

    def test_empty(self, service):
        stats = service.calculate_stats(date(2025, 1, 15), date(2025, 1, 16))
        assert stats.total == 0
        assert all(count == 0 for count in stats.by_status.values())
        assert set(stats.by_status) == set(TaskStatus)


class TestReminders:
    """Tests for reminder queries."""

    def test_find_reminders_states(self, service, clock):
        now = clock.now
        overdue = create(service, "overdue", reminder=now - timedelta(hours=1))
        soon = create(service, "soon", reminder=now + timedelta(hours=2))
        later = create(service, "later", reminder=now + timedelta(days=3))
        create(service, "no reminder")
        archived = create(service, "archived", reminder=now + timedelta(hours=1))
        service.archive_task(archived.id)

        reminders = service.find_reminders(now=now)

        states = {info.task.id: info.state for info in reminders}
        assert states == {
            overdue.id: ReminderState.OVERDUE,
            soon.id: ReminderState.DUE_SOON,
            later.id: ReminderState.UPCOMING,
        }

    def test_due_reminders_matches_current_minute(self, service, clock):
        due = create(service, "due", reminder=datetime(2025, 1, 15, 10, 31))
        create(service, "not yet", reminder=datetime(2025, 1, 15, 10, 32))

        due_now = service.due_reminders(now=datetime(2025, 1, 15, 10, 31, 45))
        assert [t.id for t in due_now] == [due.id]
