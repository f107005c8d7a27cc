# tests/test_commands.py

from __future__ import annotations

from daily_plan.cli.bootstrap import prepare_notifications
from daily_plan.cli.commands import CommandRegistry, registry


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called["h2"] == 1
    assert called["h3"] == 1


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_add_list_archive_restore_purge(state) -> None:
    prepare_notifications(state)

    reply = registry.handle(state, "/add Buy milk | Home | 2026-10-19 | 10:00 | medium")
    assert reply is not None and reply.startswith("Added")
    registry.handle(state, "/add Water plants | Garden | 2026-10-19 | 11:30")

    listing = registry.handle(state, "/list") or ""
    assert listing.index("Garden:") < listing.index("Home:")
    assert "Buy milk" in listing

    (milk,) = [t for t in state.controller.active_tasks() if t.title == "Buy milk"]
    assert "Buy milk" in (registry.handle(state, "/pending") or "")

    assert "Archived" in (registry.handle(state, f"/archive {milk.short_id}") or "")
    assert "Buy milk" not in (registry.handle(state, "/list") or "")
    assert "Buy milk" in (registry.handle(state, "/archived") or "")
    assert "Buy milk" not in (registry.handle(state, "/pending") or "")

    assert "Restored" in (registry.handle(state, f"/restore {milk.short_id}") or "")
    assert milk.id in state.coordinator.pending_ids()

    registry.handle(state, f"/archive {milk.short_id}")
    assert registry.handle(state, "/purge") == "Deleted 1 archived task(s)."
    assert state.controller.find(milk.id) is None


def test_edit_keeps_unspecified_fields(state) -> None:
    registry.handle(state, "/add Read | Books | 2026-10-20 | 07:30 | high")
    (task,) = state.controller.active_tasks()

    reply = registry.handle(state, f"/edit {task.short_id} | | | 08:15")

    assert reply is not None and reply.startswith("Updated")
    edited = state.controller.find(task.id)
    assert edited.title == "Read"
    assert edited.category == "Books"
    assert edited.start_date.strftime("%Y-%m-%d %H:%M") == "2026-10-20 08:15"


def test_add_reports_bad_input(state) -> None:
    assert "Usage" in (registry.handle(state, "/add") or "")
    assert "Cannot parse" in (registry.handle(state, "/add x | Home | tomorrow") or "")
    assert "Cannot save" in (registry.handle(state, "/add x | Other") or "")
    assert "No task matches" in (registry.handle(state, "/delete nope") or "")


def test_add_and_edit_keep_inner_spacing(state) -> None:
    reply = registry.handle(state, "/add  Call  the   plumber | Side  project | 2026-10-20 | 09:00")
    assert reply is not None and reply.startswith("Added")

    (task,) = state.controller.active_tasks()
    assert task.title == "Call  the   plumber"
    assert task.category == "Side  project"

    registry.handle(state, f"/edit   {task.short_id}   Call the  plumber again |")
    assert state.controller.find(task.id).title == "Call the  plumber again"


def test_command_registry_raw_args(state) -> None:
    reg = CommandRegistry()
    seen: list[list[str]] = []

    def h2(state, args):
        seen.append(args)
        return "ok"

    reg.register("raw", h2, "raw", aliases=["r"], raw_args=True)
    reg.register("words", h2, "words")

    reg.handle(state, "/raw a  b | c ")
    reg.handle(state, "/r")
    reg.handle(state, "/words a  b")

    assert seen == [["a  b | c "], [], ["a", "b"]]
