# tests/unit/test_persistence_coordinator.py
"""
Tests for foldkeep.persistence.coordinator module.
"""

import asyncio
import json
from pathlib import Path

from foldkeep.core.exceptions import WriteError
from foldkeep.persistence.coordinator import CoordinatorState, PersistenceCoordinator

from tests.fakes import FakeBuffer, FakeWorkspace, RecordingNotifier


def read_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestInitialize:
    """Tests for the UNINITIALIZED -> LOADING -> READY transition."""

    def test_empty_mapping_is_ready(self, project, paths, workspace, notifier):
        paths.mapping.write_text("{}", encoding="utf-8")
        coordinator = PersistenceCoordinator(workspace, notifier)

        state = asyncio.run(coordinator.initialize(project))

        assert state is CoordinatorState.READY
        assert coordinator.is_ready
        assert len(coordinator.session.store) == 0

        buffer = FakeBuffer("/a.js")
        assert coordinator.on_buffer_opened(buffer) == 0
        assert buffer.fold_calls == []
        assert notifier.errors == []

    def test_fresh_directory(self, project, paths, workspace, notifier):
        coordinator = PersistenceCoordinator(workspace, notifier)

        assert asyncio.run(coordinator.initialize(project)) is CoordinatorState.READY
        assert read_json(paths.config) == {}
        assert read_json(paths.mapping) == {}

    def test_missing_directory(self, tmp_path, workspace, notifier):
        coordinator = PersistenceCoordinator(workspace, notifier)

        state = asyncio.run(coordinator.initialize(tmp_path))

        assert state is CoordinatorState.UNINITIALIZED
        assert coordinator.session is None
        assert len(notifier.errors) == 1
        assert "There is no .js-folds directory" in notifier.errors[0]
        assert asyncio.run(coordinator.on_session_end()) is None
        assert not (tmp_path / ".js-folds").exists()

    def test_malformed_mapping(self, project, paths, workspace, notifier):
        paths.mapping.write_text('["not", "a", "mapping"]', encoding="utf-8")
        coordinator = PersistenceCoordinator(workspace, notifier)

        state = asyncio.run(coordinator.initialize(project))

        assert state is CoordinatorState.UNINITIALIZED
        assert len(notifier.errors) == 1
        assert workspace.opened == []

    def test_no_project_roots(self, workspace, notifier):
        coordinator = PersistenceCoordinator(workspace, notifier)

        state = asyncio.run(coordinator.initialize_from_roots([]))

        assert state is CoordinatorState.UNINITIALIZED
        assert notifier.errors == ["No project root is open"]

    def test_first_root_is_used(self, project, workspace, notifier, tmp_path):
        coordinator = PersistenceCoordinator(workspace, notifier)

        state = asyncio.run(coordinator.initialize_from_roots([project, tmp_path / "other"]))

        assert state is CoordinatorState.READY

    def test_second_initialize_is_ignored(self, project, workspace, notifier):
        coordinator = PersistenceCoordinator(workspace, notifier)
        asyncio.run(coordinator.initialize(project))
        session = coordinator.session

        assert asyncio.run(coordinator.initialize(project)) is CoordinatorState.READY
        assert coordinator.session is session

    def test_restores_already_open_buffers(self, project, paths, notifier):
        paths.mapping.write_text('{"/a.js": "ab12cd34"}', encoding="utf-8")
        paths.record("ab12cd34").write_text(
            '[{"start":{"row":1,"column":0},"end":{"row":3,"column":0}},'
            '{"start":{"row":5,"column":2},"end":{"row":8,"column":0}}]',
            encoding="utf-8",
        )
        buffer = FakeBuffer("/a.js")
        other = FakeBuffer("/other.js")
        coordinator = PersistenceCoordinator(FakeWorkspace([buffer, other]), notifier)

        asyncio.run(coordinator.initialize(project))

        assert buffer.fold_calls == [((1, 0), (3, 0)), ((5, 2), (8, 0))]
        assert other.fold_calls == []

    def test_malformed_record_does_not_block(self, project, paths, notifier):
        paths.mapping.write_text('{"/a.js": "ab12cd34", "/b.js": "cd34ef56"}', encoding="utf-8")
        paths.record("ab12cd34").write_text("{not json", encoding="utf-8")
        paths.record("cd34ef56").write_text(
            '[{"start":{"row":1,"column":0},"end":{"row":3,"column":0}}]', encoding="utf-8"
        )
        broken = FakeBuffer("/a.js")
        healthy = FakeBuffer("/b.js")
        coordinator = PersistenceCoordinator(FakeWorkspace([broken, healthy]), notifier)

        assert asyncio.run(coordinator.initialize(project)) is CoordinatorState.READY
        assert broken.fold_calls == []
        assert healthy.fold_calls == [((1, 0), (3, 0))]
        assert len(notifier.warnings) == 1
        assert notifier.errors == []


class TestLifecycle:
    """Tests for capture + flush across sessions."""

    def test_folds_survive_restart(self, project, notifier):
        first = FakeWorkspace([FakeBuffer("/a.js", [((0, 0), (1, 0)), ((0, 0), (1, 0)), ((2, 0), (3, 0))])])
        coordinator = PersistenceCoordinator(first, notifier)
        asyncio.run(coordinator.initialize(project))

        result = asyncio.run(coordinator.on_session_end())

        assert result.ok
        assert coordinator.state is CoordinatorState.READY

        reopened = FakeBuffer("/a.js")
        second = PersistenceCoordinator(FakeWorkspace([reopened]), notifier)
        asyncio.run(second.initialize(project))

        assert reopened.fold_calls == [((0, 0), (1, 0)), ((2, 0), (3, 0))]
        assert notifier.errors == []

    def test_checkpoint_flushes(self, project, paths, notifier):
        workspace = FakeWorkspace([FakeBuffer("/a.js", [((4, 0), (7, 0))])])
        coordinator = PersistenceCoordinator(workspace, notifier)
        asyncio.run(coordinator.initialize(project))

        asyncio.run(coordinator.checkpoint())

        record_id = read_json(paths.mapping)["/a.js"]
        assert read_json(paths.record(record_id)) == [
            {"start": {"row": 4, "column": 0}, "end": {"row": 7, "column": 0}}
        ]

    def test_flushing_state_during_flush(self, project, workspace, notifier, monkeypatch):
        coordinator = PersistenceCoordinator(workspace, notifier)
        asyncio.run(coordinator.initialize(project))
        seen = []
        real_flush = coordinator.session.flush

        async def observing_flush():
            seen.append(coordinator.state)
            return await real_flush()

        monkeypatch.setattr(coordinator.session, "flush", observing_flush)
        asyncio.run(coordinator.flush())

        assert seen == [CoordinatorState.FLUSHING]
        assert coordinator.state is CoordinatorState.READY

    def test_write_failure_is_reported_and_state_kept(self, project, notifier, monkeypatch):
        workspace = FakeWorkspace([FakeBuffer("/a.js", [((4, 0), (7, 0))])])
        coordinator = PersistenceCoordinator(workspace, notifier)
        asyncio.run(coordinator.initialize(project))

        async def failing_write(name, text):
            raise WriteError("read-only filesystem", document=name)

        monkeypatch.setattr(coordinator.session.documents, "write", failing_write)
        result = asyncio.run(coordinator.on_buffer_closed())

        assert not result.ok
        assert len(result.errors) == 2
        assert len(notifier.errors) == 2
        assert coordinator.state is CoordinatorState.READY
        record_id = coordinator.session.registry.resolve("/a.js")
        assert coordinator.session.store.pending([record_id]) == [record_id]

    def test_deactivate_flushes_and_unsubscribes(self, project, paths, notifier):
        workspace = FakeWorkspace([FakeBuffer("/a.js", [((4, 0), (7, 0))])])
        coordinator = PersistenceCoordinator(workspace, notifier)
        asyncio.run(coordinator.initialize(project))
        assert len(workspace.opened) == 1

        result = asyncio.run(coordinator.deactivate())

        assert result.ok
        assert "/a.js" in read_json(paths.mapping)
        assert workspace.opened == [] and workspace.renamed == [] and workspace.closed == []

    def test_deactivate_when_uninitialized(self, workspace, notifier):
        coordinator = PersistenceCoordinator(workspace, notifier)

        assert asyncio.run(coordinator.deactivate()) is None


class TestHostEvents:
    """Tests for listeners registered once READY."""

    def test_opened_buffer_gets_folds(self, project, paths, workspace, notifier):
        paths.mapping.write_text('{"/a.js": "ab12cd34"}', encoding="utf-8")
        paths.record("ab12cd34").write_text(
            '[{"start":{"row":1,"column":0},"end":{"row":3,"column":0}}]', encoding="utf-8"
        )
        coordinator = PersistenceCoordinator(workspace, notifier)
        asyncio.run(coordinator.initialize(project))

        buffer = FakeBuffer("/a.js")
        workspace.open(buffer)

        assert buffer.fold_calls == [((1, 0), (3, 0))]

    def test_rename_writes_mapping_through(self, project, paths, notifier):
        buffer = FakeBuffer("/a.js", [((5, 0), (6, 0))])
        workspace = FakeWorkspace([buffer])
        coordinator = PersistenceCoordinator(workspace, notifier)

        async def scenario():
            await coordinator.initialize(project)
            await coordinator.on_session_end()
            workspace.rename(buffer, "/b.js")
            await coordinator.drain()

        asyncio.run(scenario())

        mapping = read_json(paths.mapping)
        assert "/a.js" not in mapping
        assert coordinator.session.registry.resolve("/a.js") is None
        reopened = FakeBuffer("/b.js")
        coordinator.on_buffer_opened(reopened)
        assert reopened.fold_calls == [((5, 0), (6, 0))]
        assert mapping["/b.js"] == coordinator.session.registry.resolve("/b.js")

    def test_rename_of_untracked_path(self, project, paths, workspace, notifier):
        coordinator = PersistenceCoordinator(workspace, notifier)
        asyncio.run(coordinator.initialize(project))

        result = asyncio.run(coordinator.on_path_renamed("/new.js", "/renamed.js"))

        assert result.ok
        assert read_json(paths.mapping) == {}

    def test_close_captures_remaining_buffers(self, project, paths, notifier):
        keep = FakeBuffer("/keep.js", [((0, 0), (2, 0))])
        closing = FakeBuffer("/closing.js", [((9, 0), (12, 0))])
        workspace = FakeWorkspace([keep, closing])
        coordinator = PersistenceCoordinator(workspace, notifier)

        async def scenario():
            await coordinator.initialize(project)
            workspace.close(closing)
            await coordinator.drain()

        asyncio.run(scenario())

        mapping = read_json(paths.mapping)
        assert list(mapping) == ["/keep.js"]
        assert read_json(paths.record(mapping["/keep.js"])) == [
            {"start": {"row": 0, "column": 0}, "end": {"row": 2, "column": 0}}
        ]

    def test_events_before_ready_are_ignored(self, workspace, notifier):
        coordinator = PersistenceCoordinator(workspace, notifier)
        buffer = FakeBuffer("/a.js")

        assert coordinator.on_buffer_opened(buffer) == 0
        assert asyncio.run(coordinator.on_path_renamed("/a.js", "/b.js")) is None
        assert asyncio.run(coordinator.on_buffer_closed()) is None
        assert asyncio.run(coordinator.flush()) is None
        assert notifier.errors == []

    def test_background_failure_is_reported(self, project, notifier, monkeypatch):
        workspace = FakeWorkspace([FakeBuffer("/a.js")])
        coordinator = PersistenceCoordinator(workspace, notifier)

        async def scenario():
            await coordinator.initialize(project)

            def broken_capture(buffers):
                raise RuntimeError("host went away")

            monkeypatch.setattr(coordinator.session.capture, "capture", broken_capture)
            workspace.closed[0]()
            await coordinator.drain()

        asyncio.run(scenario())

        assert notifier.errors == ["host went away"]


class TestOverlappingFlushes:
    """Tests for flush triggers that overlap on one event loop."""

    def test_two_closes_in_one_tick(self, project, paths, notifier):
        a = FakeBuffer("/a.js", [((0, 0), (1, 0))])
        b = FakeBuffer("/b.js", [((2, 0), (3, 0))])
        c = FakeBuffer("/c.js", [((4, 0), (5, 0))])
        workspace = FakeWorkspace([a, b, c])
        coordinator = PersistenceCoordinator(workspace, notifier)

        async def scenario():
            await coordinator.initialize(project)
            workspace.close(b)
            workspace.close(c)
            await coordinator.drain()

        asyncio.run(scenario())

        assert notifier.errors == []
        assert coordinator.state is CoordinatorState.READY
        record_id = read_json(paths.mapping)["/a.js"]
        assert read_json(paths.record(record_id)) == [
            {"start": {"row": 0, "column": 0}, "end": {"row": 1, "column": 0}}
        ]
        assert not [p.name for p in paths.directory.iterdir() if p.name.endswith(".tmp")]

    def test_session_end_racing_checkpoint(self, project, paths, notifier):
        buffers = [FakeBuffer(f"/f{i}.js", [((i, 0), (i + 1, 0))]) for i in range(5)]
        coordinator = PersistenceCoordinator(FakeWorkspace(buffers), notifier)
        results = []

        async def scenario():
            await coordinator.initialize(project)
            for n in range(20):
                buffers[0].folds = [((n, 0), (n + 1, 0))]
                results.extend(
                    await asyncio.gather(coordinator.on_session_end(), coordinator.checkpoint())
                )

        asyncio.run(scenario())

        assert notifier.errors == []
        assert all(result.ok for result in results)
        assert coordinator.state is CoordinatorState.READY
        record_id = read_json(paths.mapping)["/f0.js"]
        assert read_json(paths.record(record_id)) == [
            {"start": {"row": 19, "column": 0}, "end": {"row": 20, "column": 0}}
        ]


def test_notifier_protocol():
    from foldkeep.core.host import Notifier

    assert isinstance(RecordingNotifier(), Notifier)
