import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from syncdrive.errors import InvalidArgumentError, InvalidStateError
from syncdrive.models import RemoteFileItem
from syncdrive.task import (
    LOCAL_DB_FILE_NAME,
    PAN_DB_FILE_NAME,
    SyncMode,
    SyncTask,
    TaskContext,
    TaskState,
)


class FakeRunner:
    def __init__(self, ctx: TaskContext, fail_start: bool = False, fail_stop: bool = False) -> None:
        self.ctx = ctx
        self.fail_start = fail_start
        self.fail_stop = fail_stop
        self.calls: list[str] = []

    def start(self) -> None:
        self.calls.append("start")
        if self.fail_start:
            raise RuntimeError("runner start failed")

    def stop(self) -> None:
        self.calls.append("stop")
        if self.fail_stop:
            raise RuntimeError("runner stop failed")


def _task(**kwargs) -> SyncTask:
    values = dict(
        name="NS game backup",
        id="5b2d7c10-e927-4e72-8f9d-5abb3bb04814",
        local_folder_path="D:\\smb\\datadisk\\game",
        pan_folder_path="/sync_drive/game",
        mode=SyncMode.SYNC,
    )
    values.update(kwargs)
    return SyncTask(**values)


class TestSyncTaskPersistence(unittest.TestCase):
    def test_to_dict_uses_config_keys(self) -> None:
        task = _task(drive_id="19519111")
        self.assertEqual(
            task.to_dict(),
            {
                "name": "NS game backup",
                "id": "5b2d7c10-e927-4e72-8f9d-5abb3bb04814",
                "driveId": "19519111",
                "localFolderPath": "D:\\smb\\datadisk\\game",
                "panFolderPath": "/sync_drive/game",
                "mode": "sync",
                "lastSyncTime": "",
            },
        )

    def test_from_dict_round_trip(self) -> None:
        task = _task(mode=SyncMode.UPLOAD, last_sync_time="2025-01-01T00:00:00.000000Z")
        self.assertEqual(SyncTask.from_dict(task.to_dict()), task)

    def test_from_dict_defaults_missing_fields(self) -> None:
        task = SyncTask.from_dict({"name": "x", "localFolderPath": "/l", "panFolderPath": "/p"})
        self.assertEqual(task.id, "")
        self.assertEqual(task.mode, SyncMode.SYNC)

    def test_from_dict_rejects_unknown_mode(self) -> None:
        with self.assertRaises(ValueError):
            SyncTask.from_dict({"name": "x", "mode": "mirror-ish"})

    def test_from_dict_rejects_wrong_types(self) -> None:
        with self.assertRaises(ValueError):
            SyncTask.from_dict({"name": 5})
        with self.assertRaises(ValueError):
            SyncTask.from_dict(["not", "a", "dict"])  # type: ignore[arg-type]

    def test_runtime_fields_are_not_persisted(self) -> None:
        task = _task()
        task.bind_runtime(
            drive_id="d1",
            sync_db_folder_path="/tmp/x",
            remote_client=object(),
            runner_factory=FakeRunner,
        )
        data = task.to_dict()
        self.assertNotIn("syncDbFolderPath", data)
        self.assertEqual(data["driveId"], "d1")

    def test_mark_synced(self) -> None:
        task = _task()
        self.assertIsNone(task.last_sync_at)
        at = datetime(2025, 2, 3, 4, 5, 6, tzinfo=timezone.utc)
        task.mark_synced(at)
        self.assertEqual(task.last_sync_time, "2025-02-03T04:05:06.000000Z")
        self.assertEqual(task.last_sync_at, at)

    def test_name_label(self) -> None:
        self.assertEqual(_task(name="a", id="b").name_label(), "a(b)")


class TestSyncTaskLifecycle(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.db_root = self._tmp.name
        self.runners: list[FakeRunner] = []
        self.remote_client = object()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _factory(self, **runner_kwargs):
        def factory(ctx: TaskContext) -> FakeRunner:
            runner = FakeRunner(ctx, **runner_kwargs)
            self.runners.append(runner)
            return runner

        return factory

    def _bind(self, task: SyncTask, **runner_kwargs) -> SyncTask:
        task.bind_runtime(
            drive_id="19519111",
            sync_db_folder_path=self.db_root,
            remote_client=self.remote_client,
            runner_factory=self._factory(**runner_kwargs),
        )
        return task

    def test_start_wires_stores_and_runner(self) -> None:
        task = self._bind(_task())
        task.start()

        self.assertIs(task.state, TaskState.RUNNING)
        self.assertEqual(len(self.runners), 1)
        ctx = self.runners[0].ctx
        self.assertIs(ctx.task, task)
        self.assertIs(ctx.remote_client, self.remote_client)

        task_dir = Path(self.db_root) / task.id
        self.assertEqual(ctx.remote_store.path, task_dir / PAN_DB_FILE_NAME)
        self.assertEqual(ctx.local_store.path, task_dir / LOCAL_DB_FILE_NAME)
        self.assertIs(task.remote_store, ctx.remote_store)

        ctx.remote_store.add(RemoteFileItem(path="/sync_drive/game/a.sav"))
        self.assertEqual(task.remote_store.count(), 1)
        self.assertEqual(task.local_store.count(), 0)

    def test_start_requires_bound_runtime(self) -> None:
        with self.assertRaises(InvalidStateError):
            _task().start()

    def test_start_requires_id(self) -> None:
        task = self._bind(_task(id=""))
        with self.assertRaises(InvalidStateError):
            task.start()

    def test_start_requires_folder_paths(self) -> None:
        task = self._bind(_task(pan_folder_path=""))
        with self.assertRaises(InvalidArgumentError):
            task.start()
        self.assertIs(task.state, TaskState.UNSTARTED)

    def test_start_twice_is_rejected(self) -> None:
        task = self._bind(_task())
        task.start()
        with self.assertRaises(InvalidStateError):
            task.start()

    def test_failed_runner_start_leaves_task_unstarted(self) -> None:
        task = self._bind(_task(), fail_start=True)
        with self.assertRaises(RuntimeError):
            task.start()
        self.assertIs(task.state, TaskState.UNSTARTED)
        with self.assertRaises(InvalidStateError):
            task.remote_store

    def test_stop_running_task(self) -> None:
        task = self._bind(_task())
        task.start()
        task.stop()
        self.assertIs(task.state, TaskState.STOPPED)
        self.assertEqual(self.runners[0].calls, ["start", "stop"])

    def test_stop_without_start_is_noop(self) -> None:
        task = _task()
        task.stop()
        self.assertIs(task.state, TaskState.UNSTARTED)

    def test_failed_runner_stop_still_marks_stopped(self) -> None:
        task = self._bind(_task(), fail_stop=True)
        task.start()
        with self.assertRaises(RuntimeError):
            task.stop()
        self.assertIs(task.state, TaskState.STOPPED)

    def test_rebinding_running_task_is_rejected(self) -> None:
        task = self._bind(_task())
        task.start()
        with self.assertRaises(InvalidStateError):
            self._bind(task)


if __name__ == "__main__":
    unittest.main()
