"""Integration tests for multi-root path loading through the coordinator."""

import asyncio
import contextlib
import os

import pytest

from pathhound.core.config.loading_config import LoadingConfig
from pathhound.services.loading_coordinator import (
    LoadingCoordinator,
    load_paths,
    stream_paths,
)
from tests.utils.fs_helpers import collect_batches, flatten, make_files, requires_symlinks


class TestManualLoading:
    """Coordinator behavior when roots are walked manually."""

    @pytest.mark.asyncio
    async def test_ignore_scenario(self, temp_root):
        make_files(temp_root, "a.txt", "b.log", "sub/c.txt")

        batches, _ = await collect_batches([temp_root], ["*.log"], use_git=False)

        assert set(flatten(batches)) == {
            str(temp_root / "a.txt"),
            str(temp_root / "sub" / "c.txt"),
        }

    @pytest.mark.asyncio
    async def test_overlapping_roots_emit_each_path_once(self, temp_root):
        make_files(temp_root, "a.txt", "sub/c.txt", "sub/d.txt")

        batches, coordinator = await collect_batches(
            [temp_root, temp_root / "sub"], use_git=False
        )
        paths = flatten(batches)

        assert len(paths) == len(set(paths))
        assert set(paths) == {
            str(temp_root / "a.txt"),
            str(temp_root / "sub" / "c.txt"),
            str(temp_root / "sub" / "d.txt"),
        }
        stats = coordinator.get_stats()
        assert stats["roots"] == 2
        assert stats["walked_roots"] == 2
        assert stats["duplicates"] == 2

    @pytest.mark.asyncio
    async def test_batches_are_full_except_last_per_root(self, temp_root):
        names = [f"dir{i % 7}/file{i}.txt" for i in range(250)]
        make_files(temp_root, *names)

        batches, coordinator = await collect_batches([temp_root], use_git=False)

        assert sorted(len(batch) for batch in batches) == [50, 100, 100]
        assert coordinator.get_stats()["batches"] == 3
        assert len(set(flatten(batches))) == 250

    @pytest.mark.asyncio
    async def test_custom_batch_size(self, temp_root):
        make_files(temp_root, *[f"f{i}.txt" for i in range(10)])

        batches, _ = await collect_batches([temp_root], use_git=False, batch_size=4)

        assert sorted(len(batch) for batch in batches) == [2, 4, 4]

    @pytest.mark.asyncio
    async def test_missing_root_contributes_nothing(self, temp_root):
        make_files(temp_root, "a.txt")

        batches, coordinator = await collect_batches(
            [temp_root / "missing", temp_root], use_git=False
        )

        assert flatten(batches) == [str(temp_root / "a.txt")]
        assert coordinator.get_stats()["roots"] == 2

    @pytest.mark.asyncio
    async def test_loading_is_idempotent(self, temp_root):
        make_files(temp_root, "a.txt", "b/c.txt", "b/d/e.txt")

        first, _ = await collect_batches([temp_root], use_git=False)
        second, _ = await collect_batches([temp_root], use_git=False)

        assert set(flatten(first)) == set(flatten(second))

    @pytest.mark.asyncio
    async def test_default_ignores_come_from_config(self, temp_root):
        make_files(temp_root, "a.txt", ".DS_Store", "._a.txt")

        coordinator = LoadingCoordinator(LoadingConfig(use_git=False))
        batches: list[list[str]] = []
        await coordinator.load([str(temp_root)], on_batch=batches.append)

        assert flatten(batches) == [str(temp_root / "a.txt")]

    @pytest.mark.asyncio
    async def test_invalid_pattern_does_not_abort(self, temp_root):
        make_files(temp_root, "a.txt", "b.log")

        batches, _ = await collect_batches(
            [temp_root], ["x" * (70 * 1024), "*.log"], use_git=False
        )

        assert flatten(batches) == [str(temp_root / "a.txt")]

    @requires_symlinks
    @pytest.mark.asyncio
    async def test_symlink_cycle_emits_each_file_once(self, temp_root):
        make_files(temp_root, "a.txt", "sub/c.txt")
        os.symlink(temp_root, temp_root / "sub" / "back")

        batches, _ = await asyncio.wait_for(
            collect_batches(
                [temp_root], use_git=False, traverse_symlink_directories=True
            ),
            timeout=10,
        )

        assert sorted(flatten(batches)) == sorted(
            [str(temp_root / "a.txt"), str(temp_root / "sub" / "c.txt")]
        )


class TestBatchDelivery:
    """Test the different ways batches reach the host."""

    @pytest.mark.asyncio
    async def test_async_callback_receives_batches(self, temp_root):
        make_files(temp_root, "a.txt", "b.txt")
        received: list[str] = []

        async def on_batch(batch: list[str]) -> None:
            await asyncio.sleep(0)
            received.extend(batch)

        coordinator = LoadingCoordinator(LoadingConfig(use_git=False))
        await coordinator.load([str(temp_root)], ignores=[], on_batch=on_batch)

        assert sorted(received) == sorted(
            [str(temp_root / "a.txt"), str(temp_root / "b.txt")]
        )

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_abort_loading(self, temp_root):
        make_files(temp_root, *[f"f{i}.txt" for i in range(5)])
        calls: list[int] = []

        def on_batch(batch: list[str]) -> None:
            calls.append(len(batch))
            raise RuntimeError("consumer failed")

        coordinator = LoadingCoordinator(LoadingConfig(use_git=False, batch_size=2))
        await coordinator.load([str(temp_root)], ignores=[], on_batch=on_batch)

        assert sorted(calls) == [1, 2, 2]

    @pytest.mark.asyncio
    async def test_stream_yields_all_batches(self, temp_root):
        make_files(temp_root, *[f"d/f{i}.txt" for i in range(30)])

        coordinator = LoadingCoordinator(
            LoadingConfig(use_git=False, batch_size=7, queue_size=1)
        )
        batches = [batch async for batch in coordinator.stream([str(temp_root)], [])]

        assert sorted(len(batch) for batch in batches) == [2, 7, 7, 7, 7]
        assert len(set(flatten(batches))) == 30

    @pytest.mark.asyncio
    async def test_closing_stream_early_stops_loading(self, temp_root):
        make_files(temp_root, *[f"f{i}.txt" for i in range(50)])

        coordinator = LoadingCoordinator(
            LoadingConfig(use_git=False, batch_size=5, queue_size=1)
        )
        async with contextlib.aclosing(
            coordinator.stream([str(temp_root)], [])
        ) as batches:
            async for batch in batches:
                assert len(batch) == 5
                break

        # Producer and every walker task are gone once the generator closes
        assert asyncio.all_tasks() == {asyncio.current_task()}
        # The root never reached its final flush
        assert coordinator.get_stats()["roots"] == 0

    @pytest.mark.asyncio
    async def test_load_can_be_cancelled(self, temp_root):
        make_files(temp_root, *[f"d{i}/f.txt" for i in range(20)])

        coordinator = LoadingCoordinator(LoadingConfig(use_git=False))
        task = asyncio.create_task(coordinator.load([str(temp_root)], ignores=[]))
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_module_level_helpers(self, temp_root):
        make_files(temp_root, "a.txt", "b.log")
        collected: list[str] = []

        await load_paths(
            [str(temp_root)],
            traverse_symlink_directories=False,
            ignore_vcs_ignores=True,
            ignores=["*.log"],
            on_batch=collected.extend,
        )
        streamed = [
            path
            async for batch in stream_paths([str(temp_root)], ignores=["*.log"])
            for path in batch
        ]

        assert collected == [str(temp_root / "a.txt")]
        assert streamed == [str(temp_root / "a.txt")]
