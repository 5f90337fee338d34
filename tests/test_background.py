"""Tests for the reset watcher and the reader/writer lock."""
from __future__ import annotations

import asyncio
import tempfile
import threading
import time
import unittest
from pathlib import Path
from types import SimpleNamespace

from statscore.core.locks import RWLock
from statscore.services.playtime_tracker import PlaytimeAccumulator
from statscore.tasks.reset_watch import reset_watch_loop

from fakes import FakeClock, at

ALICE = "069a79f4-44e9-4726-a5be-fca90e38aaf5"


class TestResetWatch(unittest.IsolatedAsyncioTestCase):
    async def test_resets_while_nobody_samples(self):
        with tempfile.TemporaryDirectory() as tmp:
            clock = FakeClock(at(2024, 5, 10, 23, 59, 59))
            acc = PlaytimeAccumulator(Path(tmp) / "playtime_daily.json", clock=clock)
            acc.on_player_connect(ALICE, 0)
            acc.on_player_disconnect(ALICE, 2000)
            clock.now = at(2024, 5, 11, 0, 0, 1)

            task = asyncio.create_task(reset_watch_loop(SimpleNamespace(accumulator=acc), interval=0.01))
            for _ in range(100):
                await asyncio.sleep(0.01)
                if acc.get_daily_seconds(ALICE) == 0.0:
                    break
            task.cancel()
            with self.assertRaises(asyncio.CancelledError):
                await task
            self.assertEqual(acc.get_daily_seconds(ALICE), 0.0)

    async def test_failing_check_keeps_the_loop_alive(self):
        calls = []

        def check_reset():
            calls.append(1)
            raise RuntimeError("disk full")

        task = asyncio.create_task(reset_watch_loop(
            SimpleNamespace(accumulator=SimpleNamespace(check_reset=check_reset)), interval=0.01))
        for _ in range(100):
            await asyncio.sleep(0.01)
            if len(calls) >= 2:
                break
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task
        self.assertGreaterEqual(len(calls), 2)


class TestRWLock(unittest.TestCase):
    def test_readers_share(self):
        lock = RWLock()
        with lock.read():
            with lock.read():
                pass

    def test_writer_waits_for_reader(self):
        lock = RWLock()
        order = []
        lock.acquire_read()

        def writer():
            with lock.write():
                order.append("write")

        t = threading.Thread(target=writer)
        t.start()
        time.sleep(0.05)
        order.append("read done")
        lock.release_read()
        t.join(timeout=2)
        self.assertEqual(order, ["read done", "write"])
