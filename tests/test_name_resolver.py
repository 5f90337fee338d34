"""Tests for the identity cache and the name resolution chain."""
from __future__ import annotations

import asyncio
import json
import os
import re
import tempfile
import unittest
from pathlib import Path

from statscore.services.identity_cache import IdentityCache
from statscore.services.name_resolver import NameResolver, placeholder_name
from statscore.services.profile_cache import HostProfileCache
from statscore.services.session_registry import SessionRegistry

from fakes import FakeDirectory

UUID = "853c80ef-3c37-49fd-aa49-938b674adae6"
OTHER = "069a79f4-44e9-4726-a5be-fca90e38aaf5"


class TestIdentityCache(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.cache_file = Path(self._tmp.name) / "playtime_usernames.json"

    def test_store_writes_through(self):
        cache = IdentityCache(self.cache_file)
        cache.store(UUID, "jeb_")
        self.assertEqual(json.loads(self.cache_file.read_text(encoding="utf-8")), {UUID: "jeb_"})

        reloaded = IdentityCache(self.cache_file)
        self.assertEqual(reloaded.load(), 1)
        self.assertEqual(reloaded.get(UUID), "jeb_")

    def test_store_overwrites_with_newer_name(self):
        cache = IdentityCache(self.cache_file)
        cache.store(UUID, "old_name")
        cache.store(UUID, "new_name")
        self.assertEqual(cache.get(UUID), "new_name")
        self.assertEqual(len(cache), 1)

    def test_empty_name_is_ignored(self):
        cache = IdentityCache(self.cache_file)
        cache.store(UUID, "")
        self.assertIsNone(cache.get(UUID))
        self.assertFalse(self.cache_file.exists())

    def test_missing_file_loads_empty(self):
        cache = IdentityCache(self.cache_file)
        self.assertEqual(cache.load(), 0)
        self.assertEqual(cache.snapshot(), {})

    def test_corrupt_file_loads_empty(self):
        self.cache_file.write_text("[oops", encoding="utf-8")
        cache = IdentityCache(self.cache_file)
        self.assertEqual(cache.load(), 0)

    def test_invalid_keys_are_skipped(self):
        self.cache_file.write_text(json.dumps({
            UUID.upper(): "Notch",
            "not-a-uuid": "ghost",
            OTHER: 42,
        }), encoding="utf-8")
        cache = IdentityCache(self.cache_file)
        self.assertEqual(cache.load(), 1)
        self.assertEqual(cache.snapshot(), {UUID: "Notch"})


class TestNameResolver(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.sessions = SessionRegistry()
        self.cache = IdentityCache(Path(self._tmp.name) / "playtime_usernames.json")

    def resolve(self, resolver: NameResolver, uuid: str = UUID) -> str:
        return asyncio.run(resolver.resolve(uuid))

    def test_live_session_wins_and_is_not_cached(self):
        self.cache.store(UUID, "cached_name")
        directory = FakeDirectory({UUID: "remote_name"})
        self.sessions.connect(UUID, "live_name", 100)
        resolver = NameResolver(self.sessions, self.cache, directory)

        self.assertEqual(self.resolve(resolver), "live_name")
        self.assertEqual(self.cache.get(UUID), "cached_name")
        self.assertEqual(directory.calls, [])

    def test_cache_hit_skips_directory(self):
        self.cache.store(UUID, "cached_name")
        directory = FakeDirectory({UUID: "remote_name"})
        resolver = NameResolver(self.sessions, self.cache, directory)
        self.assertEqual(self.resolve(resolver), "cached_name")
        self.assertEqual(directory.calls, [])

    def test_directory_hit_is_written_to_cache(self):
        directory = FakeDirectory({UUID: "jeb_"})
        resolver = NameResolver(self.sessions, self.cache, directory)
        self.assertEqual(self.resolve(resolver), "jeb_")
        self.assertEqual(self.cache.get(UUID), "jeb_")
        # second resolve is served from the cache
        self.assertEqual(self.resolve(resolver), "jeb_")
        self.assertEqual(directory.calls, [UUID])

    def test_placeholder_when_every_source_misses(self):
        resolver = NameResolver(self.sessions, self.cache, FakeDirectory())
        first = self.resolve(resolver)
        self.assertRegex(first, re.compile(r"^Unknown_[0-9a-f]{8}$"))
        self.assertEqual(first, "Unknown_853c80ef")
        self.assertEqual(self.resolve(resolver), first)
        self.assertIsNone(self.cache.get(UUID))

    def test_directory_error_falls_back_to_placeholder(self):
        resolver = NameResolver(self.sessions, self.cache, FakeDirectory(error=RuntimeError("boom")))
        self.assertEqual(self.resolve(resolver), placeholder_name(UUID))

    def test_no_directory_configured(self):
        resolver = NameResolver(self.sessions, self.cache, None)
        self.assertEqual(self.resolve(resolver, OTHER), "Unknown_069a79f4")

    def test_disconnected_player_falls_back_to_cache(self):
        self.sessions.connect(UUID, "live_name", 0)
        self.cache.store(UUID, "live_name")
        self.sessions.disconnect(UUID)
        resolver = NameResolver(self.sessions, self.cache, FakeDirectory())
        self.assertEqual(self.resolve(resolver), "live_name")


class TestHostProfileCache(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        root = Path(self._tmp.name)
        self.usercache = root / "usercache.json"
        self.sessions = SessionRegistry()
        self.cache = IdentityCache(root / "playtime_usernames.json")
        self.directory = FakeDirectory({UUID: "remote_name"})
        self.resolver = NameResolver(self.sessions, self.cache, self.directory, HostProfileCache(self.usercache))

    def write_usercache(self, entries, mtime=None):
        self.usercache.write_text(json.dumps(entries), encoding="utf-8")
        if mtime is not None:
            os.utime(self.usercache, (mtime, mtime))

    def resolve(self, uuid: str = UUID) -> str:
        return asyncio.run(self.resolver.resolve(uuid))

    def test_usercache_answers_before_cache_and_directory(self):
        self.cache.store(UUID, "cached_name")
        self.write_usercache([{"name": "server_name", "uuid": UUID, "expiresOn": "2025-01-01 00:00:00 +0000"}])
        self.assertEqual(self.resolve(), "server_name")
        self.assertEqual(self.directory.calls, [])

    def test_live_session_still_wins(self):
        self.write_usercache([{"name": "server_name", "uuid": UUID}])
        self.sessions.connect(UUID, "live_name", 0)
        self.assertEqual(self.resolve(), "live_name")

    def test_missing_entry_falls_through(self):
        self.write_usercache([{"name": "someone", "uuid": OTHER}, {"name": "", "uuid": UUID}, "junk"])
        self.assertEqual(self.resolve(), "remote_name")
        self.assertEqual(self.directory.calls, [UUID])

    def test_missing_or_corrupt_file_falls_through(self):
        self.assertEqual(self.resolve(), "remote_name")
        self.usercache.write_text("{not a list", encoding="utf-8")
        self.assertEqual(HostProfileCache(self.usercache).get(UUID), None)

    def test_file_is_reread_when_it_changes(self):
        profiles = HostProfileCache(self.usercache)
        self.write_usercache([{"name": "old_name", "uuid": UUID}], mtime=1_700_000_000)
        self.assertEqual(profiles.get(UUID), "old_name")
        self.write_usercache([{"name": "new_name", "uuid": UUID}], mtime=1_700_000_100)
        self.assertEqual(profiles.get(UUID), "new_name")
