"""Tests for the Mojang session server client."""
from __future__ import annotations

import unittest

import httpx

from statscore.services.directory import MojangDirectory

UUID = "853c80ef-3c37-49fd-aa49-938b674adae6"
BASE = "https://sessionserver.example/session/minecraft/profile"


class TestMojangDirectory(unittest.IsolatedAsyncioTestCase):
    def make(self, handler) -> MojangDirectory:
        self.requests = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(record))
        self.addAsyncCleanup(client.aclose)
        return MojangDirectory(BASE, timeout=1, client=client)

    async def test_lookup_returns_name(self):
        d = self.make(lambda r: httpx.Response(200, json={"id": UUID.replace("-", ""), "name": "jeb_"}))
        self.assertEqual(await d.lookup(UUID), "jeb_")

    async def test_uuid_is_sent_without_hyphens(self):
        d = self.make(lambda r: httpx.Response(200, json={"name": "jeb_"}))
        await d.lookup(UUID)
        self.assertEqual(str(self.requests[0].url), f"{BASE}/853c80ef3c3749fdaa49938b674adae6")

    async def test_unknown_profile_is_none(self):
        d = self.make(lambda r: httpx.Response(204))
        self.assertIsNone(await d.lookup(UUID))

    async def test_server_error_is_none(self):
        d = self.make(lambda r: httpx.Response(503, text="unavailable"))
        self.assertIsNone(await d.lookup(UUID))

    async def test_malformed_body_is_none(self):
        d = self.make(lambda r: httpx.Response(200, text="<html>"))
        self.assertIsNone(await d.lookup(UUID))

    async def test_missing_name_is_none(self):
        d = self.make(lambda r: httpx.Response(200, json={"id": "x"}))
        self.assertIsNone(await d.lookup(UUID))

    async def test_timeout_is_none(self):
        def timeout(request):
            raise httpx.ReadTimeout("timed out", request=request)

        d = self.make(timeout)
        self.assertIsNone(await d.lookup(UUID))

    async def test_borrowed_client_is_not_closed(self):
        d = self.make(lambda r: httpx.Response(200, json={"name": "jeb_"}))
        await d.aclose()
        self.assertEqual(await d.lookup(UUID), "jeb_")
