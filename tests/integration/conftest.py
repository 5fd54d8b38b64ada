"""
Fixtures for end-to-end tests.

A fake JSON-RPC node is served through ``httpx.MockTransport`` and plugged
into the provider as its HTTP agent, so requests travel the real
HttpxTransport path without opening sockets.
"""

import json

import httpx
import pytest


class FakeNode:
    """JSON-RPC node answering eth_blockNumber and recording every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.block = 16

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        payload = json.loads(request.content)
        if payload.get("method") == "eth_blockNumber":
            body = {"jsonrpc": "2.0", "id": payload.get("id"), "result": hex(self.block)}
        else:
            body = {
                "jsonrpc": "2.0",
                "id": payload.get("id"),
                "error": {"code": -32601, "message": "Method not found"},
            }
        return httpx.Response(200, json=body)

    @property
    def authorizations(self) -> list[str | None]:
        return [r.headers.get("authorization") for r in self.requests]


@pytest.fixture
def node():
    return FakeNode()


@pytest.fixture
def node_agent(node):
    """Agent options routing plain-HTTP requests to the fake node."""
    return {"http": httpx.MockTransport(node)}
