"""
Shared pytest fixtures for wrangle-sdk tests.

This module provides common fixtures used across all test files,
including sample chunk payloads, SSE bodies and an in-memory byte source.
"""

import json

import pytest


def make_chunk(content=None, *, chunk_id="chatcmpl-abc123", index=0,
               role=None, finish_reason=None, tool_calls=None):
    """Build a chat.completion.chunk dict as the gateway sends it."""
    delta = {}
    if role is not None:
        delta["role"] = role
    if content is not None:
        delta["content"] = content
    if tool_calls is not None:
        delta["tool_calls"] = tool_calls
    return {
        "id": chunk_id,
        "object": "chat.completion.chunk",
        "created": 1732000000,
        "model": "gpt-4o",
        "choices": [
            {"index": index, "delta": delta, "finish_reason": finish_reason},
        ],
    }


def sse_line(payload) -> str:
    """Encode one `data:` event (payload dicts are JSON encoded)."""
    if not isinstance(payload, str):
        payload = json.dumps(payload, ensure_ascii=False)
    return f"data: {payload}\n\n"


class ChunkSource:
    """
    In-memory byte source for driving Stream in tests.

    Records how many buffers were pulled and whether it was closed, and
    can fail with a given exception once its buffers run out.
    """

    def __init__(self, chunks, error=None):
        self.chunks = list(chunks)
        self.error = error
        self.delivered = 0
        self.closed = False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for chunk in self.chunks:
            if self.closed:
                return
            self.delivered += 1
            yield chunk
        if self.error is not None:
            raise self.error

    async def aclose(self):
        self.closed = True


@pytest.fixture
def sample_chunks():
    """Three chunks of a streamed answer, including multi-byte text."""
    return [
        make_chunk("", role="assistant"),
        make_chunk("Héllo wörld 🌍 "),
        make_chunk("日本語", finish_reason="stop"),
    ]


@pytest.fixture
def sse_body(sample_chunks):
    """Complete SSE body for sample_chunks, terminated by [DONE]."""
    text = "".join(sse_line(c) for c in sample_chunks) + sse_line("[DONE]")
    return text.encode("utf-8")


@pytest.fixture
def chunk_source():
    """Factory for ChunkSource instances."""
    return ChunkSource


@pytest.fixture
def parse_errors():
    """List collecting (payload, error) pairs from a Stream's parse handler."""
    errors = []

    def handler(payload, error):
        errors.append((payload, error))

    handler.errors = errors
    return handler


@pytest.fixture
def chunk_factory():
    """The make_chunk helper, for tests that need custom chunks."""
    return make_chunk


@pytest.fixture
def sse():
    """The sse_line helper, for building SSE bodies."""
    return sse_line
