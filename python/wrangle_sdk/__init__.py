"""
Location: python/wrangle_sdk/__init__.py

Summary:
    Main package initialization for wrangle-sdk. Exports all public classes
    and functions for convenient importing.

Usage:
    from wrangle_sdk import WrangleClient, ChatCompletionChunk

    # Or import specific modules
    from wrangle_sdk.stream import Stream, HttpxByteSource
    from wrangle_sdk.errors import APIError

Version: 0.1.0
"""

from .client import WrangleClient
from .types import (
    ClientOptions,
    ChatCompletionMessageParam,
    ChatCompletionCreateParams,
    ChatCompletion,
    ChatCompletionChunk,
    ChunkChoice,
    ChoiceDelta,
    ToolCallDelta,
    UsageResponse,
    CostResponse,
    KeyVerifyResponse,
)
from .stream import (
    Stream,
    ByteSource,
    HttpxByteSource,
    DecodeState,
    DATA_PREFIX,
    DONE_SENTINEL,
)
from .errors import (
    WrangleError,
    APIError,
    APIConnectionError,
    InvalidResponseError,
    StreamError,
)

__version__ = "0.1.0"

__all__ = [
    # Main client
    "WrangleClient",
    # Types
    "ClientOptions",
    "ChatCompletionMessageParam",
    "ChatCompletionCreateParams",
    "ChatCompletion",
    "ChatCompletionChunk",
    "ChunkChoice",
    "ChoiceDelta",
    "ToolCallDelta",
    "UsageResponse",
    "CostResponse",
    "KeyVerifyResponse",
    # Streaming
    "Stream",
    "ByteSource",
    "HttpxByteSource",
    "DecodeState",
    "DATA_PREFIX",
    "DONE_SENTINEL",
    # Exceptions
    "WrangleError",
    "APIError",
    "APIConnectionError",
    "InvalidResponseError",
    "StreamError",
]
