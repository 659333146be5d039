"""
Location: python/wrangle_sdk/stream.py

Summary:
    Server-Sent Events (SSE) decoding for streaming chat completions.
    Turns raw response bytes, split at arbitrary offsets, into ordered
    ChatCompletionChunk records.

Usage:
    Used by client.py to wrap a streaming httpx response. The decode steps
    (decode_chunk, split_lines, extract_payload, parse_record) are plain
    functions over an explicit DecodeState so they can also be driven by
    hand, e.g. from a push-style callback.

Example:
    from wrangle_sdk.stream import Stream, HttpxByteSource

    async with Stream(HttpxByteSource(response)) as stream:
        async for chunk in stream:
            print(chunk.choices[0].delta.content or "", end="")
"""

from dataclasses import dataclass, field
from typing import AsyncIterator, Callable, Optional, Protocol, TYPE_CHECKING, runtime_checkable
import codecs
import logging

from pydantic import ValidationError

from .errors import StreamError
from .types import ChatCompletionChunk

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"

# Called with the raw payload text and the validation error
ParseErrorHandler = Callable[[str, Exception], None]


@runtime_checkable
class ByteSource(Protocol):
    """
    Protocol for the raw body of a streaming response.

    A byte source yields buffers in arrival order with no alignment to
    lines or characters, and can be closed to free the connection. An
    exception raised while iterating means the transport failed.
    """

    def __aiter__(self) -> AsyncIterator[bytes]:
        ...

    async def aclose(self) -> None:
        ...


class HttpxByteSource:
    """
    ByteSource backed by an open httpx streaming response.

    Attributes:
        response: Response returned by AsyncClient.send(..., stream=True)
    """

    def __init__(self, response: "httpx.Response"):
        self.response = response

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.response.aiter_bytes()

    async def aclose(self) -> None:
        await self.response.aclose()


def _utf8_decoder() -> codecs.IncrementalDecoder:
    return codecs.getincrementaldecoder("utf-8")(errors="replace")


@dataclass
class DecodeState:
    """
    Per-stream decoding state carried between byte buffers.

    Attributes:
        decoder: Incremental UTF-8 decoder holding any split multi-byte tail
        pending: Text after the last newline seen so far
    """
    decoder: codecs.IncrementalDecoder = field(default_factory=_utf8_decoder)
    pending: str = ""


def decode_chunk(state: DecodeState, chunk: bytes) -> str:
    """
    Decode the next buffer, holding back an incomplete trailing character.

    Args:
        state: Decode state for this stream
        chunk: Raw bytes as delivered by the byte source

    Returns:
        Text for every character completed by this buffer
    """
    return state.decoder.decode(chunk, final=False)


def split_lines(state: DecodeState, text: str) -> list[str]:
    """
    Append text to the pending fragment and split off complete lines.

    Args:
        state: Decode state for this stream
        text: Newly decoded text

    Returns:
        Complete lines, without their newline; the remainder stays pending
    """
    lines = (state.pending + text).split("\n")
    state.pending = lines.pop()
    return lines


def feed(state: DecodeState, chunk: bytes) -> list[str]:
    """Decode one buffer and return the lines it completes."""
    return split_lines(state, decode_chunk(state, chunk))


def reset_state(state: DecodeState) -> None:
    """
    Drop whatever is still buffered at end of stream.

    A truncated character or an unterminated last line never produces a
    record.
    """
    if state.pending.strip():
        logger.debug("Discarding unterminated trailing line (%d chars)", len(state.pending))
    state.decoder.reset()
    state.pending = ""


def extract_payload(line: str) -> Optional[str]:
    """
    Return the data payload of an SSE line, or None if there is none.

    Blank lines, comments and other fields (event:, id:, retry:) carry
    nothing for chat completions and are ignored.

    Args:
        line: One complete line

    Returns:
        Text after the "data: " prefix, or None
    """
    line = line.strip()
    if not line.startswith(DATA_PREFIX):
        return None
    return line[len(DATA_PREFIX):]


def log_parse_error(payload: str, error: Exception) -> None:
    """Default ParseErrorHandler: log a warning and carry on."""
    logger.warning("Failed to parse stream payload: %s (%s)", payload, error)


def parse_record(
    payload: str,
    on_error: ParseErrorHandler = log_parse_error,
) -> Optional[ChatCompletionChunk]:
    """
    Parse one event payload into a ChatCompletionChunk.

    Malformed JSON and unexpected shapes are reported to on_error and
    skipped; they never end the stream.

    Args:
        payload: Event payload (never the [DONE] sentinel)
        on_error: Handler called with the payload and the error

    Returns:
        The parsed chunk, or None if the payload was rejected
    """
    try:
        return ChatCompletionChunk.model_validate_json(payload)
    except ValidationError as e:
        on_error(payload, e)
        return None


async def _iter_records(
    source: ByteSource,
    on_error: ParseErrorHandler,
) -> AsyncIterator[ChatCompletionChunk]:
    state = DecodeState()
    chunks = source.__aiter__()
    try:
        while True:
            try:
                chunk = await chunks.__anext__()
            except StopAsyncIteration:
                logger.debug("Stream source exhausted without [DONE]")
                return
            except Exception as e:
                raise StreamError(f"Stream interrupted: {e}") from e

            for line in feed(state, chunk):
                payload = extract_payload(line)
                if payload is None:
                    continue
                if payload == DONE_SENTINEL:
                    logger.debug("Stream terminated by [DONE]")
                    return
                record = parse_record(payload, on_error)
                if record is not None:
                    yield record
    finally:
        reset_state(state)


class Stream:
    """
    Single-use async iterator of ChatCompletionChunk records.

    Each pull reads from the byte source only until the next record is
    ready. Iteration ends on [DONE] or when the source is exhausted; a
    failing source raises StreamError after the records already yielded.
    The source is released when iteration ends, fails, or aclose() is
    called. Consumers that stop early should use `async with` or call
    aclose() themselves.

    Attributes:
        source: The byte source being decoded
    """

    def __init__(
        self,
        source: ByteSource,
        *,
        on_parse_error: Optional[ParseErrorHandler] = None,
    ):
        """
        Initialize the stream.

        Args:
            source: Byte source, typically an HttpxByteSource
            on_parse_error: Optional handler for rejected payloads
                (logs a warning by default)
        """
        self.source = source
        self._records = _iter_records(source, on_parse_error or log_parse_error)
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether the stream has ended and released its source."""
        return self._closed

    def __aiter__(self) -> "Stream":
        return self

    async def __anext__(self) -> ChatCompletionChunk:
        if self._closed:
            raise StopAsyncIteration
        try:
            return await self._records.__anext__()
        except BaseException:
            await self.aclose()
            raise

    async def aclose(self) -> None:
        """
        Stop decoding and release the byte source.

        Safe to call more than once; later pulls end immediately.
        """
        if self._closed:
            return
        self._closed = True
        await self._records.aclose()
        await self.source.aclose()

    async def __aenter__(self) -> "Stream":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args) -> None:
        """Exit async context manager and release the source."""
        await self.aclose()
