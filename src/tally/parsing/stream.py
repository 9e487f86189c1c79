"""Parsing strategies for captured runner output.

Two stream shapes are supported behind one entry point:

- lines: one JSON record per line, undecodable lines skipped.
- document: the whole payload is one JSON array of records; a decode
  failure is fatal and raised as MalformedDocumentError.

parse_stream() selects a strategy explicitly or by sniffing the
payload: only a bracketed payload that decodes as one JSON value is a
document.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from typing import IO, Any, Union

from tally.errors import MalformedDocumentError
from tally.models.config import StreamFormat
from tally.parsing.events import Event, classify_event

logger = logging.getLogger(__name__)

Payload = Union[str, bytes, bytearray, Iterable[str], Iterable[bytes], IO[str], IO[bytes]]


def _decode(data: bytes | bytearray) -> str:
    return bytes(data).decode("utf-8", errors="replace")


def _to_text(payload: Payload) -> str:
    if isinstance(payload, str):
        return payload
    if isinstance(payload, (bytes, bytearray)):
        return _decode(payload)
    return "".join(
        _decode(line) if isinstance(line, (bytes, bytearray)) else line
        for line in payload
    )


def _iter_lines(payload: Payload) -> Iterator[str]:
    # Records end at "\n" only. str.splitlines() would also break on
    # U+2028, U+0085 and friends, which JSON encoders leave unescaped
    # inside strings such as a failed test's captured stdout.
    if isinstance(payload, (str, bytes, bytearray)):
        for line in _to_text(payload).split("\n"):
            yield line.rstrip("\r")
        return
    for line in payload:
        yield _decode(line) if isinstance(line, (bytes, bytearray)) else line


def _load_document(text: str) -> Any:
    try:
        return json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise MalformedDocumentError(str(exc)) from exc


def _classify_document(document: Any) -> list[Event]:
    if isinstance(document, dict):
        document = [document]
    if not isinstance(document, list):
        raise MalformedDocumentError(
            f"expected a top-level array of events, got {type(document).__name__}"
        )
    return [classify_event(raw) for raw in document]


def _sniff(text: str) -> tuple[StreamFormat, Any]:
    stripped = text.strip()
    if not (stripped.startswith("[") and stripped.endswith("]")):
        return StreamFormat.lines, None
    try:
        return StreamFormat.document, _load_document(stripped)
    except MalformedDocumentError as exc:
        logger.warning(
            "Output is bracketed like a JSON document but does not decode as one "
            "(%s); parsing it line by line",
            exc.reason,
        )
        return StreamFormat.lines, None


def parse_line_delimited(payload: Payload) -> Iterator[Event]:
    """Lazily classify one JSON record per line.

    Blank lines are ignored. Lines that are not valid JSON, such as
    compiler chatter interleaved with the event stream, are skipped.

    Args:
        payload: Captured output as text, bytes, or an iterable of
            lines (e.g. an open file).

    Yields:
        One classified event per decodable line, in arrival order.
    """
    for lineno, line in enumerate(_iter_lines(payload), start=1):
        stripped = line.strip()
        if not stripped:
            continue
        try:
            raw = json.loads(stripped)
        except (ValueError, RecursionError):
            logger.debug("Skipping non-JSON line %d: %.80s", lineno, stripped)
            continue
        yield classify_event(raw)


def parse_document(payload: Payload) -> list[Event]:
    """Classify every record of a single JSON document.

    The document's top level must be an array of records; a lone
    object is accepted as a one-record document.

    Raises:
        MalformedDocumentError: If the payload is not valid JSON (or
            nests too deeply to decode) or its top level is neither an
            array nor an object.
    """
    return _classify_document(_load_document(_to_text(payload)))


def sniff_format(payload: str | bytes | bytearray) -> StreamFormat:
    """Guess the stream shape of an in-memory payload.

    A payload is a document only when it starts with ``[``, ends with
    ``]`` and decodes as a single JSON value. Everything else,
    including a single ``{...}`` record or line output bracketed by
    chatter such as ``[INFO] ... [done]``, is line-delimited.
    """
    return _sniff(_to_text(payload))[0]


def parse_stream(
    payload: Payload,
    stream_format: StreamFormat | str = StreamFormat.auto,
) -> Iterable[Event]:
    """Classify a captured stream using the selected or sniffed strategy.

    Iterables that are not in-memory buffers (open files, line
    generators) cannot be sniffed without consuming them and are
    parsed line-delimited under ``auto``.

    Raises:
        MalformedDocumentError: In explicit document mode, if the
            payload does not decode.
    """
    fmt = StreamFormat(stream_format)
    if fmt is StreamFormat.auto:
        if not isinstance(payload, (str, bytes, bytearray)):
            logger.debug("Detected %s stream format", StreamFormat.lines.value)
            return parse_line_delimited(payload)
        text = _to_text(payload)
        fmt, document = _sniff(text)
        logger.debug("Detected %s stream format", fmt.value)
        if fmt is StreamFormat.document:
            return _classify_document(document)
        return parse_line_delimited(text)

    if fmt is StreamFormat.document:
        return parse_document(payload)
    return parse_line_delimited(payload)
