# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import io
from collections.abc import Iterable, Mapping
from urllib.parse import parse_qsl, quote, unquote, urlencode

from ._http import AWSRequest
from .interfaces.io import ByteStream, Seekable


def capture_body(request: AWSRequest) -> bytes:
    """Read the full request body and leave an equivalent, re-readable body behind.

    Seekable bodies are read from their current position and rewound. Any other
    body is drained into a fresh :py:class:`io.BytesIO` that replaces it on the
    request. Errors raised while reading propagate and leave ``request.body``
    unchanged.
    """
    body = request.body
    if body is None:
        return b""

    if isinstance(body, bytes | bytearray):
        payload = bytes(body)
        request.body = io.BytesIO(payload)
        return payload

    if isinstance(body, Seekable) and isinstance(body, ByteStream):
        position = body.tell()
        payload = _as_bytes(body.read())
        body.seek(position)
        return payload

    payload = b"".join(_as_bytes(chunk) for chunk in _iter_chunks(body))
    request.body = io.BytesIO(payload)
    return payload


def _iter_chunks(body: Iterable[bytes] | ByteStream) -> Iterable[bytes | str]:
    if isinstance(body, ByteStream):
        return [body.read()]
    if isinstance(body, str):
        return [body]
    return body


def _as_bytes(chunk: bytes | str) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode()
    return bytes(chunk)


def encode_path_segment(segment: str) -> str:
    """Percent-encode every byte of ``segment`` outside ``[A-Za-z0-9-_.~]``."""
    return quote(segment, safe="")


def normalize_path(path: str | None) -> str:
    """Encode each ``/`` separated segment of ``path`` independently.

    ``path`` is in its raw wire form, so each segment is decoded before it is
    encoded again.
    """
    if not path:
        return "/"
    return "/".join(
        encode_path_segment(unquote(segment)) for segment in path.split("/")
    )


def parse_query(query: str | None) -> dict[str, str]:
    """Parse a raw query string, keeping blank values. The last duplicate wins."""
    if not query:
        return {}
    return dict(parse_qsl(query, keep_blank_values=True))


def canonical_query_string(params: Mapping[str, str]) -> str:
    """Encode ``params`` sorted by key.

    Form encoding turns spaces into ``+``. AWS requires ``%20``, and every literal
    ``+`` has already been escaped to ``%2B`` at this point, so the remaining
    ``+`` characters are all spaces.
    """
    return urlencode(sorted(params.items())).replace("+", "%20")
