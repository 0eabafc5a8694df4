# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Minimal HTTP request model consumed by the signers.

Signers mutate an :py:class:`AWSRequest` in place. Headers are held in
:py:class:`Fields`, the target location in an immutable :py:class:`URI` that is
swapped out whenever a signer rewrites the path or query.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from urllib.parse import urlsplit, urlunsplit

import aws_request_signers.interfaces.http as interfaces_http

DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443}


class Field(interfaces_http.Field):
    """A name-value pair representing a single HTTP header.

    All field names are case insensitive and case-variance must be treated as
    equivalent. Names may be normalized but should be preserved for accuracy during
    transmission.
    """

    def __init__(self, *, name: str, values: Iterable[str] | None = None):
        self.name = name
        self.values: list[str] = list(values) if values is not None else []

    def add(self, value: str) -> None:
        """Append a value to a field."""
        self.values.append(value)

    def set(self, values: list[str]) -> None:
        """Overwrite existing field values."""
        self.values = values

    def as_string(self, delimiter: str = ",") -> str:
        """Get delimited string of all values.

        If the ``Field`` has zero values, the empty string is returned. If the ``Field``
        has exactly one value, the value is returned unmodified.
        """
        if not self.values:
            return ""
        if len(self.values) == 1:
            return self.values[0]
        return delimiter.join(self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return False
        return self.name == other.name and self.values == other.values

    def __repr__(self) -> str:
        return f"Field(name={self.name!r}, value={self.values!r})"


class Fields(interfaces_http.Fields):
    def __init__(self, initial: Iterable[interfaces_http.Field] | None = None):
        """Collection of header entries mapped by normalized name.

        :param initial: Initial list of ``Field`` objects. When two fields share a
            normalized name, the later one wins.
        """
        self.entries: OrderedDict[str, interfaces_http.Field] = OrderedDict()
        for field in initial or ():
            self.set_field(field)

    @classmethod
    def from_dict(cls, headers: dict[str, str]) -> Fields:
        """Build a collection from a plain ``{name: value}`` mapping."""
        return cls(Field(name=name, values=[value]) for name, value in headers.items())

    def set_field(self, field: interfaces_http.Field) -> None:
        """Alias for __setitem__ to utilize the field.name for the entry key."""
        self.__setitem__(field.name, field)

    def set_value(self, name: str, value: str) -> None:
        """Replace any existing values of ``name`` with the single ``value``."""
        self.set_field(Field(name=name, values=[value]))

    def setdefault(self, name: str, value: str) -> str:
        """Set ``name`` to ``value`` unless a non-empty value is already present.

        Returns the value the field holds afterwards.
        """
        current = self.value_of(name)
        if current:
            return current
        self.set_value(name, value)
        return value

    def value_of(self, name: str, default: str = "") -> str:
        """Get the string value of ``name``, or ``default`` when absent."""
        field = self.get(name)
        return default if field is None else field.as_string()

    def __setitem__(self, name: str, field: interfaces_http.Field) -> None:
        """Set or override entry for a Field name."""
        normalized_name = self._normalize_field_name(name)
        normalized_field_name = self._normalize_field_name(field.name)
        if normalized_name != normalized_field_name:
            raise ValueError(
                f"Supplied key {name} does not match Field.name "
                f"provided: {normalized_field_name}"
            )
        self.entries[normalized_name] = field

    def get(
        self, key: str, default: interfaces_http.Field | None = None
    ) -> interfaces_http.Field | None:
        return self[key] if key in self else default

    def __getitem__(self, name: str) -> interfaces_http.Field:
        """Retrieve Field entry."""
        return self.entries[self._normalize_field_name(name)]

    def __delitem__(self, name: str) -> None:
        """Delete entry from collection."""
        del self.entries[self._normalize_field_name(name)]

    def _normalize_field_name(self, name: str) -> str:
        return name.strip().lower()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fields):
            return False
        return self.entries == other.entries

    def __iter__(self) -> Iterator[interfaces_http.Field]:
        yield from self.entries.values()

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Fields({self.entries})"

    def __contains__(self, key: str) -> bool:
        return self._normalize_field_name(key) in self.entries


@dataclass(kw_only=True, frozen=True)
class URI(interfaces_http.URI):
    """Universal Resource Identifier, target location for an :py:class:`AWSRequest`."""

    scheme: str = "https"
    """For example ``http`` or ``https``."""

    host: str
    """The hostname, for example ``iam.amazonaws.com``."""

    port: int | None = None
    """An explicit port number."""

    path: str | None = None
    """Path component of the URI."""

    query: str | None = None
    """Query component of the URI as string."""

    fragment: str | None = None
    """Part of the URI specification, but may not be transmitted by a client."""

    @classmethod
    def from_url(cls, url: str) -> URI:
        """Parse an absolute URL such as ``https://iam.amazonaws.com/?Action=X``."""
        split = urlsplit(url)
        return cls(
            scheme=split.scheme or "https",
            host=split.hostname or "",
            port=split.port,
            path=split.path or None,
            query=split.query or None,
            fragment=split.fragment or None,
        )

    @property
    def netloc(self) -> str:
        """Construct netloc string in format ``{host}:{port}``

        ``port`` is only included if set.
        """
        if self.port is not None:
            return f"{self.host}:{self.port}"
        return self.host

    @property
    def host_header(self) -> str:
        """The value a client sends in the ``Host`` header.

        An explicit port is dropped when it is the default port of the scheme.
        """
        if self.port is not None and DEFAULT_PORTS.get(self.scheme) == self.port:
            return self.host
        return self.netloc

    def with_changes(self, **changes: str | int | None) -> URI:
        """Return a copy of this URI with the given components replaced."""
        return replace(self, **changes)  # type: ignore[arg-type]

    def build(self) -> str:
        """Construct URI string representation.

        Returns a string of the form
        ``{scheme}://{host}:{port}{path}?{query}#{fragment}``
        """
        return urlunsplit(
            (self.scheme, self.netloc, self.path or "", self.query, self.fragment)
        )


class AWSRequest(interfaces_http.Request):
    """An HTTP request bound for AWS.

    Signing mutates this object: fields are added or overwritten, and the
    ``destination`` may be replaced with a URI carrying a rewritten path or query.
    """

    def __init__(
        self,
        *,
        destination: URI,
        method: str,
        body: Iterable[bytes] | None = None,
        fields: Fields | None = None,
    ):
        self.destination = destination
        self.method = method
        self.body = body
        self.fields = fields if fields is not None else Fields()

    @property
    def host(self) -> str:
        """The request host, without any port."""
        return self.destination.host

    def __repr__(self) -> str:
        return (
            f"AWSRequest(method={self.method!r}, "
            f"destination={self.destination.build()!r}, fields={self.fields!r})"
        )
