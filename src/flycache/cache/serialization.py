# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Serialization of cached values into the single string payload a backend stores.

The default ``PickleSerializer`` is the backend payload encoding: any
picklable Python object, base64-encoded so it fits a text field. It is
reversible within Python only. ``JsonSerializer`` trades generality for a
portable, human-readable payload.

Usage:
    serializer = get_serializer("json")
    payload = serializer.serialize({"name": "Ada"})
    value = serializer.deserialize(payload)
"""

from __future__ import annotations

import base64
import json
import pickle
from typing import Any, Protocol, runtime_checkable

from flycache.kernel.exceptions import ValidationException


@runtime_checkable
class Serializer(Protocol):
    """Converts cache values to and from a string payload."""

    def serialize(self, value: Any) -> str:
        """Convert a value to a string for storage."""
        ...

    def deserialize(self, data: str) -> Any:
        """Convert a stored string back to the original value."""
        ...


class PickleSerializer:
    """Base64-encoded pickle payloads."""

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self._protocol = protocol

    def serialize(self, value: Any) -> str:
        return base64.b64encode(pickle.dumps(value, protocol=self._protocol)).decode("ascii")

    def deserialize(self, data: str) -> Any:
        return pickle.loads(base64.b64decode(data.encode("ascii")))


class JsonSerializer:
    """JSON payloads. Only JSON-compatible values survive a round trip."""

    def serialize(self, value: Any) -> str:
        return json.dumps(value, separators=(",", ":"))

    def deserialize(self, data: str) -> Any:
        return json.loads(data)


# Errors a serializer may raise on a corrupt or foreign payload.
SERIALIZATION_ERRORS: tuple[type[Exception], ...] = (
    pickle.PicklingError,
    TypeError,
    ValueError,
    AttributeError,
    RecursionError,
)

DESERIALIZATION_ERRORS: tuple[type[Exception], ...] = (
    pickle.UnpicklingError,
    json.JSONDecodeError,
    ValueError,
    TypeError,
    EOFError,
    AttributeError,
    ImportError,
)

_SERIALIZERS: dict[str, type[PickleSerializer] | type[JsonSerializer]] = {
    "pickle": PickleSerializer,
    "json": JsonSerializer,
}


def get_serializer(name: str) -> Serializer:
    """Return a serializer by its configuration name."""
    try:
        return _SERIALIZERS[name.lower()]()
    except KeyError:
        raise ValidationException(
            f"Unknown serializer '{name}'",
            code="CACHE_UNKNOWN_SERIALIZER",
            context={"serializer": name, "supported": sorted(_SERIALIZERS)},
        ) from None
