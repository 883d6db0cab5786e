"""Responses returned by the Neocities API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any


def _text(data: dict, name: str) -> str:
    value = data.get(name)
    return "" if value is None else str(value)


def _number(data: dict, name: str) -> int:
    value = data.get(name)
    return 0 if value is None else int(value)


def _require_object(data: Any) -> dict:
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return data


@dataclass
class Info:
    """Properties of a site."""

    sitename: str = ""
    hits: int = 0
    created_at: str = ""
    last_updated: str = ""
    domain: str = ""
    tags: list[str] = field(default_factory=list)


def _info_from_json(data: Any) -> Info:
    if data is None:
        return Info()
    data = _require_object(data)
    return Info(
        sitename=_text(data, "sitename"),
        hits=_number(data, "hits"),
        created_at=_text(data, "created_at"),
        last_updated=_text(data, "last_updated"),
        domain=_text(data, "domain"),
        tags=[str(tag) for tag in data.get("tags") or []],
    )


@dataclass
class Response:
    """A general response from the Neocities API, with its raw body."""

    result: str = ""
    error_type: str = ""
    message: str = ""
    info: Info = field(default_factory=Info)
    body: bytes = b""

    @classmethod
    def from_body(cls, body: bytes | str) -> "Response":
        """Decode a JSON response body; raise ValueError if it is not valid."""
        raw = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        data = _require_object(json.loads(raw))
        return cls(
            result=_text(data, "result"),
            error_type=_text(data, "error_type"),
            message=_text(data, "message"),
            info=_info_from_json(data.get("info")),
            body=raw,
        )

    def print(self) -> None:
        """Write the result, error type and message to stdout."""
        print("Result:   ", self.result)
        if self.error_type:
            print("ErrorType:", self.error_type)
        print("Message:  ", self.message)


@dataclass
class KeyResponse:
    """The answer to a request for an API key."""

    result: str = ""
    error_type: str = ""
    message: str = ""
    api_key: str = ""

    @classmethod
    def from_json(cls, data: Any) -> "KeyResponse":
        data = _require_object(data)
        # Every field is a text field named as in the JSON document.
        values = {f.name: _text(data, f.name) for f in fields(cls)}
        return cls(**values)


@dataclass
class File:
    """One entry of a site's file listing."""

    path: str = ""
    is_directory: bool = False
    size: int = 0
    updated_at: str = ""
    sha1_hash: str = ""

    @classmethod
    def from_json(cls, data: Any) -> "File":
        data = _require_object(data)
        return cls(
            path=_text(data, "path"),
            is_directory=bool(data.get("is_directory")),
            size=_number(data, "size"),
            updated_at=_text(data, "updated_at"),
            sha1_hash=_text(data, "sha1_hash"),
        )

    def _to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {"path": self.path, "is_directory": self.is_directory}
        if self.size:
            out["size"] = self.size
        out["updated_at"] = self.updated_at
        if self.sha1_hash:
            out["sha1_hash"] = self.sha1_hash
        return out


@dataclass
class ListResponse:
    """The listing of a site's files."""

    result: str = ""
    files: list[File] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> "ListResponse":
        data = _require_object(data)
        return cls(
            result=_text(data, "result"),
            files=[File.from_json(item) for item in data.get("files") or []],
        )

    def to_json(self) -> dict[str, Any]:
        """Return the listing as JSON-ready data, omitting empty sizes and hashes."""
        return {"result": self.result, "files": [f._to_json() for f in self.files]}