from __future__ import annotations

import posixpath
import urllib.parse
from collections.abc import MutableMapping, MutableSequence
from typing import Any


def get_name(element_id: str) -> str:
    name = element_id.split("#")[-1]
    return posixpath.basename(name) if posixpath.sep in name else name


def get_path_from_token(token_value: MutableMapping[str, Any]) -> str | None:
    path = token_value.get("path", token_value.get("location"))
    if path and "://" in path:
        scheme = urllib.parse.urlsplit(path).scheme
        return (
            posixpath.normpath(urllib.parse.unquote(path[7:]))
            if scheme == "file"
            else None
        )
    return path


def get_token_class(token_value: Any) -> str | None:
    if isinstance(token_value, MutableMapping):
        return token_value.get("class")
    else:
        return None


def is_expression(value: str) -> bool:
    return "$(" in value or "${" in value


def to_list(value: Any) -> MutableSequence[Any] | None:
    if value is None:
        return None
    elif isinstance(value, MutableSequence):
        return list(value)
    else:
        return [value]
