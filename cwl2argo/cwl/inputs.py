from __future__ import annotations

import logging
import re
from collections.abc import Callable, MutableMapping, MutableSequence
from typing import Any, get_args

import cwl_utils.parser

from cwl2argo.core.exception import InputClassificationException
from cwl2argo.core.utils import get_token_class
from cwl2argo.cwl.loader import load_file
from cwl2argo.cwl.model import CWLFile, CWLInputEntry, TypeKind
from cwl2argo.log_handler import logger

_INTEGER = re.compile(r"^[-+]?[0-9]+$")
_cwl_file_types = get_args(cwl_utils.parser.File) + get_args(
    cwl_utils.parser.Directory
)


def _decode_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    elif isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValueError(f"{value!r} is not a boolean")


def _decode_int(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    elif isinstance(value, str) and _INTEGER.match(value):
        return int(value)
    raise ValueError(f"{value!r} is not an integer")


def _decode_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    elif isinstance(value, float):
        return repr(value)
    raise ValueError(f"{value!r} is not a string")


def _decode_file(value: Any) -> CWLFile:
    if isinstance(value, _cwl_file_types):
        value = value.save(relative_uris=False)
    if not isinstance(value, MutableMapping):
        raise ValueError(f"{value!r} is not an object")
    if (token_class := get_token_class(value)) != "File":
        # A mapping that is not a File is a hard error rather than a fallthrough
        raise InputClassificationException(
            f"{token_class} was received instead of File"
        )
    return load_file(value)


# Evaluated in order, the first successful decode wins
decoders: MutableSequence[tuple[TypeKind, Callable[[Any], Any]]] = [
    (TypeKind.BOOL, _decode_bool),
    (TypeKind.INT, _decode_int),
    (TypeKind.STRING, _decode_string),
    (TypeKind.FILE, _decode_file),
]


def resolve_input_value(value: Any) -> CWLInputEntry:
    for kind, decode in decoders:
        try:
            data = decode(value)
        except (TypeError, ValueError):
            continue
        return CWLInputEntry(kind, data)
    raise InputClassificationException(
        f"Unable to convert {value!r} into a runtime input entry"
    )


def resolve_input_values(
    values: MutableMapping[str, Any] | None,
) -> MutableMapping[str, CWLInputEntry]:
    entries = {}
    for name, value in (values or {}).items():
        try:
            entries[name] = resolve_input_value(value)
        except InputClassificationException as e:
            raise InputClassificationException(f"Input `{name}`: {e}") from e
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Input `{name}` classified as {entries[name].kind.value}")
    return entries
