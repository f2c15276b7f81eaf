from __future__ import annotations

from collections.abc import MutableMapping
from enum import Enum
from typing import Any

from cwl2argo.core.exception import ValidationException


class FileLocationKind(Enum):
    HTTP = "http"
    S3 = "s3"
    HDFS = "hdfs"


class FileLocation:
    def __init__(
        self,
        name: str,
        type: FileLocationKind,
        http: MutableMapping[str, Any] | None = None,
        s3: MutableMapping[str, Any] | None = None,
        hdfs: MutableMapping[str, Any] | None = None,
    ):
        payloads = {
            FileLocationKind.HTTP: http,
            FileLocationKind.S3: s3,
            FileLocationKind.HDFS: hdfs,
        }
        if payloads[type] is None:
            raise ValidationException(
                f"Location `{name}` of type `{type.value}` has no {type.value} data"
            )
        for kind, payload in payloads.items():
            if kind != type and payload is not None:
                raise ValidationException(
                    f"Location `{name}` of type `{type.value}` "
                    f"cannot carry {kind.value} data"
                )
        self.name: str = name
        self.type: FileLocationKind = type
        self.http: MutableMapping[str, Any] | None = http
        self.s3: MutableMapping[str, Any] | None = s3
        self.hdfs: MutableMapping[str, Any] | None = hdfs

    @classmethod
    def load(cls, value: MutableMapping[str, Any]) -> FileLocation:
        if not isinstance(value, MutableMapping):
            raise ValidationException(f"Invalid location descriptor: {value!r}")
        if value.get("name") is None:
            raise ValidationException(f"Location descriptor {value!r} has no name")
        try:
            kind = FileLocationKind(value.get("type"))
        except ValueError:
            raise ValidationException(
                f"{value.get('type')} is not a valid location type"
            ) from None
        return cls(
            name=value.get("name"),
            type=kind,
            http=value.get("http"),
            s3=value.get("s3"),
            hdfs=value.get("hdfs"),
        )

    def __repr__(self):
        return f"FileLocation({self.name!r}, {self.type.value})"


class FileLocations:
    def __init__(
        self,
        inputs: MutableMapping[str, FileLocation] | None = None,
        outputs: MutableMapping[str, FileLocation] | None = None,
    ):
        self.inputs: MutableMapping[str, FileLocation] = inputs or {}
        self.outputs: MutableMapping[str, FileLocation] = outputs or {}


def load_locations(value: MutableMapping[str, Any] | None) -> FileLocations:
    value = value or {}
    return FileLocations(
        inputs={
            k: FileLocation.load(v) for k, v in (value.get("inputs") or {}).items()
        },
        outputs={
            k: FileLocation.load(v) for k, v in (value.get("outputs") or {}).items()
        },
    )
