from __future__ import annotations

import logging
from collections.abc import MutableMapping, MutableSequence

from cwl2argo.argo.location import FileLocation
from cwl2argo.core.exception import (
    MissingElementException,
    TypeMismatchException,
    ValidationException,
)
from cwl2argo.cwl.model import (
    CommandInputParameter,
    CommandLineBinding,
    CommandOutputBinding,
    CommandOutputParameter,
    CWLFile,
    CWLFormat,
    CWLInputEntry,
    LoadListing,
    SecondaryFileSchema,
    TypeKind,
)
from cwl2argo.log_handler import logger

# Runtime kinds accepted by declared types other than their own
_compatible_kinds: MutableMapping[TypeKind, MutableSequence[TypeKind]] = {
    TypeKind.INT: [TypeKind.INT, TypeKind.LONG],
}


class FlatInputBinding:
    def __init__(
        self,
        id: str,
        type: TypeKind,
        value: bool | int | str | None = None,
        file: CWLFile | None = None,
        label: str | None = None,
        secondary_files: MutableSequence[SecondaryFileSchema] | None = None,
        streamable: bool | None = None,
        doc: MutableSequence[str] | None = None,
        format: CWLFormat | None = None,
        load_contents: bool | None = None,
        load_listing: LoadListing | None = None,
        input_binding: CommandLineBinding | None = None,
    ):
        self.id: str = id
        self.type: TypeKind = type
        self.value: bool | int | str | None = value
        self.file: CWLFile | None = file
        self.label: str | None = label
        self.secondary_files: MutableSequence[SecondaryFileSchema] | None = (
            secondary_files
        )
        self.streamable: bool | None = streamable
        self.doc: MutableSequence[str] | None = doc
        self.format: CWLFormat | None = format
        self.load_contents: bool | None = load_contents
        self.load_listing: LoadListing | None = load_listing
        self.input_binding: CommandLineBinding | None = input_binding

    def __repr__(self):
        return f"FlatInputBinding({self.id!r}, {self.type.value})"


class FlatOutputBinding:
    def __init__(
        self,
        id: str,
        type: TypeKind,
        label: str | None = None,
        secondary_files: MutableSequence[SecondaryFileSchema] | None = None,
        streamable: bool | None = None,
        doc: MutableSequence[str] | None = None,
        format: CWLFormat | None = None,
        output_binding: CommandOutputBinding | None = None,
    ):
        self.id: str = id
        self.type: TypeKind = type
        self.location: FileLocation | None = None
        self.label: str | None = label
        self.secondary_files: MutableSequence[SecondaryFileSchema] | None = (
            secondary_files
        )
        self.streamable: bool | None = streamable
        self.doc: MutableSequence[str] | None = doc
        self.format: CWLFormat | None = format
        self.output_binding: CommandOutputBinding | None = output_binding

    def __repr__(self):
        return f"FlatOutputBinding({self.id!r}, {self.type.value})"


def _check_type(parameter: CommandInputParameter, entry: CWLInputEntry) -> None:
    accepted = _compatible_kinds.get(entry.kind, [entry.kind])
    if not any(t.kind in accepted for t in parameter.type):
        declared = ", ".join(t.kind.value for t in parameter.type)
        raise TypeMismatchException(
            f"Input `{parameter.id}` received a value of type `{entry.kind.value}`, "
            f"expected one of: {declared}"
        )


def flatten_input(
    parameter: CommandInputParameter, inputs: MutableMapping[str, CWLInputEntry]
) -> FlatInputBinding:
    if parameter.id is None:
        raise ValidationException("Input parameters must have an identifier")
    if (entry := inputs.get(parameter.id)) is None:
        raise MissingElementException(f"{parameter.id} was not present in input")
    _check_type(parameter, entry)
    binding = FlatInputBinding(
        id=parameter.id,
        type=entry.kind,
        label=parameter.label,
        secondary_files=parameter.secondary_files,
        streamable=parameter.streamable,
        doc=parameter.doc,
        format=parameter.format,
        load_contents=parameter.load_contents,
        load_listing=parameter.load_listing,
        input_binding=parameter.input_binding,
    )
    match entry.kind:
        case TypeKind.BOOL | TypeKind.INT | TypeKind.STRING:
            binding.value = entry.value
        case TypeKind.FILE:
            binding.file = entry.value
        case _:
            raise TypeMismatchException(
                f"Input `{parameter.id}` has unknown type `{entry.kind.value}`"
            )
    return binding


def flatten_inputs(
    parameters: MutableSequence[CommandInputParameter],
    inputs: MutableMapping[str, CWLInputEntry],
) -> MutableSequence[FlatInputBinding]:
    bindings = [flatten_input(parameter, inputs) for parameter in parameters]
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Flattened {len(bindings)} input bindings")
    return bindings


def flatten_output(parameter: CommandOutputParameter) -> FlatOutputBinding:
    if parameter.id is None:
        raise ValidationException("Output parameters must have an identifier")
    if len(parameter.type) != 1:
        raise TypeMismatchException(
            f"Output `{parameter.id}` must declare exactly one type, "
            f"got {len(parameter.type)}"
        )
    match kind := parameter.type[0].kind:
        case TypeKind.STRING | TypeKind.INT | TypeKind.FILE:
            pass
        case _:
            raise TypeMismatchException(
                f"Output `{parameter.id}` has unsupported type `{kind.value}`"
            )
    return FlatOutputBinding(
        id=parameter.id,
        type=kind,
        label=parameter.label,
        secondary_files=parameter.secondary_files,
        streamable=parameter.streamable,
        doc=parameter.doc,
        format=parameter.format,
        output_binding=parameter.output_binding,
    )


def flatten_outputs(
    parameters: MutableSequence[CommandOutputParameter],
) -> MutableSequence[FlatOutputBinding]:
    return [flatten_output(parameter) for parameter in parameters]


def filter_params(
    bindings: MutableSequence[FlatInputBinding],
) -> MutableSequence[FlatInputBinding]:
    params = []
    for binding in bindings:
        match binding.type:
            case TypeKind.FILE | TypeKind.RECORD_FIELD | TypeKind.ARRAY | TypeKind.ENUM:
                continue
            case _:
                params.append(binding)
    return params
