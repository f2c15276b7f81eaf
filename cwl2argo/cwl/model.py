from __future__ import annotations

from collections.abc import MutableMapping, MutableSequence
from enum import Enum
from typing import Any

from cwl2argo.core.exception import ValidationException


class TypeKind(Enum):
    NULL = "null"
    BOOL = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    FILE = "File"
    DIRECTORY = "Directory"
    STDIN = "stdin"
    STRING = "string"
    RECORD = "record"
    RECORD_FIELD = "record_field"
    ENUM = "enum"
    ARRAY = "array"


class ExpressionKind(Enum):
    RAW = "raw"
    EXPRESSION = "expression"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"


class FormatKind(Enum):
    STRING = "string"
    STRINGS = "strings"
    EXPRESSION = "expression"


class GlobKind(Enum):
    STRING = "string"
    STRINGS = "strings"
    EXPRESSION = "expression"


class ArgumentKind(Enum):
    STRING = "string"
    EXPRESSION = "expression"
    BINDING = "binding"


class LoadListing(Enum):
    no_listing = 0
    shallow_listing = 1
    deep_listing = 2


class RequirementKind(Enum):
    DOCKER = "DockerRequirement"
    SOFTWARE = "SoftwareRequirement"
    LOAD_LISTING = "LoadListingRequirement"
    INITIAL_WORK_DIR = "InitialWorkDirRequirement"
    INLINE_JAVASCRIPT = "InlineJavascriptRequirement"
    SCHEMA_DEF = "SchemaDefRequirement"
    ENV_VAR = "EnvVarRequirement"
    SHELL_COMMAND = "ShellCommandRequirement"
    WORK_REUSE = "WorkReuse"
    NETWORK_ACCESS = "NetworkAccess"
    INPLACE_UPDATE = "InplaceUpdateRequirement"
    TOOL_TIME_LIMIT = "ToolTimeLimit"
    RESOURCE = "ResourceRequirement"


class CWLExpression:
    __slots__ = ("kind", "value")

    def __init__(self, kind: ExpressionKind, value: str | bool | int | float):
        self.kind: ExpressionKind = kind
        self.value: str | bool | int | float = value

    def __eq__(self, other):
        if not isinstance(other, CWLExpression):
            return False
        return self.kind == other.kind and self.value == other.value

    def __hash__(self):
        return hash((self.kind, self.value))

    def __repr__(self):
        return f"CWLExpression({self.kind.value}, {self.value!r})"


class CWLFormat:
    __slots__ = ("kind", "value")

    def __init__(
        self, kind: FormatKind, value: str | MutableSequence[str] | CWLExpression
    ):
        self.kind: FormatKind = kind
        self.value: str | MutableSequence[str] | CWLExpression = value


class SecondaryFileSchema:
    __slots__ = ("pattern", "required")

    def __init__(self, pattern: CWLExpression, required: CWLExpression | None = None):
        self.pattern: CWLExpression = pattern
        self.required: CWLExpression | None = required


class CommandLineBinding:
    def __init__(
        self,
        load_contents: bool | None = None,
        position: int | None = None,
        prefix: str | None = None,
        separate: bool | None = None,
        item_separator: str | None = None,
        value_from: CWLExpression | None = None,
        shell_quote: bool | None = None,
    ):
        if position is not None and position < 0:
            raise ValidationException(
                f"Binding position must be a non-negative integer, got {position}"
            )
        self.load_contents: bool | None = load_contents
        self.position: int | None = position
        self.prefix: str | None = prefix
        self.separate: bool | None = separate
        self.item_separator: str | None = item_separator
        self.value_from: CWLExpression | None = value_from
        self.shell_quote: bool | None = shell_quote


class CommandInputArraySchema:
    def __init__(
        self,
        items: MutableSequence[CommandLineType],
        label: str | None = None,
        doc: MutableSequence[str] | None = None,
        name: str | None = None,
        input_binding: CommandLineBinding | None = None,
    ):
        self.items: MutableSequence[CommandLineType] = items
        self.label: str | None = label
        self.doc: MutableSequence[str] | None = doc
        self.name: str | None = name
        self.input_binding: CommandLineBinding | None = input_binding


class CommandInputEnumSchema:
    def __init__(
        self,
        symbols: MutableSequence[str],
        label: str | None = None,
        doc: MutableSequence[str] | None = None,
        name: str | None = None,
        input_binding: CommandLineBinding | None = None,
    ):
        self.symbols: MutableSequence[str] = symbols
        self.label: str | None = label
        self.doc: MutableSequence[str] | None = doc
        self.name: str | None = name
        self.input_binding: CommandLineBinding | None = input_binding


class CommandInputRecordField:
    def __init__(
        self,
        name: str,
        type: MutableSequence[CommandLineType],
        doc: MutableSequence[str] | None = None,
        label: str | None = None,
        secondary_files: MutableSequence[SecondaryFileSchema] | None = None,
        streamable: bool | None = None,
        format: CWLFormat | None = None,
        load_contents: bool | None = None,
        load_listing: LoadListing | None = None,
        input_binding: CommandLineBinding | None = None,
    ):
        self.name: str = name
        self.type: MutableSequence[CommandLineType] = type
        self.doc: MutableSequence[str] | None = doc
        self.label: str | None = label
        self.secondary_files: MutableSequence[SecondaryFileSchema] | None = (
            secondary_files
        )
        self.streamable: bool | None = streamable
        self.format: CWLFormat | None = format
        self.load_contents: bool | None = load_contents
        self.load_listing: LoadListing | None = load_listing
        self.input_binding: CommandLineBinding | None = input_binding


class CommandInputRecordSchema:
    def __init__(
        self,
        fields: MutableSequence[CommandInputRecordField] | None = None,
        label: str | None = None,
        doc: MutableSequence[str] | None = None,
        name: str | None = None,
        input_binding: CommandLineBinding | None = None,
    ):
        self.fields: MutableSequence[CommandInputRecordField] | None = fields
        self.label: str | None = label
        self.doc: MutableSequence[str] | None = doc
        self.name: str | None = name
        self.input_binding: CommandLineBinding | None = input_binding


class CommandLineType:
    def __init__(
        self,
        kind: TypeKind,
        record: CommandInputRecordSchema | None = None,
        enum: CommandInputEnumSchema | None = None,
        array: CommandInputArraySchema | None = None,
    ):
        # A sub-schema is carried only by the variant that owns it
        for owner, schema in (
            (TypeKind.RECORD, record),
            (TypeKind.ENUM, enum),
            (TypeKind.ARRAY, array),
        ):
            if kind == owner and schema is None:
                raise ValidationException(
                    f"Type `{kind.value}` requires an embedded {owner.value} schema"
                )
            if kind != owner and schema is not None:
                raise ValidationException(
                    f"Type `{kind.value}` cannot carry an embedded {owner.value} schema"
                )
        self.kind: TypeKind = kind
        self.record: CommandInputRecordSchema | None = record
        self.enum: CommandInputEnumSchema | None = enum
        self.array: CommandInputArraySchema | None = array

    def __repr__(self):
        return f"CommandLineType({self.kind.value})"


def _check_types(
    parameter_id: str | None, types: MutableSequence[CommandLineType]
) -> MutableSequence[CommandLineType]:
    if not types:
        raise ValidationException(
            f"Parameter `{parameter_id}` must declare at least one type"
        )
    return types


class CommandInputParameter:
    def __init__(
        self,
        type: MutableSequence[CommandLineType],
        id: str | None = None,
        label: str | None = None,
        secondary_files: MutableSequence[SecondaryFileSchema] | None = None,
        streamable: bool | None = None,
        doc: MutableSequence[str] | None = None,
        format: CWLFormat | None = None,
        load_contents: bool | None = None,
        load_listing: LoadListing | None = None,
        default: Any = None,
        input_binding: CommandLineBinding | None = None,
    ):
        self.type: MutableSequence[CommandLineType] = _check_types(id, type)
        self.id: str | None = id
        self.label: str | None = label
        self.secondary_files: MutableSequence[SecondaryFileSchema] | None = (
            secondary_files
        )
        self.streamable: bool | None = streamable
        self.doc: MutableSequence[str] | None = doc
        self.format: CWLFormat | None = format
        self.load_contents: bool | None = load_contents
        self.load_listing: LoadListing | None = load_listing
        self.default: Any = default
        self.input_binding: CommandLineBinding | None = input_binding

    @property
    def is_scalar(self) -> bool:
        return len(self.type) == 1


class CommandOutputBindingGlob:
    __slots__ = ("kind", "value")

    def __init__(
        self, kind: GlobKind, value: str | MutableSequence[str] | CWLExpression
    ):
        self.kind: GlobKind = kind
        self.value: str | MutableSequence[str] | CWLExpression = value


class CommandOutputBinding:
    def __init__(
        self,
        glob: CommandOutputBindingGlob | None = None,
        load_contents: bool | None = None,
        load_listing: LoadListing | None = None,
        output_eval: CWLExpression | None = None,
    ):
        self.glob: CommandOutputBindingGlob | None = glob
        self.load_contents: bool | None = load_contents
        self.load_listing: LoadListing | None = load_listing
        self.output_eval: CWLExpression | None = output_eval


class CommandOutputParameter:
    def __init__(
        self,
        type: MutableSequence[CommandLineType],
        id: str | None = None,
        label: str | None = None,
        secondary_files: MutableSequence[SecondaryFileSchema] | None = None,
        streamable: bool | None = None,
        doc: MutableSequence[str] | None = None,
        format: CWLFormat | None = None,
        output_binding: CommandOutputBinding | None = None,
    ):
        self.type: MutableSequence[CommandLineType] = _check_types(id, type)
        self.id: str | None = id
        self.label: str | None = label
        self.secondary_files: MutableSequence[SecondaryFileSchema] | None = (
            secondary_files
        )
        self.streamable: bool | None = streamable
        self.doc: MutableSequence[str] | None = doc
        self.format: CWLFormat | None = format
        self.output_binding: CommandOutputBinding | None = output_binding


class CommandLineArgument:
    __slots__ = ("kind", "value")

    def __init__(
        self, kind: ArgumentKind, value: str | CWLExpression | CommandLineBinding
    ):
        self.kind: ArgumentKind = kind
        self.value: str | CWLExpression | CommandLineBinding = value


class Requirement:
    kind: RequirementKind


class DockerRequirement(Requirement):
    kind = RequirementKind.DOCKER

    def __init__(
        self,
        docker_pull: str | None = None,
        docker_load: str | None = None,
        docker_file: str | None = None,
        docker_import: str | None = None,
        docker_image_id: str | None = None,
        docker_output_directory: str | None = None,
    ):
        self.docker_pull: str | None = docker_pull
        self.docker_load: str | None = docker_load
        self.docker_file: str | None = docker_file
        self.docker_import: str | None = docker_import
        self.docker_image_id: str | None = docker_image_id
        self.docker_output_directory: str | None = docker_output_directory


class SoftwarePackage:
    def __init__(
        self,
        package: str,
        version: MutableSequence[str] | None = None,
        specs: MutableSequence[str] | None = None,
    ):
        self.package: str = package
        self.version: MutableSequence[str] | None = version
        self.specs: MutableSequence[str] | None = specs


class SoftwareRequirement(Requirement):
    kind = RequirementKind.SOFTWARE

    def __init__(self, packages: MutableSequence[SoftwarePackage]):
        self.packages: MutableSequence[SoftwarePackage] = packages


class LoadListingRequirement(Requirement):
    kind = RequirementKind.LOAD_LISTING

    def __init__(self, load_listing: LoadListing | None = None):
        self.load_listing: LoadListing | None = load_listing


class Dirent:
    def __init__(
        self,
        entry: CWLExpression,
        entry_name: CWLExpression | None = None,
        writable: bool | None = None,
    ):
        self.entry: CWLExpression = entry
        self.entry_name: CWLExpression | None = entry_name
        self.writable: bool | None = writable


class InitialWorkDirRequirement(Requirement):
    kind = RequirementKind.INITIAL_WORK_DIR

    def __init__(
        self,
        listing: MutableSequence[Dirent | CWLExpression | MutableMapping[str, Any]]
        | CWLExpression,
    ):
        self.listing: MutableSequence[
            Dirent | CWLExpression | MutableMapping[str, Any]
        ] | CWLExpression = listing


class InlineJavascriptRequirement(Requirement):
    kind = RequirementKind.INLINE_JAVASCRIPT

    def __init__(self, expression_lib: MutableSequence[str] | None = None):
        self.expression_lib: MutableSequence[str] | None = expression_lib


class SchemaDefRequirement(Requirement):
    kind = RequirementKind.SCHEMA_DEF

    def __init__(self, types: MutableSequence[CommandLineType]):
        self.types: MutableSequence[CommandLineType] = types


class EnvironmentDef:
    def __init__(self, env_name: str, env_value: CWLExpression):
        self.env_name: str = env_name
        self.env_value: CWLExpression = env_value


class EnvVarRequirement(Requirement):
    kind = RequirementKind.ENV_VAR

    def __init__(self, env_def: MutableSequence[EnvironmentDef]):
        self.env_def: MutableSequence[EnvironmentDef] = env_def


class ShellCommandRequirement(Requirement):
    kind = RequirementKind.SHELL_COMMAND


class WorkReuse(Requirement):
    kind = RequirementKind.WORK_REUSE

    def __init__(self, enable_reuse: CWLExpression):
        self.enable_reuse: CWLExpression = enable_reuse


class NetworkAccess(Requirement):
    kind = RequirementKind.NETWORK_ACCESS

    def __init__(self, network_access: CWLExpression):
        self.network_access: CWLExpression = network_access


class InplaceUpdateRequirement(Requirement):
    kind = RequirementKind.INPLACE_UPDATE

    def __init__(self, inplace_update: bool):
        self.inplace_update: bool = inplace_update


class ToolTimeLimit(Requirement):
    kind = RequirementKind.TOOL_TIME_LIMIT

    def __init__(self, time_limit: CWLExpression):
        self.time_limit: CWLExpression = time_limit


class ResourceRequirement(Requirement):
    kind = RequirementKind.RESOURCE

    def __init__(
        self,
        cores_min: CWLExpression | None = None,
        cores_max: CWLExpression | None = None,
        ram_min: CWLExpression | None = None,
        ram_max: CWLExpression | None = None,
        tmpdir_min: CWLExpression | None = None,
        tmpdir_max: CWLExpression | None = None,
        outdir_min: CWLExpression | None = None,
        outdir_max: CWLExpression | None = None,
    ):
        self.cores_min: CWLExpression | None = cores_min
        self.cores_max: CWLExpression | None = cores_max
        self.ram_min: CWLExpression | None = ram_min
        self.ram_max: CWLExpression | None = ram_max
        self.tmpdir_min: CWLExpression | None = tmpdir_min
        self.tmpdir_max: CWLExpression | None = tmpdir_max
        self.outdir_min: CWLExpression | None = outdir_min
        self.outdir_max: CWLExpression | None = outdir_max


class CommandLineTool:
    def __init__(
        self,
        inputs: MutableSequence[CommandInputParameter],
        outputs: MutableSequence[CommandOutputParameter],
        id: str | None = None,
        label: str | None = None,
        doc: MutableSequence[str] | None = None,
        requirements: MutableSequence[Requirement] | None = None,
        hints: MutableSequence[Any] | None = None,
        cwl_version: str | None = None,
        intent: MutableSequence[str] | None = None,
        base_command: MutableSequence[str] | None = None,
        arguments: MutableSequence[CommandLineArgument] | None = None,
        stdin: CWLExpression | None = None,
        stdout: CWLExpression | None = None,
        stderr: CWLExpression | None = None,
    ):
        self.inputs: MutableSequence[CommandInputParameter] = inputs
        self.outputs: MutableSequence[CommandOutputParameter] = outputs
        self.id: str | None = id
        self.label: str | None = label
        self.doc: MutableSequence[str] | None = doc
        self.requirements: MutableSequence[Requirement] | None = requirements
        self.hints: MutableSequence[Any] | None = hints
        self.cwl_version: str | None = cwl_version
        self.intent: MutableSequence[str] | None = intent
        self.base_command: MutableSequence[str] | None = base_command
        self.arguments: MutableSequence[CommandLineArgument] | None = arguments
        self.stdin: CWLExpression | None = stdin
        self.stdout: CWLExpression | None = stdout
        self.stderr: CWLExpression | None = stderr


class CWLFile:
    def __init__(
        self,
        location: str | None = None,
        path: str | None = None,
        basename: str | None = None,
        dirname: str | None = None,
        nameroot: str | None = None,
        nameext: str | None = None,
        checksum: str | None = None,
        size: int | None = None,
        secondary_files: MutableSequence[CWLFile] | None = None,
        format: str | None = None,
        contents: str | None = None,
    ):
        self.location: str | None = location
        self.path: str | None = path
        self.basename: str | None = basename
        self.dirname: str | None = dirname
        self.nameroot: str | None = nameroot
        self.nameext: str | None = nameext
        self.checksum: str | None = checksum
        self.size: int | None = size
        self.secondary_files: MutableSequence[CWLFile] | None = secondary_files
        self.format: str | None = format
        self.contents: str | None = contents


class CWLInputEntry:
    __slots__ = ("kind", "value")

    def __init__(self, kind: TypeKind, value: bool | int | str | CWLFile):
        if kind not in (TypeKind.BOOL, TypeKind.INT, TypeKind.STRING, TypeKind.FILE):
            raise ValidationException(
                f"Runtime input values cannot be of type `{kind.value}`"
            )
        self.kind: TypeKind = kind
        self.value: bool | int | str | CWLFile = value

    def __repr__(self):
        return f"CWLInputEntry({self.kind.value}, {self.value!r})"
