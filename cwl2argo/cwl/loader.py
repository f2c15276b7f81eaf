from __future__ import annotations

import logging
from collections.abc import MutableMapping, MutableSequence
from typing import Any, get_args

import cwl_utils.parser

from cwl2argo.core.exception import UnsupportedFeatureException, ValidationException
from cwl2argo.core.utils import get_name, get_path_from_token, is_expression, to_list
from cwl2argo.cwl.model import (
    ArgumentKind,
    CommandInputArraySchema,
    CommandInputEnumSchema,
    CommandInputParameter,
    CommandInputRecordField,
    CommandInputRecordSchema,
    CommandLineArgument,
    CommandLineBinding,
    CommandLineTool,
    CommandLineType,
    CommandOutputBinding,
    CommandOutputBindingGlob,
    CommandOutputParameter,
    CWLExpression,
    CWLFile,
    CWLFormat,
    Dirent,
    DockerRequirement,
    EnvironmentDef,
    EnvVarRequirement,
    ExpressionKind,
    FormatKind,
    GlobKind,
    InitialWorkDirRequirement,
    InlineJavascriptRequirement,
    InplaceUpdateRequirement,
    LoadListing,
    LoadListingRequirement,
    NetworkAccess,
    Requirement,
    ResourceRequirement,
    SchemaDefRequirement,
    SecondaryFileSchema,
    ShellCommandRequirement,
    SoftwarePackage,
    SoftwareRequirement,
    ToolTimeLimit,
    TypeKind,
    WorkReuse,
)
from cwl2argo.log_handler import logger

_primitive_types: MutableMapping[str, TypeKind] = {
    kind.value: kind
    for kind in (
        TypeKind.NULL,
        TypeKind.BOOL,
        TypeKind.INT,
        TypeKind.LONG,
        TypeKind.FLOAT,
        TypeKind.DOUBLE,
        TypeKind.FILE,
        TypeKind.DIRECTORY,
        TypeKind.STDIN,
        TypeKind.STRING,
    )
}

_cwl_file_types = get_args(cwl_utils.parser.File) + get_args(
    cwl_utils.parser.Directory
)


def _load_load_listing(value: str | None) -> LoadListing | None:
    if value is None:
        return None
    try:
        return LoadListing[value]
    except KeyError as e:
        raise ValidationException(f"Invalid loadListing value `{value}`") from e


def load_expression(value: Any) -> CWLExpression | None:
    match value:
        case None:
            return None
        case bool():
            return CWLExpression(ExpressionKind.BOOL, value)
        case int():
            return CWLExpression(ExpressionKind.INT, value)
        case float():
            return CWLExpression(ExpressionKind.FLOAT, value)
        case str() if is_expression(value):
            return CWLExpression(ExpressionKind.EXPRESSION, value)
        case str():
            return CWLExpression(ExpressionKind.RAW, value)
        case _:
            raise ValidationException(
                f"Unsupported expression value of type {type(value).__name__}"
            )


def load_format(value: Any) -> CWLFormat | None:
    if value is None:
        return None
    elif isinstance(value, str):
        if is_expression(value):
            return CWLFormat(FormatKind.EXPRESSION, load_expression(value))
        return CWLFormat(FormatKind.STRING, value)
    elif isinstance(value, MutableSequence):
        return CWLFormat(FormatKind.STRINGS, [str(v) for v in value])
    else:
        raise ValidationException(f"Invalid format value `{value}`")


def load_secondary_files(value: Any) -> MutableSequence[SecondaryFileSchema] | None:
    if value is None:
        return None
    secondary_files = []
    for entry in to_list(value):
        # CWL v1.0 documents keep secondary files as plain patterns
        if isinstance(entry, str):
            secondary_files.append(SecondaryFileSchema(pattern=load_expression(entry)))
        else:
            secondary_files.append(
                SecondaryFileSchema(
                    pattern=load_expression(entry.pattern),
                    required=load_expression(entry.required),
                )
            )
    return secondary_files


def load_binding(binding: Any) -> CommandLineBinding | None:
    if binding is None:
        return None
    position = binding.position
    if isinstance(position, str):
        if not position.isnumeric():
            raise UnsupportedFeatureException(
                f"Binding position `{position}` is not a literal integer"
            )
        position = int(position)
    return CommandLineBinding(
        load_contents=getattr(binding, "loadContents", None),
        position=position,
        prefix=binding.prefix,
        separate=binding.separate,
        item_separator=binding.itemSeparator,
        value_from=load_expression(binding.valueFrom),
        shell_quote=binding.shellQuote,
    )


def load_types(
    cwl_type: Any, schema_defs: MutableMapping[str, CommandLineType] | None = None
) -> MutableSequence[CommandLineType]:
    schema_defs = schema_defs or {}
    if isinstance(cwl_type, str):
        if cwl_type in _primitive_types:
            return [CommandLineType(_primitive_types[cwl_type])]
        elif (name := get_name(cwl_type)) in schema_defs:
            return [schema_defs[name]]
        else:
            raise ValidationException(f"Unsupported type `{cwl_type}`")
    elif isinstance(cwl_type, MutableSequence):
        types = []
        for t in cwl_type:
            types.extend(load_types(t, schema_defs))
        return types
    elif isinstance(cwl_type, get_args(cwl_utils.parser.ArraySchema)):
        return [
            CommandLineType(
                TypeKind.ARRAY,
                array=CommandInputArraySchema(
                    items=load_types(cwl_type.items, schema_defs),
                    label=cwl_type.label,
                    doc=to_list(getattr(cwl_type, "doc", None)),
                    name=getattr(cwl_type, "name", None),
                    input_binding=load_binding(getattr(cwl_type, "inputBinding", None)),
                ),
            )
        ]
    elif isinstance(cwl_type, get_args(cwl_utils.parser.EnumSchema)):
        return [
            CommandLineType(
                TypeKind.ENUM,
                enum=CommandInputEnumSchema(
                    symbols=[get_name(s) for s in cwl_type.symbols],
                    label=cwl_type.label,
                    doc=to_list(getattr(cwl_type, "doc", None)),
                    name=cwl_type.name,
                    input_binding=load_binding(getattr(cwl_type, "inputBinding", None)),
                ),
            )
        ]
    elif isinstance(cwl_type, get_args(cwl_utils.parser.RecordSchema)):
        return [
            CommandLineType(
                TypeKind.RECORD,
                record=CommandInputRecordSchema(
                    fields=(
                        [_load_record_field(f, schema_defs) for f in cwl_type.fields]
                        if cwl_type.fields is not None
                        else None
                    ),
                    label=cwl_type.label,
                    doc=to_list(getattr(cwl_type, "doc", None)),
                    name=cwl_type.name,
                    input_binding=load_binding(getattr(cwl_type, "inputBinding", None)),
                ),
            )
        ]
    else:
        raise ValidationException(f"Invalid type `{cwl_type}`")


def _load_record_field(
    field: Any, schema_defs: MutableMapping[str, CommandLineType]
) -> CommandInputRecordField:
    return CommandInputRecordField(
        name=get_name(field.name),
        type=load_types(field.type_, schema_defs),
        doc=to_list(field.doc),
        label=field.label,
        secondary_files=load_secondary_files(getattr(field, "secondaryFiles", None)),
        streamable=getattr(field, "streamable", None),
        format=load_format(getattr(field, "format", None)),
        load_contents=getattr(field, "loadContents", None),
        load_listing=_load_load_listing(getattr(field, "loadListing", None)),
        input_binding=load_binding(getattr(field, "inputBinding", None)),
    )


def load_input_parameter(
    parameter: cwl_utils.parser.CommandInputParameter,
    schema_defs: MutableMapping[str, CommandLineType] | None = None,
) -> CommandInputParameter:
    return CommandInputParameter(
        type=load_types(parameter.type_, schema_defs),
        id=get_name(parameter.id) if parameter.id is not None else None,
        label=parameter.label,
        secondary_files=load_secondary_files(parameter.secondaryFiles),
        streamable=parameter.streamable,
        doc=to_list(parameter.doc),
        format=load_format(parameter.format),
        load_contents=getattr(parameter, "loadContents", None),
        load_listing=_load_load_listing(getattr(parameter, "loadListing", None)),
        default=parameter.default,
        input_binding=load_binding(parameter.inputBinding),
    )


def load_glob(value: Any) -> CommandOutputBindingGlob | None:
    if value is None:
        return None
    elif isinstance(value, str):
        if is_expression(value):
            return CommandOutputBindingGlob(
                GlobKind.EXPRESSION, load_expression(value)
            )
        return CommandOutputBindingGlob(GlobKind.STRING, value)
    elif isinstance(value, MutableSequence):
        return CommandOutputBindingGlob(GlobKind.STRINGS, [str(v) for v in value])
    else:
        raise ValidationException(f"Invalid glob value `{value}`")


def load_output_parameter(
    parameter: cwl_utils.parser.CommandOutputParameter,
    schema_defs: MutableMapping[str, CommandLineType] | None = None,
) -> CommandOutputParameter:
    output_binding = parameter.outputBinding
    return CommandOutputParameter(
        type=load_types(parameter.type_, schema_defs),
        id=get_name(parameter.id) if parameter.id is not None else None,
        label=parameter.label,
        secondary_files=load_secondary_files(parameter.secondaryFiles),
        streamable=parameter.streamable,
        doc=to_list(parameter.doc),
        format=load_format(parameter.format),
        output_binding=(
            CommandOutputBinding(
                glob=load_glob(output_binding.glob),
                load_contents=output_binding.loadContents,
                load_listing=_load_load_listing(
                    getattr(output_binding, "loadListing", None)
                ),
                output_eval=load_expression(output_binding.outputEval),
            )
            if output_binding is not None
            else None
        ),
    )


def load_argument(argument: Any) -> CommandLineArgument:
    if isinstance(argument, str):
        if is_expression(argument):
            return CommandLineArgument(
                ArgumentKind.EXPRESSION, load_expression(argument)
            )
        return CommandLineArgument(ArgumentKind.STRING, argument)
    elif argument is not None:
        return CommandLineArgument(ArgumentKind.BINDING, load_binding(argument))
    else:
        raise ValidationException(f"Invalid argument `{argument}`")


def _load_listing_entry(
    entry: Any,
) -> Dirent | CWLExpression | MutableMapping[str, Any]:
    if isinstance(entry, str):
        return load_expression(entry)
    elif isinstance(entry, _cwl_file_types):
        return entry.save(relative_uris=False)
    else:
        return Dirent(
            entry=load_expression(entry.entry),
            entry_name=load_expression(entry.entryname),
            writable=entry.writable,
        )


def load_requirement(
    requirement: Any,
    schema_defs: MutableMapping[str, CommandLineType] | None = None,
) -> Requirement:
    match requirement.class_:
        case "DockerRequirement":
            return DockerRequirement(
                docker_pull=requirement.dockerPull,
                docker_load=requirement.dockerLoad,
                docker_file=requirement.dockerFile,
                docker_import=requirement.dockerImport,
                docker_image_id=requirement.dockerImageId,
                docker_output_directory=requirement.dockerOutputDirectory,
            )
        case "SoftwareRequirement":
            return SoftwareRequirement(
                packages=[
                    SoftwarePackage(
                        package=p.package,
                        version=to_list(p.version),
                        specs=to_list(p.specs),
                    )
                    for p in requirement.packages
                ]
            )
        case "LoadListingRequirement":
            return LoadListingRequirement(
                load_listing=_load_load_listing(requirement.loadListing)
            )
        case "InitialWorkDirRequirement":
            listing = requirement.listing
            return InitialWorkDirRequirement(
                listing=(
                    [_load_listing_entry(entry) for entry in listing]
                    if isinstance(listing, MutableSequence)
                    else load_expression(listing)
                )
            )
        case "InlineJavascriptRequirement":
            return InlineJavascriptRequirement(
                expression_lib=to_list(requirement.expressionLib)
            )
        case "SchemaDefRequirement":
            return SchemaDefRequirement(
                types=load_types(requirement.types, schema_defs)
            )
        case "EnvVarRequirement":
            return EnvVarRequirement(
                env_def=[
                    EnvironmentDef(
                        env_name=e.envName,
                        env_value=load_expression(e.envValue),
                    )
                    for e in requirement.envDef
                ]
            )
        case "ShellCommandRequirement":
            return ShellCommandRequirement()
        case "WorkReuse":
            return WorkReuse(
                enable_reuse=load_expression(
                    True if requirement.enableReuse is None else requirement.enableReuse
                )
            )
        case "NetworkAccess":
            return NetworkAccess(
                network_access=load_expression(requirement.networkAccess)
            )
        case "InplaceUpdateRequirement":
            return InplaceUpdateRequirement(
                inplace_update=bool(requirement.inplaceUpdate)
            )
        case "ToolTimeLimit":
            return ToolTimeLimit(time_limit=load_expression(requirement.timelimit))
        case "ResourceRequirement":
            return ResourceRequirement(
                cores_min=load_expression(requirement.coresMin),
                cores_max=load_expression(requirement.coresMax),
                ram_min=load_expression(requirement.ramMin),
                ram_max=load_expression(requirement.ramMax),
                tmpdir_min=load_expression(requirement.tmpdirMin),
                tmpdir_max=load_expression(requirement.tmpdirMax),
                outdir_min=load_expression(requirement.outdirMin),
                outdir_max=load_expression(requirement.outdirMax),
            )
        case class_name:
            raise ValidationException(f"Unsupported requirement `{class_name}`")


def _get_schema_defs(
    requirements: MutableSequence[Any],
) -> MutableMapping[str, CommandLineType]:
    schema_defs = {}
    for requirement in requirements:
        if requirement.class_ == "SchemaDefRequirement":
            for schema_type in requirement.types:
                if (name := getattr(schema_type, "name", None)) is None:
                    raise ValidationException(
                        "SchemaDefRequirement types must have a `name` field"
                    )
                schema_defs[get_name(name)] = load_types(schema_type, schema_defs)[0]
    return schema_defs


def load_file(value: MutableMapping[str, Any]) -> CWLFile:
    size = value.get("size")
    if size is not None and (isinstance(size, bool) or not isinstance(size, int)):
        raise ValidationException(f"Invalid File size `{size}`")
    return CWLFile(
        location=value.get("location"),
        path=get_path_from_token(value),
        basename=value.get("basename"),
        dirname=value.get("dirname"),
        nameroot=value.get("nameroot"),
        nameext=value.get("nameext"),
        checksum=value.get("checksum"),
        size=size,
        secondary_files=(
            [load_file(sf) for sf in value["secondaryFiles"]]
            if value.get("secondaryFiles") is not None
            else None
        ),
        format=value.get("format"),
        contents=value.get("contents"),
    )


def load_tool(cwl_definition: Any) -> CommandLineTool:
    if not isinstance(cwl_definition, get_args(cwl_utils.parser.CommandLineTool)):
        raise ValidationException(
            "Only CommandLineTool documents are supported, "
            f"got `{type(cwl_definition).__name__}`"
        )
    requirements = cwl_definition.requirements or []
    schema_defs = _get_schema_defs(requirements)
    base_command = cwl_definition.baseCommand
    tool = CommandLineTool(
        inputs=[load_input_parameter(i, schema_defs) for i in cwl_definition.inputs],
        outputs=[
            load_output_parameter(o, schema_defs) for o in cwl_definition.outputs
        ],
        id=get_name(cwl_definition.id) if cwl_definition.id is not None else None,
        label=cwl_definition.label,
        doc=to_list(cwl_definition.doc),
        requirements=(
            [load_requirement(r, schema_defs) for r in requirements]
            if cwl_definition.requirements is not None
            else None
        ),
        hints=(
            list(cwl_definition.hints) if cwl_definition.hints is not None else None
        ),
        cwl_version=cwl_definition.cwlVersion,
        intent=to_list(getattr(cwl_definition, "intent", None)),
        base_command=(
            [str(t) for t in to_list(base_command)]
            if base_command is not None
            else None
        ),
        arguments=(
            [load_argument(a) for a in cwl_definition.arguments]
            if cwl_definition.arguments is not None
            else None
        ),
        stdin=load_expression(cwl_definition.stdin),
        stdout=load_expression(cwl_definition.stdout),
        stderr=load_expression(cwl_definition.stderr),
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            f"Loaded CommandLineTool {tool.id} with {len(tool.inputs)} inputs "
            f"and {len(tool.outputs)} outputs"
        )
    return tool
