from __future__ import annotations

import logging
from collections.abc import MutableSequence

from cwl2argo.argo.binding import FlatInputBinding
from cwl2argo.argo.manifest import Arguments, Parameter
from cwl2argo.core.exception import (
    UnsupportedFeatureException,
    ValidationException,
)
from cwl2argo.cwl.model import ArgumentKind, CommandLineArgument, TypeKind
from cwl2argo.log_handler import logger


def get_parameter_placeholder(name: str) -> str:
    return f"{{{{inputs.parameters.{name}}}}}"


def eval_argument(argument: CommandLineArgument) -> str:
    match argument.kind:
        case ArgumentKind.STRING:
            return argument.value
        case _:
            raise UnsupportedFeatureException(
                f"Arguments of kind `{argument.kind.value}` are not supported yet: "
                "only literal strings are accepted"
            )


def build_command(
    base_command: MutableSequence[str] | None,
    arguments: MutableSequence[CommandLineArgument] | None,
) -> MutableSequence[str]:
    arguments = arguments or []
    if not base_command:
        if not arguments:
            raise ValidationException(
                "A tool must declare at least one of `baseCommand` and `arguments`"
            )
        # The first literal argument acts as the executable
        command = [eval_argument(arguments[0])]
        arguments = arguments[1:]
    else:
        command = list(base_command)
    command.extend(eval_argument(argument) for argument in arguments)
    return command


def _get_position(binding: FlatInputBinding) -> int:
    if binding.input_binding is None or binding.input_binding.position is None:
        return 0
    return binding.input_binding.position


def sort_bindings_by_position(
    bindings: MutableSequence[FlatInputBinding],
) -> MutableSequence[FlatInputBinding]:
    # Stable: bindings sharing a position keep their declaration order
    return sorted(bindings, key=_get_position)


def _get_value_token(binding: FlatInputBinding) -> str:
    match binding.type:
        case TypeKind.FILE:
            if binding.file is None or binding.file.path is None:
                raise ValidationException(
                    f"File information for input `{binding.id}` is not available: "
                    "a `path` is required"
                )
            return binding.file.path
        case _:
            return get_parameter_placeholder(binding.id)


def build_args(bindings: MutableSequence[FlatInputBinding]) -> MutableSequence[str]:
    args = []
    for binding in sort_bindings_by_position(bindings):
        input_binding = binding.input_binding
        if binding.type == TypeKind.FILE and input_binding is None:
            continue
        prefix = input_binding.prefix if input_binding is not None else None
        if binding.type == TypeKind.BOOL:
            if binding.value and prefix is not None:
                args.append(prefix)
            continue
        token = _get_value_token(binding)
        if prefix is not None:
            if input_binding.separate is None or input_binding.separate:
                args.append(prefix)
            else:
                token = prefix + token
        args.append(token)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Synthesized arguments: {args}")
    return args


def build_input_params(
    bindings: MutableSequence[FlatInputBinding],
) -> MutableSequence[Parameter]:
    return [Parameter(name=binding.id) for binding in bindings]


def build_arguments(bindings: MutableSequence[FlatInputBinding]) -> Arguments:
    params = []
    for binding in bindings:
        match binding.type:
            case TypeKind.STRING:
                params.append(Parameter(name=binding.id, value=binding.value))
            case TypeKind.INT:
                params.append(Parameter(name=binding.id, value=str(binding.value)))
            case TypeKind.BOOL:
                params.append(
                    Parameter(
                        name=binding.id, value="true" if binding.value else "false"
                    )
                )
            case _:
                raise UnsupportedFeatureException(
                    f"Input `{binding.id}` of type `{binding.type.value}` "
                    "cannot be passed as a workflow argument"
                )
    return Arguments(parameters=params, artifacts=[])
