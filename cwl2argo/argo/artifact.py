from __future__ import annotations

import logging
from collections.abc import MutableMapping, MutableSequence

from cwl2argo.argo.binding import FlatOutputBinding
from cwl2argo.argo.location import FileLocation, FileLocations
from cwl2argo.argo.manifest import Artifact
from cwl2argo.core.exception import (
    MissingElementException,
    UnsupportedFeatureException,
    ValidationException,
)
from cwl2argo.cwl.model import (
    CommandOutputBindingGlob,
    CWLInputEntry,
    GlobKind,
    TypeKind,
)
from cwl2argo.log_handler import logger


def _build_artifact(name: str, path: str, location: FileLocation) -> Artifact:
    return Artifact(
        name=name,
        path=path,
        http=location.http,
        s3=location.s3,
        hdfs=location.hdfs,
    )


def emit_input_artifacts(
    inputs: MutableMapping[str, CWLInputEntry], locations: FileLocations
) -> MutableSequence[Artifact]:
    artifacts = []
    for name, entry in inputs.items():
        if entry.kind != TypeKind.FILE:
            continue
        if (location := locations.inputs.get(name)) is None:
            raise MissingElementException(f"Location data not present for input {name}")
        if entry.value.path is None:
            raise ValidationException(f"Input file `{name}` has no `path`")
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Input {name} mapped to {location.type.value} artifact {location.name}"
            )
        artifacts.append(_build_artifact(location.name, entry.value.path, location))
    return artifacts


def eval_output_glob(glob: CommandOutputBindingGlob | None) -> str:
    if glob is None:
        raise ValidationException("Output binding has no glob")
    match glob.kind:
        case GlobKind.STRING:
            return glob.value
        case _:
            raise UnsupportedFeatureException(
                f"Globs of kind `{glob.kind.value}` are not supported yet: "
                "only literal strings are accepted"
            )


def emit_output_artifact(
    output: FlatOutputBinding, locations: FileLocations
) -> Artifact:
    if output.type != TypeKind.FILE:
        raise ValidationException(
            f"Output `{output.id}` is not a File and cannot become an artifact"
        )
    if output.output_binding is None:
        raise ValidationException(f"Output `{output.id}` has no outputBinding")
    path = eval_output_glob(output.output_binding.glob)
    if (location := locations.outputs.get(output.id)) is None:
        raise MissingElementException(
            f"Location data not present for output {output.id}"
        )
    output.location = location
    return _build_artifact(output.id, path, location)


def emit_output_artifacts(
    outputs: MutableSequence[FlatOutputBinding], locations: FileLocations
) -> MutableSequence[Artifact]:
    artifacts = []
    for output in outputs:
        match output.type:
            case TypeKind.FILE:
                artifacts.append(emit_output_artifact(output, locations))
            case _:
                raise UnsupportedFeatureException(
                    f"Output `{output.id}` of type `{output.type.value}` "
                    "is not supported yet"
                )
    return artifacts
