from __future__ import annotations

import copy
import logging

from kubernetes.client import V1Container, V1EnvVar, V1ResourceRequirements
from kubernetes.utils import parse_quantity

from cwl2argo.argo.storage import expression_to_quantity
from cwl2argo.core.exception import UnsupportedFeatureException, ValidationException
from cwl2argo.cwl.model import (
    CWLExpression,
    DockerRequirement,
    EnvVarRequirement,
    ExpressionKind,
    ResourceRequirement,
)
from cwl2argo.log_handler import logger


def emit_docker_requirement(
    container: V1Container, docker: DockerRequirement
) -> V1Container:
    """
    Return a copy of `container` updated with the `DockerRequirement` fields.

    The input container is never modified, so a failure leaves it untouched.
    """
    container = copy.deepcopy(container)
    if docker.docker_pull is None:
        raise ValidationException("dockerPull is a required field")
    container.image = docker.docker_pull
    if docker.docker_output_directory is not None:
        container.working_dir = docker.docker_output_directory
        if logger.isEnabledFor(logging.WARNING):
            logger.warning(
                "Assuming that dockerOutputDirectory and the container working "
                "directory are equivalent"
            )
        if logger.isEnabledFor(logging.INFO):
            logger.info(
                f"Changing container working directory to {container.working_dir}"
            )
    if docker.docker_file is not None:
        raise UnsupportedFeatureException("dockerFile is not currently supported")
    if docker.docker_image_id is not None:
        raise UnsupportedFeatureException("dockerImageId is not currently supported")
    if docker.docker_import is not None:
        raise UnsupportedFeatureException("dockerImport is not currently supported")
    if docker.docker_load is not None:
        if logger.isEnabledFor(logging.WARNING):
            logger.warning(
                f"Ignoring dockerLoad {docker.docker_load}: "
                f"image {container.image} is pulled from its registry"
            )
    return container


def _eval_literal(expression: CWLExpression) -> str:
    match expression.kind:
        case ExpressionKind.RAW:
            return expression.value
        case ExpressionKind.BOOL:
            return "true" if expression.value else "false"
        case ExpressionKind.INT | ExpressionKind.FLOAT:
            return str(expression.value)
        case _:
            raise UnsupportedFeatureException(
                f"Expression {expression.value} cannot be evaluated yet"
            )


def emit_env(container: V1Container, env_var: EnvVarRequirement) -> V1Container:
    container = copy.deepcopy(container)
    container.env = [
        V1EnvVar(name=env.env_name, value=_eval_literal(env.env_value))
        for env in env_var.env_def
    ]
    return container


def _cpu_quantity(expression: CWLExpression) -> str:
    match expression.kind:
        case ExpressionKind.BOOL:
            raise ValidationException(
                f"{expression.kind.value} cannot be converted into a quantity"
            )
        case _:
            quantity = _eval_literal(expression)
    try:
        parse_quantity(quantity)
    except ValueError as e:
        raise ValidationException(f"Invalid quantity `{quantity}`: {e}") from e
    return quantity


def _is_literal(field: str, expression: CWLExpression | None) -> bool:
    if expression is None:
        return False
    elif expression.kind == ExpressionKind.EXPRESSION:
        if logger.isEnabledFor(logging.WARNING):
            logger.warning(
                f"Ignoring {field} expression {expression.value}: "
                "only literal values are supported"
            )
        return False
    return True


def emit_compute_resources(
    container: V1Container, resource: ResourceRequirement
) -> V1Container:
    container = copy.deepcopy(container)
    requests = {}
    if _is_literal("coresMin", resource.cores_min):
        requests["cpu"] = _cpu_quantity(resource.cores_min)
    if _is_literal("ramMin", resource.ram_min):
        requests["memory"] = expression_to_quantity(resource.ram_min)
    if requests:
        container.resources = V1ResourceRequirements(requests=requests)
    return container
