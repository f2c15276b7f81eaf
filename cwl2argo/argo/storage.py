from __future__ import annotations

import copy
import logging
import math
from collections.abc import MutableSequence

from kubernetes.client import (
    V1Container,
    V1ObjectMeta,
    V1PersistentVolumeClaim,
    V1PersistentVolumeClaimSpec,
    V1VolumeMount,
    V1VolumeResourceRequirements,
)
from kubernetes.utils import parse_quantity

from cwl2argo.argo.binding import FlatOutputBinding
from cwl2argo.core.exception import UnsupportedFeatureException, ValidationException
from cwl2argo.cwl.model import (
    CWLExpression,
    ExpressionKind,
    ResourceRequirement,
    TypeKind,
)
from cwl2argo.log_handler import logger


def need_pvc(outputs: MutableSequence[FlatOutputBinding]) -> bool:
    return any(output.type == TypeKind.FILE for output in outputs)


def expression_to_quantity(expression: CWLExpression) -> str:
    match expression.kind:
        case ExpressionKind.RAW:
            quantity = expression.value
        case ExpressionKind.INT:
            quantity = f"{expression.value}Mi"
        case ExpressionKind.FLOAT:
            quantity = f"{math.ceil(expression.value)}Mi"
        case ExpressionKind.EXPRESSION:
            raise UnsupportedFeatureException(
                f"Expression {expression.value} cannot be converted into a quantity yet"
            )
        case _:
            raise ValidationException(
                f"{expression.kind.value} cannot be converted into a quantity"
            )
    try:
        parse_quantity(quantity)
    except ValueError as e:
        raise ValidationException(f"Invalid quantity `{quantity}`: {e}") from e
    return quantity


def get_storage_quantity(resource: ResourceRequirement) -> str:
    if (expression := resource.outdir_min) is None:
        if (expression := resource.outdir_max) is None:
            raise ValidationException(
                "ResourceRequirement must declare `outdirMin` or `outdirMax` "
                "to provision a persistent volume"
            )
        if logger.isEnabledFor(logging.WARNING):
            logger.warning("No `outdirMin` found: using `outdirMax` as storage request")
    return expression_to_quantity(expression)


def emit_pvc(
    resource: ResourceRequirement, volume_name: str
) -> V1PersistentVolumeClaim:
    quantity = get_storage_quantity(resource)
    if logger.isEnabledFor(logging.INFO):
        logger.info(f"Requesting {quantity} of storage for volume {volume_name}")
    return V1PersistentVolumeClaim(
        metadata=V1ObjectMeta(name=volume_name),
        spec=V1PersistentVolumeClaimSpec(
            access_modes=["ReadWriteMany"],
            resources=V1VolumeResourceRequirements(requests={"storage": quantity}),
        ),
    )


def attach_volume(
    container: V1Container, volume_name: str, mount_path: str
) -> V1Container:
    container = copy.deepcopy(container)
    container.volume_mounts = [
        V1VolumeMount(name=volume_name, mount_path=container.working_dir or mount_path)
    ]
    return container
