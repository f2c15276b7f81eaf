from __future__ import annotations

import logging
from collections.abc import MutableSequence

from cwl2argo.core.exception import MissingElementException
from cwl2argo.cwl.model import (
    DockerRequirement,
    EnvVarRequirement,
    Requirement,
    ResourceRequirement,
)
from cwl2argo.log_handler import logger


def _warn_duplicate(requirement: Requirement) -> None:
    if logger.isEnabledFor(logging.WARNING):
        logger.warning(
            f"Multiple {requirement.kind.value} entries found: "
            "the latest occurrence takes precedence"
        )


# Each lookup scans the whole list and keeps the latest occurrence


def find_docker_requirement(
    requirements: MutableSequence[Requirement] | None,
) -> DockerRequirement:
    if logger.isEnabledFor(logging.INFO):
        logger.info("Need DockerRequirement")
    docker = None
    for requirement in requirements or []:
        match requirement:
            case DockerRequirement():
                if docker is not None:
                    _warn_duplicate(requirement)
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug("Found DockerRequirement")
                docker = requirement
    if docker is None:
        raise MissingElementException("DockerRequirement was not found")
    return docker


def find_resource_requirement(
    requirements: MutableSequence[Requirement] | None,
) -> ResourceRequirement:
    resource = None
    for requirement in requirements or []:
        match requirement:
            case ResourceRequirement():
                if resource is not None:
                    _warn_duplicate(requirement)
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug("Found ResourceRequirement")
                resource = requirement
    if resource is None:
        raise MissingElementException("ResourceRequirement was not found")
    return resource


def find_env_var_requirement(
    requirements: MutableSequence[Requirement] | None,
) -> EnvVarRequirement:
    env_var = None
    for requirement in requirements or []:
        match requirement:
            case EnvVarRequirement():
                if env_var is not None:
                    _warn_duplicate(requirement)
                env_var = requirement
    if env_var is None:
        raise MissingElementException("EnvVarRequirement was not found")
    return env_var
