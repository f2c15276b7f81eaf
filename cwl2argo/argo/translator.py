from __future__ import annotations

import copy
import logging
from collections.abc import MutableMapping

from kubernetes.client import V1Container, V1ObjectMeta

from cwl2argo.argo.artifact import emit_input_artifacts, emit_output_artifacts
from cwl2argo.argo.binding import filter_params, flatten_inputs, flatten_outputs
from cwl2argo.argo.command import (
    build_args,
    build_arguments,
    build_command,
    build_input_params,
)
from cwl2argo.argo.container import (
    emit_compute_resources,
    emit_docker_requirement,
    emit_env,
)
from cwl2argo.argo.location import FileLocations
from cwl2argo.argo.manifest import Inputs, Outputs, Template, Workflow, WorkflowSpec
from cwl2argo.argo.storage import attach_volume, emit_pvc, need_pvc
from cwl2argo.core.exception import MissingElementException, ValidationException
from cwl2argo.cwl.model import CommandLineTool, CWLInputEntry, ResourceRequirement
from cwl2argo.cwl.requirement import (
    find_docker_requirement,
    find_env_var_requirement,
    find_resource_requirement,
)
from cwl2argo.log_handler import logger

TITLE_ANNOTATION = "workflows.argoproj.io/title"
DESCRIPTION_ANNOTATION = "workflows.argoproj.io/description"


class ArgoTranslator:
    def __init__(
        self,
        tool: CommandLineTool,
        inputs: MutableMapping[str, CWLInputEntry],
        locations: FileLocations,
        volume_name: str = "argovolume",
        mount_path: str = "/mnt/pvol",
        container_name: str = "main",
    ):
        self.tool: CommandLineTool = tool
        self.inputs: MutableMapping[str, CWLInputEntry] = inputs
        self.locations: FileLocations = locations
        self.volume_name: str = volume_name
        self.mount_path: str = mount_path
        self.container_name: str = container_name

    def _get_metadata(self, name: str) -> V1ObjectMeta:
        annotations = {}
        if self.tool.label is not None:
            annotations[TITLE_ANNOTATION] = self.tool.label
        if self.tool.doc:
            annotations[DESCRIPTION_ANNOTATION] = "\n".join(self.tool.doc)
        return V1ObjectMeta(name=name, annotations=annotations or None)

    def _get_resource_requirement(self) -> ResourceRequirement | None:
        try:
            return find_resource_requirement(self.tool.requirements)
        except MissingElementException:
            return None

    def _translate_container(
        self, resource: ResourceRequirement | None
    ) -> V1Container:
        docker = find_docker_requirement(self.tool.requirements)
        container = emit_docker_requirement(
            V1Container(name=self.container_name), docker
        )
        try:
            env_var = find_env_var_requirement(self.tool.requirements)
        except MissingElementException:
            env_var = None
        if env_var is not None:
            container = emit_env(container, env_var)
        if resource is not None:
            container = emit_compute_resources(container, resource)
        return container

    def _warn_streams(self) -> None:
        for stream in ("stdin", "stdout", "stderr"):
            if getattr(self.tool, stream) is not None:
                if logger.isEnabledFor(logging.WARNING):
                    logger.warning(
                        f"Ignoring {stream} redirection: "
                        "it is not supported by Argo containers"
                    )

    def translate(self) -> Workflow:
        if self.tool.id is None:
            raise ValidationException("CommandLineTool must have an identifier")
        name = self.tool.id
        if logger.isEnabledFor(logging.INFO):
            logger.info(f"TRANSPILING tool {name}")
        resource = self._get_resource_requirement()
        # The container is built first: a missing DockerRequirement aborts everything
        container = self._translate_container(resource)
        # Flatten bindings
        bindings = flatten_inputs(self.tool.inputs, self.inputs)
        params = filter_params(bindings)
        outputs = flatten_outputs(self.tool.outputs)
        # Provision storage
        volume_claim_templates = None
        if need_pvc(outputs):
            if logger.isEnabledFor(logging.INFO):
                logger.info("Need PersistentVolumeClaim")
            if resource is None:
                raise MissingElementException(
                    "ResourceRequirement was not found: "
                    "output files need a volume to be provisioned"
                )
            volume_claim_templates = [emit_pvc(resource, self.volume_name)]
            container = attach_volume(container, self.volume_name, self.mount_path)
        # Synthesize command line
        container = copy.deepcopy(container)
        container.command = build_command(self.tool.base_command, self.tool.arguments)
        container.args = build_args(bindings)
        arguments = build_arguments(params)
        # Map artifacts
        template = Template(
            name=name,
            container=container,
            inputs=Inputs(
                parameters=build_input_params(params),
                artifacts=emit_input_artifacts(self.inputs, self.locations),
            ),
            outputs=Outputs(
                artifacts=emit_output_artifacts(outputs, self.locations),
            ),
        )
        self._warn_streams()
        workflow = Workflow(
            metadata=self._get_metadata(name),
            spec=WorkflowSpec(
                entrypoint=template.name,
                arguments=arguments,
                templates=[template],
                volume_claim_templates=volume_claim_templates,
            ),
        )
        if logger.isEnabledFor(logging.INFO):
            logger.info(f"COMPLETED transpilation of tool {name}")
        return workflow
