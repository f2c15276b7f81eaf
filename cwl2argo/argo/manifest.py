from __future__ import annotations

from collections.abc import MutableMapping, MutableSequence
from typing import IO, Any

from kubernetes.client import (
    ApiClient,
    V1Container,
    V1ObjectMeta,
    V1PersistentVolumeClaim,
)
from ruamel.yaml import YAML

ARGO_API_VERSION = "argoproj.io/v1alpha1"
ARGO_KIND = "Workflow"


_api_client: ApiClient | None = None


def serialize(obj: Any) -> Any:
    global _api_client
    if _api_client is None:
        _api_client = ApiClient()
    return _api_client.sanitize_for_serialization(obj)


def dump_manifest(workflow: Workflow, stream: IO[str]) -> None:
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.dump(serialize(workflow), stream)


class ArgoObject:
    # Same layout as the generated Kubernetes models
    openapi_types: MutableMapping[str, str] = {}
    attribute_map: MutableMapping[str, str] = {}

    def to_dict(self) -> MutableMapping[str, Any]:
        return {
            self.attribute_map[attr]: getattr(self, attr)
            for attr in self.openapi_types
            if getattr(self, attr) is not None
        }

    def __eq__(self, other):
        if type(self) is not type(other):
            return False
        return serialize(self) == serialize(other)

    def __repr__(self):
        return f"{type(self).__name__}({serialize(self)})"


class Parameter(ArgoObject):
    openapi_types = {"name": "str", "value": "str"}
    attribute_map = {"name": "name", "value": "value"}

    def __init__(self, name: str, value: str | None = None):
        self.name: str = name
        self.value: str | None = value


class Artifact(ArgoObject):
    openapi_types = {
        "name": "str",
        "path": "str",
        "http": "object",
        "s3": "object",
        "hdfs": "object",
    }
    attribute_map = {
        "name": "name",
        "path": "path",
        "http": "http",
        "s3": "s3",
        "hdfs": "hdfs",
    }

    def __init__(
        self,
        name: str,
        path: str | None = None,
        http: MutableMapping[str, Any] | None = None,
        s3: MutableMapping[str, Any] | None = None,
        hdfs: MutableMapping[str, Any] | None = None,
    ):
        self.name: str = name
        self.path: str | None = path
        self.http: MutableMapping[str, Any] | None = http
        self.s3: MutableMapping[str, Any] | None = s3
        self.hdfs: MutableMapping[str, Any] | None = hdfs


class Inputs(ArgoObject):
    openapi_types = {"parameters": "list[Parameter]", "artifacts": "list[Artifact]"}
    attribute_map = {"parameters": "parameters", "artifacts": "artifacts"}

    def __init__(
        self,
        parameters: MutableSequence[Parameter] | None = None,
        artifacts: MutableSequence[Artifact] | None = None,
    ):
        self.parameters: MutableSequence[Parameter] | None = parameters
        self.artifacts: MutableSequence[Artifact] | None = artifacts


class Outputs(Inputs):
    pass


class Arguments(Inputs):
    pass


class Template(ArgoObject):
    openapi_types = {
        "name": "str",
        "inputs": "Inputs",
        "outputs": "Outputs",
        "container": "V1Container",
    }
    attribute_map = {
        "name": "name",
        "inputs": "inputs",
        "outputs": "outputs",
        "container": "container",
    }

    def __init__(
        self,
        name: str,
        container: V1Container | None = None,
        inputs: Inputs | None = None,
        outputs: Outputs | None = None,
    ):
        self.name: str = name
        self.container: V1Container | None = container
        self.inputs: Inputs = inputs or Inputs()
        self.outputs: Outputs = outputs or Outputs()


class WorkflowSpec(ArgoObject):
    openapi_types = {
        "entrypoint": "str",
        "arguments": "Arguments",
        "templates": "list[Template]",
        "volume_claim_templates": "list[V1PersistentVolumeClaim]",
    }
    attribute_map = {
        "entrypoint": "entrypoint",
        "arguments": "arguments",
        "templates": "templates",
        "volume_claim_templates": "volumeClaimTemplates",
    }

    def __init__(
        self,
        entrypoint: str | None = None,
        arguments: Arguments | None = None,
        templates: MutableSequence[Template] | None = None,
        volume_claim_templates: MutableSequence[V1PersistentVolumeClaim] | None = None,
    ):
        self.entrypoint: str | None = entrypoint
        self.arguments: Arguments | None = arguments
        self.templates: MutableSequence[Template] = templates or []
        self.volume_claim_templates: MutableSequence[
            V1PersistentVolumeClaim
        ] | None = volume_claim_templates


class Workflow(ArgoObject):
    openapi_types = {
        "api_version": "str",
        "kind": "str",
        "metadata": "V1ObjectMeta",
        "spec": "WorkflowSpec",
    }
    attribute_map = {
        "api_version": "apiVersion",
        "kind": "kind",
        "metadata": "metadata",
        "spec": "spec",
    }

    def __init__(
        self,
        metadata: V1ObjectMeta,
        spec: WorkflowSpec,
        api_version: str = ARGO_API_VERSION,
        kind: str = ARGO_KIND,
    ):
        self.api_version: str = api_version
        self.kind: str = kind
        self.metadata: V1ObjectMeta = metadata
        self.spec: WorkflowSpec = spec
