import io

import pytest
from ruamel.yaml import YAML

from cwl2argo.argo.location import load_locations
from cwl2argo.argo.manifest import dump_manifest, serialize
from cwl2argo.argo.translator import ArgoTranslator
from cwl2argo.core.exception import (
    MissingElementException,
    UnsupportedFeatureException,
)
from cwl2argo.cwl.inputs import resolve_input_values
from tests.utils.cwl import (
    get_docker_requirement,
    get_file,
    get_location,
    get_resource_requirement,
    get_tool_document,
    load_cwl_tool,
)


def _translate(document, inputs, locations=None, **kwargs):
    return ArgoTranslator(
        tool=load_cwl_tool(document),
        inputs=resolve_input_values(inputs),
        locations=load_locations(locations),
        **kwargs,
    ).translate()


def _get_bwa_document(requirements=None):
    return get_tool_document(
        tool_id="bwa-mem",
        label="BWA MEM",
        doc=["Align reads", "against a reference"],
        inputs=[
            {"id": "threads", "type": "int", "inputBinding": {"prefix": "-t"}},
            {
                "id": "reference",
                "type": "File",
                "inputBinding": {"position": 1},
            },
            {"id": "reads", "type": "File", "inputBinding": {"position": 2}},
            {"id": "tag", "type": "string?"},
            {"id": "index", "type": "File"},
        ],
        outputs=[
            {
                "id": "alignment",
                "type": "File",
                "outputBinding": {"glob": "aln.sam"},
            }
        ],
        requirements=(
            requirements
            if requirements is not None
            else [
                get_docker_requirement(
                    "biocontainers/bwa:0.7.17", dockerOutputDirectory="/data"
                ),
                get_resource_requirement(outdirMin=2.3, coresMin=4),
            ]
        ),
        base_command=["bwa", "mem"],
    )


def _get_bwa_inputs():
    return {
        "threads": 4,
        "reference": get_file("/data/ref.fa"),
        "reads": get_file("/data/reads.fq"),
        "tag": "sample1",
        "index": get_file("/data/ref.fa.bwt"),
    }


def _get_bwa_locations():
    return {
        "inputs": {
            "reference": get_location("ref"),
            "reads": get_location("reads", "s3"),
            "index": get_location("index", "hdfs"),
        },
        "outputs": {"alignment": get_location("alignment", "s3")},
    }


def test_echo_tool(echo_document):
    """Check the manifest of a tool with one string input and no outputs."""
    manifest = serialize(_translate(echo_document, {"msg": "hi"}))
    assert manifest["apiVersion"] == "argoproj.io/v1alpha1"
    assert manifest["kind"] == "Workflow"
    assert manifest["metadata"] == {"name": "echo"}
    spec = manifest["spec"]
    assert spec["entrypoint"] == "echo"
    assert "volumeClaimTemplates" not in spec
    assert spec["arguments"]["parameters"] == [{"name": "msg", "value": "hi"}]
    (template,) = spec["templates"]
    assert template["name"] == "echo"
    assert template["container"] == {
        "name": "main",
        "image": "alpine",
        "command": ["echo"],
        "args": ["{{inputs.parameters.msg}}"],
    }
    assert template["inputs"]["parameters"] == [{"name": "msg"}]
    assert template["inputs"]["artifacts"] == []
    assert template["outputs"]["artifacts"] == []


def test_file_tool():
    """Check the manifest of a tool with File inputs and outputs."""
    manifest = serialize(
        _translate(_get_bwa_document(), _get_bwa_inputs(), _get_bwa_locations())
    )
    assert manifest["metadata"] == {
        "name": "bwa-mem",
        "annotations": {
            "workflows.argoproj.io/title": "BWA MEM",
            "workflows.argoproj.io/description": "Align reads\nagainst a reference",
        },
    }
    spec = manifest["spec"]
    assert spec["volumeClaimTemplates"] == [
        {
            "metadata": {"name": "argovolume"},
            "spec": {
                "accessModes": ["ReadWriteMany"],
                "resources": {"requests": {"storage": "3Mi"}},
            },
        }
    ]
    assert spec["arguments"]["parameters"] == [
        {"name": "threads", "value": "4"},
        {"name": "tag", "value": "sample1"},
    ]
    (template,) = spec["templates"]
    container = template["container"]
    assert container["image"] == "biocontainers/bwa:0.7.17"
    assert container["workingDir"] == "/data"
    assert container["volumeMounts"] == [{"name": "argovolume", "mountPath": "/data"}]
    assert container["resources"] == {"requests": {"cpu": "4"}}
    assert container["command"] == ["bwa", "mem"]
    assert container["args"] == [
        "-t",
        "{{inputs.parameters.threads}}",
        "{{inputs.parameters.tag}}",
        "/data/ref.fa",
        "/data/reads.fq",
    ]
    assert template["inputs"]["parameters"] == [{"name": "threads"}, {"name": "tag"}]
    assert [a["name"] for a in template["inputs"]["artifacts"]] == [
        "ref",
        "reads",
        "index",
    ]
    assert template["outputs"]["artifacts"] == [
        {
            "name": "alignment",
            "path": "aln.sam",
            "s3": {"bucket": "bucket", "key": "alignment"},
        }
    ]


def test_custom_volume():
    """Check that the volume name and mount path can be configured."""
    document = _get_bwa_document(
        requirements=[
            get_docker_requirement("biocontainers/bwa:0.7.17"),
            get_resource_requirement(outdirMin="1Gi"),
        ]
    )
    manifest = serialize(
        _translate(
            document,
            _get_bwa_inputs(),
            _get_bwa_locations(),
            volume_name="scratch",
            mount_path="/scratch",
            container_name="bwa",
        )
    )
    spec = manifest["spec"]
    assert spec["volumeClaimTemplates"][0]["metadata"] == {"name": "scratch"}
    container = spec["templates"][0]["container"]
    assert container["name"] == "bwa"
    assert container["volumeMounts"] == [{"name": "scratch", "mountPath": "/scratch"}]
    assert "resources" not in container


def test_missing_docker_requirement(echo_document):
    """Check that a tool without DockerRequirement cannot be translated."""
    echo_document["requirements"] = [get_resource_requirement(outdirMin=1)]
    with pytest.raises(MissingElementException, match="DockerRequirement"):
        _translate(echo_document, {"msg": "hi"})


def test_file_output_without_resource_requirement():
    """Check that File outputs require a ResourceRequirement to size the volume."""
    document = _get_bwa_document(requirements=[get_docker_requirement("alpine")])
    with pytest.raises(MissingElementException, match="ResourceRequirement"):
        _translate(document, _get_bwa_inputs(), _get_bwa_locations())


def test_missing_input(echo_document):
    """Check that a declared input without runtime value aborts the translation."""
    with pytest.raises(MissingElementException):
        _translate(echo_document, {})


def test_stream_redirection(echo_document, log_capture):
    """Check that stdout redirection is ignored with a warning."""
    echo_document["stdout"] = "out.txt"
    manifest = serialize(_translate(echo_document, {"msg": "hi"}))
    assert manifest["spec"]["templates"][0]["container"]["command"] == ["echo"]
    assert "stdout" in log_capture.text


def test_environment(echo_document):
    """Check that environment definitions reach the container."""
    echo_document["requirements"].append(
        {"class": "EnvVarRequirement", "envDef": {"LANG": "C"}}
    )
    manifest = serialize(_translate(echo_document, {"msg": "hi"}))
    assert manifest["spec"]["templates"][0]["container"]["env"] == [
        {"name": "LANG", "value": "C"}
    ]


def test_expression_argument(echo_document):
    """Check that expression arguments are reported as not supported yet."""
    echo_document["arguments"] = ["$(inputs.msg)"]
    with pytest.raises(UnsupportedFeatureException):
        _translate(echo_document, {"msg": "hi"})


def test_dump_manifest(echo_document):
    """Check that the manifest is written as YAML."""
    stream = io.StringIO()
    dump_manifest(_translate(echo_document, {"msg": "hi"}), stream)
    manifest = YAML(typ="safe").load(stream.getvalue())
    assert manifest["kind"] == "Workflow"
    assert manifest["spec"]["templates"][0]["container"]["args"] == [
        "{{inputs.parameters.msg}}"
    ]


def test_resource_expression(echo_document, log_capture):
    """Check that a RAM expression is skipped without aborting the translation."""
    echo_document["requirements"].append(
        get_resource_requirement(ramMin="$(inputs.msg.length * 2)")
    )
    spec = serialize(_translate(echo_document, {"msg": "hi"}))["spec"]
    assert "volumeClaimTemplates" not in spec
    assert "resources" not in spec["templates"][0]["container"]
    assert "Ignoring ramMin expression" in log_capture.text


def test_duplicate_resource_requirement(log_capture):
    """Check that duplicate ResourceRequirements are reported only once."""
    document = _get_bwa_document(
        requirements=[
            get_docker_requirement("alpine"),
            get_resource_requirement(outdirMin=1),
            get_resource_requirement(outdirMin=2),
        ]
    )
    spec = serialize(
        _translate(document, _get_bwa_inputs(), _get_bwa_locations())
    )["spec"]
    assert spec["volumeClaimTemplates"][0]["spec"]["resources"]["requests"] == {
        "storage": "2Mi"
    }
    warnings = [
        r
        for r in log_capture.records
        if "Multiple ResourceRequirement" in r.getMessage()
    ]
    assert len(warnings) == 1
