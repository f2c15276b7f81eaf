import json
import logging

import pytest
from ruamel.yaml import YAML

from cwl2argo.log_handler import logger
from cwl2argo.main import main
from cwl2argo.version import VERSION
from tests.utils.cwl import (
    get_docker_requirement,
    get_file,
    get_location,
    get_resource_requirement,
    get_tool_document,
)


@pytest.fixture
def tool_files(tmp_path):
    tool = tmp_path / "wc.cwl"
    tool.write_text(
        json.dumps(
            get_tool_document(
                tool_id="wc",
                inputs=[
                    {
                        "id": "lines",
                        "type": "boolean",
                        "inputBinding": {"prefix": "-l"},
                    },
                    {"id": "text", "type": "File", "inputBinding": {"position": 1}},
                ],
                outputs=[
                    {"id": "count", "type": "File", "outputBinding": {"glob": "n.txt"}}
                ],
                requirements=[
                    get_docker_requirement("busybox"),
                    get_resource_requirement(outdirMin=16),
                ],
                base_command="wc",
            )
        )
    )
    text = tmp_path / "text.txt"
    text.write_text("one\ntwo\n")
    inputs = tmp_path / "wc-job.yml"
    inputs.write_text(f"lines: true\ntext:\n  class: File\n  path: {text}\n")
    locations = tmp_path / "locations.json"
    locations.write_text(
        json.dumps(
            {
                "inputs": {"text": get_location("text")},
                "outputs": {"count": get_location("count", "s3")},
            }
        )
    )
    return str(tool), str(inputs), str(locations)


@pytest.fixture
def text_path(tmp_path):
    return str(tmp_path / "text.txt")


def test_main(tool_files, text_path, tmp_path):
    """Check that the manifest is written to the output file."""
    tool, inputs, locations = tool_files
    output = tmp_path / "workflow.yml"
    assert main([tool, inputs, "--locations", locations, "--output", str(output)]) == 0
    manifest = YAML(typ="safe").load(output.read_text())
    assert manifest["metadata"]["name"] == "wc"
    container = manifest["spec"]["templates"][0]["container"]
    assert container["image"] == "busybox"
    assert container["command"] == ["wc"]
    assert container["args"] == ["-l", text_path]
    assert manifest["spec"]["arguments"]["parameters"] == [
        {"name": "lines", "value": "true"}
    ]
    assert manifest["spec"]["volumeClaimTemplates"][0]["metadata"]["name"] == (
        "argovolume"
    )


def test_main_stdout(tool_files, capsys):
    """Check that the manifest is written to the standard output by default."""
    tool, inputs, locations = tool_files
    assert (
        main([tool, inputs, "-l", locations, "--volume-name", "wcvol", "--quiet"]) == 0
    )
    manifest = YAML(typ="safe").load(capsys.readouterr().out)
    assert manifest["spec"]["volumeClaimTemplates"][0]["metadata"]["name"] == "wcvol"
    assert logger.level == logging.WARNING


def test_main_validate(tool_files, capsys):
    """Check that validation does not emit a manifest."""
    tool, inputs, locations = tool_files
    assert main([tool, inputs, "--locations", locations, "--validate"]) == 0
    assert capsys.readouterr().out == ""


def test_main_missing_location(tool_files, tmp_path):
    """Check that a File output without location makes the translation fail."""
    tool, inputs, _ = tool_files
    locations = tmp_path / "partial.yml"
    locations.write_text(
        "inputs:\n  text:\n    name: text\n    type: http\n"
        "    http:\n      url: https://example.com/text.txt\n"
    )
    assert main([tool, inputs, "--locations", str(locations)]) == 1


def test_main_invalid_locations(tool_files, tmp_path):
    """Check that a malformed location map makes the translation fail."""
    tool, inputs, _ = tool_files
    locations = tmp_path / "invalid.yml"
    locations.write_text("inputs:\n  text:\n    name: text\n    type: http\n")
    assert main([tool, inputs, "--locations", str(locations)]) == 1


def test_main_missing_arguments():
    """Check that TOOL and INPUTS are mandatory."""
    assert main([]) == 1


def test_main_unknown_option():
    """Check that unknown options are reported as failures."""
    assert main(["--unknown"]) == 2


def test_main_version(capsys):
    """Check that the version is printed."""
    assert main(["--version"]) == 0
    assert VERSION in capsys.readouterr().out
