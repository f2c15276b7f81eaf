import pytest

from cwl2argo.argo.location import FileLocation, FileLocationKind, load_locations
from cwl2argo.config.schema import LocationSchema
from cwl2argo.config.validator import LocationValidator
from cwl2argo.core.exception import ValidationException
from tests.utils.cwl import get_location


@pytest.mark.parametrize("type_", ["http", "s3", "hdfs"])
def test_load_location(type_):
    """Check that each location kind keeps its own payload only."""
    location = FileLocation.load(get_location("reads", type_))
    assert location.name == "reads"
    assert location.type == FileLocationKind(type_)
    assert getattr(location, type_) is not None
    assert [
        k for k in ("http", "s3", "hdfs") if getattr(location, k) is not None
    ] == [type_]


def test_location_missing_payload():
    """Check that a location without the payload matching its kind is rejected."""
    with pytest.raises(ValidationException):
        FileLocation.load({"name": "reads", "type": "s3"})
    with pytest.raises(ValidationException):
        FileLocation(name="reads", type=FileLocationKind.HTTP)


def test_location_mismatched_payload():
    """Check that a location cannot carry the payload of another kind."""
    with pytest.raises(ValidationException):
        FileLocation.load(
            {
                "name": "reads",
                "type": "http",
                "http": {"url": "https://example.com/reads"},
                "s3": {"bucket": "b", "key": "reads"},
            }
        )


def test_location_invalid_type():
    """Check that unknown location kinds are rejected."""
    with pytest.raises(ValidationException):
        FileLocation.load({"name": "reads", "type": "git", "git": {}})


def test_location_missing_name():
    """Check that a location must have a name."""
    with pytest.raises(ValidationException):
        FileLocation.load({"type": "http", "http": {"url": "https://example.com"}})


def test_load_locations():
    """Check that input and output location maps are decoded."""
    locations = load_locations(
        {
            "inputs": {"reads": get_location("reads-artifact")},
            "outputs": {"report": get_location("report", "s3")},
        }
    )
    assert locations.inputs["reads"].name == "reads-artifact"
    assert locations.outputs["report"].type == FileLocationKind.S3
    assert load_locations(None).inputs == {}


def test_validate_locations():
    """Check that a well-formed location map is accepted."""
    config = {
        "inputs": {
            "reads": get_location("reads"),
            "ref": get_location("ref", "hdfs"),
        },
        "outputs": {"report": get_location("report", "s3")},
    }
    assert LocationValidator().validate(config) == config


@pytest.mark.parametrize(
    "location",
    [
        {"name": "reads", "type": "http"},
        {"name": "reads", "type": "http", "http": {"headers": []}},
        {"name": "reads", "type": "hdfs", "hdfs": {"addresses": ["hdfs:8020"]}},
        {"name": "reads", "type": "git", "git": {"repo": "x"}},
        {"type": "s3", "s3": {"bucket": "b"}},
    ],
)
def test_validate_locations_fail(location):
    """Check that malformed locations are reported together."""
    with pytest.raises(ValidationException, match="location map is invalid"):
        LocationValidator().validate({"inputs": {"reads": location}})


def test_validate_locations_unsupported_property():
    """Check that unknown top-level clauses are rejected."""
    with pytest.raises(ValidationException):
        LocationValidator().validate({"steps": {}})


def test_validate_locations_file(tmp_path):
    """Check that location maps are read from YAML files."""
    path = tmp_path / "locations.yml"
    path.write_text(
        "inputs:\n"
        "  reads:\n"
        "    name: reads\n"
        "    type: http\n"
        "    http:\n"
        "      url: https://example.com/reads.fq\n"
    )
    config = LocationValidator().validate_file(str(path))
    assert config["inputs"]["reads"]["http"]["url"] == "https://example.com/reads.fq"


def test_schema_dump():
    """Check that the bundled schema can be dumped."""
    assert '"$defs"' in LocationSchema().dump()
