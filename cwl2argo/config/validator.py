from __future__ import annotations

from collections.abc import Iterable, MutableMapping
from typing import Any

from jsonschema import ValidationError
from jsonschema.validators import validator_for
from ruamel.yaml import YAML

from cwl2argo.config.schema import LocationSchema
from cwl2argo.core.exception import ValidationException


def handle_errors(errors: Iterable[ValidationError]) -> None:
    if not (errors := list(sorted(errors, key=str))):
        return
    raise ValidationException(
        "The location map is invalid because:\n{error_msgs}".format(
            error_msgs="\n".join([f" - {err.message}" for err in errors])
        )
    )


class LocationValidator:
    def __init__(self) -> None:
        super().__init__()
        self.schema: LocationSchema = LocationSchema()
        self.yaml = YAML(typ="safe")

    def validate_file(self, locations_file: str) -> MutableMapping[str, Any]:
        with open(locations_file) as f:
            locations = self.yaml.load(f)
        return self.validate(locations)

    def validate(self, locations: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        if not isinstance(locations, MutableMapping):
            raise ValidationException(
                "The location map must be an object with `inputs` and `outputs`"
            )
        config = self.schema.get_config().contents
        cls = validator_for(config)
        validator = cls(config, registry=self.schema.registry)
        handle_errors(validator.iter_errors(locations))
        return locations
