from __future__ import annotations

import json
from importlib.resources import files

from referencing import Registry, Resource


class Schema:
    def __init__(self, schema_id: str):
        self.schema_id: str = schema_id
        self.registry: Registry = Registry()

    def add_schema(self, schema: str) -> Resource:
        resource = Resource.from_contents(json.loads(schema))
        self.registry = resource @ self.registry
        return resource

    def dump(self, pretty: bool = False) -> str:
        output = self.registry.contents(self.schema_id)
        return json.dumps(output, indent=4) if pretty else json.dumps(output)

    def get_config(self) -> Resource:
        return self.registry[self.schema_id]


class LocationSchema(Schema):
    def __init__(self) -> None:
        super().__init__("https://cwl2argo.io/schemas/locations.json")
        self.add_schema(
            files(__package__)
            .joinpath("schemas")
            .joinpath("locations.json")
            .read_text("utf-8")
        )
        self.registry = self.registry.crawl()
