"""Metadata tags, shared options and conversion errors."""

from dataclasses import dataclass, field

from mapstostructs import Binder, BindOptions, ConversionError, UInt8, maps_to_structs


@dataclass
class Person:
    id: int = 0
    # Addressed as "gender" by default, or as "sex" when the "alias" tag is requested
    gender: str = field(default="", metadata={"json": "gender,omitempty", "alias": "sex"})
    age: UInt8 = UInt8(0)


legacy_rows = [{"id": 1, "sex": "female", "age": 34}]

# Tags requested at the call site are consulted before the default "json" tag
people = maps_to_structs(legacy_rows, list[Person], "alias")
print(f"With alias tag: {people[0]}")

# Without the alias tag the "sex" key matches nothing and gender keeps its default
people = maps_to_structs(legacy_rows, list[Person])
print(f"Without alias tag: {people[0]}")

# Options can be stored as plain data and reused through a Binder
options = BindOptions.from_dict({"tags": ["alias"], "max_depth": 16})
binder = Binder(options)
print(f"\nOptions: {options.to_dict()}")
print(f"Through binder: {binder.map_to_struct({'id': 2, 'sex': 'male'}, Person)}")

# The first value that cannot be converted aborts the call with a located error
try:
    binder.maps_to_structs([{"id": 3}, {"id": 4, "age": 300}], list[Person])
except ConversionError as exc:
    print(f"\nError: {exc}")
    print(f"Path: {[(segment.kind, segment.name) for segment in exc.path]}")
