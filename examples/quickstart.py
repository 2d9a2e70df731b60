"""Basic usage: bind decoded JSON rows to dataclasses."""

import json
from dataclasses import dataclass, field

from mapstostructs import map_to_map, map_to_struct, maps_to_structs


@dataclass
class Location:
    country: str = ""
    city: str = ""


@dataclass
class User:
    id: int = 0
    name: str = ""
    age: int | None = None
    sports: list[str] = field(default_factory=list)
    location: Location | None = None


# Rows as a JSON decoder (or a DB-API cursor turned into dicts) hands them back.
# Keys are matched to fields case-insensitively; unknown keys are ignored.
rows = json.loads(
    """
    [
        {"id": 213, "name": "Zhaoliu", "age": 19.0, "sports": ["football", "tennis"],
         "location": {"country": "UK", "city": "London"}},
        {"ID": 56, "Name": "Zhangsan", "nickname": "zs"}
    ]
    """
)

users = maps_to_structs(rows, list[User])
for user in users:
    print(f"[{user.id}] {user.name} age={user.age} location={user.location}")

# A single mapping binds to a single dataclass instance
user = map_to_struct({"id": 7, "name": "Lisi"}, User)
print(f"\nSingle user: {user}")

# Numeral-string keys (as JSON object keys always are) convert to numeric dict keys
scores = map_to_map({"1": 9.5, "2": 7}, dict[int, float])
print(f"Scores: {scores}")
