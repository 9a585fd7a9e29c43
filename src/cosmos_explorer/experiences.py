"""Database account APIs and how they are presented to the user."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from cosmos_explorer.exceptions import UnexpectedAPIError


class API(StrEnum):
    """Account API kind. Values are persisted verbatim."""

    MONGODB = "MongoDB"
    DOCUMENTDB = "DocumentDB"
    GRAPH = "Graph"
    TABLE = "Table"


@dataclass(frozen=True)
class Experience:
    api: API
    long_name: str
    short_name: str


_EXPERIENCES: dict[API, Experience] = {
    API.MONGODB: Experience(API.MONGODB, "Azure Cosmos DB for MongoDB API", "MongoDB"),
    API.DOCUMENTDB: Experience(API.DOCUMENTDB, "Azure Cosmos DB for NoSQL", "SQL"),
    API.GRAPH: Experience(API.GRAPH, "Azure Cosmos DB for Gremlin", "Gremlin"),
    API.TABLE: Experience(API.TABLE, "Azure Cosmos DB for Table", "Table"),
}


def parse_api(value: str) -> API:
    """Map a persisted or user-supplied API name onto :class:`API`.

    Accepts the enum value (``"MongoDB"``) or, case-insensitively, the
    enum name or short name (``"mongodb"``, ``"sql"``).
    """
    try:
        return API(value)
    except ValueError:
        pass
    lowered = str(value).strip().lower()
    for api, experience in _EXPERIENCES.items():
        if lowered in (api.name.lower(), api.value.lower(), experience.short_name.lower()):
            return api
    raise UnexpectedAPIError(f'Unexpected defaultExperience "{value}".')


def get_experience(api: API) -> Experience:
    try:
        return _EXPERIENCES[api]
    except KeyError:
        raise UnexpectedAPIError(f'Unexpected defaultExperience "{api}".') from None


def get_experiences() -> list[Experience]:
    """All experiences in pick order."""
    return list(_EXPERIENCES.values())
