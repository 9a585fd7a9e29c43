"""Encoding of the persisted attached-account list.

The list is one JSON array. Early releases only supported MongoDB and
stored bare id strings; those are read as MongoDB, non-emulator accounts
and rewritten in object form on the next save.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass

from cosmos_explorer.exceptions import DescriptorFormatError
from cosmos_explorer.experiences import API


@dataclass(frozen=True)
class AccountDescriptor:
    """The persisted identity of one attached account (never its secret)."""

    id: str
    default_experience: API = API.MONGODB
    is_emulator: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "defaultExperience": self.default_experience.value,
            "isEmulator": self.is_emulator,
        }


def _decode_item(item: object, index: int) -> AccountDescriptor:
    if isinstance(item, str):
        return AccountDescriptor(id=item)
    if not isinstance(item, dict):
        raise DescriptorFormatError(
            f"Persisted account #{index} must be a string or an object."
        )
    account_id = item.get("id")
    if not isinstance(account_id, str) or not account_id:
        raise DescriptorFormatError(f"Persisted account #{index} is missing an id.")
    raw_api = item.get("defaultExperience", API.MONGODB.value)
    try:
        api = API(raw_api)
    except ValueError:
        raise DescriptorFormatError(
            f"Persisted account #{index} has unknown defaultExperience {raw_api!r}."
        ) from None
    is_emulator = item.get("isEmulator", False)
    if not isinstance(is_emulator, bool):
        raise DescriptorFormatError(
            f"Persisted account #{index} has non-boolean isEmulator {is_emulator!r}."
        )
    return AccountDescriptor(id=account_id, default_experience=api, is_emulator=is_emulator)


def decode(raw: str | None) -> list[AccountDescriptor]:
    """Parse the persisted blob. Absent or empty input yields ``[]``."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DescriptorFormatError(f"Persisted account list is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise DescriptorFormatError("Persisted account list must be a JSON array.")
    return [_decode_item(item, index) for index, item in enumerate(data)]


def encode(descriptors: Iterable[AccountDescriptor]) -> str:
    """Serialize descriptors. Always writes the object form."""
    return json.dumps([d.to_dict() for d in descriptors])
