from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class RuleOptions:
    # Reject quiet moves while any piece of the side to move can capture.
    mandatory_capture: bool = True

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> "RuleOptions":
        known = {key: value for key, value in values.items() if key in cls.__dataclass_fields__ and value is not None}
        return cls(**known)
