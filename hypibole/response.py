"""Operation outcomes and their JSON encoding."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Dict, Union

from .pins import Level

STATUS_SUCCESS = "success"


@dataclass(frozen=True)
class GetSucceeded:
    level: Level
    index: int


@dataclass(frozen=True)
class SetSucceeded:
    index: int


@dataclass(frozen=True)
class Failed:
    reason: str


Outcome = Union[GetSucceeded, SetSucceeded, Failed]


def outcome_payload(outcome: Outcome) -> Dict[str, str]:
    """Return the flat string payload for an outcome."""
    if isinstance(outcome, GetSucceeded):
        return {
            "operation": "get",
            "status": STATUS_SUCCESS,
            "level": outcome.level.value,
            "pin": str(outcome.index),
        }
    if isinstance(outcome, SetSucceeded):
        return {
            "operation": "set",
            "status": STATUS_SUCCESS,
            "pin": str(outcome.index),
        }
    return {"error": outcome.reason}


def encode(outcome: Outcome) -> str:
    """Serialize an outcome with keys in lexicographic order."""
    return json.dumps(outcome_payload(outcome), sort_keys=True, separators=(",", ":"))
