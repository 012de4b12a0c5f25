"""Request parsing: turn a request URI into a typed pin operation."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qsl, urlsplit

from .pins import Level
from .pinset import parse_pin_index

PIN_PARAM = "pin"
OPERATION_PARAM = "op"
LEVEL_PARAM = "level"


class Operation(enum.Enum):
    GET = "get"
    SET = "set"


@dataclass(frozen=True)
class OperationArgs:
    """A parsed request: which pin, what to do, and the level for a set."""

    index: int
    operation: Operation
    level: Optional[Level] = None


class OperationError(Exception):
    """Base class for per-request failures reported back to the caller."""


class RequestError(OperationError):
    """The request itself is malformed."""


class MissingQuery(RequestError):
    def __init__(self) -> None:
        super().__init__("No arguments in URL.")


class MalformedUri(RequestError):
    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(f'Malformed request URI: "{uri}"')


class UnrecognizedParameter(RequestError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f'Unrecognized query parameter: "{key}"')


class MissingOrInvalidPin(RequestError):
    def __init__(self, value: Optional[str] = None) -> None:
        self.value = value
        if value is None:
            super().__init__("Did not get required GPIO index argument.")
        else:
            super().__init__(f'Invalid GPIO index argument: "{value}"')


class UnrecognizedOperation(RequestError):
    def __init__(self, value: Optional[str] = None) -> None:
        self.value = value
        if value is None:
            super().__init__("Did not get required operation argument.")
        else:
            super().__init__(f'Unrecognized operation parameter: "{value}"')


class MissingOrInvalidLevel(RequestError):
    def __init__(self, value: Optional[str] = None) -> None:
        self.value = value
        if value is None:
            super().__init__("Did not get level argument required for set.")
        else:
            super().__init__(f'Unrecognized level parameter: "{value}"')


def parse_uri(uri: str) -> OperationArgs:
    """Parse ``?pin=<n>&op=get|set[&level=high|low]`` from a request URI.

    A bare ``?`` counts as a query with no parameters. Unknown keys reject
    the whole request. A repeated key keeps its last value. ``level`` is
    only validated for ``op=set``.
    """
    try:
        query = urlsplit(uri).query
    except ValueError:
        raise MalformedUri(uri)
    if not query and "?" not in uri:
        raise MissingQuery()

    params = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        if key not in (PIN_PARAM, OPERATION_PARAM, LEVEL_PARAM):
            raise UnrecognizedParameter(key)
        params[key] = value

    raw_pin = params.get(PIN_PARAM)
    if raw_pin is None:
        raise MissingOrInvalidPin()
    try:
        index = parse_pin_index(raw_pin)
    except ValueError:
        raise MissingOrInvalidPin(raw_pin)

    raw_op = params.get(OPERATION_PARAM)
    if raw_op == Operation.GET.value:
        return OperationArgs(index, Operation.GET)
    if raw_op != Operation.SET.value:
        raise UnrecognizedOperation(raw_op)

    raw_level = params.get(LEVEL_PARAM)
    if raw_level is None:
        raise MissingOrInvalidLevel()
    if raw_level == Level.HIGH.value:
        return OperationArgs(index, Operation.SET, Level.HIGH)
    if raw_level == Level.LOW.value:
        return OperationArgs(index, Operation.SET, Level.LOW)
    raise MissingOrInvalidLevel(raw_level)
