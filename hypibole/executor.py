"""Execute parsed operations against the pin registry."""

from __future__ import annotations

from typing import FrozenSet, Tuple
import logging

from .operations import Operation, OperationArgs, OperationError, RequestError, parse_uri
from .pins import DiscretePin
from .registry import PinRegistry
from .response import Failed, GetSucceeded, Outcome, SetSucceeded, encode

LOGGER = logging.getLogger(__name__)


class BoardOperationError(OperationError):
    """The request was well-formed but cannot be carried out on this board."""


class PinNotFound(BoardOperationError):
    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Could not find pin {index} in either map.")


class NotWhitelistedForGet(BoardOperationError):
    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Pin, {index}, is not in the get whitelist for this pin type!")


class NotWhitelistedForSet(BoardOperationError):
    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Pin, {index}, is not in the set whitelist for this pin type!")


def resolve_pin(index: int, registry: PinRegistry) -> Tuple[DiscretePin, FrozenSet[int], FrozenSet[int]]:
    """Return the pin for ``index`` with its (get, set) whitelists; physical wins."""
    pin_set = registry.pin_set
    physical = registry.physical.get(index)
    if physical is not None:
        return physical, pin_set.get_whitelist, pin_set.set_whitelist
    simulated = registry.simulated.get(index)
    if simulated is not None:
        return simulated, pin_set.get_simulated, pin_set.set_simulated
    raise PinNotFound(index)


def execute(args: OperationArgs, registry: PinRegistry) -> Outcome:
    """Perform one read or write; raises BoardOperationError on failure."""
    pin, get_whitelist, set_whitelist = resolve_pin(args.index, registry)

    if args.operation is Operation.GET:
        if args.index not in get_whitelist:
            raise NotWhitelistedForGet(args.index)
        return GetSucceeded(pin.read(), args.index)

    if args.index not in set_whitelist:
        raise NotWhitelistedForSet(args.index)
    pin.write(args.level)
    return SetSucceeded(args.index)


def process_uri(uri: str, registry: PinRegistry) -> Outcome:
    """Parse and execute a request URI, folding per-request errors into Failed."""
    try:
        args = parse_uri(uri)
    except RequestError as exc:
        return Failed(str(exc))

    try:
        return execute(args, registry)
    except OperationError as exc:
        return Failed(f'Failed to perform board operation: "{exc}"')


def handle_uri(uri: str, registry: PinRegistry) -> str:
    """Return the JSON response body for a request URI."""
    outcome = process_uri(uri, registry)
    LOGGER.debug("%s -> %s", uri, outcome)
    return encode(outcome)
