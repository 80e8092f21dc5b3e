"""
Operation Registry - Maps operation identifiers to schema + handler pairs.

Registry is populated by operation modules. Adding an operation means
decorating one handler function; the dispatcher never changes.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from threading import Event
from typing import Any

from pydantic import BaseModel

from ..config.schemas import ToolConfig
from ..errors import UnsupportedOperation

logger = logging.getLogger(__name__)


@dataclass
class OperationContext:
    """Everything a handler needs besides its parameters."""

    inputs: list[str]
    output: str
    settings: ToolConfig
    cancel_event: Event | None = None


Handler = Callable[[OperationContext, BaseModel], dict[str, Any]]


@dataclass(frozen=True)
class OperationSpec:
    """
    Registered operation.

    Attributes:
        name: Operation identifier used on the command line
        params_model: Pydantic model validating the operation's parameters
        handler: Runs the operation, returns a summary dict
        min_inputs: Fewest input paths accepted
        max_inputs: Most input paths accepted (None = unbounded)
        description: One-line summary for --list
        streaming: Runs a frame loop that stops early on SIGINT/SIGTERM
    """

    name: str
    params_model: type[BaseModel]
    handler: Handler
    min_inputs: int = 1
    max_inputs: int | None = 1
    description: str = ""
    streaming: bool = False

    def accepts_input_count(self, count: int) -> bool:
        if count < self.min_inputs:
            return False
        return self.max_inputs is None or count <= self.max_inputs

    def input_summary(self) -> str:
        if self.max_inputs is None:
            return f">={self.min_inputs} inputs"
        if self.min_inputs == self.max_inputs:
            return f"{self.min_inputs} input" + ("s" if self.min_inputs != 1 else "")
        return f"{self.min_inputs}-{self.max_inputs} inputs"


# Registry: operation name -> spec
OPERATION_REGISTRY: dict[str, OperationSpec] = {}


def register(
    name: str,
    params_model: type[BaseModel],
    min_inputs: int = 1,
    max_inputs: int | None = 1,
    description: str = "",
    streaming: bool = False,
):
    """Decorator to register a handler function for an operation."""

    def decorator(func: Handler) -> Handler:
        if name in OPERATION_REGISTRY:
            raise ValueError(f"Operation registered twice: {name}")
        OPERATION_REGISTRY[name] = OperationSpec(
            name=name,
            params_model=params_model,
            handler=func,
            min_inputs=min_inputs,
            max_inputs=max_inputs,
            description=description,
            streaming=streaming,
        )
        return func

    return decorator


def load_operations() -> dict[str, OperationSpec]:
    """Import operation modules so their decorators populate the registry."""
    from . import detection, image, video  # noqa: F401

    return OPERATION_REGISTRY


def get_operation(name: str) -> OperationSpec:
    """
    Look up a registered operation.

    Raises:
        UnsupportedOperation: If no operation has this name
    """
    load_operations()
    spec = OPERATION_REGISTRY.get(name)
    if spec is None:
        known = ", ".join(sorted(OPERATION_REGISTRY))
        raise UnsupportedOperation(f"Unsupported operation: '{name}' (known: {known})")
    return spec
