"""
Operations - one registered handler per command-line operation.

Each operation pairs a pydantic parameter schema with a handler. The
registry maps operation names to those pairs; the dispatcher looks them
up, validates, and invokes.
"""

from .registry import (
    OPERATION_REGISTRY,
    OperationContext,
    OperationSpec,
    get_operation,
    load_operations,
    register,
)

__all__ = [
    "OPERATION_REGISTRY",
    "OperationContext",
    "OperationSpec",
    "get_operation",
    "load_operations",
    "register",
]
