"""
Operation Dispatcher - validates a request and routes it to its handler.

Validation is complete before any file is opened: unknown operation,
missing output, wrong input count, and bad parameters all fail with
ConfigurationError (or its UnsupportedOperation subclass).
"""

import logging
import time
from dataclasses import dataclass, field
from threading import Event
from typing import Any

from pydantic import BaseModel, ValidationError

from .config.planner import OperationPlan
from .config.schemas import ToolConfig, format_validation_error
from .errors import ConfigurationError
from .operations import OperationContext, OperationSpec, get_operation

logger = logging.getLogger(__name__)


@dataclass
class OperationRequest:
    """
    One requested operation.

    Attributes:
        operation: Operation identifier (e.g. "resize")
        inputs: Input file paths
        output: Output file path
        params: Explicitly set parameters; unset ones come from config or defaults
    """

    operation: str
    inputs: list[str]
    output: str
    params: dict[str, Any] = field(default_factory=dict)


def validate_request(
    request: OperationRequest, settings: ToolConfig | None = None
) -> tuple[OperationSpec, BaseModel]:
    """
    Validate a request without running it.

    Args:
        request: The requested operation
        settings: Tool configuration supplying per-operation defaults

    Returns:
        (operation spec, validated parameters)

    Raises:
        UnsupportedOperation: Unknown operation identifier
        ConfigurationError: Missing output, wrong input count, or bad parameters
    """
    settings = settings or ToolConfig()
    spec = get_operation(request.operation)

    if not request.output:
        raise ConfigurationError(f"{spec.name}: output path is required")

    if not spec.accepts_input_count(len(request.inputs)):
        raise ConfigurationError(
            f"{spec.name} requires {spec.input_summary()}, got {len(request.inputs)}"
        )

    merged = {**settings.operations.get(spec.name, {}), **request.params}
    try:
        params = spec.params_model.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(
            f"{spec.name}: invalid parameters: {format_validation_error(e)}"
        ) from e

    return spec, params


def build_plan(request: OperationRequest, settings: ToolConfig | None = None) -> OperationPlan:
    """Validate a request and describe what it would do."""
    settings = settings or ToolConfig()
    spec, params = validate_request(request, settings)
    explicit = set(request.params) | set(settings.operations.get(spec.name, {}))

    return OperationPlan(
        operation=spec.name,
        description=spec.description,
        inputs=list(request.inputs),
        output=request.output,
        params=params.model_dump(),
        defaulted=set(params.model_dump()) - explicit,
    )


def dispatch(
    request: OperationRequest,
    settings: ToolConfig | None = None,
    cancel_event: Event | None = None,
) -> dict[str, Any]:
    """
    Validate and run one operation.

    Args:
        request: The requested operation
        settings: Tool configuration
        cancel_event: Cancellation signal for streaming operations

    Returns:
        Handler summary (e.g. frames written, detections kept)

    Raises:
        VisionOpsError: Any validation or processing failure
    """
    settings = settings or ToolConfig()
    spec, params = validate_request(request, settings)

    logger.info(f"Running {spec.name}: {', '.join(request.inputs)} -> {request.output}")
    start_time = time.time()

    ctx = OperationContext(
        inputs=list(request.inputs),
        output=request.output,
        settings=settings,
        cancel_event=cancel_event,
    )
    summary = spec.handler(ctx, params)

    logger.info(f"{spec.name} completed in {time.time() - start_time:.2f}s")
    return summary
