"""
Operation planner display - what a validated request would do.
"""

import sys
from dataclasses import dataclass, field
from typing import Any


# ANSI color codes for terminal output
class Colors:
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls):
        """Disable colors for non-TTY output."""
        cls.GREEN = cls.CYAN = cls.GRAY = cls.BOLD = cls.RESET = ""


# Disable colors if not a TTY
if not sys.stdout.isatty():
    Colors.disable()


@dataclass
class OperationPlan:
    """A fully validated request, ready to run."""

    operation: str
    description: str
    inputs: list[str]
    output: str
    params: dict[str, Any] = field(default_factory=dict)
    defaulted: set[str] = field(default_factory=set)  # params not set explicitly


def print_plan(plan: OperationPlan) -> None:
    """Print the resolved operation plan."""
    print()
    print(f"{Colors.BOLD}Operation Plan{Colors.RESET}")
    print("=" * 60)
    print(f"\n{Colors.GREEN}✓ Request is valid{Colors.RESET}")

    print(f"\n  {Colors.BOLD}{plan.operation}{Colors.RESET}  {Colors.GRAY}{plan.description}{Colors.RESET}")

    print(f"\n{Colors.CYAN}Inputs:{Colors.RESET}")
    for path in plan.inputs:
        print(f"  <- {path}")

    print(f"\n{Colors.CYAN}Output:{Colors.RESET}")
    print(f"  -> {plan.output}")

    if plan.params:
        print(f"\n{Colors.CYAN}Parameters (resolved):{Colors.RESET}")
        for name, value in plan.params.items():
            note = f" {Colors.GRAY}(default){Colors.RESET}" if name in plan.defaulted else ""
            print(f"  {name}: {value}{note}")

    print()


def print_operations(operations: dict) -> None:
    """Print registered operations and their input requirements."""
    print()
    print(f"{Colors.BOLD}Operations{Colors.RESET}")
    print("=" * 60)
    for name in sorted(operations):
        spec = operations[name]
        print(f"  {Colors.GREEN}{name:<16}{Colors.RESET} {spec.input_summary():<14} {spec.description}")
    print()
