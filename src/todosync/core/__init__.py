"""Functional core - pure business logic with no I/O."""

from .tasks import TaskDescriptor, TaskParseError, parse_tasks
from .commands import (
    Command,
    CommandArgs,
    DueExpression,
    RequestEnvelope,
    ResponseDecodeError,
    ResponseEnvelope,
    build_commands,
    build_request,
    decode_response,
    new_id,
    reminder_due,
    task_due,
)

__all__ = [
    # Tasks
    "TaskDescriptor",
    "TaskParseError",
    "parse_tasks",
    # Commands
    "Command",
    "CommandArgs",
    "DueExpression",
    "RequestEnvelope",
    "ResponseDecodeError",
    "ResponseEnvelope",
    "build_commands",
    "build_request",
    "decode_response",
    "new_id",
    "reminder_due",
    "task_due",
]
