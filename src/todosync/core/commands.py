"""Sync API command building - pure logic, no I/O.

A task becomes an ``item_add`` command, followed by a ``reminder_add``
command when it has a due time. The reminder refers to the item through the
item's temp id, which the service resolves within the same request.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .tasks import TaskDescriptor

FULL_SYNC_TOKEN = "*"

ITEM_ADD = "item_add"
REMINDER_ADD = "reminder_add"

TASK_DUE_STRING = "every day"
REMINDER_TYPE = "absolute"


class ResponseDecodeError(Exception):
    """Raised when a sync response body cannot be decoded."""

    pass


def new_id() -> str:
    """Generate a random (version 4) UUID string."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class DueExpression:
    """The service's structured due date: machine date plus a human string."""

    date: str
    string: str
    timezone: str
    lang: str = "en"
    is_recurring: bool = False

    def to_dict(self) -> dict:
        return {
            "lang": self.lang,
            "is_recurring": self.is_recurring,
            "string": self.string,
            "date": self.date,
            "timezone": self.timezone,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DueExpression":
        return cls(
            date=data["date"],
            string=data.get("string", ""),
            timezone=data.get("timezone", ""),
            lang=data.get("lang", "en"),
            is_recurring=data.get("is_recurring", False),
        )


@dataclass(frozen=True)
class CommandArgs:
    """Arguments of one command. Unset fields are left off the wire."""

    id: str
    item_id: str | None = None
    type: str | None = None
    content: str | None = None
    due: DueExpression | None = None
    date_added: str | None = None
    priority: int | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"id": self.id}
        for name in ("item_id", "type", "content"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        if self.due is not None:
            data["due"] = self.due.to_dict()
        if self.date_added is not None:
            data["date_added"] = self.date_added
        if self.priority is not None:
            data["priority"] = self.priority
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CommandArgs":
        due = data.get("due")
        return cls(
            id=data["id"],
            item_id=data.get("item_id"),
            type=data.get("type"),
            content=data.get("content"),
            due=DueExpression.from_dict(due) if due else None,
            date_added=data.get("date_added"),
            priority=data.get("priority"),
        )


@dataclass(frozen=True)
class Command:
    """One Sync API operation."""

    type: str
    uuid: str
    temp_id: str
    args: CommandArgs

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "uuid": self.uuid,
            "temp_id": self.temp_id,
            "args": self.args.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Command":
        return cls(
            type=data["type"],
            uuid=data["uuid"],
            temp_id=data["temp_id"],
            args=CommandArgs.from_dict(data["args"]),
        )


@dataclass(frozen=True)
class RequestEnvelope:
    """A batch of commands sent in one request. Always a full sync."""

    commands: tuple[Command, ...]
    sync_token: str = FULL_SYNC_TOKEN

    def to_dict(self) -> dict:
        return {
            "sync_token": self.sync_token,
            "commands": [c.to_dict() for c in self.commands],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "RequestEnvelope":
        return cls(
            commands=tuple(Command.from_dict(c) for c in data["commands"]),
            sync_token=data.get("sync_token", FULL_SYNC_TOKEN),
        )


@dataclass(frozen=True)
class ResponseEnvelope:
    """The service's acknowledgment of a request."""

    full_sync: bool = False
    sync_status: dict[str, Any] = field(default_factory=dict)
    sync_token: str = ""
    temp_id_mapping: dict[str, str] = field(default_factory=dict)

    @property
    def failed_commands(self) -> dict[str, Any]:
        """Command uuids whose status is anything other than "ok"."""
        return {k: v for k, v in self.sync_status.items() if v != "ok"}

    @classmethod
    def from_api(cls, data: dict) -> "ResponseEnvelope":
        """Create a ResponseEnvelope from a decoded sync response."""
        if not isinstance(data, dict):
            raise ResponseDecodeError(f"Expected a JSON object, got {type(data).__name__}")
        sync_status = data.get("sync_status")
        sync_status = {} if sync_status is None else sync_status
        mapping = data.get("temp_id_mapping")
        mapping = {} if mapping is None else mapping
        if not isinstance(sync_status, dict) or not isinstance(mapping, dict):
            raise ResponseDecodeError("sync_status and temp_id_mapping must be objects")
        return cls(
            full_sync=bool(data.get("full_sync", False)),
            sync_status=dict(sync_status),
            sync_token=data.get("sync_token") or "",
            # Real ids arrive as numbers from older API versions
            temp_id_mapping={k: str(v) for k, v in mapping.items()},
        )


def decode_response(body: str | bytes) -> list[ResponseEnvelope]:
    """Decode a response body holding one envelope or an array of them."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ResponseDecodeError(f"Response is not valid JSON: {e}") from e

    if isinstance(data, list):
        return [ResponseEnvelope.from_api(item) for item in data]
    return [ResponseEnvelope.from_api(data)]


# ============== Due expressions ==============


def task_due(now: datetime, timezone: str, lang: str = "en") -> DueExpression:
    """Due expression for the task itself: today's date."""
    return DueExpression(
        date=now.strftime("%Y-%m-%d"),
        string=TASK_DUE_STRING,
        timezone=timezone,
        lang=lang,
    )


def reminder_due(now: datetime, due_time: str, timezone: str, lang: str = "en") -> DueExpression:
    """Due expression for a reminder at ``due_time`` (HH:MM) today."""
    return DueExpression(
        date=f"{now.strftime('%Y-%m-%d')}T{due_time}:00",
        string=f"{now.strftime('%d %b')} {due_time}",
        timezone=timezone,
        lang=lang,
    )


# ============== Command building ==============


def build_commands(
    task: TaskDescriptor,
    now: datetime,
    timezone: str,
    lang: str = "en",
    priority: int = 1,
) -> list[Command]:
    """
    Build the ordered commands for one task: item_add, then reminder_add.

    Pure function apart from identifier generation. Every call returns
    freshly built commands; nothing is shared between tasks.
    """
    item_id = new_id()
    item = Command(
        type=ITEM_ADD,
        uuid=new_id(),
        temp_id=item_id,
        args=CommandArgs(
            id=item_id,
            content=task.name,
            due=task_due(now, timezone, lang),
            date_added=now.isoformat(timespec="seconds"),
            priority=priority,
        ),
    )
    commands = [item]

    if task.due_time:
        commands.append(
            Command(
                type=REMINDER_ADD,
                uuid=new_id(),
                temp_id=new_id(),
                args=CommandArgs(
                    id=new_id(),
                    item_id=item.temp_id,
                    type=REMINDER_TYPE,
                    due=reminder_due(now, task.due_time, timezone, lang),
                ),
            )
        )

    return commands


def build_request(commands: list[Command]) -> RequestEnvelope:
    """Wrap commands in a full-sync request envelope."""
    return RequestEnvelope(commands=tuple(commands))
