"""Validation rules for extracted conversation data.

Rules split into two classes:

- fatal (`errors`): the export must not be produced. An empty title, or a
  message whose role is not user/assistant.
- non-fatal (`warnings`): recorded in the export's ``parsing_errors`` but
  never block it. Role-order anomalies, possibly unsafe markup in content
  (content is exported unmodified; sanitizing is the viewer's job), and
  unusually long messages.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from pagelogue.lib.models import ConversationData
from pagelogue.lib.roles import Role

LONG_MESSAGE_WARNING_LENGTH = 50_000

UNSAFE_CONTENT_RE = re.compile(r"<script|javascript:|<[^>]*\bon\w+\s*=", re.IGNORECASE)


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    message_count: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def data_integrity(self) -> bool:
        return not self.errors


def validate_conversation(data: ConversationData) -> ValidationResult:
    result = ValidationResult(message_count=len(data.messages))

    if not data.title or not data.title.strip():
        result.errors.append("Missing conversation title")

    if not data.messages:
        result.warnings.append("No messages found in conversation")

    for index, message in enumerate(data.messages):
        if not isinstance(message.role, Role):
            result.errors.append(f"Message {index} has invalid role: {message.role}")
        if len(message.content) > LONG_MESSAGE_WARNING_LENGTH:
            result.warnings.append(f"Message {index} is unusually long ({len(message.content)} chars)")

    if data.messages and data.messages[0].role != Role.USER:
        result.warnings.append("Conversation does not start with user message")

    for index in range(1, len(data.messages)):
        role = data.messages[index].role
        if role == data.messages[index - 1].role:
            result.warnings.append(f"Messages {index - 1} and {index} have same role ({_role_name(role)})")

    if any(UNSAFE_CONTENT_RE.search(message.content) for message in data.messages):
        result.warnings.append("Messages contain potentially unsafe HTML/script content")

    return result


def _role_name(role: object) -> str:
    return role.value if isinstance(role, Role) else str(role)


__all__ = ["LONG_MESSAGE_WARNING_LENGTH", "UNSAFE_CONTENT_RE", "ValidationResult", "validate_conversation"]
