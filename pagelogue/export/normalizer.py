"""Canonicalization of extracted conversation data.

Every rewrite here is deterministic and meaning-preserving, and
`normalize_conversation` is idempotent: normalizing twice yields the
same value as normalizing once.
"""

from __future__ import annotations

from pagelogue.lib.models import ConversationData, ConversationMessage
from pagelogue.lib.text import normalize_content, normalize_title
from pagelogue.lib.timestamps import canonical_timestamp


def normalize_message(
    message: ConversationMessage,
    *,
    include_timestamps: bool = True,
    include_metadata: bool = True,
    include_raw_snippet: bool = True,
) -> ConversationMessage:
    metadata = message.metadata if include_metadata else None
    if metadata is not None and not include_raw_snippet:
        metadata = metadata.model_copy(update={"raw_snippet": None})
    return ConversationMessage(
        role=message.role,
        content=normalize_content(message.content),
        timestamp=canonical_timestamp(message.timestamp) if include_timestamps else None,
        metadata=metadata,
    )


def normalize_conversation(
    data: ConversationData,
    *,
    include_timestamps: bool = True,
    include_metadata: bool = True,
    include_raw_snippet: bool = True,
) -> ConversationData:
    messages = [
        normalize_message(
            message,
            include_timestamps=include_timestamps,
            include_metadata=include_metadata,
            include_raw_snippet=include_raw_snippet,
        )
        for message in data.messages
    ]
    return ConversationData(
        title=normalize_title(data.title),
        messages=messages,
        metadata=data.metadata.model_copy(update={"total_messages": len(messages)}),
    )


__all__ = ["normalize_message", "normalize_conversation"]
