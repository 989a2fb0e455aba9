"""
In-memory conversation store keyed by customer phone number.

Each customer gets one Conversation holding a sliding window of the most
recent messages. Records are created lazily by the first recorded turn
and removed only by an explicit expiry sweep; reads never evict, so a
conversation past its timeout is still served until the next sweep.

Usage:
    store = SessionStore(max_history=10, timeout=timedelta(hours=24))
    store.record_turn("+14155550134", "How much is a hoodie?", "From $35.")
    context = store.get_context("+14155550134")
    removed = store.sweep_expired()
"""

import itertools
import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Optional

from pydantic import ValidationError

from sms_agent.schemas.conversation_schema import (
    Conversation,
    ConversationMetadata,
    Message,
    Role,
    SearchHit,
    StoreStats,
)
from sms_agent.utils import mask_phone

logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY = 10
DEFAULT_TIMEOUT = timedelta(hours=24)
DEFAULT_CONTEXT_WINDOW = 6


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """
    Owns every Conversation for the lifetime of the process.

    All mutations happen under a single re-entrant lock, so the two
    appends of a turn are never interleaved with another turn for the
    same customer, even when called from worker threads.
    """

    def __init__(
        self,
        max_history: int = DEFAULT_MAX_HISTORY,
        timeout: timedelta = DEFAULT_TIMEOUT,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if max_history < 1:
            raise ValueError(f"max_history must be >= 1, got {max_history}")
        self._max_history = max_history
        self._timeout = timeout
        self._clock = clock
        self._conversations: dict[str, Conversation] = {}
        self._lock = threading.RLock()
        self._id_counter = itertools.count(1)

    @property
    def max_history(self) -> int:
        return self._max_history

    @property
    def timeout(self) -> timedelta:
        return self._timeout

    def __len__(self) -> int:
        return len(self._conversations)

    def __contains__(self, customer_id: object) -> bool:
        return customer_id in self._conversations

    def _new_message_id(self) -> str:
        return f"msg_{next(self._id_counter):06d}_{uuid.uuid4().hex[:8]}"

    def _new_conversation(self, customer_id: str, now: datetime) -> Conversation:
        return Conversation(
            customer_id=customer_id,
            metadata=ConversationMetadata(customer_id=customer_id, created_at=now),
            last_activity_at=now,
        )

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def record_turn(
        self, customer_id: str, customer_text: str, assistant_text: str
    ) -> Conversation:
        """
        Append a customer message and the assistant reply as one unit.

        Creates the conversation if absent, trims the oldest messages so at
        most ``max_history`` remain, and refreshes activity and counters.

        Returns:
            The updated conversation.
        """
        with self._lock:
            now = self._clock()
            conversation = self._conversations.get(customer_id)
            if conversation is None:
                conversation = self._new_conversation(customer_id, now)
                self._conversations[customer_id] = conversation
                logger.debug("Conversation created for %s", mask_phone(customer_id))

            conversation.messages.append(Message(
                role=Role.CUSTOMER,
                content=customer_text,
                timestamp=now,
                id=self._new_message_id(),
            ))
            conversation.messages.append(Message(
                role=Role.ASSISTANT,
                content=assistant_text,
                timestamp=now,
                id=self._new_message_id(),
            ))

            if len(conversation.messages) > self._max_history:
                conversation.messages = conversation.messages[-self._max_history:]

            conversation.metadata.message_count = len(conversation.messages)
            conversation.last_activity_at = now
            return conversation

    def update_metadata(self, customer_id: str, partial: dict[str, Any]) -> bool:
        """Merge fields into an existing conversation's metadata.

        No-op when the conversation does not exist. A partial that fails
        validation is rejected whole and the prior metadata is kept.
        ``message_count`` always tracks the retained message count, whatever
        the caller passes.

        Returns:
            True if a conversation was updated.
        """
        with self._lock:
            conversation = self._conversations.get(customer_id)
            if conversation is None:
                return False
            merged = {**conversation.metadata.model_dump(), **partial}
            merged["message_count"] = len(conversation.messages)
            try:
                metadata = ConversationMetadata.model_validate(merged)
            except ValidationError as exc:
                logger.warning(
                    "Rejected metadata update for %s: %s",
                    mask_phone(customer_id), exc.errors()[0].get("msg"),
                )
                return False
            conversation.metadata = metadata
            conversation.last_activity_at = self._clock()
            return True

    def sweep_expired(
        self, now: Optional[datetime] = None, timeout: Optional[timedelta] = None
    ) -> int:
        """
        Remove every conversation idle for longer than ``timeout``.

        A conversation survives when ``now - last_activity_at <= timeout``.

        Returns:
            Number of conversations removed.
        """
        now = now or self._clock()
        timeout = self._timeout if timeout is None else timeout
        with self._lock:
            expired = [
                cid for cid, conv in self._conversations.items()
                if now - conv.last_activity_at > timeout
            ]
            for cid in expired:
                del self._conversations[cid]
        logger.info("Swept %d expired conversations", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._conversations.clear()

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def get_conversation(self, customer_id: str) -> Optional[Conversation]:
        """Return the conversation for a customer, or None if there is none."""
        return self._conversations.get(customer_id)

    def get_context(
        self, customer_id: str, window_size: int = DEFAULT_CONTEXT_WINDOW
    ) -> list[Message]:
        """Return the last ``window_size`` messages in chronological order."""
        conversation = self._conversations.get(customer_id)
        if conversation is None or window_size <= 0:
            return []
        return list(conversation.messages[-window_size:])

    def search(self, query: str) -> list[SearchHit]:
        """Case-insensitive substring search over every message's content."""
        needle = query.lower()
        hits = []
        with self._lock:
            for cid, conversation in self._conversations.items():
                matching = [m for m in conversation.messages if needle in m.content.lower()]
                if matching:
                    hits.append(SearchHit(
                        customer_id=cid,
                        matching_messages=matching,
                        last_activity_at=conversation.last_activity_at,
                    ))
        return hits

    def get_stats(self) -> StoreStats:
        """Aggregate counters across all resident conversations."""
        with self._lock:
            conversations = list(self._conversations.values())
        if not conversations:
            return StoreStats()

        total = sum(len(c.messages) for c in conversations)
        created = [c.metadata.created_at for c in conversations if c.metadata.created_at]
        return StoreStats(
            active_conversations=len(conversations),
            total_messages=total,
            average_messages_per_conversation=total / len(conversations),
            oldest_created_at=min(created) if created else None,
            newest_activity=max(c.last_activity_at for c in conversations),
        )

    # ------------------------------------------------------------------ #
    # Backup / restore
    # ------------------------------------------------------------------ #

    def export_all(self) -> list[dict[str, Any]]:
        """Serialize every conversation to JSON-compatible dicts."""
        with self._lock:
            return [c.model_dump(mode="json") for c in self._conversations.values()]

    def import_all(self, records: Iterable[dict[str, Any]]) -> int:
        """
        Restore conversations from ``export_all`` output.

        Missing fields fall back to defaults: no messages, the current time
        for timestamps, and metadata zeroed for the customer. Individual
        messages that fail validation are dropped. Records without a
        customer id are skipped. Existing conversations with the same id
        are replaced.

        Returns:
            Number of conversations imported.
        """
        imported = 0
        with self._lock:
            for record in records:
                conversation = self._restore(record)
                if conversation is None:
                    continue
                self._conversations[conversation.customer_id] = conversation
                imported += 1
        logger.info("Imported %d conversations", imported)
        return imported

    def _restore(self, record: Any) -> Optional[Conversation]:
        if not isinstance(record, dict):
            logger.warning("Skipping non-dict import record: %r", type(record).__name__)
            return None
        customer_id = record.get("customer_id") or record.get("phone_number")
        if not customer_id:
            logger.warning("Skipping import record without a customer id")
            return None

        now = self._clock()
        messages = []
        for raw in record.get("messages") or []:
            if not isinstance(raw, dict):
                continue
            data = {"timestamp": now, "id": self._new_message_id(), **raw}
            try:
                messages.append(Message.model_validate(data))
            except ValidationError as exc:
                logger.warning(
                    "Dropping malformed message for %s: %s",
                    mask_phone(customer_id), exc.errors()[0].get("msg"),
                )
        messages = messages[-self._max_history:]

        raw_meta = record.get("metadata") or {}
        meta = {
            "customer_id": customer_id,
            "created_at": now,
            **(raw_meta if isinstance(raw_meta, dict) else {}),
        }
        meta["message_count"] = len(messages)
        try:
            metadata = ConversationMetadata.model_validate(meta)
        except ValidationError:
            metadata = ConversationMetadata(
                customer_id=customer_id, created_at=now, message_count=len(messages)
            )

        last_activity = record.get("last_activity_at") or now
        try:
            return Conversation(
                customer_id=customer_id,
                messages=messages,
                metadata=metadata,
                last_activity_at=last_activity,
            )
        except ValidationError:
            return Conversation(
                customer_id=customer_id,
                messages=messages,
                metadata=metadata,
                last_activity_at=now,
            )
