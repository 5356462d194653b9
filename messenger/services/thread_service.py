# messenger/services/thread_service.py
import logging
from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from typing import Dict, Iterator, List, Optional

from messenger.config import get_settings
from messenger.errors import ThreadWalkError
from messenger.models.message import Message, message_participants

logger = logging.getLogger(__name__)


class ThreadService:
    """
    Rebuilds conversation threads from parent-linked messages.

    A thread starts at a head (a message without a parent) and continues
    through the child of each message until a message has no child. Walks
    are bounded by ``max_depth`` and raise ThreadWalkError when they revisit
    a message.
    """

    def __init__(self, db: Session, max_depth: Optional[int] = None, batch_fetch: Optional[bool] = None):
        settings = get_settings()
        self.db = db
        self.max_depth = max_depth if max_depth is not None else settings.THREAD_MAX_DEPTH
        self.batch_fetch = batch_fetch if batch_fetch is not None else settings.THREAD_BATCH_FETCH

    def get_thread_heads(self, user_id: str) -> List[Message]:
        """
        Get every thread head the user can see: heads they wrote and heads
        naming them as a participant, in creation order.
        """
        participant_heads = select(message_participants.c.message_id).where(
            message_participants.c.user_id == user_id
        )
        return self.db.query(Message).filter(
            Message.parent_id.is_(None),
            or_(
                Message.author_id == user_id,
                Message.id.in_(participant_heads)
            )
        ).order_by(Message.created_at, Message.id).all()

    def get_child(self, parent_id: str) -> Optional[Message]:
        """
        Get the message continuing the chain after ``parent_id``.

        Chains are not expected to branch; if they do, the earliest child wins.
        """
        return self.db.query(Message).filter(
            Message.parent_id == parent_id
        ).order_by(Message.created_at, Message.id).first()

    def iter_chain(self, start: Message) -> Iterator[Message]:
        """Yield ``start`` and each following message, one lookup per hop."""
        seen = set()
        current = start
        while current is not None:
            if current.id in seen:
                logger.error(f"Message chain from {start.id} loops back to {current.id}")
                raise ThreadWalkError("Message thread could not be built")
            if len(seen) >= self.max_depth:
                logger.error(f"Message chain from {start.id} exceeds {self.max_depth} messages")
                raise ThreadWalkError("Message thread could not be built")
            seen.add(current.id)
            yield current
            current = self.get_child(current.id)

    def walk_thread(self, start: Message) -> List[Message]:
        """Collect the whole chain from ``start``, root first."""
        return list(self.iter_chain(start))

    def iter_batched_levels(self, heads: List[Message]) -> Iterator[List[List[Message]]]:
        """
        Walk all chains together, advancing every unfinished thread by one
        message per query. Yields the threads built so far after each level;
        the last value yielded holds the same threads as walking each head on
        its own.
        """
        threads = [[head] for head in heads]
        seen = {head.id for head in heads}
        # id of the last message of each unfinished thread -> thread index
        tails: Dict[str, int] = {head.id: index for index, head in enumerate(heads)}
        depth = 1
        yield threads

        while tails:
            children = self.db.query(Message).filter(
                Message.parent_id.in_(list(tails))
            ).order_by(Message.created_at, Message.id).all()

            next_tails: Dict[str, int] = {}
            for child in children:
                index = tails.pop(child.parent_id, None)
                if index is None:
                    # A later sibling of a child already taken this round
                    continue
                if child.id in seen:
                    logger.error(f"Message chain from {threads[index][0].id} loops back to {child.id}")
                    raise ThreadWalkError("Message thread could not be built")
                seen.add(child.id)
                threads[index].append(child)
                next_tails[child.id] = index

            depth += 1
            if next_tails and depth > self.max_depth:
                logger.error(f"Message chains exceed {self.max_depth} messages")
                raise ThreadWalkError("Message thread could not be built")
            tails = next_tails
            yield threads

    def walk_threads_batched(self, heads: List[Message]) -> List[List[Message]]:
        """Walk all chains level by level and return the finished threads."""
        threads = []
        for threads in self.iter_batched_levels(heads):
            pass
        return threads

    def build_threads(self, user_id: str) -> List[List[Message]]:
        """Build every thread visible to the user, each one root first."""
        heads = self.get_thread_heads(user_id)
        if self.batch_fetch:
            return self.walk_threads_batched(heads)
        return [self.walk_thread(head) for head in heads]

    def find_head(self, message: Message) -> Optional[Message]:
        """
        Follow parent links up to the thread head.

        Returns None when a link is dangling, i.e. the message is an orphan.
        """
        seen = set()
        current = message
        while current.parent_id is not None:
            if current.id in seen or len(seen) >= self.max_depth:
                logger.error(f"Parent chain of message {message.id} is corrupted at {current.id}")
                raise ThreadWalkError("Message thread could not be resolved")
            seen.add(current.id)
            current = self.db.query(Message).filter(Message.id == current.parent_id).first()
            if current is None:
                return None
        return current
