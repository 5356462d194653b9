"""
Tests for rebuilding message threads from parent-linked chains.
"""

import pytest

from messenger.errors import ThreadWalkError
from messenger.services.message_service import MessageService
from messenger.services.thread_service import ThreadService
from helpers import make_chain, make_message, make_user


def ids(threads):
    return [[message.id for message in thread] for thread in threads]


class TestHeadDiscovery:
    """Which messages start a thread for a given user."""

    def test_user_without_messages_has_no_threads(self, db):
        user = make_user(db, "Fourth")
        assert ThreadService(db).build_threads(user.id) == []

    def test_author_and_participant_both_see_the_head(self, db):
        author = make_user(db, "Alice")
        participant = make_user(db, "Bob")
        head = make_message(db, author, "hello", participants=[participant])

        service = ThreadService(db)
        assert ids(service.build_threads(author.id)) == [[head.id]]
        assert ids(service.build_threads(participant.id)) == [[head.id]]

    def test_outsider_sees_nothing(self, db):
        author = make_user(db, "Alice")
        outsider = make_user(db, "Eve")
        make_message(db, author, "private")

        assert ThreadService(db).build_threads(outsider.id) == []

    def test_replies_are_never_heads(self, db):
        author = make_user(db, "Alice")
        participant = make_user(db, "Bob")
        head = make_message(db, author, "hello")
        # A reply naming Bob does not make Bob a viewer of the thread
        make_message(db, author, "reply", parent=head, participants=[participant])

        service = ThreadService(db)
        assert [message.id for message in service.get_thread_heads(author.id)] == [head.id]
        assert service.get_thread_heads(participant.id) == []

    def test_independent_heads_come_back_in_creation_order(self, db):
        author = make_user(db, "Alice")
        first = make_message(db, author, "first")
        second = make_message(db, author, "second")

        assert ids(ThreadService(db).build_threads(author.id)) == [[first.id], [second.id]]

    def test_one_thread_per_visible_head(self, db):
        alice = make_user(db, "Alice")
        bob = make_user(db, "Bob")
        own = make_chain(db, alice, 2)
        shared = make_chain(db, bob, 3, participants=[alice])
        make_chain(db, bob, 2)

        threads = ThreadService(db).build_threads(alice.id)
        assert [thread[0].id for thread in threads] == [own[0].id, shared[0].id]


class TestChainWalk:
    """Following replies from a head."""

    @pytest.mark.parametrize("length", [1, 2, 5, 20])
    def test_chain_of_n_gives_one_thread_of_n_root_first(self, db, length):
        author = make_user(db, "Alice")
        chain = make_chain(db, author, length)

        threads = ThreadService(db).build_threads(author.id)
        assert ids(threads) == [[message.id for message in chain]]

    def test_participant_sees_replies_from_anyone(self, db):
        alice = make_user(db, "Alice")
        bob = make_user(db, "Bob")
        head = make_message(db, alice, "question", participants=[bob])
        reply = make_message(db, bob, "answer", parent=head)
        follow_up = make_message(db, alice, "thanks", parent=reply)

        threads = ThreadService(db).build_threads(bob.id)
        assert ids(threads) == [[head.id, reply.id, follow_up.id]]

    def test_earliest_child_continues_a_branching_chain(self, db):
        author = make_user(db, "Alice")
        head = make_message(db, author, "head")
        first_reply = make_message(db, author, "first reply", parent=head)
        make_message(db, author, "second reply", parent=head)

        assert ids(ThreadService(db).build_threads(author.id)) == [[head.id, first_reply.id]]

    def test_deleting_head_orphans_the_reply(self, db):
        author = make_user(db, "Alice")
        m1 = make_message(db, author, "M1")
        m2 = make_message(db, author, "M2", parent=m1)

        service = ThreadService(db)
        assert ids(service.build_threads(author.id)) == [[m1.id, m2.id]]

        MessageService(db).delete_message(m1)

        assert service.build_threads(author.id) == []
        orphan = MessageService(db).get_message(m2.id)
        assert orphan is not None
        assert orphan.parent_id == m1.id
        assert service.find_head(orphan) is None

    def test_repeated_builds_are_identical(self, db):
        alice = make_user(db, "Alice")
        bob = make_user(db, "Bob")
        make_chain(db, alice, 3, participants=[bob])
        make_chain(db, bob, 2, participants=[alice])

        service = ThreadService(db)
        assert ids(service.build_threads(alice.id)) == ids(service.build_threads(alice.id))


class TestBatchedWalk:
    """The level-by-level walk must match the one-hop-at-a-time walk."""

    def test_batched_walk_matches_sequential_walk(self, db):
        alice = make_user(db, "Alice")
        bob = make_user(db, "Bob")
        make_chain(db, alice, 4)
        make_chain(db, bob, 1, participants=[alice])
        make_chain(db, alice, 2, participants=[bob])
        head = make_message(db, alice, "branching head")
        make_message(db, alice, "first", parent=head)
        make_message(db, bob, "second", parent=head)

        sequential = ThreadService(db, batch_fetch=False).build_threads(alice.id)
        batched = ThreadService(db, batch_fetch=True).build_threads(alice.id)
        assert ids(batched) == ids(sequential)

    def test_batched_levels_grow_one_message_at_a_time(self, db):
        author = make_user(db, "Alice")
        chain = make_chain(db, author, 3)

        levels = [
            [len(thread) for thread in threads]
            for threads in ThreadService(db).iter_batched_levels([chain[0]])
        ]
        assert levels[:3] == [[1], [2], [3]]
        assert levels[-1] == [3]

    def test_batched_walk_with_no_heads(self, db):
        user = make_user(db, "Alice")
        assert ThreadService(db, batch_fetch=True).build_threads(user.id) == []


class TestWalkBounds:
    """Corrupted or runaway chains fail instead of looping."""

    @pytest.mark.parametrize("batch_fetch", [False, True])
    def test_chain_at_the_limit_is_returned(self, db, batch_fetch):
        author = make_user(db, "Alice")
        chain = make_chain(db, author, 3)

        service = ThreadService(db, max_depth=3, batch_fetch=batch_fetch)
        assert ids(service.build_threads(author.id)) == [[message.id for message in chain]]

    @pytest.mark.parametrize("batch_fetch", [False, True])
    def test_chain_past_the_limit_fails(self, db, batch_fetch):
        author = make_user(db, "Alice")
        make_chain(db, author, 4)

        service = ThreadService(db, max_depth=3, batch_fetch=batch_fetch)
        with pytest.raises(ThreadWalkError):
            service.build_threads(author.id)

    def test_self_referencing_message_fails(self, db):
        author = make_user(db, "Alice")
        message = make_message(db, author, "loop")
        message.parent_id = message.id
        db.commit()

        with pytest.raises(ThreadWalkError):
            ThreadService(db).walk_thread(message)

    def test_parent_loop_fails_when_finding_the_head(self, db):
        author = make_user(db, "Alice")
        first = make_message(db, author, "first")
        second = make_message(db, author, "second", parent=first)
        first.parent_id = second.id
        db.commit()

        with pytest.raises(ThreadWalkError):
            ThreadService(db).find_head(second)

    def test_find_head_of_a_reply(self, db):
        author = make_user(db, "Alice")
        chain = make_chain(db, author, 4)

        assert ThreadService(db).find_head(chain[-1]).id == chain[0].id
