"""
Property-based tests for queue invariants.

Random operation sequences are replayed against the queues and the
invariants are checked after every step.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from admission_queue.queue import KeyedQueue, UnkeyedQueue

keys = st.sampled_from(["a", "b", "c", "d", "e", "f"])
pool_sizes = st.integers(min_value=-1, max_value=4)

keyed_ops = st.one_of(
    st.tuples(st.just("enqueue"), keys, st.integers()),
    st.tuples(st.just("start")),
    st.tuples(st.just("dequeue"), keys),
    st.tuples(
        st.just("enqueue_many"),
        st.lists(st.tuples(keys, st.integers()), max_size=4),
    ),
)


def apply_op(queue: KeyedQueue[str, int], op: tuple) -> KeyedQueue[str, int]:
    """Apply one generated operation to a keyed queue."""
    name, *args = op
    if name == "enqueue":
        return queue.enqueue(*args)
    if name == "start":
        return queue.start()[0]
    if name == "dequeue":
        return queue.dequeue(*args)
    if name == "enqueue_many":
        return queue.enqueue_many(*args)
    raise AssertionError(f"unknown op {op!r}")


@st.composite
def reachable_queues(draw) -> KeyedQueue[str, int]:
    """Strategy producing keyed queues reachable through public operations."""
    queue = KeyedQueue.empty(draw(pool_sizes))
    for op in draw(st.lists(keyed_ops, max_size=25)):
        queue = apply_op(queue, op)
    return queue


class TestKeyedQueueProperties:
    """Invariants over reachable keyed queue states."""

    @settings(max_examples=200)
    @given(pool_size=pool_sizes, ops=st.lists(keyed_ops, max_size=40))
    def test_invariants_hold_after_every_step(self, pool_size: int, ops: list[tuple]):
        """Test capacity and key uniqueness after each operation."""
        queue = KeyedQueue.empty(pool_size)
        for op in ops:
            queue = apply_op(queue, op)

            assert len(queue.active_lanes) <= max(0, pool_size)

            all_keys = [lane.key for lane in queue.backlog + queue.active_lanes]
            assert len(all_keys) == len(set(all_keys))

    @given(queue=reachable_queues(), key=keys, item=st.integers())
    def test_enqueue_and_start_composition(self, queue: KeyedQueue[str, int], key: str, item: int):
        """Test enqueue_and_start equals start after enqueue."""
        assert queue.enqueue_and_start(key, item) == queue.enqueue(key, item).start()

    @given(queue=reachable_queues(), key=keys)
    def test_dequeue_inactive_key_is_identity(self, queue: KeyedQueue[str, int], key: str):
        """Test dequeue of a key that is not active leaves the queue equal."""
        if not queue.is_active(key):
            assert queue.dequeue(key) == queue

    @given(queue=reachable_queues(), key=keys, first=st.integers(), second=st.integers())
    def test_duplicate_enqueue_first_write_wins(
        self,
        queue: KeyedQueue[str, int],
        key: str,
        first: int,
        second: int,
    ):
        """Test a second enqueue under the same key changes nothing."""
        once = queue.enqueue(key, first)

        assert once.enqueue(key, second) == once

    @given(queue=reachable_queues())
    def test_start_admits_oldest_first(self, queue: KeyedQueue[str, int]):
        """Test admitted items are the head of the backlog in order."""
        after, admitted = queue.start()
        expected = [lane.item for lane in queue.backlog[: queue.available_slots]]

        assert admitted == expected
        assert after.backlog == queue.backlog[len(admitted):]


class TestUnkeyedQueueProperties:
    """Properties of the unkeyed queue."""

    @given(
        pool_size=st.integers(min_value=1, max_value=5),
        items=st.lists(st.integers(), max_size=30),
    )
    def test_every_item_emitted_once_in_order(self, pool_size: int, items: list[int]):
        """Test repeated starts emit every item, in order, in bounded batches."""
        queue = UnkeyedQueue.empty(pool_size).enqueue_many(items)
        emitted: list[int] = []

        while True:
            queue, batch = queue.start()
            if not batch:
                break
            assert len(batch) <= pool_size
            emitted.extend(batch)

        assert emitted == items
        assert queue.backlog == ()
