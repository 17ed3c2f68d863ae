"""Named counters backing human-readable references.

The short order id printed on courier paperwork is ``1000 + seq`` of the
``order`` sequence. The offset keeps new references clear of the low
numbers already in circulation.
"""

import threading

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from shipping.domain import shipping

logger = structlog.get_logger(__name__)

ORDER_SEQUENCE = "order"
SHORT_ID_OFFSET = 1000
MAX_INCREMENT_ATTEMPTS = 5

_increment_lock = threading.Lock()


@shipping.aggregate
class Sequence:
    name = String(identifier=True, required=True, max_length=50)
    seq = Integer(default=0, min_value=0)

    def advance(self) -> int:
        self.seq = (self.seq or 0) + 1
        return self.seq


class SequenceContentionError(Exception):
    """The counter kept changing underneath us; no value was handed out."""


def next_value(name: str) -> int:
    """Atomically increment the named sequence and return the new value.

    Increments are serialized inside the process and protected across
    processes by the aggregate's optimistic version check: a conflicting
    write is retried from a fresh read.
    """
    repo = current_domain.repository_for(Sequence)
    with _increment_lock:
        for attempt in range(1, MAX_INCREMENT_ATTEMPTS + 1):
            try:
                sequence = repo.get(name)
            except ObjectNotFoundError:
                sequence = Sequence(name=name, seq=0)

            value = sequence.advance()
            try:
                repo.add(sequence)
            except ExpectedVersionError:
                logger.warning("Sequence changed concurrently, retrying", sequence=name, attempt=attempt)
                continue
            return value

    raise SequenceContentionError(f"Could not increment sequence {name!r} after {MAX_INCREMENT_ATTEMPTS} attempts")


def next_short_order_id() -> int:
    return SHORT_ID_OFFSET + next_value(ORDER_SEQUENCE)
