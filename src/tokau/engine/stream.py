"""Stream operators over sequences of raw token IDs.

All operators are lazy generators and preserve input order. Filters drop
non-matching IDs silently; only classify() reports per-element failures,
and only decode_all()/after_reserved() raise.

    ids = [0, 5, 6, 1010, 1200]
    list(filter_kind(ids, space, MaoToken))   -> [ProgramStart, ProgramEnd]
    list(remainders(ids, space))              -> [0, 190]
"""
from __future__ import annotations

from collections import Counter
from typing import Iterable, Iterator, NamedTuple

from ..core.errors import KindNotInSpace, OutOfRange
from ..core.space import DYNAMIC, SpaceToken, TokenSpace


class Classified(NamedTuple):
    """One classify() result: the input ID and either a token or an error."""
    id: int
    token: SpaceToken | None
    error: OutOfRange | None

    @property
    def ok(self) -> bool:
        return self.error is None


def classify(ids: Iterable[int], space: TokenSpace) -> Iterator[Classified]:
    """Decode every ID, yielding a Classified per input (none omitted)."""
    for token_id in ids:
        try:
            yield Classified(token_id, space.decode(token_id), None)
        except OutOfRange as exc:
            yield Classified(token_id, None, exc)


def decode_all(ids: Iterable[int], space: TokenSpace) -> Iterator[SpaceToken]:
    """Decode every ID; raises OutOfRange at the first undecodable one."""
    for token_id in ids:
        yield space.decode(token_id)


def _require_kind(space: TokenSpace, kind) -> None:
    if not space.has_kind(kind):
        raise KindNotInSpace(kind, space.name)


def filter_kind(ids: Iterable[int], space: TokenSpace, kind) -> Iterator:
    """Typed values of the IDs that belong to kind, in order.

    kind may be DYNAMIC, in which case the tail offsets are yielded.
    Raises KindNotInSpace immediately if kind is not part of the space.
    """
    _require_kind(space, kind)
    return _filter_kind(ids, space, kind)


def _filter_kind(ids, space, kind):
    for token_id in ids:
        value = space.try_as(kind, token_id)
        if value is not None:
            yield value


def select(ids: Iterable[int], space: TokenSpace, kind) -> Iterator[int]:
    """Raw IDs that belong to kind, in order. Idempotent."""
    _require_kind(space, kind)
    return _select(ids, space, kind)


def _select(ids, space, kind):
    for token_id in ids:
        if space.try_as(kind, token_id) is not None:
            yield token_id


def tails(ids: Iterable[int], space: TokenSpace) -> Iterator[int]:
    """Raw IDs that land in the dynamic tail."""
    return select(ids, space, DYNAMIC)


def remainders(ids: Iterable[int], space: TokenSpace) -> Iterator[int]:
    """id - RESERVED for each ID past the static range."""
    for token_id in ids:
        offset = space.remainder(token_id)
        if offset is not None:
            yield offset


def after_reserved(ids: Iterable[int], space: TokenSpace) -> Iterator[int]:
    """id + RESERVED for each input, staging offsets into the dynamic range."""
    for offset in ids:
        yield space.after_reserved(offset)


def encode_all(values: Iterable, space: TokenSpace) -> Iterator[int]:
    """Global positions of typed values (or SpaceTokens)."""
    for value in values:
        yield space.encode(value)


def count_kinds(ids: Iterable[int], space: TokenSpace) -> Counter:
    """Histogram of decoded kinds; failures are counted under OutOfRange."""
    counts = Counter()
    for item in classify(ids, space):
        counts[item.token.kind if item.ok else OutOfRange] += 1
    return counts
