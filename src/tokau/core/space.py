"""Token spaces: composing token kinds into one flat integer ID space.

A space is an ordered list of kinds. Each kind gets a disjoint sub-range
starting at the sum of the counts before it:

    kinds:    GingerToken(5)  MaoToken(4)  TextTokens(1000)  [dynamic]
    offsets:  0               5            9                 1009..

RESERVED is the total of the static counts. An optional dynamic tail takes
every ID from RESERVED up to the ID width (2**32 by default), or up to a
fixed dynamic_size when the tail is bounded.

Decoding tests an ID against each kind in layout order and returns a
SpaceToken tagged with the matching kind. Encoding is OFFSET + local.
"""
from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .errors import KindNotInSpace, OutOfRange
from .token import check_kind

logger = logging.getLogger(__name__)

DEFAULT_ID_BITS = 32


class Tail(Enum):
    DYNAMIC = "dynamic"

    def __repr__(self) -> str:
        return self.name


# Kind tag for values decoded from the dynamic tail
DYNAMIC = Tail.DYNAMIC


@dataclass(frozen=True)
class SpaceToken:
    """A decoded token: the kind it belongs to and its typed value.

    kind is the token kind class, or DYNAMIC for the dynamic tail.
    value is a NameToken member, a RangeToken instance, or (for DYNAMIC)
    the int offset past RESERVED.
    """
    kind: Any
    value: Any

    @property
    def is_dynamic(self) -> bool:
        return self.kind is DYNAMIC

    def __repr__(self) -> str:
        name = getattr(self.kind, "__name__", repr(self.kind))
        return f"SpaceToken({name}, {self.value!r})"


@dataclass(frozen=True)
class TokenSpace:
    """An immutable layout of token kinds over the flat ID space."""
    name: str
    kinds: tuple
    dynamic: bool = False
    dynamic_size: int | None = None
    id_bits: int = DEFAULT_ID_BITS

    offsets: Mapping[type, int] = field(init=False, repr=False, compare=False)
    reserved: int = field(init=False)

    def __post_init__(self) -> None:
        kinds = tuple(self.kinds)
        object.__setattr__(self, "kinds", kinds)

        if self.id_bits <= 0:
            raise ValueError(f"id_bits must be positive, got {self.id_bits}")
        if self.dynamic_size is not None:
            if not self.dynamic:
                raise ValueError("dynamic_size requires a dynamic tail")
            if self.dynamic_size < 0:
                raise ValueError(
                    f"dynamic_size must be >= 0, got {self.dynamic_size}")

        # Single prefix sum over the ordered kinds
        offsets = {}
        total = 0
        for kind in kinds:
            check_kind(kind)
            if kind in offsets:
                raise ValueError(
                    f"{kind.__name__} appears more than once in token space "
                    f"{self.name!r}")
            offsets[kind] = total
            total += kind.count()

        limit = self.id_limit
        if total + (self.dynamic_size or 0) > limit:
            raise ValueError(
                f"Token space {self.name!r} needs {total + (self.dynamic_size or 0)} "
                f"IDs but only {limit} fit in {self.id_bits} bits")

        object.__setattr__(self, "offsets", MappingProxyType(offsets))
        object.__setattr__(self, "reserved", total)
        logger.debug("Defined token space %r: reserved=%d dynamic=%s offsets=%s",
                     self.name, total, self.dynamic,
                     {k.__name__: v for k, v in offsets.items()})

    def __reduce__(self):
        # offsets is a mappingproxy and cannot be pickled; __post_init__ rebuilds it
        return (TokenSpace, (self.name, self.kinds, self.dynamic,
                             self.dynamic_size, self.id_bits))

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    @property
    def id_limit(self) -> int:
        """Exclusive upper bound imposed by the ID width."""
        return 1 << self.id_bits

    @property
    def capacity(self) -> int | None:
        """Number of decodable IDs, or None for an unbounded dynamic tail."""
        if not self.dynamic:
            return self.reserved
        if self.dynamic_size is None:
            return None
        return self.reserved + self.dynamic_size

    @property
    def _upper(self) -> int:
        capacity = self.capacity
        return self.id_limit if capacity is None else capacity

    def has_kind(self, kind) -> bool:
        if kind is DYNAMIC:
            return self.dynamic
        return kind in self.offsets

    def offset_of(self, kind) -> int:
        """Base position of a kind in this space."""
        if kind is DYNAMIC and self.dynamic:
            return self.reserved
        try:
            return self.offsets[kind]
        except (KeyError, TypeError):
            raise KindNotInSpace(kind, self.name) from None

    def span_of(self, kind) -> range:
        """Sub-range of IDs owned by a kind."""
        start = self.offset_of(kind)
        if kind is DYNAMIC:
            return range(start, self._upper)
        return range(start, start + kind.count())

    def is_reserved(self, token_id: int) -> bool:
        """True if the ID falls in the static part of the space."""
        return 0 <= token_id < self.reserved

    def describe(self) -> list[dict]:
        """Layout table, one row per kind (plus the tail if present)."""
        rows = []
        for kind in self.kinds:
            start = self.offsets[kind]
            rows.append({
                "kind": kind.__name__,
                "offset": start,
                "count": kind.count(),
                "end": start + kind.count(),
            })
        if self.dynamic:
            rows.append({
                "kind": DYNAMIC.name,
                "offset": self.reserved,
                "count": self.dynamic_size,
                "end": self.capacity,
            })
        return rows

    # ------------------------------------------------------------------
    # Decode
    # ------------------------------------------------------------------

    def try_as(self, kind, token_id: int):
        """Typed value of token_id if it belongs to kind, else None."""
        token_id = operator.index(token_id)
        if kind is DYNAMIC:
            if not self.dynamic:
                raise KindNotInSpace(kind, self.name)
            return self._dynamic_local(token_id)
        start = self.offset_of(kind)
        if token_id < start:
            return None
        local = token_id - start
        if local >= kind.count():
            return None
        return kind.from_local(local)

    def remainder(self, token_id: int) -> int | None:
        """token_id - RESERVED for IDs past the static range, else None.

        Does not check a bounded tail's size.
        """
        token_id = operator.index(token_id)
        if token_id < self.reserved:
            return None
        return token_id - self.reserved

    def decode(self, token_id: int) -> SpaceToken:
        """Resolve a raw ID to a SpaceToken.

        Raises OutOfRange when no kind claims the ID and the dynamic tail
        (if any) cannot absorb it.
        """
        token_id = operator.index(token_id)
        if token_id < 0 or token_id >= self.id_limit:
            raise OutOfRange(token_id, self._upper)

        for kind in self.kinds:
            start = self.offsets[kind]
            if start <= token_id < start + kind.count():
                return SpaceToken(kind, kind.from_local(token_id - start))

        if self.dynamic:
            local = self._dynamic_local(token_id)
            if local is not None:
                return SpaceToken(DYNAMIC, local)
        raise OutOfRange(token_id, self._upper)

    def try_decode(self, token_id: int) -> SpaceToken | None:
        try:
            return self.decode(token_id)
        except OutOfRange:
            return None

    def _dynamic_local(self, token_id: int) -> int | None:
        if not self.reserved <= token_id < self._upper:
            return None
        return token_id - self.reserved

    # ------------------------------------------------------------------
    # Encode
    # ------------------------------------------------------------------

    def encode(self, value, kind=None) -> int:
        """Global position of a typed value.

        kind defaults to type(value). A SpaceToken carries its own kind.
        """
        if isinstance(value, SpaceToken):
            value, kind = value.value, value.kind
        if kind is DYNAMIC:
            return self.encode_dynamic(value)
        if kind is None:
            kind = type(value)
        return self.offset_of(kind) + kind.to_local(value)

    position_of = encode

    def encode_dynamic(self, offset: int) -> int:
        """RESERVED + offset, for spaces with a dynamic tail."""
        if not self.dynamic:
            raise KindNotInSpace(DYNAMIC, self.name)
        offset = operator.index(offset)
        if self.dynamic_size is not None and not 0 <= offset < self.dynamic_size:
            raise OutOfRange(offset, self.dynamic_size)
        return self.after_reserved(offset)

    def after_reserved(self, offset: int) -> int:
        """Shift a local offset past the static range.

        Works on any space; only the ID width is checked.
        """
        offset = operator.index(offset)
        room = self.id_limit - self.reserved
        if not 0 <= offset < room:
            raise OutOfRange(offset, room)
        return self.reserved + offset


def define_space(name: str, kinds: Iterable, *, dynamic: bool = False,
                 dynamic_size: int | None = None,
                 id_bits: int = DEFAULT_ID_BITS) -> TokenSpace:
    """Build a TokenSpace from an ordered list of kinds.

    Passing dynamic_size implies a (bounded) dynamic tail.
    """
    return TokenSpace(
        name=name,
        kinds=tuple(kinds),
        dynamic=dynamic or dynamic_size is not None,
        dynamic_size=dynamic_size,
        id_bits=id_bits,
    )


def default_space(kind, id_bits: int = DEFAULT_ID_BITS) -> TokenSpace:
    """A single kind at offset 0 followed by an unbounded dynamic tail."""
    return define_space(f"Default[{kind.__name__}]", [kind], dynamic=True,
                        id_bits=id_bits)
