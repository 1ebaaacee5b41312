"""Token kinds: the leaf building blocks of a token space.

Two flavours:

    NameToken   an IntEnum whose members are individually named tokens
                (control markers, keywords, operators). Members are numbered
                0..COUNT-1; auto() numbers them in declaration order.
    RangeToken  a contiguous block of COUNT anonymous positions (a text or
                audio sub-vocabulary). The identity is the local offset.

A kind only knows its own local numbering. Where it lands in the flat ID
space is decided by the TokenSpace it is composed into.
"""
from __future__ import annotations

import operator
import types
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Iterable

from .errors import OutOfRange


class NameToken(IntEnum):
    """Base class for named token kinds.

    Subclass it like any enum:

        class GingerToken(NameToken):
            TEXT_START = auto()
            TEXT_END = auto()

    Members still compare equal to plain ints, but members of two different
    kinds never compare equal to each other.
    """

    @staticmethod
    def _generate_next_value_(name, start, count, last_values):
        return count

    # Members of different kinds never compare equal, even with the same
    # local value. Equality with plain ints is kept, so hashes stay int hashes.
    def __eq__(self, other):
        if isinstance(other, NameToken) and type(other) is not type(self):
            return False
        return int.__eq__(self, other)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return int.__hash__(self)

    @classmethod
    def count(cls) -> int:
        """Number of local positions (COUNT)."""
        return len(cls)

    @classmethod
    def to_local(cls, value) -> int:
        """Local value of a member (or of an int naming one)."""
        if isinstance(value, cls):
            return int(value)
        if isinstance(value, NameToken):
            raise TypeError(f"{value!r} is not a {cls.__name__} token")
        return int(cls.from_local(operator.index(value)))

    @classmethod
    def from_local(cls, local: int) -> NameToken:
        """Member for a local value; OutOfRange if local >= COUNT."""
        count = cls.count()
        if not 0 <= local < count:
            raise OutOfRange(local, count)
        return cls(local)

    @property
    def local(self) -> int:
        return int(self)

    def inside(self, space) -> int:
        """Global position of this token in the given space."""
        return space.position_of(self)


@dataclass(frozen=True)
class RangeToken:
    """Base class for range token kinds.

    COUNT is given as a class keyword:

        class TextTokens(RangeToken, count=1000):
            pass

    Instances wrap a local offset and are validated on construction.
    """

    offset: int

    COUNT: ClassVar[int] = 0

    def __init_subclass__(cls, count: int | None = None, **kwargs):
        super().__init_subclass__(**kwargs)
        if count is not None:
            if count < 0:
                raise ValueError(f"Range token count must be >= 0, got {count}")
            cls.COUNT = count

    def __post_init__(self) -> None:
        offset = operator.index(self.offset)
        if not 0 <= offset < self.COUNT:
            raise OutOfRange(offset, self.COUNT)
        object.__setattr__(self, "offset", offset)

    @classmethod
    def count(cls) -> int:
        return cls.COUNT

    @classmethod
    def to_local(cls, value) -> int:
        if isinstance(value, cls):
            return value.offset
        if isinstance(value, (RangeToken, NameToken)):
            raise TypeError(f"{value!r} is not a {cls.__name__} token")
        return cls(value).offset

    @classmethod
    def from_local(cls, local: int) -> RangeToken:
        return cls(local)

    @classmethod
    def inside(cls, space, offset: int) -> int | None:
        """Global position of a local offset in the given space.

        Returns None when the offset falls outside this kind's COUNT.
        """
        if not 0 <= offset < cls.COUNT:
            return None
        return space.offset_of(cls) + offset

    @property
    def value(self) -> int:
        return self.offset

    @property
    def local(self) -> int:
        return self.offset


def is_token_kind(obj) -> bool:
    """True for NameToken/RangeToken subclasses (not the bases themselves)."""
    if not isinstance(obj, type):
        return False
    if issubclass(obj, NameToken):
        return obj is not NameToken
    if issubclass(obj, RangeToken):
        return obj is not RangeToken
    return False


def kind_count(kind) -> int:
    """COUNT of a token kind."""
    check_kind(kind)
    return kind.count()


def check_kind(kind) -> None:
    """Validate a kind at definition time.

    Named kinds must number their members exactly 0..COUNT-1.
    """
    if not is_token_kind(kind):
        raise ValueError(f"Not a token kind: {kind!r}")
    if issubclass(kind, NameToken):
        values = sorted(int(m) for m in kind)
        if values != list(range(len(values))):
            raise ValueError(
                f"{kind.__name__} values must be 0-{len(values) - 1}, got {values}"
            )


def define_names(name: str, names: Iterable[str] | str,
                 module: str | None = None) -> type[NameToken]:
    """Declare a named kind from an ordered list of member names."""
    if isinstance(names, str):
        names = names.replace(",", " ").split()
    names = list(names)
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate member names in {name}: {names}")
    return NameToken(name, names, module=module or __name__)


def define_range(name: str, count: int,
                 module: str | None = None) -> type[RangeToken]:
    """Declare a range kind with the given COUNT."""
    kind = types.new_class(name, (RangeToken,), {"count": count})
    kind.__module__ = module or __name__
    return kind
