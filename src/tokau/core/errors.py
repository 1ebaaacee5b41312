"""Error types for token space operations.

There is one real failure mode: a value outside the range it was checked
against. Everything else that "does not match" is reported as None by the
partial lookups, not raised.
"""


class TokauError(ValueError):
    """Base class for all token space errors."""


class OutOfRange(TokauError):
    """A token ID or local value fell outside [0, max)."""

    def __init__(self, value: int, max: int):
        self.value = value
        self.max = max
        super().__init__(f"Token ID {value} is out of valid range [0, {max})")

    def __eq__(self, other):
        if not isinstance(other, OutOfRange):
            return NotImplemented
        return (self.value, self.max) == (other.value, other.max)

    def __hash__(self):
        return hash((OutOfRange, self.value, self.max))

    def __repr__(self) -> str:
        return f"OutOfRange(value={self.value}, max={self.max})"


class KindNotInSpace(TokauError, LookupError):
    """The requested token kind is not part of the space's layout."""

    def __init__(self, kind, space_name: str):
        self.kind = kind
        self.space_name = space_name
        name = getattr(kind, "__name__", repr(kind))
        super().__init__(f"{name} is not part of token space {space_name!r}")
