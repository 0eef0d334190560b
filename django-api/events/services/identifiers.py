from typing import Protocol, TypeVar

from events.domain.errors import InvalidIdentifierError


class _ParsableId(Protocol):
    @classmethod
    def from_string(cls, value: str): ...


IdT = TypeVar("IdT", bound=_ParsableId)


def parse_id(id_type: type[IdT], value: str, field: str) -> IdT:
    """Parse a raw identifier, mapping malformed input to InvalidIdentifierError."""
    try:
        return id_type.from_string(str(value))
    except (TypeError, ValueError):
        raise InvalidIdentifierError(field) from None
