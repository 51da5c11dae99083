class EntityError(Exception):
    """Base exception for entity store errors."""


class EntityNotFoundError(EntityError):
    """Raised when an id does not resolve to a stored record."""

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} not found: {entity_id}")
