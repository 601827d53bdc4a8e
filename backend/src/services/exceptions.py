"""Shared exceptions for service layer operations."""


class NotFoundError(Exception):
    """Raised when a record addressed by id does not exist."""

    def __init__(self, entity_name: str, entity_id: int | str) -> None:
        self.entity_name = entity_name
        self.entity_id = entity_id
        super().__init__(f"{entity_name} not found: {entity_id}")
