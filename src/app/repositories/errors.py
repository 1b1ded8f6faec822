class ConcurrencyConflictError(Exception):
    """Raised when a conditional update finds the row changed or gone."""

    def __init__(self, entity: str, key: str, expected_version: int):
        self.entity = entity
        self.key = key
        self.expected_version = expected_version
        super().__init__(
            f"{entity} {key} was modified concurrently (expected version {expected_version})"
        )
