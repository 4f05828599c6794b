class StaffplanError(Exception):
    """Base class for errors raised by staffplan."""

    pass


class NotFoundError(StaffplanError, LookupError):
    """Raised when a referenced plan, run, campaign, template or skill set is missing."""

    def __init__(self, entity: str, key: object = None) -> None:
        self.entity = entity
        self.key = key
        msg = f"{entity} not found." if key is None else f"{entity} not found: {key!r}."
        super().__init__(msg)
