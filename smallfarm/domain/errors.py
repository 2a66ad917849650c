class NotFoundError(LookupError):
    """Raised when a referenced record does not exist or is not visible to the caller."""

    def __init__(self, resource: str, record_id: str):
        self.resource = resource
        self.record_id = record_id
        super().__init__(f"{resource} not found")
