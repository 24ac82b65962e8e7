"""Error taxonomy for the import flow and the draft save workflow"""


class DraftPipelineError(Exception):
    """Base class for every error surfaced to the editing UI."""


class ReadError(DraftPipelineError):
    """The import file could not be read or decoded as UTF-8 text."""


class ParseError(DraftPipelineError):
    """Detection, conversion or extraction raised while importing a file."""


class ValidationError(DraftPipelineError):
    """One or more required fields are missing. `fields` maps field name -> message."""

    def __init__(self, fields: dict[str, str]):
        self.fields = dict(fields)
        super().__init__("Please fix validation errors: " + ", ".join(sorted(self.fields)))


class PersistenceError(DraftPipelineError):
    """A call to the persistence collaborator failed."""

    def __init__(self, operation: str, cause: Exception = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to {operation}{detail}")
