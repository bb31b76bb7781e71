"""Error types shared by the repository, the codec and the HTTP layer.

Each class carries the HTTP status the API answers with, so route handlers
never have to inspect messages to pick a status code.
"""


class ScorebookError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ScorebookError):
    """Malformed submission: bad id, mismatched player/score lists, bad date."""
    status_code = 400


class GameNotFound(ScorebookError):
    """Unknown game id, or a game that belongs to another variant."""
    status_code = 404

    def __init__(self, game_id: int, variant=None):
        scope = f" for variant '{variant.value}'" if variant is not None else ''
        super().__init__(f"Game {game_id} not found{scope}")
        self.game_id = game_id
        self.variant = variant


class UnknownVariant(ScorebookError):
    status_code = 404

    def __init__(self, name: str):
        super().__init__(f"Unknown game '{name}'")
        self.name = name


class StoreError(ScorebookError):
    """The store rejected or failed an operation; its transaction was rolled back."""


class DataIntegrityError(ScorebookError):
    """A stored row could not be read back, e.g. an unparseable date."""


class SchemaError(ScorebookError):
    """The database schema could not be created or is missing columns."""
