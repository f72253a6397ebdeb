"""Error taxonomy shared by the domain core, the services and the CLI.

Every error carries a short ``error_code``, an HTTP-ish ``status_code`` that an
API layer can hand to its client unchanged, and ``is_retryable`` so callers
can tell a stale write (fetch fresh data and try again) from a request that
will never succeed as sent.
"""

from typing import Any, Dict, Optional


class GameStatsError(Exception):
    status_code = 400
    is_retryable = False

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def error_code(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        return {
            'error': self.error_code,
            'message': self.message,
            'details': self.details,
            'retryable': self.is_retryable,
        }


class ValidationFailure(GameStatsError):
    """Client-correctable input problem tied to one field."""

    def __init__(self, field: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.field = field
        merged = {'field': field}
        merged.update(details or {})
        super().__init__(message, merged)


class MissingRequiredField(ValidationFailure):
    def __init__(self, field: str):
        super().__init__(field, f'Missing required field "{field}"')


class FieldTooLong(ValidationFailure):
    def __init__(self, field: str, max_length: int):
        super().__init__(
            field,
            f'Field "{field}" exceeds maximum length of {max_length} characters',
            {'max_length': max_length},
        )


class NullArgument(ValidationFailure):
    def __init__(self, field: str):
        super().__init__(field, f'Field "{field}" may not contain null values')


class DuplicateParticipant(ValidationFailure):
    def __init__(self, player_id):
        super().__init__(
            'participants',
            'The same player cannot participate multiple times in the same game',
            {'player_id': player_id},
        )


class DuplicateStoryteller(ValidationFailure):
    def __init__(self, player_id):
        super().__init__(
            'storytellers',
            'The same player cannot be a storyteller multiple times in the same game',
            {'player_id': player_id},
        )


class DuplicateWinner(ValidationFailure):
    def __init__(self, player_id):
        super().__init__(
            'winning_players',
            'The same player cannot win multiple times in the same game',
            {'player_id': player_id},
        )


class MissingWinnerSpecification(ValidationFailure):
    def __init__(self):
        super().__init__(
            'winning_alignment',
            'Either a winning alignment or a list of winning players must be given',
        )


class UnknownWinner(ValidationFailure):
    def __init__(self, player_id):
        super().__init__(
            'winning_players',
            'A player that did not participate cannot win the game',
            {'player_id': player_id},
        )


class RelatedResourceNotFound(GameStatsError):
    """A referenced script, character or player does not exist."""


class ResourceNotFound(GameStatsError):
    status_code = 404

    def __init__(self, kind: str, resource_id):
        super().__init__(
            f'{kind} with id {resource_id} does not exist',
            {'kind': kind, 'id': resource_id},
        )


class StaleData(GameStatsError):
    status_code = 409
    is_retryable = True

    def __init__(self, kind: str, resource_id, expected_version=None):
        super().__init__(
            f'{kind} {resource_id} has already been updated or deleted by another request',
            {'kind': kind, 'id': resource_id, 'expected_version': expected_version},
        )
