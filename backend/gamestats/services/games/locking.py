"""Optimistic locking for versioned records (games, characters, scripts).

The version check itself is done by the database: every versioned model maps
its ``version`` column as SQLAlchemy's ``version_id_col``, so the flush issues
``UPDATE ... WHERE id = :id AND version = :loaded_version`` and bumps the
counter in the same statement. A writer that lost the race updates zero rows
and SQLAlchemy raises ``StaleDataError``, which is reported as ``StaleData``.

Nothing here retries; callers decide whether to reload and try again.
"""

from contextlib import contextmanager
from datetime import datetime, timezone

from flask import current_app
from sqlalchemy.orm.exc import StaleDataError

from gamestats.errors import ResourceNotFound, StaleData


@contextmanager
def optimistic_write(session, record_class, entity_id, expected_version, kind=None):
    """Load ``record_class`` ``entity_id`` for an update based on
    ``expected_version`` and commit the changes made inside the block.

    Raises ``ResourceNotFound`` if the record is gone and ``StaleData`` if it
    was changed since ``expected_version`` was read, either before the block
    runs or by a concurrent writer while it ran.
    """
    kind = kind or record_class.__name__.replace('Record', '')
    record = session.get(record_class, entity_id)
    if record is None:
        raise ResourceNotFound(kind, entity_id)
    if expected_version is None or record.version != expected_version:
        current_app.logger.info(
            f"[stale-write] {kind.lower()}={entity_id} expected={expected_version} stored={record.version}"
        )
        raise StaleData(kind, entity_id, expected_version)

    try:
        yield record
        # Collection-only edits leave the row clean; touching it makes the
        # flush emit the versioned UPDATE every time.
        record.updated_at = datetime.now(timezone.utc)
        session.commit()
    except StaleDataError as exc:
        session.rollback()
        current_app.logger.info(f"[stale-write] {kind.lower()}={entity_id} expected={expected_version} lost race")
        raise StaleData(kind, entity_id, expected_version) from exc
    except Exception:
        session.rollback()
        raise


def commit_or_rollback(session):
    """Commit ``session``; on failure roll it back and re-raise so the
    session can be used again."""
    try:
        session.commit()
    except Exception:
        session.rollback()
        raise
