from typing import List, Optional

from flask import current_app

from gamestats import db
from gamestats.errors import RelatedResourceNotFound
from gamestats.models import CharacterRecord, GameRecord, ScriptRecord
from gamestats.services.games.entities import Script, ScriptCreationRequest
from gamestats.services.games.locking import commit_or_rollback, optimistic_write
from gamestats.services.mapping import script_to_domain


def resolve_script(session, script: Optional[Script]) -> ScriptRecord:
    record = session.get(ScriptRecord, script.id) if script is not None and script.id is not None else None
    if record is None:
        script_id = script.id if script is not None else None
        raise RelatedResourceNotFound(
            f'Script with id {script_id} does not exist', {'kind': 'Script', 'id': script_id}
        )
    return record


class ScriptService:
    """Scripts: named sets of characters a game can be played with."""

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def create_script(self, request: ScriptCreationRequest) -> Script:
        record = ScriptRecord(
            name=request.name,
            description=request.description,
            wiki_page=request.wiki_page,
            characters=self._load_characters(request.characters),
        )
        self.session.add(record)
        commit_or_rollback(self.session)
        current_app.logger.info(f"[script-create] script={record.id} characters={len(record.characters)}")
        return script_to_domain(record)

    def get_script(self, script_id) -> Optional[Script]:
        return script_to_domain(self.session.get(ScriptRecord, script_id))

    def get_all_scripts(self) -> List[Script]:
        records = self.session.query(ScriptRecord).order_by(ScriptRecord.id).all()
        return [script_to_domain(r) for r in records]

    def update_script(self, script: Script) -> Script:
        with optimistic_write(self.session, ScriptRecord, script.id, script.version) as record:
            record.name = script.name
            record.description = script.description
            record.wiki_page = script.wiki_page
            record.characters = self._load_characters(script.characters)
        current_app.logger.info(f"[script-update] script={record.id} version={record.version}")
        return script_to_domain(record)

    def delete_script(self, script_id) -> None:
        """Delete a script; games played with it keep their record without
        one. Unknown ids are ignored."""
        record = self.session.get(ScriptRecord, script_id)
        if record is None:
            return
        try:
            self.session.query(GameRecord).filter(GameRecord.script_id == script_id).update(
                {GameRecord.script_id: None}, synchronize_session='fetch'
            )
            self.session.delete(record)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        current_app.logger.info(f"[script-delete] script={script_id}")

    def _load_characters(self, characters) -> List[CharacterRecord]:
        ids = sorted(c.id for c in characters if c.id is not None)
        records = self.session.query(CharacterRecord).filter(CharacterRecord.id.in_(ids)).all() if ids else []
        if len(records) != len(characters):
            found = {r.id for r in records}
            missing = next((c.id for c in characters if c.id not in found), None)
            raise RelatedResourceNotFound(
                'At least one of the characters of the script does not exist',
                {'kind': 'Character', 'id': missing},
            )
        return records
