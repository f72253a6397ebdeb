from typing import Iterable, List, Optional

from flask import current_app

from gamestats import db
from gamestats.errors import RelatedResourceNotFound, ResourceNotFound, ValidationFailure
from gamestats.models import CharacterRecord, ParticipationRecord, ScriptRecord
from gamestats.services.games.entities import Character, CharacterCreationRequest
from gamestats.services.games.locking import commit_or_rollback, optimistic_write
from gamestats.services.mapping import character_to_domain


def resolve_character(session, character: Optional[Character]) -> Optional[CharacterRecord]:
    """Look up the stored record for a referenced character."""
    if character is None:
        return None
    record = session.get(CharacterRecord, character.id) if character.id is not None else None
    if record is None:
        raise RelatedResourceNotFound(
            f'Character with id {character.id} does not exist', {'kind': 'Character', 'id': character.id}
        )
    return record


class CharacterService:
    """Catalog of characters known to the application."""

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def create_character(self, request: CharacterCreationRequest) -> Character:
        record = self._record_from_request(request)
        self.session.add(record)
        commit_or_rollback(self.session)
        current_app.logger.info(f"[character-create] character={record.id} name={record.name}")
        return character_to_domain(record)

    def create_characters(self, requests: Iterable[CharacterCreationRequest]) -> List[Character]:
        """Create all characters in one transaction; none are stored if any fails."""
        records = [self._record_from_request(r) for r in requests]
        try:
            self.session.add_all(records)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        current_app.logger.info(f"[character-create] count={len(records)}")
        return [character_to_domain(r) for r in records]

    def get_character(self, character_id) -> Optional[Character]:
        return character_to_domain(self.session.get(CharacterRecord, character_id))

    def get_all_characters(self) -> List[Character]:
        records = self.session.query(CharacterRecord).order_by(CharacterRecord.id).all()
        return [character_to_domain(r) for r in records]

    def get_characters_by_ids(self, ids) -> List[Character]:
        wanted = list(ids)
        records = self.session.query(CharacterRecord).filter(CharacterRecord.id.in_(wanted)).all()
        found = {r.id: r for r in records}
        missing = [i for i in wanted if i not in found]
        if missing:
            raise ResourceNotFound('Character', missing[0])
        return [character_to_domain(found[i]) for i in wanted]

    def update_character(self, character: Character) -> Character:
        with optimistic_write(self.session, CharacterRecord, character.id, character.version) as record:
            record.name = character.name
            record.character_type = character.character_type
            record.script_tool_identifier = character.script_tool_identifier
            record.wiki_page = character.wiki_page
            record.image_url = character.image_url
        current_app.logger.info(f"[character-update] character={record.id} version={record.version}")
        return character_to_domain(record)

    def delete_character(self, character_id) -> None:
        """Remove a character, take it out of every script and clear it from
        recorded games. Unknown ids are ignored."""
        self.delete_characters([character_id])

    def delete_characters(self, ids) -> None:
        records = [r for r in (self.session.get(CharacterRecord, i) for i in ids) if r is not None]
        if not records:
            return
        deleted_ids = [r.id for r in records]
        scripts = (
            self.session.query(ScriptRecord)
            .join(ScriptRecord.characters)
            .filter(CharacterRecord.id.in_(deleted_ids))
            .distinct()
            .all()
        )
        for script in scripts:
            if all(c.id in deleted_ids for c in script.characters):
                raise ValidationFailure(
                    'characters',
                    f'Deleting would leave script "{script.name}" without characters',
                    {'script_id': script.id},
                )
        try:
            for script in scripts:
                script.characters = [c for c in script.characters if c.id not in deleted_ids]
            for column in (ParticipationRecord.initial_character_id, ParticipationRecord.end_character_id):
                self.session.query(ParticipationRecord).filter(column.in_(deleted_ids)).update(
                    {column: None}, synchronize_session='fetch'
                )
            for record in records:
                self.session.delete(record)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        current_app.logger.info(f"[character-delete] ids={deleted_ids} scripts={[s.id for s in scripts]}")

    @staticmethod
    def _record_from_request(request: CharacterCreationRequest) -> CharacterRecord:
        return CharacterRecord(
            name=request.name,
            character_type=request.character_type,
            script_tool_identifier=request.script_tool_identifier,
            wiki_page=request.wiki_page,
            image_url=request.image_url,
        )
