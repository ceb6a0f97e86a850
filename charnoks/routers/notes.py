# charnoks/routers/notes.py

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from charnoks.database import get_db
from charnoks.core.auth import get_current_user
from charnoks.models.notes import Note
from charnoks.schemas.note import NoteCreate, NoteResponse

router = APIRouter(prefix="/notes", tags=["Notes"])

logger = logging.getLogger(__name__)


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def add_note(
    note_data: NoteCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    note = Note(
        category=note_data.category,
        title=note_data.title,
        description=note_data.description,
        amount=note_data.amount,
        author_id=current_user.id,
    )

    db.add(note)
    db.commit()
    db.refresh(note)

    logger.info("Note %s (%s) added by %s", note.id, note.category, current_user.id)
    return note


# Shop notes are shared: every signed-in user sees all of them
@router.get("", response_model=list[NoteResponse])
def list_notes(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
    category: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    query = db.query(Note)

    if category:
        query = query.filter(Note.category == category)

    return (
        query
        .order_by(Note.created_at.desc(), Note.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )
