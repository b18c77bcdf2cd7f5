"""
Store operations. Every note/task query is filtered by the owning account,
so a record that belongs to someone else behaves exactly like a missing one.
"""
from typing import List, Optional

from sqlalchemy import or_

from notes_tasks_database.models import Note, Task, User, utcnow


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# ids are signed 64-bit in the store; anything wider cannot exist
MAX_ID = 2**63 - 1


def _valid_id(record_id: int) -> bool:
    return -MAX_ID - 1 <= record_id <= MAX_ID


def _owned(db, model, user_id: int):
    return db.query(model).filter(model.user_id == user_id)


def _newest_first(query, model):
    return query.order_by(model.updated_at.desc(), model.id.desc())


# User helpers
def get_user_by_email(db, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()

def get_user(db, user_id: int) -> Optional[User]:
    if not _valid_id(user_id):
        return None
    return db.query(User).filter(User.id == user_id).first()

def create_user(db, name: str, email: str, password_hash: str) -> User:
    """Inserts an account. The unique constraint on email is left to the caller to handle."""
    user = User(name=name, email=email, password_hash=password_hash, created_at=utcnow())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# Note helpers
def list_notes(db, user_id: int, q: Optional[str] = None) -> List[Note]:
    query = _owned(db, Note, user_id)
    if q:
        search = f"%{_escape_like(q)}%"
        query = query.filter(or_(Note.title.ilike(search, escape="\\"), Note.content.ilike(search, escape="\\")))
    return _newest_first(query, Note).all()

def get_note(db, user_id: int, note_id: int) -> Optional[Note]:
    if not _valid_id(note_id):
        return None
    return _owned(db, Note, user_id).filter(Note.id == note_id).first()

def create_note(db, user_id: int, title: str, content: str) -> Note:
    now = utcnow()
    note = Note(user_id=user_id, title=title, content=content, created_at=now, updated_at=now)
    db.add(note)
    db.commit()
    db.refresh(note)
    return note

def update_note(db, note: Note, title: Optional[str] = None, content: Optional[str] = None) -> Note:
    """Applies the supplied fields; None leaves a field as it was."""
    if title is not None:
        note.title = title
    if content is not None:
        note.content = content
    note.updated_at = max(utcnow(), note.updated_at)
    db.commit()
    db.refresh(note)
    return note

def delete_note(db, user_id: int, note_id: int) -> bool:
    if not _valid_id(note_id):
        return False
    deleted = _owned(db, Note, user_id).filter(Note.id == note_id).delete(synchronize_session=False)
    db.commit()
    return deleted > 0


# Task helpers
def list_tasks(db, user_id: int, q: Optional[str] = None) -> List[Task]:
    query = _owned(db, Task, user_id)
    if q:
        query = query.filter(Task.title.ilike(f"%{_escape_like(q)}%", escape="\\"))
    return _newest_first(query, Task).all()

def get_task(db, user_id: int, task_id: int) -> Optional[Task]:
    if not _valid_id(task_id):
        return None
    return _owned(db, Task, user_id).filter(Task.id == task_id).first()

def create_task(db, user_id: int, title: str) -> Task:
    now = utcnow()
    task = Task(user_id=user_id, title=title, completed=False, created_at=now, updated_at=now)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task

def update_task(db, task: Task, title: Optional[str] = None, completed: Optional[bool] = None) -> Task:
    """Applies the supplied fields; None leaves a field as it was."""
    if title is not None:
        task.title = title
    if completed is not None:
        task.completed = completed
    task.updated_at = max(utcnow(), task.updated_at)
    db.commit()
    db.refresh(task)
    return task

def delete_task(db, user_id: int, task_id: int) -> bool:
    if not _valid_id(task_id):
        return False
    deleted = _owned(db, Task, user_id).filter(Task.id == task_id).delete(synchronize_session=False)
    db.commit()
    return deleted > 0
