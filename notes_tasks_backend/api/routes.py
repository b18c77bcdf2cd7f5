import logging
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.exc import IntegrityError

from . import crud
from .auth import (
    clear_auth_cookie,
    get_current_account_id,
    get_settings,
    hash_password,
    issue_token,
    set_auth_cookie,
    verify_password,
)
from .config import Settings
from .errors import Conflict, InvalidCredentials, NotFound, ValidationError
from .schemas import (
    AuthResponse,
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    OkResponse,
    SigninRequest,
    SignupRequest,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
    UserResponse,
    is_blank,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# DATABASE Dependency
def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def _start_session(response: Response, user_id: int, settings: Settings) -> str:
    token = issue_token(user_id, settings.secret_key, timedelta(days=settings.token_expire_days))
    set_auth_cookie(response, token, settings)
    return token


def _reject_blank(value: Optional[str], message: str):
    """For partial updates: an omitted field is fine, an empty one is not."""
    if value is not None and not value.strip():
        raise ValidationError(message)


@router.get("/health", summary="Health Check", tags=["General"])
def health_check():
    """Simple health check endpoint."""
    return {"status": "ok"}


#####################
# AUTH ENDPOINTS
#####################

# PUBLIC_INTERFACE
@router.post("/auth/signup", response_model=AuthResponse, status_code=201, summary="Register a new user", tags=["Authentication"])
def signup(
    response: Response,
    payload: Optional[SignupRequest] = None,
    db=Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Register a new account and sign it in.
    Returns the new profile (never the password hash) and sets the auth cookie.
    """
    payload = payload or SignupRequest()
    if is_blank(payload.name) or is_blank(payload.email) or is_blank(payload.password):
        raise ValidationError("name, email and password are required")
    email = payload.email.strip()
    if crud.get_user_by_email(db, email):
        raise Conflict("Email already in use")
    try:
        user = crud.create_user(db, payload.name.strip(), email, hash_password(payload.password))
    except IntegrityError:
        # lost a race with a concurrent signup for the same email
        db.rollback()
        raise Conflict("Email already in use")
    logger.info("Account %s created", user.id)
    token = _start_session(response, user.id, settings)
    return {"user": user, "token": token}

# PUBLIC_INTERFACE
@router.post("/auth/signin", response_model=AuthResponse, summary="Sign in with email and password", tags=["Authentication"])
def signin(
    response: Response,
    payload: Optional[SigninRequest] = None,
    db=Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Check credentials and set the auth cookie.
    Unknown email and wrong password produce the same error.
    """
    payload = payload or SigninRequest()
    if is_blank(payload.email) or not payload.password:
        raise ValidationError("email and password are required")
    user = crud.get_user_by_email(db, payload.email.strip())
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("Failed sign-in attempt")
        raise InvalidCredentials()
    logger.info("Account %s signed in", user.id)
    token = _start_session(response, user.id, settings)
    return {"user": user, "token": token}

# PUBLIC_INTERFACE
@router.post("/auth/signout", response_model=OkResponse, summary="Sign out", tags=["Authentication"])
def signout(response: Response):
    """Clears the auth cookie. Always succeeds."""
    clear_auth_cookie(response)
    return {"ok": True}

# PUBLIC_INTERFACE
@router.get("/me", response_model=UserResponse, summary="Get current user profile", tags=["Authentication"])
def get_profile(db=Depends(get_db), user_id: int = Depends(get_current_account_id)):
    """
    Get details about the current authed user.
    A valid token for an account that no longer exists yields 404.
    """
    user = crud.get_user(db, user_id)
    if not user:
        raise NotFound("User not found")
    return {"user": user}


#####################
# NOTES ENDPOINTS
#####################

# PUBLIC_INTERFACE
@router.get("/notes", response_model=NoteListResponse, summary="List all user notes", tags=["Notes"])
def list_notes(
    q: Optional[str] = Query(None, description="Search term for note title or content"),
    db=Depends(get_db),
    user_id: int = Depends(get_current_account_id),
):
    """
    Get all notes for the authenticated user, most recently updated first.
    """
    return {"notes": crud.list_notes(db, user_id, q)}

# PUBLIC_INTERFACE
@router.post("/notes", response_model=NoteResponse, status_code=201, summary="Create a new note", tags=["Notes"])
def create_note(
    payload: Optional[NoteCreate] = None,
    db=Depends(get_db),
    user_id: int = Depends(get_current_account_id),
):
    """
    Create a new note for the authenticated user.
    """
    payload = payload or NoteCreate()
    if is_blank(payload.title) or is_blank(payload.content):
        raise ValidationError("title and content are required")
    return {"note": crud.create_note(db, user_id, payload.title, payload.content)}

# PUBLIC_INTERFACE
@router.get("/notes/{note_id}", response_model=NoteResponse, summary="Get a single note", tags=["Notes"])
def get_note(note_id: int, db=Depends(get_db), user_id: int = Depends(get_current_account_id)):
    """
    Retrieve a single note belonging to the authenticated user.
    """
    note = crud.get_note(db, user_id, note_id)
    if not note:
        raise NotFound("Note not found")
    return {"note": note}

# PUBLIC_INTERFACE
@router.put("/notes/{note_id}", response_model=NoteResponse, summary="Update a note", tags=["Notes"])
def update_note(
    note_id: int,
    payload: Optional[NoteUpdate] = None,
    db=Depends(get_db),
    user_id: int = Depends(get_current_account_id),
):
    """
    Update a note belonging to the authenticated user.
    Fields left out of the body keep their current value.
    """
    payload = payload or NoteUpdate()
    note = crud.get_note(db, user_id, note_id)
    if not note:
        raise NotFound("Note not found")
    _reject_blank(payload.title, "title cannot be empty")
    _reject_blank(payload.content, "content cannot be empty")
    return {"note": crud.update_note(db, note, title=payload.title, content=payload.content)}

# PUBLIC_INTERFACE
@router.delete("/notes/{note_id}", response_model=OkResponse, summary="Delete a note", tags=["Notes"])
def delete_note(note_id: int, db=Depends(get_db), user_id: int = Depends(get_current_account_id)):
    """
    Delete a note belonging to the authenticated user.
    """
    if not crud.delete_note(db, user_id, note_id):
        raise NotFound("Note not found")
    return {"ok": True}


#####################
# TASKS ENDPOINTS
#####################

# PUBLIC_INTERFACE
@router.get("/tasks", response_model=TaskListResponse, summary="List all user tasks", tags=["Tasks"])
def list_tasks(
    q: Optional[str] = Query(None, description="Search term for task title"),
    db=Depends(get_db),
    user_id: int = Depends(get_current_account_id),
):
    """
    Get all tasks for the authenticated user, most recently updated first.
    """
    return {"tasks": crud.list_tasks(db, user_id, q)}

# PUBLIC_INTERFACE
@router.post("/tasks", response_model=TaskResponse, status_code=201, summary="Create a new task", tags=["Tasks"])
def create_task(
    payload: Optional[TaskCreate] = None,
    db=Depends(get_db),
    user_id: int = Depends(get_current_account_id),
):
    """
    Create a new, not yet completed task for the authenticated user.
    """
    payload = payload or TaskCreate()
    if is_blank(payload.title):
        raise ValidationError("title is required")
    return {"task": crud.create_task(db, user_id, payload.title)}

# PUBLIC_INTERFACE
@router.get("/tasks/{task_id}", response_model=TaskResponse, summary="Get a single task", tags=["Tasks"])
def get_task(task_id: int, db=Depends(get_db), user_id: int = Depends(get_current_account_id)):
    task = crud.get_task(db, user_id, task_id)
    if not task:
        raise NotFound("Task not found")
    return {"task": task}

# PUBLIC_INTERFACE
@router.put("/tasks/{task_id}", response_model=TaskResponse, summary="Update a task", tags=["Tasks"])
def update_task(
    task_id: int,
    payload: Optional[TaskUpdate] = None,
    db=Depends(get_db),
    user_id: int = Depends(get_current_account_id),
):
    """
    Update a task's title and/or completed flag.
    """
    payload = payload or TaskUpdate()
    task = crud.get_task(db, user_id, task_id)
    if not task:
        raise NotFound("Task not found")
    _reject_blank(payload.title, "title cannot be empty")
    return {"task": crud.update_task(db, task, title=payload.title, completed=payload.completed)}

# PUBLIC_INTERFACE
@router.delete("/tasks/{task_id}", response_model=OkResponse, summary="Delete a task", tags=["Tasks"])
def delete_task(task_id: int, db=Depends(get_db), user_id: int = Depends(get_current_account_id)):
    if not crud.delete_task(db, user_id, task_id):
        raise NotFound("Task not found")
    return {"ok": True}
