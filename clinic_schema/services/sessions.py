from __future__ import annotations
import asyncio, time, uuid
from typing import Any, Callable, Dict

from clinic_schema.form_models import FormState
from clinic_schema.services.variants import initial_state

# One FormState per editing session, kept in process memory.
_sessions: Dict[str, Dict[str, Any]] = {}
_lock = asyncio.Lock()

async def create_session(entity, arity, state: FormState | None = None) -> str:
    session_id = str(uuid.uuid4())
    async with _lock:
        _sessions[session_id] = {
            "state": state if state is not None else initial_state(entity, arity),
            "created": time.time(),
            "updated": time.time(),
        }
    return session_id

async def get_state(session_id: str) -> FormState | None:
    async with _lock:
        s = _sessions.get(session_id)
        return s["state"] if s else None

async def replace_state(session_id: str, state: FormState) -> bool:
    async with _lock:
        if session_id not in _sessions:
            return False
        _sessions[session_id]["state"] = state
        _sessions[session_id]["updated"] = time.time()
        return True

async def update_state(session_id: str, fn: Callable[[FormState], FormState]) -> FormState | None:
    """Apply `fn` to the session's current state and store the result, all under
    the lock. Returns None for an unknown session; errors raised by `fn` leave
    the stored state unchanged."""
    async with _lock:
        s = _sessions.get(session_id)
        if s is None:
            return None
        state = fn(s["state"])
        s["state"] = state
        s["updated"] = time.time()
        return state

async def reset_variant(session_id: str, entity, arity) -> FormState | None:
    """Switching either axis discards the form and starts from a new template."""
    state = initial_state(entity, arity)
    return state if await replace_state(session_id, state) else None

async def drop_session(session_id: str) -> bool:
    async with _lock:
        return _sessions.pop(session_id, None) is not None

async def session_count() -> int:
    async with _lock:
        return len(_sessions)
