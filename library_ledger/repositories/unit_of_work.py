from functools import wraps

from flask import current_app
from sqlalchemy.exc import OperationalError

from library_ledger.extensions import db
from library_ledger.utils.result import ErrorKind, Result


class UnitOfWork:
    """
    Explicit transaction scope over ``db.session``.

    Commits on a clean exit. Rolls back when the block raises or when
    ``rollback_only()`` was called, e.g. after a step returned a failure.
    Nothing that ran inside the block survives a rollback.
    """

    def __init__(self):
        self.session = db.session
        self._rollback_only = False

    def rollback_only(self):
        self._rollback_only = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None or self._rollback_only:
            self.session.rollback()
            return False
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return False


def storage_failure(tag: str, op: str, err: Exception) -> Result:
    db.session.rollback()
    current_app.logger.warning(f"[{tag}] {op} failed, store unavailable: {err}")
    return Result.fail(ErrorKind.STORAGE_UNAVAILABLE, "Storage is temporarily unavailable")


def storage_guarded(tag: str):
    """Turn an OperationalError from the store into a STORAGE_UNAVAILABLE result."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except OperationalError as e:
                return storage_failure(tag, fn.__name__, e)
        return wrapper
    return decorator
