"""Result envelope shared by every server action.

An action is a plain function that either returns its payload or raises.
:func:`server_action` turns that into :class:`ActionOk` / :class:`ActionError`
so views and the JSON API never see a raw exception:

* ``pydantic.ValidationError``  -> ``validation`` (first message, verbatim)
* ``PermissionError``           -> ``forbidden``
* ``LookupError``               -> ``not_found``
* ``ValueError``                -> ``validation`` (business rule, e.g. duplicate)
* ``SQLAlchemyError``           -> ``failure`` (generic text, logged)
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Generic, Literal, TypeVar, Union

from blinker import Namespace
from flask import current_app, g, has_app_context, jsonify
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from extensions import db

log = logging.getLogger(__name__)

T = TypeVar("T")

ErrorKind = Literal["validation", "forbidden", "not_found", "failure"]

HTTP_STATUS: dict[str, int] = {
    "validation": 400,
    "forbidden": 403,
    "not_found": 404,
    "failure": 500,
}

_signals = Namespace()
path_revalidated = _signals.signal("path-revalidated")


def _jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, (list, tuple)):
        return [_jsonable(x) for x in data]
    return data


@dataclass
class ActionOk(Generic[T]):
    data: T
    success: Literal[True] = field(default=True, init=False)

    def to_dict(self) -> dict:
        return {"success": True, "data": _jsonable(self.data)}


@dataclass
class ActionError:
    error: str
    kind: ErrorKind = "failure"
    success: Literal[False] = field(default=False, init=False)

    @property
    def http_status(self) -> int:
        return HTTP_STATUS.get(self.kind, 500)

    def to_dict(self) -> dict:
        return {"success": False, "error": self.error}


ActionResult = Union[ActionOk[T], ActionError]


def first_error_message(ve: ValidationError) -> str:
    errs = ve.errors()
    if not errs:
        return "Invalid input"
    first = errs[0]
    if first.get("type") == "value_error":
        ctx_err = (first.get("ctx") or {}).get("error")
        if ctx_err is not None:
            return str(ctx_err)
    if first.get("type") == "missing" and first.get("loc"):
        label = str(first["loc"][-1]).replace("_", " ").capitalize()
        return f"{label} is required"
    return str(first.get("msg") or "Invalid input")


def revalidate_path(*paths: str) -> None:
    """Mark routes whose rendered data changed; surfaced as ``X-Revalidate``."""
    if not has_app_context():
        return
    pending = g.setdefault("revalidated_paths", [])
    app = current_app._get_current_object()
    for p in paths:
        if p not in pending:
            pending.append(p)
        path_revalidated.send(app, path=p)


def as_response(result: ActionResult, status: int = 200):
    if result.success:
        return jsonify(result.to_dict()), status
    return jsonify(result.to_dict()), result.http_status


def server_action(failure: str) -> Callable[[Callable[..., T]], Callable[..., ActionResult[T]]]:
    def decorator(fn: Callable[..., T]) -> Callable[..., ActionResult[T]]:
        @wraps(fn)
        def wrapper(*args, **kwargs) -> ActionResult[T]:
            try:
                return ActionOk(fn(*args, **kwargs))
            except ValidationError as ve:
                db.session.rollback()
                return ActionError(first_error_message(ve), "validation")
            except PermissionError as pe:
                db.session.rollback()
                return ActionError(str(pe) or "Forbidden", "forbidden")
            except LookupError as le:
                db.session.rollback()
                return ActionError(str(le.args[0]) if le.args else "Not found", "not_found")
            except ValueError as ve:
                db.session.rollback()
                return ActionError(str(ve), "validation")
            except SQLAlchemyError:
                db.session.rollback()
                log.exception("action %s failed", fn.__name__)
                return ActionError(failure, "failure")
        wrapper.failure_message = failure  # type: ignore[attr-defined]
        return wrapper
    return decorator
