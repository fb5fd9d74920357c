from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Callable

from flask import g, request

from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import Profile


@dataclass(frozen=True)
class Guards:
    token_required: Callable
    admin_required: Callable


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization token is missing")
    return token.strip()


def current_profile() -> Profile:
    return g.profile


def build_guards(container) -> Guards:
    """Route decorators bound to the container's AuthService.

    ``token_required`` stores the caller's Profile on ``flask.g.profile``.
    """

    def token_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.profile = container.auth_service.resolve_token(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        @token_required
        def wrapper(*args, **kwargs):
            if not g.profile.is_admin:
                raise AuthorizationError("Access denied")
            return view(*args, **kwargs)

        return wrapper

    return Guards(token_required=token_required, admin_required=admin_required)
