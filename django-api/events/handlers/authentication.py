"""Actor identification for API requests.

Authentication proper happens upstream; requests arrive with the caller's
user id in the ``X-User-Id`` header and the role is read from the user store.
"""

from dataclasses import dataclass

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication
from rest_framework.request import Request

from events.domain import Role, UserId
from events.stores import DjangoUserStore

ACTOR_HEADER = "X-User-Id"


@dataclass(frozen=True)
class Actor:
    """The authenticated caller: identity plus role."""

    user_id: UserId
    role: Role

    @property
    def is_authenticated(self) -> bool:
        return True


class ActorHeaderAuthentication(BaseAuthentication):
    def authenticate(self, request: Request) -> tuple[Actor, None] | None:
        raw = request.headers.get(ACTOR_HEADER)
        if not raw:
            return None
        try:
            user_id = UserId.from_string(raw)
        except ValueError:
            raise exceptions.AuthenticationFailed("Invalid actor identifier") from None
        user = DjangoUserStore().get_user(user_id)
        if user is None:
            raise exceptions.AuthenticationFailed("Unknown actor")
        return Actor(user_id=user.id, role=user.role), None

    def authenticate_header(self, request: Request) -> str:
        return ACTOR_HEADER
