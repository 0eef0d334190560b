from rest_framework.permissions import BasePermission

from events.domain import Role


class HasRole(BasePermission):
    """Allow only actors whose role is in ``roles``."""

    roles: frozenset[Role] = frozenset()

    def has_permission(self, request, view) -> bool:
        actor = request.user
        return actor is not None and getattr(actor, "role", None) in self.roles


class IsMarketer(HasRole):
    roles = frozenset({Role.MARKETER})


class IsConcierge(HasRole):
    roles = frozenset({Role.CONCIERGE})


class IsAdmin(HasRole):
    roles = frozenset({Role.ADMIN})
