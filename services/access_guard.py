from models.auth_model import AuthenticatedIdentity
from utils.exceptions import ForbiddenError, UnauthenticatedError


class AccessGuard:
    """
    Participant checks for messaging resources.

    Runs before any store access. A caller who is authenticated but not a
    participant gets ``ForbiddenError``, never the resource or a ``NotFoundError``.
    """

    @staticmethod
    def _require_identity(identity: AuthenticatedIdentity) -> str:
        if identity is None or not identity.user_id:
            raise UnauthenticatedError()
        return identity.user_id

    def require_self(self, identity: AuthenticatedIdentity, user_id: str, message: str = "Forbidden") -> None:
        """The resource is addressed by a single user id that must be the caller"""
        if self._require_identity(identity) != user_id:
            raise ForbiddenError(message)

    def require_participant(
        self,
        identity: AuthenticatedIdentity,
        user_a: str,
        user_b: str,
        message: str = "Forbidden",
    ) -> None:
        """The resource is addressed by a pair; the caller must be one of them"""
        caller = self._require_identity(identity)
        if caller not in (user_a, user_b):
            raise ForbiddenError(message)
