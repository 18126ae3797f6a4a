# accounts/models.py
from dataclasses import dataclass, asdict

ROLE_MEMBER = 'member'
ROLE_ADMIN = 'admin'


def normalize_role(value):
    """Only an explicit 'admin' grants elevated access; everything else is a member."""
    return ROLE_ADMIN if str(value or '').strip().lower() == ROLE_ADMIN else ROLE_MEMBER


@dataclass(frozen=True)
class User:
    """
    Transient copy of the backend user, kept in the session for the
    lifetime of a login. The backend auth service owns the record.
    """
    id: int
    username: str
    email: str
    role: str = ROLE_MEMBER

    def __post_init__(self):
        object.__setattr__(self, 'role', normalize_role(self.role))

    def __str__(self):
        return f"{self.username} <{self.email}>"

    def is_admin(self):
        return self.role == ROLE_ADMIN

    def is_member(self):
        return self.role == ROLE_MEMBER

    def to_session(self):
        return asdict(self)

    @classmethod
    def from_session(cls, data):
        """Rebuild from the session dict; returns None for anything malformed."""
        if not isinstance(data, dict):
            return None
        try:
            return cls(
                id=int(data['id']),
                username=str(data.get('username') or ''),
                email=str(data.get('email') or ''),
                role=data.get('role'),
            )
        except (KeyError, TypeError, ValueError):
            return None

    @classmethod
    def from_backend(cls, payload):
        """
        Backend users carry firstName/lastName instead of a display name.
        """
        first = (payload.get('firstName') or '').strip()
        last = (payload.get('lastName') or '').strip()
        username = payload.get('username') or payload.get('name') or f"{first} {last}".strip()
        return cls(
            id=int(payload['id']),
            username=username or payload.get('email', ''),
            email=payload.get('email', ''),
            role=payload.get('role'),
        )
