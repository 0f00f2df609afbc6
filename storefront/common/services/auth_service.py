import time
from typing import Dict, Optional, Tuple
from uuid import uuid4

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from ..db.session import SessionFactory
from ..models.user import RevokedToken, User
from ..utils.dto import to_user_dto
from .logging import log_event

ROLES = {"user", "admin"}
PROFILE_FIELDS = {"firstName": "first_name", "lastName": "last_name", "phone": "phone"}


class TokenError(Exception):
    """Bearer token rejected; `code` is one of NO_TOKEN, TOKEN_EXPIRED, TOKEN_INVALID."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class AuthService:
    """Accounts and HS256 bearer tokens."""

    def __init__(self, session_factory: SessionFactory, secret_key: str, token_ttl_seconds: int = 86400):
        self._session_factory = session_factory
        self._secret_key = secret_key
        self._token_ttl = int(token_ttl_seconds)

    def register(self, *, username: str, email: str, password: str, role: str = "user") -> Dict:
        username = (username or "").strip()
        email = (email or "").strip().lower()
        if not username or not email or not password:
            raise ValueError("username, email and password are required")
        if len(password) < 6:
            raise ValueError("password must be at least 6 characters")
        if role not in ROLES:
            raise ValueError("role must be user or admin")
        with self._session_factory() as session:
            if session.query(User).filter(User.email == email).first():
                raise ValueError("email already registered")
            user = User(
                id=str(uuid4()),
                username=username,
                email=email,
                password_hash=generate_password_hash(password, method="pbkdf2:sha256"),
                role=role,
            )
            session.add(user)
            session.flush()
            log_event("info", "auth.registered", user_id=user.id, role=role)
            return to_user_dto(user)

    def ensure_user(self, *, username: str, email: str, password: str, role: str = "user") -> Dict:
        """Create the account unless the email is already taken."""
        with self._session_factory() as session:
            existing = session.query(User).filter(User.email == email.strip().lower()).first()
            if existing:
                return to_user_dto(existing)
        return self.register(username=username, email=email, password=password, role=role)

    def authenticate(self, *, email: str, password: str) -> Optional[Dict]:
        with self._session_factory() as session:
            user = session.query(User).filter(User.email == (email or "").strip().lower()).first()
            if not user or not check_password_hash(user.password_hash, password or ""):
                return None
            return to_user_dto(user)

    def issue_token(self, user: Dict, ttl_seconds: Optional[int] = None) -> str:
        now = int(time.time())
        ttl = self._token_ttl if ttl_seconds is None else int(ttl_seconds)
        payload = {
            "sub": str(user["id"]),
            "role": user.get("role", "user"),
            "jti": uuid4().hex,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, self._secret_key, algorithm="HS256")

    def login(self, *, email: str, password: str) -> Tuple[str, Dict]:
        user = self.authenticate(email=email, password=password)
        if user is None:
            raise PermissionError("Invalid email or password")
        log_event("info", "auth.login", user_id=user["id"])
        return self.issue_token(user), user

    def _decode(self, token: Optional[str]) -> Dict:
        if not token:
            raise TokenError("NO_TOKEN", "No token provided")
        try:
            return jwt.decode(token, self._secret_key, algorithms=["HS256"])
        except jwt.ExpiredSignatureError as exc:
            raise TokenError("TOKEN_EXPIRED", "Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise TokenError("TOKEN_INVALID", "Token is invalid") from exc

    def resolve(self, token: Optional[str]) -> Dict:
        """Return the user DTO for a live token or raise TokenError."""
        claims = self._decode(token)
        with self._session_factory() as session:
            if session.get(RevokedToken, claims.get("jti")) is not None:
                raise TokenError("TOKEN_INVALID", "Token has been revoked")
            user = session.get(User, claims.get("sub"))
            if user is None:
                raise TokenError("TOKEN_INVALID", "Token user no longer exists")
            return to_user_dto(user)

    def revoke(self, token: Optional[str]) -> None:
        claims = self._decode(token)
        with self._session_factory() as session:
            if session.get(RevokedToken, claims["jti"]) is None:
                session.add(RevokedToken(jti=claims["jti"]))
        log_event("info", "auth.logout", user_id=claims.get("sub"))

    def update_profile(self, *, user_id: str, data: Dict) -> Dict:
        """Change display name and contact fields; email, password and role are not editable here."""
        data = data or {}
        with self._session_factory() as session:
            user = session.get(User, user_id)
            if user is None:
                raise LookupError("user not found")
            if "name" in data:
                name = str(data.get("name") or "").strip()
                if not name:
                    raise ValueError("name must not be blank")
                user.username = name
            for key, attr in PROFILE_FIELDS.items():
                if key in data:
                    setattr(user, attr, str(data.get(key) or "").strip())
            session.flush()
            log_event("info", "auth.profile_updated", user_id=user_id)
            return to_user_dto(user)
