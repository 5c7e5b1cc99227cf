"""
Authentication and identity related use cases.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import html
import logging
import secrets
import time
from typing import Optional

from sqlalchemy.exc import IntegrityError

from catalog_api.core.config import get_settings
from catalog_api.core.errors import ConflictError, NotFoundError, ServiceError
from catalog_api.core.mailer import send_email
from catalog_api.core.security import hash_password, password_needs_rehash, verify_password
from catalog_api.core.utils import absolute_url
from catalog_api.db.models import User
from catalog_api.repositories.sql_repository import SQLRepository
from catalog_api.services.session_service import issue_access_token

logger = logging.getLogger(__name__)


class AuthError(ServiceError):
    """Base class for authentication-related exceptions."""


class AccountExistsError(AuthError):
    code = "user_exists"


class InvalidCredentialsError(AuthError):
    code = "invalid_credentials"


class TokenInvalidError(AuthError):
    code = "invalid_token"


class EmailDeliveryError(AuthError):
    status_code = 500
    code = "email_failed"


class ProfileConflictError(ConflictError):
    code = "profile_conflict"


class UserNotFoundError(NotFoundError):
    pass


@dataclass
class RegisterResult:
    user_id: str
    email_sent: bool


@dataclass
class LoginResult:
    user_id: str
    token: str
    expires_in: int
    email_verified: bool


def _new_token() -> str:
    return secrets.token_hex(32)


def _normalize_email(value: str | None) -> str:
    return (value or "").strip().lower()


@dataclass
class AuthService:
    """Handles registration, login, profile, verification and password reset flows."""

    def __post_init__(self):
        self.settings = get_settings()
        self.repository = SQLRepository()

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> int:
        return int(time.time())

    def _token_expired(self, expires_at: datetime | int | None, now: int) -> bool:
        if isinstance(expires_at, datetime):
            # SQLite hands back naive datetimes; they were written as UTC.
            normalized = expires_at.astimezone(timezone.utc) if expires_at.tzinfo else expires_at.replace(tzinfo=timezone.utc)
            expires_ts = int(normalized.timestamp())
        else:
            expires_ts = int(expires_at or 0)
        if not expires_ts:
            return True
        return expires_ts < now

    def _expiry(self, ttl_seconds: int) -> datetime:
        return datetime.fromtimestamp(self._now() + max(0, ttl_seconds), tz=timezone.utc)

    def _ensure_verification_token(self, user: User, force_new: bool = False) -> tuple[str, bool]:
        now = self._now()
        if (
            user.verification_token
            and not force_new
            and not self._token_expired(user.verification_expires_at, now)
        ):
            return user.verification_token, False
        token = _new_token()
        self.repository.set_verification_token(
            user.id, token, self._expiry(self.settings.email_verification_ttl_seconds)
        )
        return token, True

    def _send_verification(self, user: User, email: str, token: str) -> bool:
        verify_url = absolute_url(f"/verify-email?token={token}")
        sent = send_email(
            f"Verify your e-mail - {self.settings.app_name}",
            email,
            self._verify_email_html(user.username, verify_url),
            f"Verify your e-mail address: {verify_url}",
        )
        if not sent:
            logger.warning("Verification e-mail for user %s was not delivered", user.id)
        return sent

    def _verify_email_html(self, username: str, verify_url: str) -> str:
        app_name = html.escape(self.settings.app_name)
        url = html.escape(verify_url)
        hours = max(1, self.settings.email_verification_ttl_seconds // 3600)
        return f"""
        <h1>Welcome to {app_name}!</h1>
        <p>Hello {html.escape(username)},</p>
        <p>Thank you for registering with us! Please verify your e-mail address by clicking the button below:</p>
        <p><a href="{url}" style="background:#007bff;color:#fff;padding:12px 24px;border-radius:5px;text-decoration:none;">Verify e-mail address</a></p>
        <p>If the button does not work, copy and paste this link into your browser:</p>
        <p><a href="{url}">{url}</a></p>
        <p><strong>This link will expire in {hours} hour{"s" if hours != 1 else ""}.</strong></p>
        <p>If you did not create an account with us, please ignore this e-mail.</p>
        """

    def _reset_email_html(self, username: str, reset_url: str) -> str:
        app_name = html.escape(self.settings.app_name)
        url = html.escape(reset_url)
        minutes = max(1, self.settings.password_reset_ttl // 60)
        return f"""
        <h1>Password reset request</h1>
        <p>Hello {html.escape(username)},</p>
        <p>We received a request to reset the password of your {app_name} account.</p>
        <p><a href="{url}" style="background:#dc3545;color:#fff;padding:12px 24px;border-radius:5px;text-decoration:none;">Reset password</a></p>
        <p>If the button does not work, copy and paste this link into your browser:</p>
        <p><a href="{url}">{url}</a></p>
        <ul>
          <li>This link will expire in {minutes} minutes.</li>
          <li>If you did not request a password reset, ignore this e-mail.</li>
          <li>Your password stays unchanged until you use this link.</li>
        </ul>
        """

    # -------------------------------------- registration --------------------------------------
    def register(self, username: str, email: str, password: str) -> RegisterResult:
        raw_username = (username or "").strip()
        raw_email = _normalize_email(email)
        if not raw_username or not raw_email:
            raise AuthError("Username and e-mail are required")
        if self.repository.find_user_by_identity(raw_email, raw_username):
            raise AccountExistsError("User already exists")
        try:
            user = self.repository.create_user(raw_username, raw_email, hash_password(password))
        except IntegrityError:
            raise AccountExistsError("User already exists")
        token, _ = self._ensure_verification_token(user, force_new=True)
        email_sent = self._send_verification(user, raw_email, token)
        logger.info("Registered user %s", user.id)
        return RegisterResult(user_id=user.id, email_sent=email_sent)

    # -------------------------------------- login --------------------------------------
    def login(self, email: str, password: str) -> LoginResult:
        raw_email = _normalize_email(email)
        if not raw_email:
            raise InvalidCredentialsError("Invalid credentials")
        user = self.repository.get_user_by_email(raw_email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt for %s", raw_email)
            raise InvalidCredentialsError("Invalid credentials")
        if password_needs_rehash(user.password_hash):
            self.repository.update_user_password(user.id, hash_password(password))
        token = issue_access_token(user.id)
        return LoginResult(
            user_id=user.id,
            token=token,
            expires_in=self.settings.jwt_ttl_seconds,
            email_verified=bool(user.email_verified),
        )

    # -------------------------------------- profile --------------------------------------
    def get_profile(self, user_id: str) -> User:
        user = self.repository.get_user(user_id)
        if not user:
            raise UserNotFoundError("User not found")
        return user

    def update_profile(self, user_id: str, *, username: Optional[str] = None, email: Optional[str] = None) -> User:
        user = self.get_profile(user_id)
        changes: dict = {}
        new_username = (username or "").strip()
        if new_username and new_username != user.username:
            other = self.repository.get_user_by_username(new_username)
            if other and other.id != user.id:
                raise ProfileConflictError("Username already in use")
            changes["username"] = new_username
        new_email = _normalize_email(email)
        email_changed = bool(new_email) and new_email != user.email
        if email_changed:
            other = self.repository.get_user_by_email(new_email)
            if other and other.id != user.id:
                raise ProfileConflictError("E-mail already in use")
            changes["email"] = new_email
            changes["email_verified"] = False
        if not changes:
            return user
        try:
            updated = self.repository.update_user(user_id, **changes)
        except IntegrityError:
            raise ProfileConflictError("Username or e-mail already in use")
        if updated is None:
            raise UserNotFoundError("User not found")
        if email_changed:
            token, _ = self._ensure_verification_token(updated, force_new=True)
            self._send_verification(updated, new_email, token)
            updated = self.repository.get_user(user_id) or updated
        logger.info("Updated profile of user %s (%s)", user_id, ", ".join(sorted(changes)))
        return updated

    # -------------------------------------- verification --------------------------------------
    def verify_email(self, token: str) -> User:
        token_value = (token or "").strip()
        if not token_value:
            raise TokenInvalidError("Invalid or expired verification token")
        user = self.repository.get_user_by_verification_token(token_value)
        if not user:
            raise TokenInvalidError("Invalid or expired verification token")
        if self._token_expired(user.verification_expires_at, self._now()):
            self.repository.clear_verification_token(user.id)
            raise TokenInvalidError("Invalid or expired verification token")
        self.repository.set_user_verified(user.id)
        logger.info("Verified e-mail of user %s", user.id)
        return self.repository.get_user(user.id) or user

    def resend_verification(self, email: str) -> bool:
        raw = _normalize_email(email)
        if not raw:
            return False
        user = self.repository.get_user_by_email(raw)
        if not user or user.email_verified:
            return False
        token, _ = self._ensure_verification_token(user, force_new=False)
        return self._send_verification(user, raw, token)

    # -------------------------------------- password reset --------------------------------------
    def issue_password_reset(self, email: str) -> bool:
        """
        Issue a reset token and e-mail it. Returns False when no account matches.
        Raises EmailDeliveryError (after discarding the token) when sending fails.
        """
        raw = _normalize_email(email)
        if not raw:
            return False
        user = self.repository.get_user_by_email(raw)
        if not user:
            return False
        token = _new_token()
        self.repository.set_password_reset_token(user.id, token, self._expiry(self.settings.password_reset_ttl))
        reset_url = absolute_url(f"/reset-password?token={token}")
        sent = send_email(
            "Password Reset Request",
            raw,
            self._reset_email_html(user.username, reset_url),
            f"Use this link to reset your password: {reset_url}",
        )
        if not sent:
            self.repository.clear_password_reset_token(user.id)
            logger.error("Password reset e-mail for user %s could not be sent", user.id)
            raise EmailDeliveryError(
                "Failed to send password reset email. Please try again later.", email_sent=False
            )
        logger.info("Issued password reset for user %s", user.id)
        return True

    def validate_reset_token(self, token: str) -> Optional[User]:
        token = (token or "").strip()
        if not token:
            return None
        user = self.repository.get_user_by_reset_token(token)
        if not user:
            return None
        if self._token_expired(user.password_reset_expires_at, self._now()):
            self.repository.clear_password_reset_token(user.id)
            return None
        return user

    def reset_password(self, token: str, password: str) -> str:
        user = self.validate_reset_token(token)
        if not user:
            raise TokenInvalidError("Invalid or expired password reset token")
        self.repository.update_user_password(user.id, hash_password(password))
        self.repository.clear_password_reset_token(user.id)
        logger.info("Password reset completed for user %s", user.id)
        return user.id
