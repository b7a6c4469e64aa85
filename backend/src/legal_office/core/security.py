"""
Security utilities for the Legal Office backend.

Password hashing, JWT access tokens, encryption of provider API keys at rest,
and log sanitisation.
"""

import re
import base64
import logging
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from passlib.context import CryptContext
from jose import jwt

from legal_office.core.config import get_config

config = get_config()
logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bcrypt has a 72 byte limit
BCRYPT_MAX_BYTES = 72


def _truncate_for_bcrypt(password: str) -> str:
    encoded = password.encode('utf-8')
    if len(encoded) <= BCRYPT_MAX_BYTES:
        return password
    return encoded[:BCRYPT_MAX_BYTES].decode('utf-8', errors='ignore')


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(_truncate_for_bcrypt(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return pwd_context.verify(_truncate_for_bcrypt(plain_password), hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification error: {e}")
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=config.security.access_token_expire_minutes)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.security.secret_key, algorithm=config.security.algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Raises:
        JWTError: If the token is malformed, expired or badly signed
    """
    return jwt.decode(token, config.security.secret_key, algorithms=[config.security.algorithm])


class PasswordValidator:
    """Validates password strength."""

    FORBIDDEN_PASSWORDS = {'password', '123456', '12345678', 'qwerty'}

    @staticmethod
    def validate_password(password: str) -> Dict[str, Any]:
        """
        Validate password strength.

        Returns:
            Dict with ``is_valid`` and a list of ``errors``
        """
        errors = []
        min_length = config.security.min_password_length
        max_length = config.security.max_password_length

        if len(password) < min_length:
            errors.append(f"Password must be at least {min_length} characters")
        if len(password) > max_length:
            errors.append(f"Password must be no more than {max_length} characters")
        if password.lower() in PasswordValidator.FORBIDDEN_PASSWORDS:
            errors.append("Password is too common")
        if password.strip() != password:
            errors.append("Password cannot start or end with whitespace")

        return {'is_valid': len(errors) == 0, 'errors': errors}


class EncryptionService:
    """Encrypts provider API keys before they are written to the database."""

    KDF_SALT = b"legal-office-api-keys"
    KDF_ITERATIONS = 100_000

    def __init__(self, key: Optional[str] = None):
        self._fernet = Fernet(self._resolve_key(key))

    def _resolve_key(self, key: Optional[str]) -> bytes:
        key = key or config.security.encryption_key
        if key:
            try:
                decoded = base64.urlsafe_b64decode(key.encode())
                if len(decoded) == 32:
                    return key.encode()
            except (ValueError, TypeError):
                pass
            logger.warning("Invalid ENCRYPTION_KEY format. Deriving key from SECRET_KEY.")

        # Stable key derived from SECRET_KEY so stored values survive restarts
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=self.KDF_SALT,
            iterations=self.KDF_ITERATIONS,
        )
        return base64.urlsafe_b64encode(kdf.derive(config.security.secret_key.encode()))

    def encrypt(self, data: str) -> str:
        if not isinstance(data, str):
            raise ValueError("Data must be a string")
        return self._fernet.encrypt(data.encode('utf-8')).decode('utf-8')

    def decrypt(self, encrypted_data: str) -> str:
        try:
            return self._fernet.decrypt(encrypted_data.encode('utf-8')).decode('utf-8')
        except InvalidToken as e:
            logger.error("Decryption failed: stored value was encrypted with another key")
            raise ValueError("Decryption failed") from e


_encryption_service: Optional[EncryptionService] = None


def get_encryption_service() -> EncryptionService:
    global _encryption_service
    if _encryption_service is None:
        _encryption_service = EncryptionService()
    return _encryption_service


class SecureLogger:
    """Redacts personal data from strings before they reach the logs."""

    PII_PATTERNS = [
        r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b',  # Email
        r'\+?\d[\d\s-]{7,}\d',  # Phone
    ]

    @staticmethod
    def sanitize_log_message(message: str, max_length: int = 200) -> str:
        sanitized = message
        for pattern in SecureLogger.PII_PATTERNS:
            sanitized = re.sub(pattern, '[REDACTED]', sanitized)
        if len(sanitized) > max_length:
            sanitized = sanitized[:max_length] + "..."
        return sanitized