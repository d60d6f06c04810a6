"""SQLAlchemy TypeDecorator for transparent Fernet encryption of text columns."""

from sqlalchemy import Text, TypeDecorator

from .crypto import TOKEN_SALT, get_fernet


def _fernet():
    from ..config import settings
    return get_fernet(settings.secret_key, TOKEN_SALT)


class EncryptedText(TypeDecorator):
    """Transparently encrypts/decrypts text values stored in the database."""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return _fernet().encrypt(value.encode()).decode()

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return _fernet().decrypt(value.encode()).decode()
