import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from sqlalchemy.types import TypeDecorator, Text

from config import DB_ENCRYPTION_KEY

logger = logging.getLogger(__name__)


class EncryptedString(TypeDecorator):
    """
    Encrypts values with Fernet before they are written and decrypts them on
    load, so the database file only ever holds ciphertext.

    Without a key the column behaves like plain Text.
    """
    impl = Text  # ciphertext is longer than the plaintext
    cache_ok = True

    def __init__(self, key: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        key = key if key is not None else DB_ENCRYPTION_KEY
        if not key:
            logger.warning("DB_ENCRYPTION_KEY is not set, storing values unencrypted")
            self.fernet = None
        else:
            self.fernet = Fernet(key)

    def process_bind_param(self, value, dialect):
        # Python -> DB
        if value is not None and self.fernet:
            if isinstance(value, str):
                value = value.encode("utf-8")
            return self.fernet.encrypt(value).decode("utf-8")
        return value

    def process_result_value(self, value, dialect):
        # DB -> Python
        if value is not None and self.fernet:
            try:
                return self.fernet.decrypt(value.encode("utf-8")).decode("utf-8")
            except InvalidToken:
                # Rows written before the key was configured are plaintext
                logger.warning("Could not decrypt stored value, returning it as-is")
                return value
        return value
