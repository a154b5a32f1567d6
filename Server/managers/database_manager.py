"""
OilDesk Server - Database Manager

This module manages database connection, initialization, and password hashing.
"""

import secrets
import string
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
import bcrypt

from models.database import Base, User, Credential, Setting, RecordStatus

DEFAULT_DB_PATH = "database/oildesk.db"
BOOTSTRAP_ADMIN_EMAIL = "admin@oildesk.local"

# key -> (default value, description)
DEFAULT_SETTINGS = {
    "session_lifetime_hours": ("24", "Hours an admin web session stays signed in"),
    "jwt_expiration_hours": ("24", "Hours an API bearer token stays valid"),
}


class DatabaseManager:
    """
    Manages database connection, initialization, and operations
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """
        Initialize database manager

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

        # Ensure database directory exists
        db_dir = Path(db_path).parent
        if db_dir and str(db_dir) != '.':
            db_dir.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(
            f"sqlite:///{db_path}",
            echo=False,
            connect_args={"check_same_thread": False}
        )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def InitializeDatabase(self) -> Optional[Tuple[str, str]]:
        """
        Initialize the database with all tables and default data
        Creates tables if they don't exist, populates default settings,
        and creates a bootstrap admin account on first run.

        Returns:
            (email, password) of the bootstrap admin if it was created, None otherwise
        """
        # Create all tables
        Base.metadata.create_all(bind=self.engine)

        session = self.SessionLocal()
        admin_credentials = None

        try:
            # First run means no credentials exist yet
            is_first_run = session.query(Credential).count() == 0

            if is_first_run:
                admin_password = self.GenerateRandomPassword()
                credential = Credential(
                    email=BOOTSTRAP_ADMIN_EMAIL,
                    password_hash=self.HashPassword(admin_password),
                    is_disabled=False
                )
                session.add(credential)
                session.flush()  # Flush to get the identity_ref

                now = datetime.now(timezone.utc)
                session.add(User(
                    user_id=credential.identity_ref,
                    name="Administrator",
                    email=BOOTSTRAP_ADMIN_EMAIL,
                    phone="",
                    roles="admin",
                    status=RecordStatus.APPROVED.value,
                    created_at=now,
                    last_updated=now
                ))
                admin_credentials = (BOOTSTRAP_ADMIN_EMAIL, admin_password)

            # Populate default settings if not present
            self.PopulateDefaultSettings(session)

            session.commit()

        except Exception as e:
            session.rollback()
            raise e
        finally:
            session.close()

        return admin_credentials

    def PopulateDefaultSettings(self, session):
        """
        Populate default settings
        Only adds settings that don't already exist

        Args:
            session: SQLAlchemy session
        """
        for key, (value, description) in DEFAULT_SETTINGS.items():
            existing = session.query(Setting).filter(Setting.key == key).first()
            if not existing:
                session.add(Setting(key=key, value=value, description=description))

    def GetSettingInt(self, key: str) -> int:
        """
        Read an integer setting, falling back to its default

        Args:
            key: Setting key

        Returns:
            int: Stored value, or the default when missing or malformed
        """
        default = int(DEFAULT_SETTINGS[key][0])
        session = self.SessionLocal()
        try:
            setting = session.query(Setting).filter(Setting.key == key).first()
            if not setting:
                return default
            try:
                return int(setting.value)
            except ValueError:
                return default
        finally:
            session.close()

    @staticmethod
    def GenerateRandomPassword(length: int = 12) -> str:
        """
        Generate a secure random password

        Args:
            length: Password length (default 12)

        Returns:
            str: Generated password
        """
        alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
        return ''.join(secrets.choice(alphabet) for _ in range(length))

    @staticmethod
    def HashPassword(password: str) -> str:
        """
        Hash a password using bcrypt
        Truncates to 72 bytes to comply with bcrypt's maximum password length

        Args:
            password: Plain text password

        Returns:
            str: Hashed password (as string)
        """
        password_bytes = password.encode('utf-8')[:72]
        hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt())
        return hashed.decode('utf-8')

    @staticmethod
    def VerifyPassword(plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against a hash

        Args:
            plain_password: Plain text password to verify
            hashed_password: Stored password hash (as string)

        Returns:
            bool: True if password matches, False otherwise
        """
        password_bytes = plain_password.encode('utf-8')[:72]
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))

    def GetSession(self):
        """
        Get a new database session

        Returns:
            Session: SQLAlchemy session
        """
        return self.SessionLocal()
