"""Local user profiles: register, log in, edit profile, change password.

Profiles live in ``data/accounts.json``. Form validation failures are
reported through the store's notification queue and leave all state
untouched. This is a convenience profile book for a single machine, not
an authentication system.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from pathlib import Path
from typing import Optional

from jobtracker.models import Severity, User, new_id
from jobtracker.storage import ACCOUNTS_FILE, DEFAULT_DATA_DIR, read_json, write_json
from jobtracker.store import AppStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
_HASH_ITERATIONS = 100_000

MSG_PASSWORD_MISMATCH = "两次输入的密码不一致"
MSG_PASSWORD_TOO_SHORT = f"密码长度至少{MIN_PASSWORD_LENGTH}位"
MSG_EMAIL_TAKEN = "该邮箱已被注册"
MSG_BAD_CREDENTIALS = "邮箱或密码错误"
MSG_WRONG_OLD_PASSWORD = "原密码错误"
MSG_NOT_LOGGED_IN = "请先登录"


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), _HASH_ITERATIONS)
    return digest.hex()


class AccountBook:
    def __init__(self, store: AppStore, data_dir: str | Path = DEFAULT_DATA_DIR):
        self.store = store
        self.path = Path(data_dir) / ACCOUNTS_FILE

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def _load(self) -> list[dict]:
        data = read_json(self.path, default={"users": []})
        return list(data.get("users", [])) if isinstance(data, dict) else []

    def _save(self, records: list[dict]) -> None:
        write_json(self.path, {"users": records})

    def _find(self, records: list[dict], email: str) -> Optional[dict]:
        email = email.strip().lower()
        return next((r for r in records if r.get("email", "").lower() == email), None)

    def _fail(self, message: str) -> None:
        self.store.notify(message, Severity.ERROR)

    def _validate_new_password(self, password: str, confirm: str) -> bool:
        if password != confirm:
            self._fail(MSG_PASSWORD_MISMATCH)
            return False
        if len(password) < MIN_PASSWORD_LENGTH:
            self._fail(MSG_PASSWORD_TOO_SHORT)
            return False
        return True

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def register(self, nickname: str, email: str, password: str, confirm_password: str) -> Optional[User]:
        if not self._validate_new_password(password, confirm_password):
            return None
        records = self._load()
        if self._find(records, email):
            self._fail(MSG_EMAIL_TAKEN)
            return None

        user = User(id=new_id("user"), nickname=nickname.strip(), email=email.strip().lower())
        salt = secrets.token_hex(16)
        records.append({**user.to_dict(), "salt": salt, "password_hash": _hash_password(password, salt)})
        self._save(records)

        self.store.set_user(user)
        self.store.notify("注册成功", Severity.SUCCESS)
        logger.info("Registered user %s", user.id)
        return user

    def login(self, email: str, password: str) -> Optional[User]:
        record = self._find(self._load(), email)
        if record is None or not hmac.compare_digest(
            record.get("password_hash", ""),
            _hash_password(password, record.get("salt", "")),
        ):
            self._fail(MSG_BAD_CREDENTIALS)
            return None

        user = User.from_dict(record)
        self.store.set_user(user)
        self.store.notify(f"欢迎回来，{user.nickname}", Severity.SUCCESS)
        return user

    def logout(self) -> None:
        self.store.set_user(None)

    def update_profile(self, nickname: Optional[str] = None, avatar: Optional[str] = None) -> bool:
        user = self.store.user
        if user is None:
            self._fail(MSG_NOT_LOGGED_IN)
            return False

        records = self._load()
        record = self._find(records, user.email)
        if nickname is not None:
            user.nickname = nickname.strip()
        if avatar is not None:
            user.avatar = avatar or None
        if record is not None:
            record.update(user.to_dict())
            self._save(records)

        self.store.set_user(user)
        self.store.notify("资料已更新", Severity.SUCCESS)
        return True

    def change_password(self, old_password: str, new_password: str, confirm_password: str) -> bool:
        user = self.store.user
        if user is None:
            self._fail(MSG_NOT_LOGGED_IN)
            return False
        if not self._validate_new_password(new_password, confirm_password):
            return False

        records = self._load()
        record = self._find(records, user.email)
        if record is None or not hmac.compare_digest(
            record.get("password_hash", ""),
            _hash_password(old_password, record.get("salt", "")),
        ):
            self._fail(MSG_WRONG_OLD_PASSWORD)
            return False

        record["salt"] = secrets.token_hex(16)
        record["password_hash"] = _hash_password(new_password, record["salt"])
        self._save(records)
        self.store.notify("密码已修改", Severity.SUCCESS)
        return True
