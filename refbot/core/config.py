import os
from dataclasses import dataclass
from urllib.parse import quote


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def make_async_db_url(url: str) -> str:
    """Accepts Railway-style DATABASE_URL and returns sqlalchemy async url."""
    if url.startswith("postgresql+asyncpg://"):
        return url
    if url.startswith("postgres://"):
        return "postgresql+asyncpg://" + url[len("postgres://") :]
    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url[len("postgresql://") :]
    raise RuntimeError("Unsupported DATABASE_URL format")


def compose_db_url(
    *,
    user: str,
    password: str,
    host: str,
    port: str,
    name: str,
    sslmode: str | None = None,
) -> str:
    """Builds an asyncpg url out of the discrete DB_* variables.

    asyncpg has no `sslmode`; the value goes to its `ssl` argument instead,
    which accepts the same mode names (disable, prefer, require, ...).
    """
    url = f"postgresql+asyncpg://{quote(user, safe='')}:{quote(password, safe='')}@{host}:{port}/{name}"
    if sslmode:
        url += f"?ssl={sslmode}"
    return url


@dataclass(frozen=True)
class Settings:
    bot_token: str
    database_url: str

    # when empty, the deep-link username comes from getMe at startup
    bot_username: str | None = None

    bot_debug: bool = False
    polling_timeout: int = 60

    # how many fresh codes create_code tries before giving up on collisions
    referral_code_attempts: int = 5

    run_migrations: bool = True


_DB_PARTS = ("DB_USER", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_NAME")


def load_database_url() -> str:
    database_url_raw = os.getenv("DATABASE_URL", "").strip()
    if database_url_raw:
        return make_async_db_url(database_url_raw)

    missing = [name for name in _DB_PARTS if not os.getenv(name, "").strip()]
    if missing:
        raise RuntimeError("DATABASE_URL is missing (or set " + ", ".join(missing) + ")")

    return compose_db_url(
        user=os.environ["DB_USER"].strip(),
        password=os.environ["DB_PASSWORD"].strip(),
        host=os.environ["DB_HOST"].strip(),
        port=os.environ["DB_PORT"].strip(),
        name=os.environ["DB_NAME"].strip(),
        sslmode=(os.getenv("DB_SSLMODE") or "").strip() or None,
    )


def load_settings() -> Settings:
    bot_token = (os.getenv("BOT_TOKEN") or "").strip()
    if not bot_token:
        raise RuntimeError("BOT_TOKEN is missing")

    attempts_raw = os.getenv("REFERRAL_CODE_ATTEMPTS", "5").strip()
    if not attempts_raw.isdigit() or int(attempts_raw) < 1:
        raise RuntimeError("REFERRAL_CODE_ATTEMPTS must be a positive integer")

    return Settings(
        bot_token=bot_token,
        database_url=load_database_url(),
        bot_username=(os.getenv("BOT_USERNAME") or "").strip().lstrip("@") or None,
        bot_debug=_env_bool("BOT_DEBUG", False),
        polling_timeout=int(os.getenv("POLLING_TIMEOUT", "60")),
        referral_code_attempts=int(attempts_raw),
        run_migrations=_env_bool("RUN_MIGRATIONS", True),
    )
