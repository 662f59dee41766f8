from passlib.context import CryptContext

from app.config import settings

pwd_context = CryptContext(
    schemes=[scheme.strip() for scheme in settings.password_schemes.split(",") if scheme.strip()],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    if not plain or not hashed:
        return False
    return pwd_context.verify(plain, hashed)
