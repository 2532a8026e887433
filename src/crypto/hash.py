from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from utils.dataModels import KEY_LEN, PBKDF2_ITERATIONS


def derive_key(password: str, salt: bytes, iterations: int = PBKDF2_ITERATIONS) -> bytes:
    """key = PBKDF2-HMAC-SHA256(password, salt) -> 32 bytes"""
    if iterations < PBKDF2_ITERATIONS:
        raise ValueError(f"PBKDF2 iterations must be at least {PBKDF2_ITERATIONS}")
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LEN,
        salt=salt,
        iterations=iterations,
        backend=default_backend(),
    )
    return kdf.derive(password.encode("utf-8"))
