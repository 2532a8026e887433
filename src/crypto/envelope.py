"""
Password envelope: one string in, one self-contained base64 token out.

Token layout (before base64):
    salt       : 16 bytes  (random, per call)
    nonce      : 12 bytes  (random, per call)
    ciphertext : remaining bytes (AES-256-GCM, tag appended, no AAD)

The key is PBKDF2-HMAC-SHA256(password, salt) with 250k iterations and is
derived again for every seal/unseal, so no two fields ever share a key.
"""
import logging
import os

from crypto.aead import aead_encrypt, aead_decrypt
from crypto.hash import derive_key
from crypto.transcode import decode_from_base64, decode_from_utf8, encode_to_base64, encode_to_utf8
from utils.dataModels import NONCE_LEN, SALT_LEN, TOKEN_MIN_LEN
from utils.errors import MalformedToken

logger = logging.getLogger(__name__)


def seal(password: str, plaintext: str) -> str:
    salt = os.urandom(SALT_LEN)
    key = derive_key(password, salt)
    nonce, ct = aead_encrypt(key, encode_to_utf8(plaintext))
    return encode_to_base64(salt + nonce + ct)


def unseal(password: str, token: str) -> str:
    payload = decode_from_base64(token)
    if len(payload) < TOKEN_MIN_LEN:
        logger.debug("token too short: %d bytes", len(payload))
        raise MalformedToken(f"Token is too short ({len(payload)} < {TOKEN_MIN_LEN} bytes)")

    salt = payload[:SALT_LEN]
    nonce = payload[SALT_LEN:SALT_LEN + NONCE_LEN]
    ct = payload[TOKEN_MIN_LEN:]

    key = derive_key(password, salt)
    return decode_from_utf8(aead_decrypt(key, nonce, ct))
