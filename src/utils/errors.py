class SolutionError(ValueError):
    """Base class for every failure raised while sealing, opening or decoding a solution."""


class MalformedToken(SolutionError):
    """Token is not valid base64 or too short to hold salt and nonce."""


class AuthenticationFailed(SolutionError):
    """AEAD tag did not verify: wrong password or corrupted data."""

    def __init__(self, message: str = "Invalid password or corrupted data") -> None:
        super().__init__(message)


class InvalidEncoding(SolutionError):
    """Decrypted bytes are not UTF-8, or annotations are not valid annotation JSON."""


class UnsupportedVersion(SolutionError):
    def __init__(self, version: object) -> None:
        self.version = version
        super().__init__(f"Could not decode solution with unknown version {version!r}")


class MalformedDocument(SolutionError):
    """Document record is missing fields or is not a JSON object."""
