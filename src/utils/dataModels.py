import math

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from utils.errors import MalformedDocument

SALT_LEN = 16
NONCE_LEN = 12
KEY_LEN = 32  # AES-256
PBKDF2_ITERATIONS = 250_000
TOKEN_MIN_LEN = SALT_LEN + NONCE_LEN

VERSION_1 = "1.0"
VERSION_2 = "2.0"  # multiple files and a title
CURRENT_VERSION = VERSION_2

LEGACY_TITLE = "Untitled"
LEGACY_FILE_NAME = "unnamed"

NumberRange = Tuple[int, int]


def _require_str(obj: Dict[str, Any], key: str, where: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str):
        raise MalformedDocument(f"{where}: field '{key}' must be a string")
    return value


@dataclass(frozen=True)
class Annotation:
    comment: str
    line: NumberRange
    column: NumberRange

    def to_dict(self) -> Dict[str, Any]:
        return {"comment": self.comment, "line": list(self.line), "column": list(self.column)}

    @staticmethod
    def from_dict(obj: Any) -> "Annotation":
        """Build an annotation from its JSON shape. Raises ValueError/TypeError on anything else."""
        if not isinstance(obj, dict):
            raise TypeError("annotation must be an object")
        comment = obj["comment"]
        if not isinstance(comment, str):
            raise TypeError("annotation comment must be a string")
        return Annotation(comment=comment, line=_range(obj["line"]), column=_range(obj["column"]))


def _range(value: Any) -> NumberRange:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError("range must be a [from, to] pair")
    lo, hi = value
    for n in (lo, hi):
        if isinstance(n, bool) or not isinstance(n, (int, float)):
            raise TypeError("range bounds must be numbers")
        if not math.isfinite(n):
            raise ValueError("range bounds must be finite")
    return (lo, hi)


@dataclass(frozen=True)
class PlainFile:
    name: str
    language: str
    code: str
    annotations: Tuple[Annotation, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "language": self.language,
            "code": self.code,
            "annotations": [a.to_dict() for a in self.annotations],
        }

    @staticmethod
    def from_dict(obj: Dict[str, Any]) -> "PlainFile":
        raw = obj.get("annotations", [])
        if not isinstance(raw, list):
            raise MalformedDocument("file: field 'annotations' must be a list")
        try:
            annotations = tuple(Annotation.from_dict(a) for a in raw)
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedDocument(f"file: invalid annotation ({exc})") from exc
        return PlainFile(
            name=_require_str(obj, "name", "file"),
            language=_require_str(obj, "language", "file"),
            code=_require_str(obj, "code", "file"),
            annotations=annotations,
        )


@dataclass(frozen=True)
class PlainDocument:
    title: str
    files: Tuple[PlainFile, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "files": [f.to_dict() for f in self.files]}

    @staticmethod
    def from_dict(obj: Any) -> "PlainDocument":
        if not isinstance(obj, dict):
            raise MalformedDocument("document must be a JSON object")
        files = obj.get("files")
        if not isinstance(files, list) or not all(isinstance(f, dict) for f in files):
            raise MalformedDocument("document: field 'files' must be a list of objects")
        return PlainDocument(
            title=_require_str(obj, "title", "document"),
            files=tuple(PlainFile.from_dict(f) for f in files),
        )


@dataclass(frozen=True)
class EncodedFile:
    name: str
    language: str
    code: str
    annotations: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "language": self.language, "code": self.code, "annotations": self.annotations}

    @staticmethod
    def from_dict(obj: Any) -> "EncodedFile":
        if not isinstance(obj, dict):
            raise MalformedDocument("encoded file must be an object")
        return EncodedFile(
            name=_require_str(obj, "name", "file"),
            language=_require_str(obj, "language", "file"),
            code=_require_str(obj, "code", "file"),
            annotations=_require_str(obj, "annotations", "file"),
        )


@dataclass(frozen=True)
class EncodedDocument:
    """Current (2.0) on-disk shape. Older shapes are only ever read, see LegacyDocument."""
    title: str
    files: Tuple[EncodedFile, ...] = ()
    version: str = field(default=CURRENT_VERSION)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "title": self.title,
            "files": [f.to_dict() for f in self.files],
        }

    @staticmethod
    def from_dict(obj: Dict[str, Any]) -> "EncodedDocument":
        files = obj.get("files")
        if not isinstance(files, list):
            raise MalformedDocument("document: field 'files' must be a list")
        return EncodedDocument(
            title=_require_str(obj, "title", "document"),
            files=tuple(EncodedFile.from_dict(f) for f in files),
            version=_require_str(obj, "version", "document"),
        )


@dataclass(frozen=True)
class LegacyDocument:
    """Single-file shape written before titles existed; `version` is None when the tag was absent."""
    language: str
    code: str
    annotations: str
    version: str | None = None

    @staticmethod
    def from_dict(obj: Dict[str, Any]) -> "LegacyDocument":
        return LegacyDocument(
            language=_require_str(obj, "language", "legacy document"),
            code=_require_str(obj, "code", "legacy document"),
            annotations=_require_str(obj, "annotations", "legacy document"),
            version=obj.get("version"),
        )


def doc_summary(obj: Dict[str, Any]) -> List[Tuple[str, str]]:
    """Clear-text (name, language) pairs of a raw document of any known shape."""
    if "files" in obj and isinstance(obj["files"], list):
        return [(str(f.get("name", "")), str(f.get("language", ""))) for f in obj["files"] if isinstance(f, dict)]
    return [(LEGACY_FILE_NAME, str(obj.get("language", "")))]
