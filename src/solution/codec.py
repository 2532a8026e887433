"""
Versioned solution codec.

encode() always writes the current format (2.0). decode() reads every format
ever written:

    tag absent  -> legacy single file, same as 1.0
    "1.0"       -> legacy single file: flat language/code/annotations
    "2.0"       -> title + ordered files, each with its own code/annotations tokens
    other       -> UnsupportedVersion, nothing is decoded

Names, languages and the title stay in clear text. Every code and annotations
field is sealed on its own, so one file can be opened without the others and a
damaged field fails alone.
"""
import json
import logging

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Sequence, Tuple, TypeVar

from crypto.envelope import seal, unseal
from utils.dataModels import (
    CURRENT_VERSION, LEGACY_FILE_NAME, LEGACY_TITLE, VERSION_1, VERSION_2,
    Annotation, EncodedDocument, EncodedFile, LegacyDocument, PlainDocument, PlainFile,
)
from utils.errors import InvalidEncoding, MalformedDocument, UnsupportedVersion
from utils.helper import default_workers

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_NO_VERSION = object()


def _fan_out(fn: Callable[[T], R], items: Sequence[T], max_workers: int | None) -> List[R]:
    """Run fn over items concurrently, results in input order. The first failure (in order) is raised."""
    workers = max_workers if max_workers is not None else default_workers()
    workers = max(1, min(workers, len(items)))
    if workers == 1:
        return [fn(item) for item in items]

    with ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(fn, item) for item in items]
        try:
            return [fut.result() for fut in futures]
        except BaseException:
            for fut in futures:
                fut.cancel()
            raise


# ------------------------------ annotations ------------------------------

def dump_annotations(annotations: Sequence[Annotation]) -> str:
    return json.dumps([a.to_dict() for a in annotations], ensure_ascii=False, separators=(",", ":"))


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def parse_annotations(text: str) -> Tuple[Annotation, ...]:
    try:
        raw = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        # JSONDecodeError is a ValueError; very deep nesting overflows the decoder
        raise InvalidEncoding("Annotations are not valid JSON") from exc
    if not isinstance(raw, list):
        raise InvalidEncoding("Annotations must be a JSON array")
    try:
        return tuple(Annotation.from_dict(a) for a in raw)
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidEncoding(f"Malformed annotation: {exc}") from exc


# ------------------------------ per file ------------------------------

def encode_file(password: str, plain: PlainFile) -> EncodedFile:
    # code and annotations get separate salts, keys and nonces
    return EncodedFile(
        name=plain.name,
        language=plain.language,
        code=seal(password, plain.code),
        annotations=seal(password, dump_annotations(plain.annotations)),
    )


def decode_file(password: str, encoded: EncodedFile) -> PlainFile:
    return PlainFile(
        name=encoded.name,
        language=encoded.language,
        code=unseal(password, encoded.code),
        annotations=parse_annotations(unseal(password, encoded.annotations)),
    )


# ------------------------------ version dispatch ------------------------------

def read_version(raw: Dict[str, Any]) -> Any:
    """The raw version tag, or None when the field is absent."""
    return raw.get("version") if "version" in raw else None


def version_label(raw: Dict[str, Any]) -> str:
    """Printable tag; "(none)" only when the field is missing, so null or "" stay distinguishable."""
    return repr(raw["version"]) if "version" in raw else "(none)"


def parse_document(raw: Any) -> EncodedDocument | LegacyDocument:
    """Turn a raw JSON record into the dataclass for its version."""
    if not isinstance(raw, dict):
        raise MalformedDocument("Solution document must be a JSON object")

    version = raw.get("version", _NO_VERSION)
    if version is _NO_VERSION or version == VERSION_1:
        return LegacyDocument.from_dict(raw)
    if version == VERSION_2:
        return EncodedDocument.from_dict(raw)
    raise UnsupportedVersion(version)


def is_current(raw: Dict[str, Any]) -> bool:
    return isinstance(raw, dict) and raw.get("version", _NO_VERSION) == CURRENT_VERSION


def upgrade_legacy(password: str, legacy: LegacyDocument) -> PlainDocument:
    """Decode a 1.0 or untagged document into the single-file PlainDocument it stands for."""
    if legacy.version not in (None, VERSION_1):
        raise UnsupportedVersion(legacy.version)
    logger.debug("decoding legacy solution (version=%s)", legacy.version or "absent")
    annotations = parse_annotations(unseal(password, legacy.annotations))
    code = unseal(password, legacy.code)
    return PlainDocument(
        title=LEGACY_TITLE,
        files=(PlainFile(name=LEGACY_FILE_NAME, language=legacy.language, code=code, annotations=annotations),),
    )


def _decode_v2(password: str, doc: EncodedDocument, max_workers: int | None) -> PlainDocument:
    logger.debug("decoding solution v%s with %d file(s)", doc.version, len(doc.files))
    files = _fan_out(lambda f: decode_file(password, f), doc.files, max_workers)
    return PlainDocument(title=doc.title, files=tuple(files))


def decode(
    password: str,
    document: EncodedDocument | LegacyDocument | Dict[str, Any],
    max_workers: int | None = None,
) -> PlainDocument:
    """Decode a solution of any known version.

    Raises:
        UnsupportedVersion: unknown version tag.
        MalformedToken, AuthenticationFailed, InvalidEncoding: a field could not be opened.
        MalformedDocument: the raw record is missing fields.
    """
    if isinstance(document, dict):
        document = parse_document(document)

    if isinstance(document, LegacyDocument):
        return upgrade_legacy(password, document)
    if isinstance(document, EncodedDocument):
        if document.version != VERSION_2:
            raise UnsupportedVersion(document.version)
        return _decode_v2(password, document, max_workers)
    raise MalformedDocument(f"Cannot decode object of type {type(document).__name__}")


def encode(password: str, document: PlainDocument, max_workers: int | None = None) -> EncodedDocument:
    """Encrypt a solution. The result always carries the current version."""
    logger.debug("encoding solution with %d file(s)", len(document.files))
    files = _fan_out(lambda f: encode_file(password, f), document.files, max_workers)
    return EncodedDocument(title=document.title, files=tuple(files), version=CURRENT_VERSION)


def decode_mapping(password: str, raw: Dict[str, Any], max_workers: int | None = None) -> PlainDocument:
    return decode(password, parse_document(raw), max_workers)


def encode_mapping(password: str, document: PlainDocument, max_workers: int | None = None) -> Dict[str, Any]:
    return encode(password, document, max_workers).to_dict()
