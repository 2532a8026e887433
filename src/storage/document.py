import json
import os

from pathlib import Path
from typing import Any, Dict

from utils.dataModels import EncodedDocument, PlainDocument
from utils.errors import MalformedDocument


def _write_json(path: Path, obj: Dict[str, Any]) -> None:
    tmp = path.with_suffix(".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
        f.write("\n")
    os.replace(tmp, path)


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        obj = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedDocument(f"{path.name} is not a JSON document") from exc
    if not isinstance(obj, dict):
        raise MalformedDocument(f"{path.name} does not contain a JSON object")
    return obj


def save_document(path: Path, doc: EncodedDocument | Dict[str, Any]) -> None:
    _write_json(path, doc.to_dict() if isinstance(doc, EncodedDocument) else doc)


def load_document(path: Path) -> Dict[str, Any]:
    """Raw record; left undecoded so a missing `version` stays visible to the codec."""
    return _read_json(path)


def save_plain(path: Path, doc: PlainDocument) -> None:
    _write_json(path, doc.to_dict())


def load_plain(path: Path) -> PlainDocument:
    return PlainDocument.from_dict(_read_json(path))
