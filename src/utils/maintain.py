import argparse
import sys

from dataclasses import replace
from pathlib import Path

from solution.codec import decode, encode, is_current, version_label
from storage.document import load_document, save_document
from utils.dataModels import CURRENT_VERSION, EncodedDocument
from utils.helper import resolve_password


def _load_current(doc_path: Path) -> EncodedDocument:
    raw = load_document(doc_path)
    if not is_current(raw):
        print(f"[!] {doc_path.name} uses an older format, run 'upgrade' first")
        sys.exit(1)
    return EncodedDocument.from_dict(raw)


def cmd_rm(args: argparse.Namespace) -> None:
    doc_path = Path(args.doc)
    doc = _load_current(doc_path)
    if not any(f.name == args.name for f in doc.files):
        print(f"[!] No such file: {args.name}")
        sys.exit(1)
    # clear-text metadata only, no password needed
    files = tuple(f for f in doc.files if f.name != args.name)
    save_document(doc_path, replace(doc, files=files))
    print(f"[+] Removed {args.name}")


def cmd_rename(args: argparse.Namespace) -> None:
    doc_path = Path(args.doc)
    doc = _load_current(doc_path)
    if not any(f.name == args.name for f in doc.files):
        print(f"[!] No such file: {args.name}")
        sys.exit(1)
    files = tuple(replace(f, name=args.new_name) if f.name == args.name else f for f in doc.files)
    save_document(doc_path, replace(doc, files=files))
    print(f"[+] Renamed {args.name} -> {args.new_name}")


def cmd_upgrade(args: argparse.Namespace) -> None:
    """Rewrite an older document in the current format (decode, then encode with the same password)."""
    doc_path = Path(args.doc)
    raw = load_document(doc_path)
    if is_current(raw):
        print(f"[+] {doc_path.name} is already version {CURRENT_VERSION}")
        return
    old = version_label(raw)
    password = resolve_password(args.password)

    plain = decode(password, raw, max_workers=args.workers)
    save_document(doc_path, encode(password, plain, max_workers=args.workers))
    print(f"[+] Upgraded {doc_path.name} from version {old} to {CURRENT_VERSION}")
