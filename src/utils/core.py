import argparse
import logging
import sys

from pathlib import Path

from crypto.envelope import seal, unseal
from solution.codec import decode, decode_file, encode, encode_file, is_current, parse_document, version_label
from storage.document import load_document, load_plain, save_document, save_plain
from utils.dataModels import LEGACY_TITLE, EncodedDocument, LegacyDocument, PlainFile, doc_summary
from utils.helper import guess_language, resolve_password

logger = logging.getLogger(__name__)


def _read_text_arg(value: str | None) -> str:
    return sys.stdin.read() if value is None or value == "-" else value


def cmd_seal(args: argparse.Namespace) -> None:
    password = resolve_password(args.password, confirm=True)
    print(seal(password, _read_text_arg(args.text)))


def cmd_unseal(args: argparse.Namespace) -> None:
    password = resolve_password(args.password)
    token = _read_text_arg(args.token)
    sys.stdout.write(unseal(password, token.strip()))
    if sys.stdout.isatty():
        sys.stdout.write("\n")


def cmd_encode(args: argparse.Namespace) -> None:
    src = Path(args.src)
    out = Path(args.out)
    plain = load_plain(src)
    password = resolve_password(args.password, confirm=True)

    encoded = encode(password, plain, max_workers=args.workers)
    save_document(out, encoded)
    print(f"[+] Encrypted {len(encoded.files)} file(s) from {src.name} -> {out}")


def cmd_decode(args: argparse.Namespace) -> None:
    src = Path(args.src)
    out = Path(args.out)
    raw = load_document(src)
    password = resolve_password(args.password)

    plain = decode(password, raw, max_workers=args.workers)
    save_plain(out, plain)
    print(f"[+] Decrypted {len(plain.files)} file(s) from {src.name} -> {out}")


def cmd_ls(args: argparse.Namespace) -> None:
    raw = load_document(Path(args.doc))
    print(f"version: {version_label(raw)}")
    print(f"title:   {raw.get('title', LEGACY_TITLE)}")
    entries = doc_summary(raw)
    if not entries:
        print("(empty)")
        return
    for name, language in entries:
        print(f"{name}\t{language}")


def cmd_extract(args: argparse.Namespace) -> None:
    raw = load_document(Path(args.doc))
    doc = parse_document(raw)
    password = resolve_password(args.password)

    if isinstance(doc, LegacyDocument):
        plain_files = decode(password, doc).files
        match = next((f for f in plain_files if f.name == args.name), None)
    else:
        # open only the requested file
        enc = next((f for f in doc.files if f.name == args.name), None)
        match = decode_file(password, enc) if enc is not None else None

    if match is None:
        print(f"[!] No such file: {args.name}")
        sys.exit(1)

    if args.out:
        out = Path(args.out)
        out.write_text(match.code, encoding="utf-8")
        print(f"[+] Extracted {match.name} -> {out}")
    else:
        sys.stdout.write(match.code)


def _check_password(password: str, doc: EncodedDocument) -> None:
    """Open one existing field so a document never mixes passwords."""
    if doc.files:
        unseal(password, doc.files[0].annotations)


def cmd_add(args: argparse.Namespace) -> None:
    doc_path = Path(args.doc)
    src = Path(args.path)
    if not src.is_file():
        print(f"[!] Not a file: {src}")
        sys.exit(1)

    if doc_path.exists():
        raw = load_document(doc_path)
        if not is_current(raw):
            print(f"[!] {doc_path.name} uses an older format, run 'upgrade' first")
            sys.exit(1)
        doc = EncodedDocument.from_dict(raw)
        password = resolve_password(args.password)
        _check_password(password, doc)
    else:
        doc = EncodedDocument(title=args.title or LEGACY_TITLE)
        password = resolve_password(args.password, confirm=True)

    name = args.name or src.name
    if any(f.name == name for f in doc.files):
        logger.warning("document already has a file named %r", name)

    plain = PlainFile(
        name=name,
        language=args.language or guess_language(src),
        code=src.read_text(encoding="utf-8"),
    )
    entry = encode_file(password, plain)
    save_document(doc_path, EncodedDocument(title=doc.title, files=doc.files + (entry,), version=doc.version))
    print(f"[+] Encrypted and added {name} ({plain.language})")
