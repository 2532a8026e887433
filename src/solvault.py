#!/usr/bin/env python3
"""
Solution Vault - password-protected solution documents.

A solution is a title plus ordered source files, each with review
annotations. On disk it is JSON where names, languages and the title are
clear text and every code / annotations field is an independent token:

    base64( salt[16] || nonce[12] || AES-256-GCM(ciphertext || tag) )

with key = PBKDF2-HMAC-SHA256(password, salt, 250k iterations) per token.

Formats:
  (no version) / "1.0"  single file: {language, code, annotations}   read only
  "2.0"                 {version, title, files: [{name, language, code, annotations}]}

Commands:
  seal / unseal        Encrypt or decrypt a single string
  encode <in> <out>    Clear-text solution JSON -> encrypted solution
  decode <in> <out>    Encrypted solution (any version) -> clear-text JSON
  ls <doc>             Show title, file names and languages (no password)
  extract <doc> <name> Decrypt one file's code only
  add <doc> <path>     Encrypt a source file and append it
  rm / rename          Edit clear-text file entries (no password)
  upgrade <doc>        Rewrite an old document as version 2.0
"""
from __future__ import annotations

import logging
import sys

from ui.cli import build_parser
from utils.helper import log_level


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=log_level(args.verbose), format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except (ValueError, OSError) as exc:
        # SolutionError is a ValueError
        print(f"[!] {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
