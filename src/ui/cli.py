import argparse

from utils.core import cmd_add, cmd_decode, cmd_encode, cmd_extract, cmd_ls, cmd_seal, cmd_unseal
from utils.maintain import cmd_rename, cmd_rm, cmd_upgrade


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return n


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    common.add_argument("--workers", type=_positive_int, default=None,
                        help="Parallel files during encode/decode (default: $SOLVAULT_WORKERS or CPU count)")

    pw = argparse.ArgumentParser(add_help=False)
    pw.add_argument("--password", help="Password (default: $SOLVAULT_PASSWORD or prompt)")

    p = argparse.ArgumentParser(description="Password-protected solution documents (code + review annotations)")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_seal = sub.add_parser("seal", help="Encrypt a string into a token", parents=[common, pw])
    p_seal.add_argument("text", nargs="?", help="Text to seal (default: stdin)")
    p_seal.set_defaults(func=cmd_seal)

    p_unseal = sub.add_parser("unseal", help="Decrypt a token", parents=[common, pw])
    p_unseal.add_argument("token", nargs="?", help="Token to open (default: stdin)")
    p_unseal.set_defaults(func=cmd_unseal)

    p_enc = sub.add_parser("encode", help="Encrypt a clear-text solution JSON", parents=[common, pw])
    p_enc.add_argument("src", help="Clear-text solution (title/files JSON)")
    p_enc.add_argument("out", help="Encrypted output path")
    p_enc.set_defaults(func=cmd_encode)

    p_dec = sub.add_parser("decode", help="Decrypt a solution of any version", parents=[common, pw])
    p_dec.add_argument("src", help="Encrypted solution")
    p_dec.add_argument("out", help="Clear-text output path")
    p_dec.set_defaults(func=cmd_decode)

    p_ls = sub.add_parser("ls", help="List files (no password needed)", parents=[common])
    p_ls.add_argument("doc", help="Encrypted solution")
    p_ls.set_defaults(func=cmd_ls)

    p_ext = sub.add_parser("extract", help="Decrypt the code of a single file", parents=[common, pw])
    p_ext.add_argument("doc", help="Encrypted solution")
    p_ext.add_argument("name", help="File name inside the solution")
    p_ext.add_argument("out", nargs="?", help="Output path (default: stdout)")
    p_ext.set_defaults(func=cmd_extract)

    p_add = sub.add_parser("add", help="Encrypt a source file and append it", parents=[common, pw])
    p_add.add_argument("doc", help="Encrypted solution (created if missing)")
    p_add.add_argument("path", help="Source file to add")
    p_add.add_argument("--name", help="Name inside the solution (default: file name)")
    p_add.add_argument("--language", help="Language id (default: guessed from extension)")
    p_add.add_argument("--title", help="Title for a new solution")
    p_add.set_defaults(func=cmd_add)

    p_rm = sub.add_parser("rm", help="Remove a file entry", parents=[common])
    p_rm.add_argument("doc", help="Encrypted solution")
    p_rm.add_argument("name", help="File name inside the solution")
    p_rm.set_defaults(func=cmd_rm)

    p_ren = sub.add_parser("rename", help="Rename a file entry", parents=[common])
    p_ren.add_argument("doc", help="Encrypted solution")
    p_ren.add_argument("name", help="Current name")
    p_ren.add_argument("new_name", help="New name")
    p_ren.set_defaults(func=cmd_rename)

    p_up = sub.add_parser("upgrade", help="Rewrite an older solution in the current format", parents=[common, pw])
    p_up.add_argument("doc", help="Encrypted solution")
    p_up.set_defaults(func=cmd_upgrade)

    return p
