import json

from pathlib import Path

import pytest

from crypto.envelope import seal
from solvault import main
from storage.document import load_document, load_plain, save_document, save_plain
from utils.dataModels import PlainDocument
from utils.helper import ENV_PASSWORD, guess_language, log_level


@pytest.fixture(autouse=True)
def _password_env(monkeypatch, password: str) -> None:
    monkeypatch.setenv(ENV_PASSWORD, password)


def test_seal_then_unseal(capsys) -> None:
    assert main(["seal", "hello"]) == 0
    token = capsys.readouterr().out.strip()
    assert main(["unseal", token]) == 0
    assert capsys.readouterr().out.strip() == "hello"


def test_unseal_with_wrong_password_reports_failure(capsys, password: str) -> None:
    token = seal(password, "hello")
    assert main(["unseal", token, "--password", "nope"]) == 1
    assert "Invalid password or corrupted data" in capsys.readouterr().out


def test_encode_decode_files(tmp_path, go_solution: PlainDocument) -> None:
    plain_in, enc, plain_out = tmp_path / "in.json", tmp_path / "enc.json", tmp_path / "out.json"
    save_plain(plain_in, go_solution)

    assert main(["encode", str(plain_in), str(enc), "--workers", "2"]) == 0
    assert load_document(enc)["version"] == "2.0"
    assert main(["decode", str(enc), str(plain_out)]) == 0
    assert load_plain(plain_out) == go_solution


def test_add_ls_extract(tmp_path, capsys) -> None:
    doc = tmp_path / "solution.json"
    src = tmp_path / "main.go"
    src.write_text("package main\n", encoding="utf-8")

    assert main(["add", str(doc), str(src), "--title", "Homework"]) == 0
    assert main(["add", str(doc), str(src), "--name", "copy.txt", "--language", "text"]) == 0
    capsys.readouterr()

    assert main(["ls", str(doc)]) == 0
    out = capsys.readouterr().out
    assert "version: '2.0'" in out
    assert "title:   Homework" in out
    assert "main.go\tgo" in out
    assert "copy.txt\ttext" in out

    assert main(["extract", str(doc), "main.go"]) == 0
    assert capsys.readouterr().out == "package main\n"

    target = tmp_path / "extracted.go"
    assert main(["extract", str(doc), "copy.txt", str(target)]) == 0
    assert target.read_text(encoding="utf-8") == "package main\n"


def test_add_refuses_a_different_password(tmp_path) -> None:
    doc = tmp_path / "solution.json"
    src = tmp_path / "a.py"
    src.write_text("print(1)\n", encoding="utf-8")
    assert main(["add", str(doc), str(src)]) == 0
    assert main(["add", str(doc), str(src), "--password", "other"]) == 1
    assert len(load_document(doc)["files"]) == 1


def test_extract_missing_file_exits(tmp_path) -> None:
    doc = tmp_path / "solution.json"
    save_document(doc, {"version": "2.0", "title": "T", "files": []})
    with pytest.raises(SystemExit) as info:
        main(["extract", str(doc), "nope.py"])
    assert info.value.code == 1


def test_rm_and_rename_need_no_password(tmp_path, monkeypatch, password: str) -> None:
    doc = tmp_path / "solution.json"
    token = seal(password, "[]")
    save_document(doc, {
        "version": "2.0",
        "title": "T",
        "files": [
            {"name": "a.py", "language": "python", "code": token, "annotations": token},
            {"name": "b.py", "language": "python", "code": token, "annotations": token},
        ],
    })
    monkeypatch.delenv(ENV_PASSWORD)

    assert main(["rename", str(doc), "a.py", "c.py"]) == 0
    assert main(["rm", str(doc), "b.py"]) == 0
    files = load_document(doc)["files"]
    assert [f["name"] for f in files] == ["c.py"]
    assert files[0]["code"] == token


def test_upgrade_legacy_document(tmp_path, legacy_record: dict, capsys) -> None:
    doc = tmp_path / "old.json"
    save_document(doc, legacy_record)

    assert main(["ls", str(doc)]) == 0
    assert "version: (none)" in capsys.readouterr().out
    with pytest.raises(SystemExit):
        main(["rm", str(doc), "unnamed"])

    assert main(["upgrade", str(doc)]) == 0
    raw = json.loads(doc.read_text(encoding="utf-8"))
    assert raw["version"] == "2.0"
    assert raw["title"] == "Untitled"
    assert [(f["name"], f["language"]) for f in raw["files"]] == [("unnamed", "py")]

    capsys.readouterr()
    assert main(["extract", str(doc), "unnamed"]) == 0
    assert capsys.readouterr().out == "print(1)"


def test_unknown_version_is_reported(tmp_path, capsys) -> None:
    doc = tmp_path / "future.json"
    save_document(doc, {"version": "9.9", "title": "T", "files": []})
    assert main(["decode", str(doc), str(tmp_path / "out.json")]) == 1
    assert "9.9" in capsys.readouterr().out


def test_helpers() -> None:
    assert guess_language(Path("x.RS")) == "rust"
    assert guess_language(Path("Makefile")) == "plaintext"
    assert log_level(2) == 10
    assert log_level(1) == 20


def test_ls_tells_null_version_apart_from_missing(tmp_path, legacy_record: dict, capsys) -> None:
    doc = tmp_path / "null.json"
    save_document(doc, dict(legacy_record, version=None))
    assert main(["ls", str(doc)]) == 0
    assert "version: None" in capsys.readouterr().out

    save_document(doc, dict(legacy_record, version=""))
    assert main(["ls", str(doc)]) == 0
    assert "version: ''" in capsys.readouterr().out


def test_upgrade_reports_tagged_legacy_version(tmp_path, legacy_record: dict, capsys) -> None:
    doc = tmp_path / "v1.json"
    save_document(doc, dict(legacy_record, version="1.0"))
    assert main(["upgrade", str(doc)]) == 0
    assert "from version '1.0' to 2.0" in capsys.readouterr().out
