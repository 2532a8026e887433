import pytest

from crypto.envelope import seal
from utils.dataModels import Annotation, PlainDocument, PlainFile

PASSWORD = "correct horse battery staple"


@pytest.fixture
def password() -> str:
    return PASSWORD


@pytest.fixture
def go_solution() -> PlainDocument:
    return PlainDocument(
        title="T",
        files=(
            PlainFile(
                name="a.go",
                language="go",
                code="package main",
                annotations=(Annotation(comment="x", line=(1, 1), column=(0, 5)),),
            ),
        ),
    )


@pytest.fixture
def legacy_record(password: str) -> dict:
    return {
        "language": "py",
        "code": seal(password, "print(1)"),
        "annotations": seal(password, "[]"),
    }
