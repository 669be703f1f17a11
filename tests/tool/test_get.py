"""Tests for the get command."""

import json
from pathlib import Path

import pytest

from bloggernetes.tool.bloggernetes import main

from ..fakes import fake_kubectl, page_doc, post_doc


@pytest.fixture
def kubectl(tmp_path: Path) -> Path:
    return fake_kubectl(
        tmp_path,
        {
            "blogposts": [
                post_doc(
                    "hello",
                    "p1",
                    title="Hello",
                    author="alice",
                    tags=["go", "k8s"],
                    authored_date="2024-01-01T00:00:00Z",
                ),
                post_doc(
                    "next",
                    "p2",
                    title="Next",
                    author="bob",
                    tags=["go"],
                    authored_date="2024-02-01T00:00:00Z",
                ),
                post_doc("broken", "p3", authored_date=None),
            ],
            "blogpages": [
                page_doc("contact", title="Contact", order=2),
                page_doc("about", title="About", order=1),
            ],
        },
        {"blogposts": [], "blogpages": []},
    )


def test_get_posts(kubectl: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test printing posts as a table, newest first."""
    main(["get", "posts", "--kubectl", str(kubectl)])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["ID", "TITLE", "AUTHOR", "AUTHOREDDATE", "TAGS"]
    assert [line.split()[0] for line in lines[1:]] == ["p2", "p1"]
    assert lines[2].split()[-1] == "go,k8s"


def test_get_pages(kubectl: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test printing pages in navigation order."""
    main(["get", "pages", "--kubectl", str(kubectl), "-n", "blog"])
    lines = capsys.readouterr().out.splitlines()
    assert [line.split() for line in lines] == [
        ["ID", "TITLE", "ORDER"],
        ["about", "About", "1"],
        ["contact", "Contact", "2"],
    ]
    log = (kubectl.parent / "args.log").read_text()
    assert "/namespaces/blog/blogpages" in log


def test_get_tags_json(kubectl: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test printing tags as json."""
    main(["get", "tags", "--kubectl", str(kubectl), "-o", "json"])
    assert json.loads(capsys.readouterr().out) == [{"tag": "go"}, {"tag": "k8s"}]


def test_get_authors(kubectl: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test printing authors."""
    main(["get", "authors", "--kubectl", str(kubectl)])
    assert capsys.readouterr().out.split() == ["AUTHOR", "alice", "bob"]


def test_get_posts_yaml(kubectl: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test printing whole posts as yaml."""
    main(["get", "posts", "--kubectl", str(kubectl), "-o", "yaml"])
    out = capsys.readouterr().out
    assert out.startswith("---\nid: p2\n")
    assert "authoredDate:" in out
    assert "title: Hello\n" in out


def test_get_nothing(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test an empty namespace."""
    kubectl = fake_kubectl(
        tmp_path,
        {"blogposts": [], "blogpages": []},
        {"blogposts": [], "blogpages": []},
    )
    main(["get", "posts", "--kubectl", str(kubectl)])
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "No posts found in namespace default" in captured.err


def test_get_failure(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test a cluster without the custom resources installed."""
    kubectl = fake_kubectl(tmp_path, {"blogpages": []}, {"blogpages": []})
    with pytest.raises(SystemExit) as exc_info:
        main(["get", "posts", "--kubectl", str(kubectl)])
    assert exc_info.value.code == 1
    err = capsys.readouterr().err
    assert "bloggernetes error:" in err
    assert "could not find the requested resource" in err


def test_get_authors_skips_anonymous(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test that posts without an author do not print an empty row."""
    kubectl = fake_kubectl(
        tmp_path,
        {
            "blogposts": [
                post_doc("signed", author="alice"),
                post_doc("anonymous", title="No byline"),
            ],
            "blogpages": [],
        },
        {"blogposts": [], "blogpages": []},
    )
    main(["get", "authors", "--kubectl", str(kubectl)])
    assert capsys.readouterr().out.splitlines() == ["AUTHOR", "alice"]

    main(["get", "authors", "--kubectl", str(kubectl), "-o", "json"])
    assert json.loads(capsys.readouterr().out) == [{"author": "alice"}]
