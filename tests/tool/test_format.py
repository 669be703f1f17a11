"""Tests for the format library."""

import io
import json

import yaml

from bloggernetes.tool.format import (
    JsonFormatter,
    PrintFormatter,
    YamlFormatter,
    format_columns,
    formatter,
)


def test_format_columns_empty_rows() -> None:
    """Tests with no rows."""
    assert list(format_columns(["a", "b", "c"], [])) == ["a    b    c"]


def test_format_columns_rows() -> None:
    """Tests format with normal rows"""
    assert list(
        format_columns(["id", "title"], [["hello", "Hello world"], ["p2", "Next"]])
    ) == [
        "id       title",
        "hello    Hello world",
        "p2       Next",
    ]


def test_print_formatter_empty() -> None:
    """Print formatting with empty data."""
    assert list(PrintFormatter(["id"]).format([])) == []


def test_print_formatter_data() -> None:
    """Print formatting selects columns and joins lists."""
    formatter = PrintFormatter(keys=["id", "tags", "order"])
    assert list(
        formatter.format(
            [
                {"id": "hello", "tags": ["go", "k8s"], "order": 1, "title": "x"},
                {"id": "about", "tags": []},
            ]
        )
    ) == [
        "ID       TAGS      ORDER",
        "hello    go,k8s    1",
        "about",
    ]


def test_yaml_formatter() -> None:
    """Yaml formatting writes one document per record."""
    data = [{"id": "hello", "tags": ["go"]}, {"id": "about", "order": 2}]
    lines = list(YamlFormatter().format(data))
    assert len(lines) == 1
    assert lines[0].startswith("---\n")
    assert list(yaml.safe_load_all(lines[0])) == data


def test_yaml_formatter_empty() -> None:
    """Yaml formatting with empty data."""
    assert list(YamlFormatter().format([])) == []


def test_json_formatter() -> None:
    """Json formatting writes a single array."""
    data = [{"id": "hello"}]
    output = io.StringIO()
    JsonFormatter().print(data, file=output)
    assert json.loads(output.getvalue()) == data


def test_formatter_choice() -> None:
    """Test selecting a formatter from the output flag."""
    assert isinstance(formatter("table", ["id"]), PrintFormatter)
    assert isinstance(formatter("yaml", ["id"]), YamlFormatter)
    assert isinstance(formatter("json", ["id"]), JsonFormatter)
