"""Unit tests for template materialization."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from codegen.materializer import (
    TemplatePair,
    materialize_templates,
    parse_revision_arguments,
    render_template,
)
from core.errors import CodegenError

_ARMS_TEMPLATE = (
    "{% for revision in revisions | at_most(30) %}legacy {{ revision }}\n{% endfor %}"
    "{% for revision in revisions | greater_than(30) %}modern {{ revision }}\n{% endfor %}"
)


def _write_template(root: Path, name: str, text: str) -> TemplatePair:
    template = Path("templates") / name
    (root / "templates").mkdir(parents=True, exist_ok=True)
    (root / template).write_text(text, encoding="utf-8")
    return TemplatePair(template=template, output=Path("out") / name.removesuffix(".j2"))


def test_render_splits_arms_at_cutoff() -> None:
    """Revisions should land in the arm matching their side of the cutoff."""
    rendered = render_template(_ARMS_TEMPLATE, [28, 29, 30, 32, 33])

    assert rendered == "legacy 28\nlegacy 29\nlegacy 30\nmodern 32\nmodern 33\n"


def test_render_is_deterministic() -> None:
    """Rendering twice with the same input should give identical output."""
    revisions = [28, 29, 30, 32, 33]

    assert render_template(_ARMS_TEMPLATE, revisions) == render_template(_ARMS_TEMPLATE, revisions)


def test_undefined_variable_fails_render() -> None:
    """Templates referencing unknown variables should fail."""
    with pytest.raises(CodegenError, match="versions"):
        render_template("{% for v in versions %}{{ v }}{% endfor %}", [28], "broken.j2")


def test_invalid_template_syntax_fails_render() -> None:
    """Template syntax errors should surface as codegen errors."""
    with pytest.raises(CodegenError, match="failed to render template"):
        render_template("{% for revision in revisions %}", [28])


def test_materialize_writes_every_output(tmp_path: Path) -> None:
    """Each template pair should produce its output file."""
    pairs = (
        _write_template(tmp_path, "arms.txt.j2", _ARMS_TEMPLATE),
        _write_template(tmp_path, "count.txt.j2", "{{ revisions | length }}\n"),
    )

    outputs = materialize_templates([29, 36], tmp_path, pairs)

    assert outputs == (tmp_path / "out/arms.txt", tmp_path / "out/count.txt")
    assert (tmp_path / "out/arms.txt").read_text(encoding="utf-8") == "legacy 29\nmodern 36\n"
    assert (tmp_path / "out/count.txt").read_text(encoding="utf-8") == "2\n"


def test_failed_render_leaves_existing_outputs_untouched(tmp_path: Path) -> None:
    """A failure in any template should not modify any output."""
    good = _write_template(tmp_path, "good.txt.j2", _ARMS_TEMPLATE)
    bad = _write_template(tmp_path, "bad.txt.j2", "{{ missing_variable }}")
    (tmp_path / "out").mkdir()
    (tmp_path / good.output).write_text("previous\n", encoding="utf-8")

    with pytest.raises(CodegenError):
        materialize_templates([28, 32], tmp_path, (good, bad))

    assert (tmp_path / good.output).read_text(encoding="utf-8") == "previous\n"
    assert not (tmp_path / bad.output).exists()
    assert sorted(path.name for path in (tmp_path / "out").iterdir()) == ["good.txt"]


def test_missing_template_fails_without_writing(tmp_path: Path) -> None:
    """A missing template should fail before any output is written."""
    good = _write_template(tmp_path, "good.txt.j2", _ARMS_TEMPLATE)
    missing = TemplatePair(template=Path("templates/absent.j2"), output=Path("out/absent"))

    with pytest.raises(CodegenError, match="template not found"):
        materialize_templates([28], tmp_path, (good, missing))

    assert not (tmp_path / "out").exists()


def test_failed_replace_restores_already_replaced_outputs(tmp_path: Path, monkeypatch) -> None:
    """A move failing midway should put earlier outputs back as they were."""
    first = _write_template(tmp_path, "first.txt.j2", _ARMS_TEMPLATE)
    second = _write_template(tmp_path, "second.txt.j2", "{{ revisions | length }}\n")
    third = _write_template(tmp_path, "third.txt.j2", "{{ revisions | first }}\n")
    (tmp_path / "out").mkdir()
    (tmp_path / first.output).write_text("previous\n", encoding="utf-8")
    real_replace = os.replace
    calls: list[str] = []

    def replace_until_third(source: Path, target: Path) -> None:
        calls.append(str(target))
        if len(calls) == 3:
            raise OSError("disk full")
        real_replace(source, target)

    monkeypatch.setattr("codegen.materializer.os.replace", replace_until_third)

    with pytest.raises(CodegenError, match="disk full"):
        materialize_templates([28, 32], tmp_path, (first, second, third))

    assert (tmp_path / first.output).read_text(encoding="utf-8") == "previous\n"
    assert sorted(path.name for path in (tmp_path / "out").iterdir()) == ["first.txt"]


def test_parse_revision_arguments_accepts_ascending_integers() -> None:
    """Valid arguments should parse to a tuple of integers."""
    assert parse_revision_arguments(["28", "29", "30", "32"]) == (28, 29, 30, 32)


@pytest.mark.parametrize(
    ("values", "message"),
    [
        ([], "No revisions given"),
        (["28", "abc"], 'invalid version "abc"'),
        (["-1"], 'invalid version "-1"'),
        (["30", "29"], 'invalid version "29"'),
        (["30", "30"], "strictly ascending"),
    ],
)
def test_parse_revision_arguments_rejects_bad_input(values: list[str], message: str) -> None:
    """Non-integers, empty lists and unordered lists should be rejected."""
    with pytest.raises(CodegenError, match=message):
        parse_revision_arguments(values)
