"""Build driver tests: traversal, output layout, stylesheet and failures."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from mamd.build import FileTask, SiteBuilder, build_site, copy_stylesheet, discover
from mamd.config import BuildConfig
from mamd.errors import BuildError, StylesheetError, TemplateLoadError, TraversalError
from mamd.template import PageTemplate


def read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


class TestFileTask:
    """Output location and stylesheet offset of one input file."""

    def test_root_file(self) -> None:
        task = FileTask.for_source(Path("/in"), Path("out"), Path("/in/index.md"))
        assert task.depth == 0
        assert task.css_offset == ""
        assert task.title == "index"
        assert task.output_path == Path("out/index.html")

    def test_nested_file(self) -> None:
        task = FileTask.for_source(Path("/in"), Path("out"), Path("/in/a/b/c/doc.md"))
        assert task.rel_dir == Path("a/b/c")
        assert task.depth == 3
        assert task.css_offset == "../../../"
        assert task.output_path == Path("out/a/b/c/doc.html")

    def test_title_drops_only_last_suffix(self) -> None:
        task = FileTask.for_source(Path("/in"), Path("out"), Path("/in/v1.2.md"))
        assert task.title == "v1.2"
        assert task.output_path.name == "v1.2.html"

    def test_bare_suffix_name_has_empty_title(self) -> None:
        task = FileTask.for_source(Path("/in"), Path("out"), Path("/in/.md"))
        assert task.title == ""
        assert task.output_path == Path("out/.html")


class TestDiscover:
    """Depth-first, sorted, Markdown files only."""

    def test_order_and_filtering(self, site, write_file) -> None:
        input_root, _ = site
        for name in ("b.md", "a.md", "notes.txt", "UPPER.MD", "sub/c.md", "sub/deeper/d.md"):
            write_file(input_root / name, "x")
        (input_root / "empty").mkdir()

        found = [p.relative_to(input_root).as_posix() for p in discover(input_root)]
        assert found == ["a.md", "b.md", "sub/c.md", "sub/deeper/d.md"]

    def test_custom_suffixes(self, site, write_file) -> None:
        input_root, _ = site
        write_file(input_root / "a.md", "x")
        write_file(input_root / "b.markdown", "x")
        found = [p.name for p in discover(input_root, (".md", ".markdown"))]
        assert found == ["a.md", "b.markdown"]

    def test_file_named_only_suffix_is_found(self, site, write_file) -> None:
        input_root, _ = site
        write_file(input_root / ".md", "x")
        write_file(input_root / "a.md", "x")
        assert [p.name for p in discover(input_root)] == [".md", "a.md"]

    def test_directory_named_like_markdown_is_descended(self, site, write_file) -> None:
        input_root, _ = site
        write_file(input_root / "odd.md" / "inner.md", "x")
        assert [p.name for p in discover(input_root)] == ["inner.md"]

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(TraversalError):
            list(discover(tmp_path / "missing"))


class TestCopyStylesheet:
    """Copy only when the target is missing or stale."""

    def test_copies_then_skips(self, tmp_path: Path, write_file) -> None:
        source = write_file(tmp_path / "src.css", "body {}")
        target = tmp_path / "out" / "mamd.css"
        assert copy_stylesheet(source, target) is True
        assert read(target) == "body {}"
        assert copy_stylesheet(source, target) is False

    def test_newer_source_is_copied_again(self, tmp_path: Path, write_file) -> None:
        source = write_file(tmp_path / "src.css", "old")
        target = tmp_path / "mamd.css"
        copy_stylesheet(source, target)

        source.write_text("new", encoding="utf-8")
        stat = target.stat()
        os.utime(source, (stat.st_atime + 10, stat.st_mtime + 10))
        assert copy_stylesheet(source, target) is True
        assert read(target) == "new"

    def test_never_copied_onto_itself(self, tmp_path: Path, write_file) -> None:
        source = write_file(tmp_path / "mamd.css", "body {}")
        os.utime(source, (0, 0))
        assert copy_stylesheet(source, tmp_path / "mamd.css") is False

    def test_missing_source(self, tmp_path: Path) -> None:
        with pytest.raises(StylesheetError, match="missing.css"):
            copy_stylesheet(tmp_path / "missing.css", tmp_path / "mamd.css")


class TestBuildSite:
    """End-to-end builds over a temporary tree."""

    def test_single_page(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "index.md", "# Hi\n\n```go\nfunc main() {}\n```\n")

        report = build_site(config)

        assert report.ok
        page = read(config.output_root / "index.html")
        assert '<h1 id="hi">Hi</h1>' in page
        assert '<div class="highlight"' in page
        assert '<span style="' in page
        assert 'href="mamd.css"' in page
        assert "<title>index</title>" in page
        assert (config.output_root / "mamd.css").is_file()
        assert report.stylesheet_copied is True

    def test_nested_page_links_up(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "docs" / "guide.md", "Some *text*.\n")

        build_site(config)

        page = read(config.output_root / "docs" / "guide.html")
        assert 'href="../mamd.css"' in page
        assert "<p>Some <em>text</em>.</p>" in page
        assert not (config.output_root / "docs" / "mamd.css").exists()

    def test_deep_offset(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "a" / "b" / "c" / "doc.md", "x\n")
        build_site(config)
        assert 'href="../../../mamd.css"' in read(config.output_root / "a/b/c/doc.html")

    def test_only_markdown_files_produce_pages(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "page.md", "x\n")
        write_file(config.input_root / "image.png", b"\x89PNG")
        report = build_site(config)
        assert report.written == [config.output_root / "page.html"]
        assert not (config.output_root / "image.html").exists()

    def test_bare_suffix_file_is_converted(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / ".md", "*hidden*\n")
        report = build_site(config)
        assert report.written == [config.output_root / ".html"]
        assert "<em>hidden</em>" in read(config.output_root / ".html")

    def test_empty_tree_still_copies_stylesheet(self, config: BuildConfig) -> None:
        report = build_site(config)
        assert report.written == []
        assert (config.output_root / "mamd.css").is_file()

    def test_unknown_language_falls_back(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "p.md", "```klingon\nqapla' <b>\n```\n")
        build_site(config)
        page = read(config.output_root / "p.html")
        assert "qapla" in page
        assert "<b>" not in page
        assert "&lt;" in page

    def test_two_builds_are_byte_identical(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "a.md", "# A\n\n```python\ndef f():\n    pass\n```\n")
        write_file(config.input_root / "sub" / "b.md", "- [x] done\n- [ ] todo\n")

        build_site(config)
        first = {p: p.read_bytes() for p in config.output_root.rglob("*.html")}
        build_site(config)
        second = {p: p.read_bytes() for p in config.output_root.rglob("*.html")}

        assert first == second
        assert len(first) == 2

    def test_crlf_output_is_lf(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "w.md", b"# W\r\n\r\ntext\r\n")
        build_site(config)
        assert b"\r" not in (config.output_root / "w.html").read_bytes()

    def test_progress_row_is_logged(self, config: BuildConfig, write_file, caplog) -> None:
        write_file(config.input_root / "index.md", "x\n")
        caplog.set_level(logging.INFO, logger="mamd")
        build_site(config)
        rows = [r.getMessage() for r in caplog.records if " | " in r.getMessage()]
        assert len(rows) == 1
        assert rows[0].rstrip().endswith(str(config.output_root))
        assert "index.md" in rows[0]


class TestFailures:
    """Per-file isolation, fail_fast and fatal errors."""

    def test_bad_file_does_not_stop_siblings(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "a_good.md", "# Good\n")
        write_file(config.input_root / "b_bad.md", b"# Bad \xff\xfe\n")
        write_file(config.input_root / "c_good.md", "# Also good\n")

        report = build_site(config)

        assert not report.ok
        assert [f.source.name for f in report.failures] == ["b_bad.md"]
        assert len(report.written) == 2
        assert (config.output_root / "c_good.html").is_file()
        assert not (config.output_root / "b_bad.html").exists()
        assert "1 failed" in report.summary()
        assert "b_bad.md" in str(report.failures[0])

    def test_fail_fast_raises(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "a_bad.md", b"\xff")
        write_file(config.input_root / "b_good.md", "ok\n")

        with pytest.raises(BuildError, match="a_bad.md"):
            build_site(config.with_overrides(fail_fast=True))
        assert not (config.output_root / "b_good.html").exists()

    def test_missing_template_is_fatal_before_any_file(
        self, config: BuildConfig, write_file, tmp_path: Path
    ) -> None:
        write_file(config.input_root / "index.md", "x\n")
        bad = config.with_overrides(template_path=tmp_path / "nope.html")

        with pytest.raises(TemplateLoadError):
            build_site(bad)
        assert not config.output_root.exists()

    def test_missing_stylesheet_is_fatal(
        self, config: BuildConfig, write_file, tmp_path: Path
    ) -> None:
        write_file(config.input_root / "index.md", "x\n")
        with pytest.raises(StylesheetError):
            build_site(config.with_overrides(stylesheet_path=tmp_path / "nope.css"))
        assert not (config.output_root / "index.html").exists()

    def test_missing_input_root_is_fatal(self, tmp_path: Path) -> None:
        config = BuildConfig(input_root=tmp_path / "missing", output_root=tmp_path / "out")
        with pytest.raises(TraversalError):
            build_site(config)

    def test_template_render_failure_is_per_file(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "index.md", "x\n")
        template = PageTemplate.from_string("{{ content }}{{ undefined_name }}")
        report = SiteBuilder(config, template).run()
        assert len(report.failures) == 1
        assert "undefined_name" in str(report.failures[0].error)


class TestScenarios:
    """End-to-end pages for the documented usage scenarios."""

    def test_go_block_is_tokenized(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "index.md", "# Hi\n\n```go\nfunc f(){}\n```\n")
        build_site(config)
        page = read(config.output_root / "index.html")
        assert '<h1 id="hi">Hi</h1>' in page
        assert "<pre><code" not in page
        assert ">func</span>" in page

    def test_untagged_python_is_inferred(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "py.md", "```\ndef f():\n    return 1\n```\n")
        build_site(config)
        page = read(config.output_root / "py.html")
        # keywords, the function name and the number are styled separately
        assert page.count("<span style=") >= 4
        assert ">def</span>" in page

    def test_unknown_tag_is_plain_text(self, config: BuildConfig, write_file) -> None:
        write_file(config.input_root / "u.md", "```foobarlang\nhello world\n```\n")
        report = build_site(config)
        page = read(config.output_root / "u.html")
        assert report.ok
        assert '<div class="highlight"' in page
        assert "hello world" in page
