"""Build driver: mirror a tree of Markdown files as HTML pages.

For every Markdown file under the input root the driver computes the
parallel output location, converts the file, wraps the fragment in the page
template and writes ``<name>.html``. The shared stylesheet is copied once
to the output root.

Per-file pipeline:

    discovered -> read -> converted -> templated -> written
         \\________\\__________\\___________\\-----> failed

A failure ends only that file's pipeline; the walk continues and the
failure is recorded in the BuildReport. ``BuildConfig.fail_fast`` turns the
first failure into a BuildError instead.

Example:
    >>> config = BuildConfig(input_root=Path("docs"), output_root=Path("site"))
    >>> report = build_site(config)
    >>> report.ok
    True

"""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from mamd.config import MARKDOWN_SUFFIXES, BuildConfig
from mamd.errors import BuildError, MamdError, StylesheetError, TraversalError
from mamd.markdown import Markdown
from mamd.template import PageTemplate, load_template
from mamd.utils.logger import get_logger

logger = get_logger(__name__)

PARENT_DIR = "../"


@dataclass(frozen=True, slots=True)
class FileTask:
    """One Markdown file scheduled for conversion.

    Attributes:
        source: Absolute path of the input file
        rel_dir: Directory of the file relative to the input root
        out_dir: Directory the page is written to
        css_offset: Relative prefix from the page to the output root
    """

    source: Path
    rel_dir: Path
    out_dir: Path
    css_offset: str

    @classmethod
    def for_source(cls, input_root: Path, output_root: Path, source: Path) -> FileTask:
        """Compute the output location of ``source``.

        Example:
            >>> task = FileTask.for_source(Path("/in"), Path("out"), Path("/in/a/b/c/doc.md"))
            >>> task.css_offset
            '../../../'
            >>> task.output_path
            PosixPath('out/a/b/c/doc.html')
        """
        rel_dir = source.parent.relative_to(input_root)
        depth = len(rel_dir.parts)
        return cls(
            source=source,
            rel_dir=rel_dir,
            out_dir=output_root / rel_dir,
            css_offset=PARENT_DIR * depth,
        )

    @property
    def depth(self) -> int:
        """Number of directories between the input root and the file."""
        return len(self.rel_dir.parts)

    @property
    def title(self) -> str:
        """File name up to its last dot (".md" alone gives "")."""
        name = self.source.name
        dot = name.rfind(".")
        return name[:dot] if dot >= 0 else name

    @property
    def output_path(self) -> Path:
        return self.out_dir / f"{self.title}.html"


@dataclass(frozen=True, slots=True)
class FileFailure:
    """A file whose pipeline ended in the failed state."""

    source: Path
    error: Exception

    def __str__(self) -> str:
        return f"{self.source}: {self.error}"


@dataclass(slots=True)
class BuildReport:
    """Outcome of one build run."""

    written: list[Path] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)
    stylesheet_copied: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        text = f"{len(self.written)} page(s) written"
        if self.failures:
            text += f", {len(self.failures)} failed"
        return text


def discover(input_root: Path, suffixes: Sequence[str] = MARKDOWN_SUFFIXES) -> Iterator[Path]:
    """Depth-first walk yielding Markdown files under ``input_root``.

    Directory and file names are visited in sorted order. Entries that are
    not regular files with one of ``suffixes`` are skipped; every directory
    is descended into.

    Raises:
        TraversalError: If a directory cannot be listed
    """

    def _on_error(err: OSError) -> None:
        raise TraversalError(err.filename or str(input_root), err.strerror or str(err)) from err

    for dirpath, dirnames, filenames in os.walk(input_root, onerror=_on_error):
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if name.endswith(tuple(suffixes)) and path.is_file():
                yield path


def copy_stylesheet(source: Path, target: Path) -> bool:
    """Copy the stylesheet unless ``target`` is already up to date.

    The copy happens when ``target`` is missing or older than ``source``.
    A stylesheet is never copied onto itself.

    Returns:
        True if the file was copied

    Raises:
        StylesheetError: If the source is missing or the copy fails
    """
    try:
        source_mtime = source.stat().st_mtime
        if target.exists():
            if target.samefile(source):
                logger.debug("Stylesheet %s is its own target, not copying", source)
                return False
            if target.stat().st_mtime >= source_mtime:
                logger.debug("Stylesheet %s is up to date", target)
                return False
    except OSError as exc:
        raise StylesheetError(str(source), exc.strerror or str(exc)) from exc

    logger.info("Copying CSS to output...")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
    except OSError as exc:
        raise StylesheetError(str(source), exc.strerror or str(exc)) from exc
    return True


class SiteBuilder:
    """Runs one build over an input tree.

    Args:
        config: Build configuration
        template: Page template, loaded once by the caller
        markdown: Conversion pipeline (defaults to Markdown(style=config.style))
    """

    __slots__ = ("_config", "_template", "_markdown")

    def __init__(
        self,
        config: BuildConfig,
        template: PageTemplate,
        markdown: Markdown | None = None,
    ) -> None:
        self._config = config
        self._template = template
        self._markdown = markdown or Markdown(style=config.style)

    @property
    def config(self) -> BuildConfig:
        return self._config

    def tasks(self) -> Iterator[FileTask]:
        """FileTasks for every Markdown file, in walk order."""
        input_root = self._config.input_root.absolute()
        for source in discover(input_root, self._config.suffixes):
            yield FileTask.for_source(input_root, self._config.output_root, source)

    def run(self) -> BuildReport:
        """Copy the stylesheet and build every page.

        Raises:
            StylesheetError: If the stylesheet cannot be copied
            TraversalError: If the input tree cannot be walked
            BuildError: On the first per-file failure when ``fail_fast`` is set
        """
        report = BuildReport()
        report.stylesheet_copied = copy_stylesheet(
            self._config.stylesheet_path, self._config.stylesheet_target
        )

        for task in self.tasks():
            try:
                report.written.append(self.build_file(task))
            except (MamdError, OSError) as exc:
                if self._config.fail_fast:
                    raise BuildError(f"{task.source}: {exc}") from exc
                logger.error("Failed to build %s: %s", task.source, exc)
                report.failures.append(FileFailure(source=task.source, error=exc))

        logger.info("%s", report.summary())
        return report

    def build_file(self, task: FileTask) -> Path:
        """Convert one file and write its page.

        Returns:
            Path of the written page
        """
        task.out_dir.mkdir(parents=True, exist_ok=True)

        data = task.source.read_bytes()
        logger.info("%40s | %7d | %7d | %s", task.source, len(data), task.depth, task.out_dir)

        fragment = self._markdown.convert(data, source_file=str(task.source))
        page = self._template.render(content=fragment, title=task.title, css_offset=task.css_offset)

        task.output_path.write_text(page, encoding="utf-8", newline="")
        return task.output_path


def build_site(config: BuildConfig, *, markdown: Markdown | None = None) -> BuildReport:
    """Load the page template and run a build.

    Raises:
        TemplateLoadError: If the template cannot be loaded (before any
            file is processed)
    """
    template = load_template(config.template_path)
    return SiteBuilder(config, template, markdown).run()
