"""Build the example tree from Python instead of the command line."""

from pathlib import Path

from mamd import BuildConfig, build_site
from mamd.utils.logger import configure_logging

here = Path(__file__).parent
configure_logging()

report = build_site(
    BuildConfig(input_root=here / "docs", output_root=here / "out", style="monokai")
)
print(report.summary())
for failure in report.failures:
    print("  ", failure)
