import os
from pathlib import Path

import pytest

from careerfind.cli import main

requires_live = pytest.mark.skipif(
    os.getenv("RUN_LIVE_INTEGRATION") != "1",
    reason="Set RUN_LIVE_INTEGRATION=1 to execute live integration tests.",
)


@requires_live
def test_live_duckduckgo_crawl_smoke(tmp_path: Path) -> None:
    exit_code = main(
        [
            "-L",
            "Berlin",
            "-b",
            "duckduckgo",
            "-m",
            "none",
            "--db",
            "",
            "--output-dir",
            str(tmp_path),
            "--no-progress",
        ]
    )
    assert exit_code in (0, 1)
