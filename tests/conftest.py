import textwrap
from pathlib import Path

import pytest

from smartscript.processor import ScriptProcessor

from tests.infrastructure.file_utils import write
from tests.infrastructure.rendering_utils import RecordingContext


@pytest.fixture
def processor() -> ScriptProcessor:
    return ScriptProcessor()


@pytest.fixture
def recording_context() -> RecordingContext:
    return RecordingContext()


@pytest.fixture
def script_dir(tmp_path: Path) -> Path:
    """Каталог с парой скриптов и файлом настроек."""
    root = tmp_path
    write(root / "loop.smscr", "{$ FOR i 1 3 $}[{$= i $}]{$END$}")
    write(
        root / "sum.smscr",
        textwrap.dedent("""\
            a={$= "a" "0" @paramGet $}
            b={$= "b" "0" @paramGet $}
            sum={$= "a" "0" @paramGet "b" "0" @paramGet + $}
            """),
    )
    write(root / "broken.smscr", "{$ FOR i 1 3 $}no end")
    write(root / "smartscript.yaml", "mime_type: text/plain\nencoding: UTF-8\n")
    return root
