from pathlib import Path

import pytest

from btpl.template import RenderContext, reset_default_context

from tests.infrastructure.file_utils import write_page


@pytest.fixture(autouse=True)
def _fresh_default_context():
    # процессный контекст не должен переживать тест
    reset_default_context()
    yield
    reset_default_context()


@pytest.fixture
def ctx() -> RenderContext:
    """Изолированный контекст рендеринга."""
    return RenderContext()


@pytest.fixture
def page_dir(tmp_path: Path) -> Path:
    """Каталог с примером страницы: main.html, overall.html, page.yaml."""
    return write_page(tmp_path)
