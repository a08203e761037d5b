from pathlib import Path

import pytest
from PIL import Image

SITEURL = 'https://eloise.rip'


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    return tmp_path / 'content'


@pytest.fixture
def make_image(content_dir: Path):
    def _make(relative: str, size=(640, 480)) -> Path:
        path = content_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new('RGB', size, color=(200, 120, 180)).save(path)
        return path

    return _make


@pytest.fixture
def settings(content_dir: Path) -> dict:
    return {
        'SITENAME': 'eloise.rip',
        'SITEURL': SITEURL,
        'SITESUBTITLE': 'from the goblin hole',
        'PATH': str(content_dir),
        'DEFAULT_CATEGORY': 'misc',
    }
