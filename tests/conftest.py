import json
from pathlib import Path

import pytest

from stache import Mustache
from tests.infrastructure import write


@pytest.fixture
def engine() -> Mustache:
    """Свежий экземпляр движка со своим кэшем."""
    return Mustache()


@pytest.fixture(autouse=True)
def _cache_env(monkeypatch):
    # кэш по умолчанию включён независимо от окружения
    monkeypatch.delenv("STACHE_CACHE", raising=False)


@pytest.fixture
def tmpproj(tmp_path: Path) -> Path:
    """Минимальный набор файлов: шаблон, данные, партиал и настройки."""
    root = tmp_path
    write(root / "page.mustache", "<h1>{{title}}</h1>\n{{#items}}\n  {{> item}}\n{{/items}}\n")
    write(root / "partials" / "item.mustache", "<li>{{name}}</li>\n")
    write(root / "view.json", json.dumps({"title": "A & B", "items": [{"name": "x"}, {"name": "y"}]}))
    write(root / "view.yaml", "title: From YAML\nitems:\n  - name: q\n")
    write(root / "settings.yaml", "partials_dir: partials\n")
    return root
