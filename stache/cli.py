from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import RenderSettings, load_settings
from .engine import Mustache
from .errors import MustacheError
from .jsonic import dumps as jdumps
from .loaders import FilePartials, load_view
from .parser import normalize_tags
from .tokens import format_tokens
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="stache",
        description="Mustache template renderer",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Общие аргументы для render/parse
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("template", help="файл шаблона или - для чтения из stdin")
        sp.add_argument(
            "--tags",
            metavar="'OPEN CLOSE'",
            help="разделители тегов через пробел (например: '<% %>')",
        )
        sp.add_argument("--config", metavar="FILE", help="YAML-файл настроек рендеринга")
        sp.add_argument("--verbose", action="store_true", help="отладочный лог в stderr")

    sp_render = sub.add_parser("render", help="Отрисовать шаблон")
    add_common(sp_render)
    sp_render.add_argument("--view", metavar="FILE", help="данные представления (.json, .yaml, .yml)")
    sp_render.add_argument(
        "--partial",
        action="append",
        metavar="NAME=FILE",
        help="партиал из файла (можно указать несколько)",
    )
    sp_render.add_argument("--partials-dir", metavar="DIR", help="каталог с файлами партиалов")
    sp_render.add_argument("--partial-ext", metavar="EXT", help="расширение файлов партиалов (по умолчанию .mustache)")
    sp_render.add_argument("--no-escape", action="store_true", help="не экранировать {{переменные}}")
    sp_render.add_argument("-o", "--output", metavar="FILE", help="записать результат в файл")

    sp_parse = sub.add_parser("parse", help="Дерево токенов шаблона (JSON)")
    add_common(sp_parse)
    sp_parse.add_argument("--tree", action="store_true", help="текстовое дерево вместо JSON")

    return p


def _setup_logging(verbose: bool) -> None:
    log = logging.getLogger("stache")
    level = logging.DEBUG if verbose or os.environ.get("STACHE_DEBUG") else logging.WARNING
    log.setLevel(level)
    if not log.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)


def _read_template(arg: str) -> str:
    if arg == "-":
        return sys.stdin.read()
    path = Path(arg)
    if not path.is_file():
        raise ValueError(f"Template file not found: {path}")
    return path.read_text(encoding="utf-8")


def _settings(ns: argparse.Namespace) -> RenderSettings:
    """Настройки из --config, поверх которых накладываются флаги командной строки."""
    settings = load_settings(Path(ns.config)) if ns.config else RenderSettings()

    update: Dict[str, Any] = {}
    if ns.tags:
        update["tags"] = normalize_tags(ns.tags)
    if getattr(ns, "no_escape", False):
        update["escape"] = "none"
    if getattr(ns, "partials_dir", None):
        update["partials_dir"] = Path(ns.partials_dir)
    if getattr(ns, "partial_ext", None):
        update["partial_ext"] = ns.partial_ext
    return settings.model_copy(update=update) if update else settings


def _parse_partials(specs: Optional[List[str]]) -> Dict[str, str]:
    """Читает партиалы, заданные как NAME=FILE."""
    result: Dict[str, str] = {}
    for spec in specs or []:
        if "=" not in spec:
            raise ValueError(f"Invalid partial format '{spec}'. Expected 'NAME=FILE'")
        name, file_name = spec.split("=", 1)
        path = Path(file_name.strip())
        if not path.is_file():
            raise ValueError(f"Partial file not found: {path}")
        result[name.strip()] = path.read_text(encoding="utf-8")
    return result


def _run_render(ns: argparse.Namespace) -> str:
    settings = _settings(ns)
    engine = Mustache()
    if not settings.cache:
        engine.template_cache = None

    view: Any = load_view(Path(ns.view)) if ns.view else {}
    partials = FilePartials(
        directory=settings.partials_dir,
        extension=settings.partial_ext,
        overrides=_parse_partials(ns.partial),
    )
    return engine.render(_read_template(ns.template), view, partials, settings.render_config())


def _run_parse(ns: argparse.Namespace) -> str:
    settings = _settings(ns)
    tokens = Mustache().parse(_read_template(ns.template), settings.tags)
    if ns.tree:
        return format_tokens(tokens) + "\n"
    return jdumps([token.as_dict() for token in tokens]) + "\n"


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(getattr(ns, "verbose", False)))

    try:
        if ns.cmd == "render":
            text = _run_render(ns)
            if ns.output:
                Path(ns.output).write_text(text, encoding="utf-8")
            else:
                sys.stdout.write(text)
            return 0

        if ns.cmd == "parse":
            sys.stdout.write(_run_parse(ns))
            return 0

    except MustacheError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
