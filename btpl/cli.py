from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

from .errors import BTPLUserError, HandlerError
from .report_schema import build_blocks_report
from .script import load_script, render_file
from .template import open_document, RenderContext
from .version import tool_version


def _setup_logging(debug: bool) -> None:
    """Один stderr-обработчик на логгер пакета; DEBUG по --debug или BTPL_DEBUG."""
    log = logging.getLogger("btpl")
    if getattr(_setup_logging, "_inited", False):
        return
    _setup_logging._inited = True  # type: ignore[attr-defined]
    level = logging.DEBUG if (debug or os.environ.get("BTPL_DEBUG")) else logging.WARNING
    log.setLevel(level)
    if not log.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        log.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="btpl",
        description="Block templates: render HTML-like documents from named blocks",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--debug", action="store_true", help="подробный журнал в stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Отрендерить шаблон и вывести итоговый текст")
    sp_render.add_argument("template", help="путь к файлу шаблона")
    sp_render.add_argument(
        "--script",
        metavar="FILE",
        help="YAML-сценарий: globals, handlers, steps",
    )
    sp_render.add_argument(
        "--global",
        dest="globals",
        action="append",
        metavar="NAME=VALUE",
        help="глобальная переменная (можно указать несколько)",
    )
    sp_render.add_argument(
        "--assign",
        action="append",
        metavar="NAME=VALUE",
        help="локальная переменная перед блоками из --parse (можно указать несколько)",
    )
    sp_render.add_argument(
        "--parse",
        action="append",
        metavar="PATH",
        help="путь блока для резолвинга, например content_body.some_row (порядок важен)",
    )
    sp_render.add_argument(
        "--strict",
        action="store_true",
        help="ошибка вместо пропуска при parse несуществующего блока",
    )
    sp_render.add_argument("-o", "--output", metavar="FILE", help="записать результат в файл вместо stdout")

    sp_blocks = sub.add_parser("blocks", help="Дерево блоков шаблона (JSON)")
    sp_blocks.add_argument("template", help="путь к файлу шаблона")

    return p


def _parse_pairs(pairs: list[str] | None, option: str) -> Dict[str, str]:
    """Парсит список 'NAME=VALUE' в словарь."""
    result: Dict[str, str] = {}
    if not pairs:
        return result

    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid {option} format '{pair}'. Expected 'NAME=VALUE'")
        name, value = pair.split("=", 1)
        name = name.strip()
        if not name:
            raise ValueError(f"Invalid {option} format '{pair}'. Name is empty")
        result[name] = value

    return result


def _write_output(text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(ns.debug))

    try:
        if ns.cmd == "render":
            template_path = Path(ns.template)
            script = None
            script_dir = None
            if ns.script:
                script_path = Path(ns.script)
                script = load_script(script_path)
                script_dir = script_path.parent

            text = render_file(
                template_path,
                script,
                script_dir=script_dir,
                global_values=_parse_pairs(ns.globals, "--global"),
                assigns=_parse_pairs(ns.assign, "--assign"),
                parse=ns.parse or (),
                context=RenderContext(),
                strict=bool(ns.strict),
            )
            _write_output(text, ns.output)
            return 0

        if ns.cmd == "blocks":
            doc = open_document(Path(ns.template), context=RenderContext())
            report = build_blocks_report(doc, ns.template)
            sys.stdout.write(json.dumps(report.model_dump(mode="json"), ensure_ascii=False, indent=2))
            sys.stdout.write("\n")
            return 0

    except (BTPLUserError, HandlerError) as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
