# -*- coding: utf-8 -*-
"""
docx_to_latex.py
- DOCX -> XDOM -> LaTeX in one pass; output defaults to the input name with .tex
- --layout plain wraps the body in an article preamble (gb4e + cleveref), --layout semprag in the S&P journal class, --layout body writes the body only
- --style-rules overrides the paragraph-style / inline-command tables (style_rules.json)
- --xdom-json additionally dumps the intermediate tree
- logs: {log_dir}/{doc}.user.log always, {doc}.debug.log with --debug-log
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from typing import Optional

import style_rules
from conversion_errors import DocxConversionError
from docx_package import DocxPackage
from docx_to_xdom import DocxReader
from layouts import LAYOUTS
from pipeline_logger import PipelineLogger
from xdom import to_dict
from xdom_to_latex import render

PIPELINE_LOGGER: Optional[PipelineLogger] = None

# library loggers relayed into the pipeline log channels
CAPTURED_LOGGERS = (
    "docx_package",
    "docx_to_xdom",
    "docx_characters",
    "style_rules",
    "xdom_to_latex",
)


def _log_user(message: str):
    print(message)
    if PIPELINE_LOGGER:
        PIPELINE_LOGGER.user(message)


def _log_warn(message: str):
    print(message)
    if PIPELINE_LOGGER:
        PIPELINE_LOGGER.warn(message)


def _log_error(message: str):
    print(message, file=sys.stderr)
    if PIPELINE_LOGGER:
        PIPELINE_LOGGER.error(message)


def _debug_log(message: str):
    if PIPELINE_LOGGER:
        PIPELINE_LOGGER.debug(message)


def _default_output_path(input_path: str) -> str:
    return os.path.splitext(input_path)[0] + ".tex"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="DOCX -> LaTeX converter (examples, footnotes, cross-references)")
    parser.add_argument("input", help="Input .docx path")
    parser.add_argument("output", nargs="?", help="Output .tex path (default: input name with .tex)")
    parser.add_argument(
        "--layout",
        choices=sorted(LAYOUTS),
        default="plain",
        help="Document wrapper: plain (article preamble), semprag (sp.cls journal preamble) or body (content only)",
    )
    parser.add_argument("--style-rules", help="Path to a style_rules.json overriding the paragraph/inline style tables")
    parser.add_argument("--xdom-json", help="Also write the intermediate XDOM tree as JSON to this path")
    parser.add_argument("--log-dir", help="Log directory (default: ./logs beside the input)")
    parser.add_argument("--debug-log", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None) -> int:
    global PIPELINE_LOGGER
    start_ts = time.time()
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug_log else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = os.path.abspath(args.input)
    if not os.path.exists(input_path):
        _log_error(f"[ERR] input file not found: {input_path}")
        return 2
    output_path = os.path.abspath(args.output) if args.output else _default_output_path(input_path)
    out_dir = os.path.dirname(output_path) or os.getcwd()
    if not os.path.isdir(out_dir):
        _log_error(f"[ERR] output directory does not exist: {out_dir}")
        return 2

    PIPELINE_LOGGER = PipelineLogger(
        input_path,
        log_root=args.log_dir,
        enable_debug=args.debug_log,
        console_echo=False,
    )
    PIPELINE_LOGGER.capture(CAPTURED_LOGGERS)
    try:
        return _convert(args, input_path, output_path, start_ts)
    finally:
        PIPELINE_LOGGER.release()
        PIPELINE_LOGGER = None


def _convert(args: argparse.Namespace, input_path: str, output_path: str, start_ts: float) -> int:
    if args.debug_log:
        PIPELINE_LOGGER.describe_paths()
    arg_line = (
        f"[ARGS] input={input_path} output={output_path} layout={args.layout} "
        f"style_rules={args.style_rules or '(default)'} xdom_json={args.xdom_json or '(none)'} "
        f"log_dir={args.log_dir or '(default)'}"
    )
    PIPELINE_LOGGER.user(arg_line)

    if args.style_rules:
        rules_path = style_rules.load_style_rules(args.style_rules)
        if rules_path:
            _log_user(f"[INFO] style rules: {rules_path}")
        else:
            _log_warn(f"[WARN] style rules not loaded from {args.style_rules}; using built-in defaults")
    else:
        _debug_log(f"[RULES] active={style_rules.ACTIVE_STYLE_RULES_PATH or '(built-in)'}")

    try:
        with DocxPackage(input_path) as package:
            reader = DocxReader(package)
            document = reader.read_document()
            summary = reader.summary()
        tex_body = render(document)
    except DocxConversionError as e:
        _log_error(f"[ERR] conversion failed: {e}")
        return 1
    _debug_log(f"[DOCX] summary raw={summary}")
    if document.metadata:
        PIPELINE_LOGGER.summarize(
            "[META]", " ".join(f"{k}={v!r}" for k, v in sorted(document.metadata.items()))
        )

    report = (
        f"[REPORT] DOCX parsed: paragraphs={summary['paragraphs']} sections={summary['sections']} "
        f"examples={summary['examples']} footnotes={summary['footnotes']} endnotes={summary['endnotes']} "
        f"references={summary['references']} unresolved={summary['unresolved_references']} "
        f"placeholders={summary['placeholders']}"
    )
    _log_user(report)

    if args.xdom_json:
        xdom_path = os.path.abspath(args.xdom_json)
        with open(xdom_path, "w", encoding="utf-8") as fh:
            json.dump(to_dict(document), fh, ensure_ascii=False, indent=2)
        _log_user(f"[OUTPUT] XDOM: {xdom_path}")

    layout = LAYOUTS[args.layout]
    with open(output_path, "w", encoding="utf-8") as fh:
        fh.write(layout(document, tex_body))
    _log_user(f"[OUTPUT] TEX: {output_path}")

    counts = PIPELINE_LOGGER.counts
    _log_user(f"[REPORT] log events warn={counts.get('WARN', 0)} error={counts.get('ERROR', 0)}")
    _log_user(f"[TIME] total={time.time() - start_ts:.2f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
