from __future__ import annotations

import argparse
import json
import logging
import math
from pathlib import Path

from eduplot.config import load_widget_document
from eduplot.svg.preview import PreviewOptions, render_svg_png
from eduplot.ticks import build_ticks
from eduplot.widgets import render_widget

LOGGER = logging.getLogger("eduplot.cli")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="eduplot")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a widget description (.toml or .json) to SVG.")
    render.add_argument("widget_file", type=Path)
    render.add_argument("--out", type=Path, default=None, help="SVG output path. Default: print to stdout.")
    render.add_argument("--png", type=Path, default=None, help="Also write a rasterized PNG preview.")
    render.add_argument("--scale", type=float, default=1.0, help="PNG preview scale factor.")

    ticks = sub.add_parser("ticks", help="Print tick values and labels for an axis range as JSON.")
    ticks.add_argument("min", type=float)
    ticks.add_argument("max", type=float)
    ticks.add_argument("interval", type=str, help="Tick interval; accepts fractions like 1/3 and pi/2.")

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "render":
        document = load_widget_document(args.widget_file)
        svg = render_widget(document.widget, theme=document.theme)
        if args.out is None:
            print(svg)
        else:
            args.out.write_text(svg, encoding="utf-8")
            LOGGER.info("wrote %s", args.out)
        if args.png is not None:
            if args.scale <= 0:
                raise ValueError("--scale must be > 0")
            render_svg_png(svg, args.png, PreviewOptions(scale=args.scale))
            LOGGER.info("wrote %s", args.png)
        return

    if args.command == "ticks":
        result = build_ticks(args.min, args.max, _parse_interval(args.interval))
        print(json.dumps({"values": list(result.values), "labels": list(result.labels)}, ensure_ascii=False))
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def _parse_interval(text: str) -> float:
    value = text.strip().lower().replace("π", "pi")
    numerator, _, denominator = value.partition("/")
    if numerator.endswith("pi"):
        coeff = numerator[:-2].strip()
        top = (float(coeff) if coeff else 1.0) * math.pi
    else:
        top = float(numerator)
    return top / float(denominator) if denominator else top


if __name__ == "__main__":
    main()
