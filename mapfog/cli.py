"""Command line interface for offline fog shape processing."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, List

from .boolean2d import merge_shapes, subtract_shapes, union_area
from .settings import EngineConfig
from .shapes import Shape, shapes_from_json, shapes_to_json
from .simplify import simplify_points, simplify_scale


def _read_shapes(path: Path) -> List[Shape]:
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if isinstance(data, dict):
        if "shapes" in data:
            data = data["shapes"]
        else:
            data = list(data.values())
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of shapes.")
    return shapes_from_json(data)


def _load_config(args: argparse.Namespace) -> EngineConfig:
    if args.config:
        return EngineConfig.from_file(args.config)
    return EngineConfig()


def _write(args: argparse.Namespace, payload: Any) -> None:
    text = json.dumps(payload, indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
    else:
        sys.stdout.write(text + "\n")


def _cmd_merge(args: argparse.Namespace) -> None:
    cfg = _load_config(args)
    shapes = _read_shapes(Path(args.input))
    merged = merge_shapes(
        shapes,
        treat_hidden_as_visible=args.include_hidden,
        sliver_area=cfg.sliver_area,
        repair=cfg.repair_invalid,
    )
    _write(args, shapes_to_json(merged))


def _cmd_subtract(args: argparse.Namespace) -> None:
    cfg = _load_config(args)
    shapes = _read_shapes(Path(args.input))
    region = _read_shapes(Path(args.region))
    result = subtract_shapes(
        region,
        {shape.id: shape for shape in shapes},
        sliver_area=cfg.sliver_area,
        repair=cfg.repair_invalid,
    )
    kept = [shape for shape in result.values() if len(shape.points) >= 3]
    _write(args, shapes_to_json(kept))


def _cmd_simplify(args: argparse.Namespace) -> None:
    cfg = _load_config(args)
    shapes = _read_shapes(Path(args.input))
    scale = simplify_scale(args.zoom, cfg.simplify_downscale)
    cell = (args.cell_size[0], args.cell_size[1])
    out = [shape.with_points(simplify_points(shape.points, cell, scale, cfg.simplify_size)) for shape in shapes]
    _write(args, shapes_to_json(out))


def _cmd_area(args: argparse.Namespace) -> None:
    cfg = _load_config(args)
    shapes = _read_shapes(Path(args.input))
    visible = [shape for shape in shapes if shape.visible]
    _write(
        args,
        {
            "shapes": len(shapes),
            "visible": len(visible),
            "union_area": union_area(visible, repair=cfg.repair_invalid),
        },
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mapfog", description="Fog of war shape tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--config", help="Path to an engine config JSON file")
    parser.add_argument("--out", help="Write the result to this path instead of stdout")
    sub = parser.add_subparsers(dest="command", required=True)

    merger = sub.add_parser("merge", help="Union overlapping fog shapes")
    merger.add_argument("input", help="JSON file with fog shapes")
    merger.add_argument("--include-hidden", action="store_true", help="Merge hidden shapes as well")
    merger.set_defaults(func=_cmd_merge)

    subtracter = sub.add_parser("subtract", help="Subtract a region from fog shapes")
    subtracter.add_argument("input", help="JSON file with candidate fog shapes")
    subtracter.add_argument("--region", required=True, help="JSON file with the shapes to subtract")
    subtracter.set_defaults(func=_cmd_subtract)

    simplifier = sub.add_parser("simplify", help="Simplify fog shape outlines")
    simplifier.add_argument("input", help="JSON file with fog shapes")
    simplifier.add_argument(
        "--cell-size", nargs=2, type=float, required=True, metavar=("W", "H"), help="Normalized grid cell size"
    )
    simplifier.add_argument("--zoom", type=float, default=1.0, help="View zoom used to scale the tolerance")
    simplifier.set_defaults(func=_cmd_simplify)

    area = sub.add_parser("area", help="Report the covered area of visible fog")
    area.add_argument("input", help="JSON file with fog shapes")
    area.set_defaults(func=_cmd_area)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(None if argv is None else list(argv))
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except (OSError, KeyError, ValueError) as exc:
        parser.error(str(exc))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
