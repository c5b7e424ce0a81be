"""Command-line front end: generate a disc and write it to OBJ or GLB."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .assembler import generate
from .export import save_glb, save_obj
from .gradient import Color, Gradient, GradientKey, GradientMode
from .mesh import Mesh
from .settings import get_settings
from .types import Axis, ColorSpace, DiscParameters, UVAxis, UVType

logger = logging.getLogger(__name__)

_DEF_HELP = """
Examples:
  python -m instamesh --out ring.glb --inner 0.5 --outer 1 --segments-u 64 --segments-v 2
  python -m instamesh --out fan.obj --angle 0.25 --double-sided
  python -m instamesh --out cone.glb --inner 1 --outer 0 --extrusion -1 --axis y
  python -m instamesh --out glow.glb --key 0:#ffffff --key 1:#ff000000 --color-map v
"""


def parse_hex_color(text: str) -> Color:
    h = text.lstrip("#")
    if len(h) not in (6, 8):
        raise ValueError(f"expected #RRGGBB or #RRGGBBAA (got {text!r})")
    channels = [int(h[k:k + 2], 16) / 255.0 for k in range(0, len(h), 2)]
    if len(channels) == 3:
        channels.append(1.0)
    r, g, b, a = channels
    return (r, g, b, a)


def parse_gradient_key(text: str) -> GradientKey:
    """Parse ``POS:#RRGGBB[AA]``."""
    try:
        pos, color = text.split(":", 1)
        return GradientKey(float(pos), parse_hex_color(color))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid gradient key {text!r}: {exc}") from None


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="instamesh", description="instamesh: revolved disc mesh generator",
                                epilog=_DEF_HELP, formatter_class=argparse.RawTextHelpFormatter)
    p.add_argument("--out", required=True, help="Output path (.obj/.glb). Alternatively use --obj/--glb flags.")
    fmt = p.add_mutually_exclusive_group()
    fmt.add_argument("--obj", action="store_true", help="Force OBJ output")
    fmt.add_argument("--glb", action="store_true", help="Force GLB output")
    p.add_argument("--name", default="InstaMesh")

    p.add_argument("--inner", type=float, default=0.0, help="Radius at V=0")
    p.add_argument("--outer", type=float, default=1.0, help="Radius at V=1")
    p.add_argument("--extrusion", type=float, default=0.0)
    p.add_argument("--angle", type=float, default=1.0, help="Fraction of a full turn")
    p.add_argument("--segments-u", type=int, default=32)
    p.add_argument("--segments-v", type=int, default=32)
    p.add_argument("--axis", choices=[a.name.lower() for a in Axis], default="z")
    p.add_argument("--flipped", action="store_true")
    p.add_argument("--double-sided", action="store_true")

    uv_names = [t.value for t in UVType]
    p.add_argument("--uv", action="append", choices=uv_names,
                   help="UV family for the next output channel (repeatable, up to 8; default: radial)")
    p.add_argument("--key", action="append", type=parse_gradient_key, metavar="POS:#RRGGBB[AA]",
                   help="Vertex color gradient key (repeatable). Without keys no colors are written.")
    p.add_argument("--fixed", action="store_true", help="Step between gradient keys instead of blending")
    p.add_argument("--color-uv", choices=uv_names, default=UVType.RADIAL.value)
    p.add_argument("--color-map", choices=[a.value for a in UVAxis], default=UVAxis.U.value)
    p.add_argument("--color-space", choices=[c.value for c in ColorSpace],
                   default=get_settings().default_color_space.value)
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def params_from_args(args: argparse.Namespace) -> DiscParameters:
    gradient = None
    if args.key:
        gradient = Gradient(args.key, GradientMode.FIXED if args.fixed else GradientMode.BLEND)
    uv_channels = tuple(UVType(t) for t in (args.uv or [UVType.RADIAL.value]))
    return DiscParameters(
        inner_radius=args.inner,
        outer_radius=args.outer,
        extrusion=args.extrusion,
        angle=args.angle,
        segments_u=args.segments_u,
        segments_v=args.segments_v,
        axis=Axis[args.axis.upper()],
        flipped=args.flipped,
        double_sided=args.double_sided,
        vertex_color_uv_type=UVType(args.color_uv),
        vertex_color_map_type=UVAxis(args.color_map),
        gradient=gradient,
        uv_channels=uv_channels,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.uv and len(args.uv) > 8:
        p.error("at most 8 --uv channels are supported")

    params = params_from_args(args)
    mesh = Mesh(args.name)
    if not generate(params, mesh, ColorSpace(args.color_space)):
        logger.warning("nothing generated: need --segments-u >= 3 and --segments-v >= 1")
        return 1

    out_lower = args.out.lower()
    if args.obj or (not args.glb and out_lower.endswith(".obj")):
        save_obj(args.out, mesh)
    else:
        save_glb(args.out, mesh)
    logger.info("wrote %s: %d vertices, %d triangles", args.out, mesh.vertex_count, mesh.triangle_count)
    return 0


def _cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    _cli()
