"""Command line interface to evaluate cover on a scene file."""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence, Tuple

from config.settings import IntersectionMode, load_settings
from core.cover_levels import CoverLevel, benefits_for
from modules.cover import CoverDetector, detect_for_template
from modules.scene import load_scene
from utils.logger import configure_logging


def _parse_origin(value: str) -> Tuple[float, float]:
    try:
        x, y = (float(part) for part in value.split(","))
    except ValueError as exc:
        raise argparse.ArgumentTypeError("origin must look like 'X,Y'") from exc
    return x, y


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Evaluate tactical cover on a scene file.")
    parser.add_argument("scene", help="Path to a YAML or JSON scene description.")
    parser.add_argument("--settings", help="YAML settings file with a 'cover' section.")
    parser.add_argument("--mode", choices=[mode.value for mode in IntersectionMode])
    parser.add_argument("--attacker", help="Attacking token id.")
    parser.add_argument("--target", help="Target token id.")
    parser.add_argument("--origin", type=_parse_origin, help="Effect origin as 'X,Y' instead of an attacker.")
    parser.add_argument("--elevation", type=float, default=0.0, help="Origin elevation in feet.")
    parser.add_argument(
        "--radius",
        type=float,
        help="With --origin and no --target, report every token within this many scene units.",
    )
    parser.add_argument("--explain", action="store_true", help="Print the wall/token breakdown.")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def _format(label: str, level: CoverLevel) -> str:
    benefits = benefits_for(level)
    hide = "yes" if benefits.can_hide else "no"
    return (
        f"{label}: {level.label} "
        f"(AC +{benefits.bonus_ac}, Reflex +{benefits.bonus_reflex}, "
        f"Stealth +{benefits.bonus_stealth}, can hide: {hide})"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    configure_logging(level)

    if args.origin is None and not args.attacker:
        parser.error("either --attacker or --origin is required")
    if args.origin is None and not args.target:
        parser.error("--target is required with --attacker")
    if args.origin is not None and not args.target and args.radius is None:
        parser.error("--origin needs --target or --radius")

    overrides = {"intersection_mode": args.mode} if args.mode else {}
    try:
        settings = load_settings(args.settings, **overrides)
    except ValueError as exc:
        parser.error(f"invalid settings: {exc}")

    scene = load_scene(args.scene)
    detector = CoverDetector(scene, settings)

    target = scene.entity(args.target) if args.target else None
    if args.target and target is None:
        parser.error(f"unknown target token '{args.target}'")

    if args.origin is not None:
        if target is None:
            results = detect_for_template(
                detector, args.origin, args.radius, scene.obstacles, elevation=args.elevation
            )
            for entity_id, result in sorted(results.items()):
                print(_format(entity_id, result))
            return 0
        print(_format(target.entity_id, detector.detect_from_point(args.origin, target, args.elevation)))
        return 0

    attacker = scene.entity(args.attacker)
    if attacker is None:
        parser.error(f"unknown attacker token '{args.attacker}'")

    if args.explain:
        report = detector.explain(attacker, target)
        print(f"mode: {report.mode.value}")
        print(f"wall: {report.wall_level.label} ({report.wall_percent:.1f}% weighted coverage)")
        print(f"tokens: {report.token_level.label} (blockers: {', '.join(report.blocker_ids) or '-'})")
        if report.error:
            print(f"error: {report.error}")
        print(_format(f"{attacker.entity_id} -> {target.entity_id}", report.level))
    else:
        level = detector.detect_between_tokens(attacker, target)
        print(_format(f"{attacker.entity_id} -> {target.entity_id}", level))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
