"""Command-line interface for event generation and cross section tables.

Usage:
    python -m nuevg.cli generate --probe 14 --Z 6 --A 12 --energy 1.0 -n 100
    python -m nuevg.cli xsec --probe 14 --Z 6 --A 12 --emin 0.1 --emax 100 --points 30
    python -m nuevg.cli info
"""

import argparse
import logging
import sys
from collections import Counter
from typing import List, Optional

import numpy as np

from nuevg.config import create_validated_config, get_defaults
from nuevg.config.defaults import XSEC_REPORT_UNIT_CM2
from nuevg.core import pdg
from nuevg.core.kinematics import FourVector
from nuevg.driver import create_driver
from nuevg.generators import EventGeneratorListAssembler
from nuevg.splines import knot_energies

logger = logging.getLogger(__name__)


def _build_driver(args: argparse.Namespace):
    overrides = {"generator_list": args.profile}
    if getattr(args, "seed", None) is not None:
        overrides["seed"] = args.seed
    config = create_validated_config(**overrides)

    driver = create_driver(args.probe, args.Z, args.A, config)
    if args.splines:
        n_created = driver.create_splines()
        logger.info(f"Created {n_created} cross section splines")
    return driver


def cmd_generate(args: argparse.Namespace) -> None:
    """Generate events at a fixed probe energy and print channel counts."""
    driver = _build_driver(args)
    if args.keep_unphysical:
        driver.filter_unphysical(False)

    p4 = FourVector(0.0, 0.0, args.energy, args.energy)
    logger.info(
        f"Generating {args.n_events} events for {pdg.name(args.probe)} + "
        f"{driver.target} at E = {args.energy} GeV"
    )

    counts = Counter()
    n_unphysical = 0
    for _ in range(args.n_events):
        record = driver.generate_event(p4)
        counts[str(record.interaction.process_info)] += 1
        if record.is_unphysical:
            n_unphysical += 1

    print("\n" + "=" * 60)
    print(f"EVENTS: {pdg.name(args.probe)} + {driver.target}, E = {args.energy} GeV")
    print("=" * 60)
    for channel, count in sorted(counts.items()):
        print(f"  {channel:<10s} {count:8d}  ({100.0 * count / args.n_events:5.1f}%)")
    if args.keep_unphysical:
        print(f"  unphysical {n_unphysical:8d}")
    print("=" * 60)


def cmd_xsec(args: argparse.Namespace) -> None:
    """Print the cross section sum table, optionally plot it."""
    driver = _build_driver(args)

    energies = knot_energies(args.points, args.emin, args.emax, log_spacing=not args.linear)
    xsecs = np.array([driver.xsec_sum(FourVector(0.0, 0.0, e, e)) for e in energies])

    print("\n" + "=" * 60)
    print(f"CROSS SECTION SUM: {pdg.name(args.probe)} + {driver.target}")
    print("=" * 60)
    print(f"  {'E [GeV]':>12s}  {'xsec [1e-38 cm2]':>18s}")
    for energy, xsec in zip(energies, xsecs):
        print(f"  {energy:12.5g}  {xsec / XSEC_REPORT_UNIT_CM2:18.6g}")
    print("=" * 60)

    if args.plot:
        from nuevg.utils.visualization import plot_xsec_sum

        plot_xsec_sum(
            energies,
            xsecs,
            title=f"{pdg.name(args.probe)} + {driver.target}",
            save_path=args.plot,
            log_energy=not args.linear,
        )


def cmd_info(args: argparse.Namespace) -> None:
    """Display generator list profiles and event generators."""
    defaults = get_defaults()
    assembler = EventGeneratorListAssembler(catalog=defaults)
    catalog = defaults.get("event_generators") or {}

    print("\n" + "=" * 60)
    print("EVENT GENERATION INFORMATION")
    print("=" * 60)

    print("\n[Generator List Profiles]")
    for profile in assembler.list_profiles():
        entries = defaults["generator_lists"][profile] or []
        print(f"  {profile:<10s} {', '.join(entries)}")

    print("\n[Event Generators]")
    for name in assembler.list_generators():
        entry = catalog[name] or {}
        print(
            f"  {name:<8s} model={entry.get('model')}, current={entry.get('current', 'CC')}, "
            f"E = [{entry.get('e_min', 0.0):g}, {entry.get('e_max', 0.0):g}] GeV"
        )

    print("\n[Driver Defaults]")
    for key, value in (defaults.get("driver") or {}).items():
        print(f"  {key:<20s} {value}")

    print("\n" + "=" * 60)


def _add_initial_state_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--probe", type=int, default=14, help="Probe PDG code (default: 14)")
    parser.add_argument("--Z", type=int, default=6, help="Target Z (default: 6)")
    parser.add_argument("--A", type=int, default=12, help="Target A (default: 12)")
    parser.add_argument(
        "--profile",
        default="Default",
        help="Event generator list profile (default: Default)",
    )
    parser.add_argument(
        "--splines",
        action="store_true",
        help="Create and use cross section splines",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Neutrino event generation driver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 1000 nu_mu + C12 events at 1 GeV
  python -m nuevg.cli generate --probe 14 --Z 6 --A 12 --energy 1.0 -n 1000 --seed 42

  # Cross section sum table with splines, saved as a plot
  python -m nuevg.cli xsec --probe -14 --Z 8 --A 16 --emin 0.1 --emax 100 \\
      --points 40 --splines --plot xsec.png

  # Show profiles and generators
  python -m nuevg.cli info
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Generate events at a fixed energy")
    _add_initial_state_arguments(gen_parser)
    gen_parser.add_argument("--energy", type=float, default=1.0, help="Probe energy [GeV] (default: 1.0)")
    gen_parser.add_argument("-n", "--n-events", type=int, default=100, help="Number of events (default: 100)")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    gen_parser.add_argument(
        "--keep-unphysical",
        action="store_true",
        help="Return unphysical events instead of regenerating them",
    )

    # Cross section command
    xsec_parser = subparsers.add_parser("xsec", help="Tabulate the cross section sum")
    _add_initial_state_arguments(xsec_parser)
    xsec_parser.add_argument("--emin", type=float, default=0.1, help="Minimum energy [GeV] (default: 0.1)")
    xsec_parser.add_argument("--emax", type=float, default=100.0, help="Maximum energy [GeV] (default: 100)")
    xsec_parser.add_argument("--points", type=int, default=20, help="Number of energies (default: 20)")
    xsec_parser.add_argument("--linear", action="store_true", help="Linear energy spacing")
    xsec_parser.add_argument("--plot", default=None, help="Save a plot to this path")

    # Info command
    subparsers.add_parser("info", help="Display generator list profiles")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "generate":
        cmd_generate(args)
    elif args.command == "xsec":
        if not 0.0 < args.emin < args.emax:
            parser.error(f"xsec needs 0 < --emin < --emax, got {args.emin:g} and {args.emax:g}")
        if args.points < 2:
            parser.error(f"xsec needs --points >= 2, got {args.points}")
        cmd_xsec(args)
    elif args.command == "info":
        cmd_info(args)
    else:
        parser.print_help()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
