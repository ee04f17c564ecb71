"""
Main Entry Point for the Drainage Network Optimization System.

This module orchestrates a design run:
1. Accepts catchment input
2. Runs the drainage optimizer
3. Prices the network and checks NBC / BBMP compliance
4. Outputs pipe schedule, cost breakdown, compliance and advisories

THIS IS A DECISION-SUPPORT TOOL.
IT DOES NOT REPLACE ENGINEERS.
"""

import argparse
import logging
import random
import sys

from data_models import OptimizationResult
from design_config import DEFAULT_CONFIG, DesignConfig, load_rate_table
from ga_optimizer import DrainageOptimizer, CONVERGENCE_MODES, CONVERGENCE_SIMULATED
from cost_engine import cost_breakdown, check_cost_sanity, describe_rates
from codal_engine import NBCEngine, summarize
from advisory_engine import Advisory, format_advisories
from risk_scorer import risk_band
from backend.services.optimizer_service import parse_catchment


def print_network(result: OptimizationResult):
    """Print the pipe schedule of the winning network."""
    network = result.network
    print(f"\nPeak Runoff:       {network.peak_runoff:.3f} m³/s")
    print(f"Total Pipe Length: {network.total_pipe_length:.0f} m")
    print(f"Total Cost:        ₹{network.total_cost:.1f} lakhs")
    print(f"Flood Risk Score:  {network.flood_risk_score} ({risk_band(network.flood_risk_score)})")
    print(f"NBC Compliant:     {'YES' if network.nbc_compliant else 'NO'}")

    print(f"\n{'Pipe':<6} {'From':<6} {'To':<6} {'L (m)':>7} {'D (mm)':>7} {'S (%)':>6} "
          f"{'Mat':<5} {'V (m/s)':>8} {'Q (m³/s)':>9} {'Fill':>5} {'Risk':>5}")
    print("-" * 80)
    for p in network.pipes:
        print(f"{p.id:<6} {p.from_node:<6} {p.to_node:<6} {p.length:>7.1f} {p.diameter:>7d} "
              f"{p.slope:>6.2f} {p.material.value:<5} {p.velocity:>8.2f} {p.flow_rate:>9.4f} "
              f"{p.fill_ratio:>5.2f} {p.risk_score:>5d}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Stormwater Drainage Network Optimization System',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
This is a DECISION-SUPPORT TOOL.
It does NOT replace engineers.
All designs must be reviewed by qualified engineers before construction.

Example usage:
  python main.py --area 18.5 --runoff-coeff 0.65 --rainfall 100 --slope 1.2 --soil clay --land-use residential
        """
    )

    # Required arguments
    parser.add_argument('--area', type=float, required=True, help='Catchment area in hectares')
    parser.add_argument('--runoff-coeff', type=float, required=True, help='Runoff coefficient C (0-1)')
    parser.add_argument('--slope', type=float, required=True, help='Average ground slope in percent')
    parser.add_argument(
        '--soil',
        type=str,
        required=True,
        choices=['clay', 'loam', 'sandy', 'rocky'],
        help='Soil type'
    )

    # Optional arguments
    parser.add_argument(
        '--land-use',
        type=str,
        default='residential',
        choices=['residential', 'commercial', 'industrial', 'mixed'],
        help='Land use (default: residential)'
    )
    parser.add_argument(
        '--rainfall',
        type=float,
        default=None,
        help='Design rainfall intensity in mm/hr (default: IMD design storm for --ward)'
    )
    parser.add_argument(
        '--ward',
        type=str,
        default=None,
        help='Bengaluru ward / zone for IMD rainfall adjustment (e.g. whitefield)'
    )
    parser.add_argument('--pipes', type=int, default=8, help='Number of pipe segments (default: 8)')
    parser.add_argument('--generations', type=int, default=50, help='Generation budget (default: 50)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible runs')
    parser.add_argument(
        '--mode',
        type=str,
        default=CONVERGENCE_SIMULATED,
        choices=list(CONVERGENCE_MODES),
        help='Convergence trace mode (default: simulated)'
    )
    parser.add_argument('--rates', type=str, default=None, help='JSON rate table override')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    config = DEFAULT_CONFIG
    if args.rates:
        try:
            config = DesignConfig(rates=load_rate_table(args.rates))
        except (OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

    # Parse inputs
    try:
        catchment = parse_catchment({
            "area": args.area,
            "runoff_coeff": args.runoff_coeff,
            "rainfall_intensity": args.rainfall,
            "ward": args.ward,
            "slope": args.slope,
            "soil_type": args.soil,
            "land_use": args.land_use,
        }, config)
        if args.pipes < 1:
            raise ValueError(f"--pipes must be at least 1, got {args.pipes}")
        if args.generations < 0:
            raise ValueError(f"--generations must be non-negative, got {args.generations}")
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"\n{'='*70}")
    print(f"CATCHMENT: {catchment.area} ha, C={catchment.runoff_coeff}, "
          f"I={catchment.rainfall_intensity:.1f} mm/hr, S={catchment.slope}%")
    print(f"SOIL: {catchment.soil_type.value}   LAND USE: {catchment.land_use.value}")
    print(f"{'='*70}\n")

    optimizer = DrainageOptimizer(
        config=config,
        rng=random.Random(args.seed),
        convergence_mode=args.mode,
    )

    print("Running optimization...")
    steps = optimizer.iterate(catchment, num_pipes=args.pipes, generations=args.generations)
    while True:
        try:
            progress = next(steps)
        except StopIteration as stop:
            result = stop.value
            break
        print(f"\r  Generation {progress.generation}/{progress.total_generations} "
              f"({progress.percent}%)", end="", flush=True)
    print()

    print("\n" + "="*70)
    print("OPTIMIZATION RESULTS")
    print("="*70)
    print_network(result)

    print(f"\nGenerations:       {result.iterations}")
    print(f"Naive Estimate:    ₹{result.naive_cost:,.1f} lakhs")
    print(f"Savings:           {result.savings}%")

    breakdown = cost_breakdown(result.network, config.rates)
    print(f"\nCost Breakdown (₹ lakhs):")
    print(f"  Pipe Material: {breakdown.pipe_material:>8.1f}")
    print(f"  Manholes:      {breakdown.manholes:>8.1f}")
    print(f"  Excavation:    {breakdown.excavation:>8.1f}")
    print(f"  Backfill:      {breakdown.backfill:>8.1f}")
    print(f"  Labor:         {breakdown.labor:>8.1f}")
    print(f"  Total:         {breakdown.total:>8.1f}")
    print(f"\nRates ({config.region}):")
    for line in describe_rates(config.rates):
        print(f"  {line}")

    is_reasonable, sanity_warning = check_cost_sanity(result.network)
    if not is_reasonable:
        print(f"\n{sanity_warning}")

    engine = NBCEngine(config)
    checks = engine.evaluate(result.network)
    summary = summarize(checks)
    print(f"\n{'='*70}")
    print(f"COMPLIANCE: {engine.standard_name}")
    print("="*70)
    for check in checks:
        print(f"  [{check.status.value.upper():<4}] {check.rule:<30} {check.value:<16} "
              f"limit {check.limit}")
        print(f"         {check.clause}: {check.note}")
    print(f"\n  {summary['pass']}/{summary['total']} passed, "
          f"{summary['warn']} warnings, {summary['fail']} failures")

    print()
    print(format_advisories("Warnings", [Advisory(w, "warning") for w in result.warnings]))
    print()
    print(format_advisories("Recommendations", [Advisory(r) for r in result.recommendations]))


if __name__ == "__main__":
    main()
