#!/usr/bin/env python
"""Simulate werewolf matches with stub bots.

Usage:
    werewolf-host                          # One 8-player match, random seed
    werewolf-host --seed 42 --players 10   # Reproducible match
    werewolf-host --config match.yaml      # Role headcounts and timers from YAML
    werewolf-host --games 200 --validate   # Stress test with invariant checks
"""

import argparse
import logging
import random
import sys
from collections import Counter
from typing import Optional

# Enable Windows console colors
if sys.platform == "win32":
    import colorama
    colorama.init()

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from werewolf_host.engine import CollectingValidator, create_validator
from werewolf_host.models import MatchConfig, MatchConfigError
from werewolf_host.simulation import SimulationResult, run_simulated_match


def run_single(
    seed: int,
    player_count: int,
    config: MatchConfig,
    validate: bool,
    log_file: Optional[str],
) -> SimulationResult:
    """Run and print one match."""
    console = Console()
    console.print(f"\n[bold]Simulating match (seed {seed}, {player_count} players)...[/bold]\n")

    validator = create_validator(collect=validate)
    result = run_simulated_match(seed, player_count, config, validator=validator)

    console.print(str(result.log))
    winner = result.winner.value if result.winner else "none (abandoned)"
    console.print(Panel(
        f"[bold]Match Over[/bold]\n\n"
        f"Winner: {winner}\n"
        f"Rounds: {result.rounds}\n"
        f"Snapshots broadcast: {result.snapshots}",
        title="Result",
    ))

    if validate:
        _print_violations(console, result.violations)

    if log_file:
        try:
            result.log.save_to_file(log_file, include_roles=True)
            console.print(f"Match log saved to {log_file}")
        except OSError as e:
            console.print(f"[red]Failed to save log: {e}[/red]")

    return result


def run_stress_test(
    num_games: int,
    seed_base: int,
    player_count: int,
    config: MatchConfig,
) -> None:
    """Run many matches with validators and report results."""
    console = Console()
    console.print(f"\n[bold]Running stress test: {num_games} matches...[/bold]")
    console.print(f"Seed base: {seed_base}")

    winners = Counter()
    violations = []
    rounds = []
    for i in range(num_games):
        validator = CollectingValidator()
        result = run_simulated_match(seed_base + i, player_count, config, validator=validator)
        winners[result.winner.value if result.winner else "abandoned"] += 1
        violations.extend(result.violations)
        rounds.append(result.rounds)

    table = Table(title="Winner Distribution")
    table.add_column("Winner")
    table.add_column("Matches", justify="right")
    table.add_column("Share", justify="right")
    for winner, count in winners.most_common():
        table.add_row(winner, str(count), f"{count / num_games * 100:.1f}%")
    console.print(table)
    console.print(f"Average rounds: {sum(rounds) / max(len(rounds), 1):.2f}")
    _print_violations(console, violations)


def _print_violations(console: Console, violations: list) -> None:
    by_rule = Counter(v.rule_id for v in violations)
    console.print("\nInvariant Violations:")
    if by_rule:
        for rule_id, count in sorted(by_rule.items()):
            console.print(f"  [red]{rule_id}[/red]: {count}")
    else:
        console.print("  None")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Werewolf host engine - offline match simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible matches")
    parser.add_argument("--players", type=int, default=8, help="Number of players (default: 8)")
    parser.add_argument("--config", type=str, default=None, help="YAML file with match configuration")
    parser.add_argument("--games", type=int, default=None, help="Run N matches and report statistics")
    parser.add_argument("--validate", action="store_true", help="Check match invariants while playing")
    parser.add_argument(
        "--log-file",
        type=str,
        default="",
        help="Save the match log as YAML (single match only)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log engine transitions")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    if args.seed is None:
        args.seed = random.randint(1, 1000000)

    if args.games is not None and args.games < 1:
        print("Error: --games must be a positive integer")
        return 1

    try:
        config = MatchConfig.from_yaml(args.config) if args.config else MatchConfig()
        config.check(args.players)
    except (MatchConfigError, OSError) as e:
        print(f"Error: {e}")
        return 1

    if args.games is not None:
        run_stress_test(args.games, args.seed, args.players, config)
    else:
        run_single(args.seed, args.players, config, args.validate, args.log_file or None)

    return 0


if __name__ == "__main__":
    exit(main())
