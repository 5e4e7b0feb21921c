#!/usr/bin/env python3
"""
REDUCTION REPORT

For each catalog game, reports per player:
1. Information sets and sequence-form size (tree games)
2. Reduced normal form strategy count vs. the unreduced product count
3. Regret and Lyapunov value of the centroid profile

Optionally writes each game's strategic form as an .nfg savefile.

Usage:
    python experiments/run_reduction_report.py [--numeric rational] [--output-dir out/]
"""

import argparse
import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

import sys
sys.path.insert(0, '.')

from stratspace.config import list_numerics
from stratspace.games.catalog import GAME_CATALOG, create_game

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(name)s | %(message)s',
    datefmt='%H:%M:%S'
)
log = logging.getLogger(__name__)


@dataclass
class ReductionReportConfig:
    """Configuration for the reduction report."""
    games: List[str] = field(default_factory=lambda: list(GAME_CATALOG.keys()))
    numeric: str = "float"
    output_dir: Optional[str] = None
    show_progress: bool = False


def unreduced_count(player) -> int:
    """Strategy count of the plain normal form: product of action counts."""
    count = 1
    for infoset in player.infosets:
        count *= infoset.num_actions
    return count


def report_game(name: str, config: ReductionReportConfig) -> dict:
    start = time.time()
    game = create_game(name)
    rows = []
    for player in game.players:
        row = {
            "player": player.label or str(player.number),
            "strategies": player.num_strategies,
        }
        if game.is_tree:
            row["infosets"] = player.num_infosets
            row["sequences"] = player.num_sequences
            row["unreduced"] = unreduced_count(player)
        rows.append(row)

    profile = game.mixed_strategy_profile(config.numeric)
    result = {
        "game": name,
        "players": rows,
        "centroid_max_regret": float(profile.max_regret()),
        "centroid_liap": float(profile.liap_value()),
        "seconds": time.time() - start,
    }

    if config.output_dir:
        path = Path(config.output_dir) / f"{name}.nfg"
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            game.write_nfg(f, show_progress=config.show_progress)
        result["savefile"] = str(path)
        log.info(f"Wrote {path}")
    return result


def main():
    parser = argparse.ArgumentParser(description="Reduced normal form report")
    parser.add_argument("--games", nargs="+", default=list(GAME_CATALOG.keys()),
                        choices=list(GAME_CATALOG.keys()))
    parser.add_argument("--numeric", default="float", choices=list_numerics())
    parser.add_argument("--output-dir", default=None)
    parser.add_argument("--progress", action="store_true",
                        help="Show a progress bar while writing payoff rows")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()
    if args.verbose:
        logging.getLogger("stratspace").setLevel(logging.DEBUG)
    config = ReductionReportConfig(games=args.games, numeric=args.numeric,
                                   output_dir=args.output_dir, show_progress=args.progress)
    log.info(f"Reporting {len(config.games)} games with {config.numeric} arithmetic")

    results = [report_game(name, config) for name in tqdm(config.games, desc="Games")]

    print("\n" + "=" * 70)
    print("REDUCED NORMAL FORM REPORT")
    print("=" * 70)
    for result in results:
        print(f"\n{result['game']}  ({result['seconds']:.2f}s)")
        print("-" * 70)
        for row in result["players"]:
            line = f"  {row['player']:<12} strategies={row['strategies']:<6}"
            if "infosets" in row:
                line += (f" infosets={row['infosets']:<4} sequences={row['sequences']:<4}"
                         f" unreduced={row['unreduced']}")
            print(line)
        print(f"  centroid: max regret={result['centroid_max_regret']:.6f}"
              f"  liap={result['centroid_liap']:.6f}")
        if "savefile" in result:
            print(f"  wrote {result['savefile']}")

    if config.output_dir:
        path = Path(config.output_dir) / "reduction_report.json"
        with open(path, "w") as f:
            json.dump(results, f, indent=2)
        log.info(f"Results saved to {path}")


if __name__ == "__main__":
    main()
