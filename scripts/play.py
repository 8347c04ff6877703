#!/usr/bin/env python3
"""
对战脚本

Usage:
    python scripts/play.py --games 10 --seed 42
    python scripts/play.py --bots brain,simple,simple,random --verbose
"""
import argparse
import logging
import sys
from pathlib import Path

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

import numpy as np

from bot import create_bot
from bot.agents import BOT_KINDS
from evaluation import Arena

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Tien Len bot arena")

    parser.add_argument("--games", type=int, default=1, help="Number of games")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--bots",
        type=str,
        default="brain,simple,simple,random",
        help=f"Comma separated bot kinds by seat, from {', '.join(BOT_KINDS)}",
    )
    parser.add_argument("--max-steps", type=int, default=1000)
    parser.add_argument("--verbose", action="store_true", help="Log every decision")

    return parser.parse_args()


def main():
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    kinds = [k.strip() for k in args.bots.split(",") if k.strip()]
    rng = np.random.default_rng(args.seed)
    bots = [create_bot(kind, seat, rng) for seat, kind in enumerate(kinds)]

    arena = Arena(rng, max_steps=args.max_steps)
    logger.info("Playing %d games: %s", args.games, ", ".join(kinds))
    series = arena.play_series(bots, args.games)

    print(series)


if __name__ == "__main__":
    main()
