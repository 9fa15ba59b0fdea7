#!/usr/bin/env python3
"""
Simulate Key Growth - shows how slowly base-79 keys grow under random inserts.

Starts with a list holding only the middle key 'R', then N times picks a random
slot and inserts a key there: the average with 0 at the head, with 1 at the
tail, or of the two neighbours in between. Prints every key, the longest key
length and the average key length.

By default the raw truncating averages are used, which can produce a key equal
to a neighbour when two keys are adjacent. --strict inserts through
PositionedList instead, which always extends to a key strictly between.

Configuration is read from the environment (or a .env file):
    BASE79_SIM_COUNT - number of inserts (default 10000)
    BASE79_SIM_SEED  - random seed (default: unseeded)

Usage:
    python3 scripts/simulate_key_growth.py
    python3 scripts/simulate_key_growth.py --count 1000 --seed 42 --quiet
    python3 scripts/simulate_key_growth.py --strict --env-file .env.test
"""

import sys
import os
import argparse
import logging
import random
from typing import List, Optional, Tuple

from dotenv import load_dotenv

# Add parent directory to path so we can import app modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from base79 import average, average_with_lower_bound, average_with_upper_bound, mid, render
from models.positioned_list import PositionedList

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 10000


def load_config(env_file: Optional[str] = None) -> dict:
    """
    Load simulation defaults from the environment.

    Raises:
        ValueError: If BASE79_SIM_COUNT or BASE79_SIM_SEED is not an integer
    """
    if env_file:
        if not load_dotenv(env_file):
            logger.warning(f"Environment file {env_file} not found or empty")
    else:
        load_dotenv()

    seed = os.environ.get('BASE79_SIM_SEED')
    return {
        'count': int(os.environ.get('BASE79_SIM_COUNT', DEFAULT_COUNT)),
        'seed': int(seed) if seed else None,
    }


def simulate(count: int, rng: random.Random) -> List[str]:
    """Insert count keys at random slots using the raw averages."""
    keys = [mid()]
    for _ in range(count):
        pos = rng.randint(0, len(keys))
        if pos == 0:
            keys.insert(pos, average_with_lower_bound(keys[pos]))
        elif pos == len(keys):
            keys.insert(pos, average_with_upper_bound(keys[pos - 1]))
        else:
            keys.insert(pos, average(keys[pos - 1], keys[pos]))
    return [render(key) for key in keys]


def simulate_strict(count: int, rng: random.Random) -> List[str]:
    """Insert count items at random slots through PositionedList."""
    items = PositionedList([0])
    for n in range(1, count + 1):
        items.insert(rng.randint(0, len(items)), n)
    return items.positions()


def summarize(keys: List[str]) -> Tuple[int, float, int]:
    """
    Returns:
        Tuple of (max length, average length, number of keys not strictly
        greater than the key before them)
    """
    lengths = [len(key) for key in keys]
    out_of_order = sum(1 for a, b in zip(keys, keys[1:]) if not a < b)
    return max(lengths), sum(lengths) / len(lengths), out_of_order


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Simulate random inserts and report how long base-79 keys get'
    )

    parser.add_argument(
        '--count',
        type=int,
        help=f'Number of inserts (default: BASE79_SIM_COUNT or {DEFAULT_COUNT})'
    )

    parser.add_argument(
        '--seed',
        type=int,
        help='Random seed (default: BASE79_SIM_SEED or unseeded)'
    )

    parser.add_argument(
        '--strict',
        action='store_true',
        help='Insert through PositionedList, which never repeats a neighbour key'
    )

    parser.add_argument(
        '--quiet',
        '-q',
        action='store_true',
        help='Only print the summary, not every key'
    )

    parser.add_argument(
        '--env-file',
        type=str,
        metavar='PATH',
        help='Load configuration from this file instead of .env'
    )

    parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    args = parser.parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = load_config(args.env_file)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    count = args.count if args.count is not None else config['count']
    seed = args.seed if args.seed is not None else config['seed']
    if count < 0:
        logger.error(f"Count must be non-negative, got {count}")
        return 1

    logger.info(f"Simulating {count} inserts (seed={seed}, strict={args.strict})")
    rng = random.Random(seed)
    keys = simulate_strict(count, rng) if args.strict else simulate(count, rng)

    if not args.quiet:
        for key in keys:
            print(key)

    max_len, avg_len, out_of_order = summarize(keys)
    print(f"Max len: {max_len}")
    print(f"Avg len: {avg_len}")
    print(f"Out of order: {out_of_order}")

    if out_of_order:
        logger.info(f"{out_of_order} keys repeat their neighbour; use --strict to avoid this")

    return 0


if __name__ == '__main__':
    sys.exit(main())
