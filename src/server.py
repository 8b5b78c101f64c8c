"""Protean Engine runner for Farmgate domains.

Starts Engine workers that process events asynchronously. The messaging
engine subscribes to the ordering streams and posts order-lifecycle
messages into each order's conversation.

Usage:
    python src/server.py                     # Run both domain engines
    python src/server.py --domain ordering   # Run only the ordering engine
    python src/server.py --domain messaging  # Run only the messaging engine
"""

import argparse
import asyncio

from protean.server.engine import Engine

DOMAIN_NAMES = ["ordering", "messaging"]


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name == "ordering":
        from ordering.domain import ordering

        ordering.init()
        return ordering
    elif name == "messaging":
        from messaging.domain import messaging

        messaging.init()
        return messaging
    else:
        raise ValueError(f"Unknown domain: {name}")


async def run(domain_names):
    engines = [Engine(_get_domain(name)) for name in domain_names]
    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    parser = argparse.ArgumentParser(description="Farmgate Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        help="Run a single domain engine (default: run all)",
    )
    args = parser.parse_args()

    asyncio.run(run([args.domain] if args.domain else DOMAIN_NAMES))


if __name__ == "__main__":
    main()
