#!/usr/bin/env python3
"""Entry point for the Api3 aggregator adapter tooling.

The package lives under src/, so install it first (`pip install -e .`).
The same commands are then also available as `api3-aggregator-adapter`.

Usage:
    PROXY_ADDRESS=0x... python main.py print-address
    PROXY_ADDRESS=0x... RPC_URL=https://... python main.py deploy
"""

from api3_aggregator_adapter.cli import run

if __name__ == "__main__":
    run()
