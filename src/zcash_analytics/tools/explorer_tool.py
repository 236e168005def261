#!/usr/bin/env python3
"""Zcash Explorer Tool — chain lookups and viewing-key scans from the shell.

A standalone CLI utility for the public Zcash explorers:

    # Current chain height
    python -m zcash_analytics.tools.explorer_tool height

    # Show a block by height or hash
    python -m zcash_analytics.tools.explorer_tool block <height|hash>

    # Classify the privacy of a transaction
    python -m zcash_analytics.tools.explorer_tool privacy <txid>

    # Check that a viewing key is well formed (key is prompted for)
    python -m zcash_analytics.tools.explorer_tool validate <unified|sapling|orchard>

    # Scan a block range with a viewing key (key is prompted for)
    python -m zcash_analytics.tools.explorer_tool scan <type> <start> <end> [label]

Viewing keys are read from the ZCASH_VIEWING_KEY environment variable or
prompted for without echo. They live in an in-memory session for the
duration of the command and are never written anywhere.

Scan results are SIMULATED: amounts, memos and addresses are placeholders.
"""

from __future__ import annotations

import asyncio
import getpass
import os
import sys


def _read_viewing_key() -> str:
    return os.getenv("ZCASH_VIEWING_KEY") or getpass.getpass("Viewing key: ").strip()


async def _open_explorer():  # noqa: ANN202
    from zcash_analytics.cache.client import CacheClient
    from zcash_analytics.config.settings import AppConfig
    from zcash_analytics.explorer.client import ZcashBlockExplorer

    config = AppConfig()
    cache = CacheClient(config.cache)
    await cache.connect()
    explorer = ZcashBlockExplorer(config.explorer, cache.namespace("explorer"))
    await explorer.connect()
    return cache, explorer


def _cmd_height() -> None:
    """Print the current chain height."""

    async def _run() -> None:
        cache, explorer = await _open_explorer()
        try:
            height = await explorer.get_latest_block_height()
            network = "TESTNET" if explorer.testnet else "MAINNET"
            print(f"Network: {network}")
            print(f"Height:  {height:,}" if height else "Height:  unavailable")
        finally:
            await explorer.close()
            await cache.close()

    asyncio.run(_run())


def _cmd_block(height_or_hash: str) -> None:
    """Print a block summary."""

    async def _run() -> None:
        cache, explorer = await _open_explorer()
        try:
            block = await explorer.get_block(height_or_hash)
            if block is None:
                print(f"Block not found: {height_or_hash}")
                return
            print(f"Block {block.height}  {block.hash}")
            print("-" * 80)
            print(f"  time:         {block.time}")
            print(f"  size:         {block.size:,} bytes")
            print(f"  difficulty:   {block.difficulty}")
            print(f"  transactions: {len(block.tx)}")
            for txid in block.tx:
                print(f"    {txid}")
        finally:
            await explorer.close()
            await cache.close()

    asyncio.run(_run())


def _cmd_privacy(txid: str) -> None:
    """Classify one transaction."""

    async def _run() -> None:
        cache, explorer = await _open_explorer()
        try:
            tx = await explorer.get_transaction(txid)
            if tx is None:
                print(f"Transaction not found: {txid}")
                return
            report = explorer.verify_transaction_privacy(tx)
            print(f"Transaction: {tx.txid}")
            print(f"Privacy:     {report.level} ({'private' if report.is_private else 'public'})")
            for line in report.details:
                print(f"  - {line}")
        finally:
            await explorer.close()
            await cache.close()

    asyncio.run(_run())


def _cmd_validate(key_type: str) -> None:
    """Validate a viewing key without storing it."""
    from zcash_analytics.keys.viewing_keys import validate_viewing_key

    if validate_viewing_key(_read_viewing_key(), key_type):
        print(f"Valid {key_type} viewing key")
    else:
        print(f"Invalid {key_type} viewing key")
        sys.exit(1)


def _cmd_scan(key_type: str, start: int, end: int, label: str | None = None) -> None:
    """Add a key to a fresh session and scan a block range with it."""
    from zcash_analytics.keys.session import MemorySessionStorage
    from zcash_analytics.keys.viewing_keys import ViewingKeyStore, key_id

    store = ViewingKeyStore(MemorySessionStorage())
    key = _read_viewing_key()
    if not store.add(key, key_type, label):
        print(f"Invalid {key_type} viewing key")
        sys.exit(1)
    viewing_key = store.get(key_id(key))
    if viewing_key is None:
        print(f"Viewing key {key_id(key)} is not in the session")
        sys.exit(1)

    def _progress(done: int, total: int) -> None:
        print(f"\r  scanning {done}/{total} blocks", end="", flush=True)

    async def _run() -> None:
        cache, explorer = await _open_explorer()
        try:
            found = await explorer.scan_for_shielded_transactions(
                viewing_key, start, end, on_progress=_progress
            )
            print()
            if not found:
                print(f"No shielded transactions in blocks {start}-{end}")
                return
            print(f"Shielded transactions in blocks {start}-{end} (SIMULATED):")
            print("-" * 80)
            for tx in found:
                print(
                    f"  {tx.txid}  h={tx.block_height}  {tx.type:<8} {tx.pool:<7} "
                    f"{tx.amount:>10.4f} ZEC  {tx.memo or ''}"
                )
        finally:
            await explorer.close()
            await cache.close()
            store.clear()

    asyncio.run(_run())


def main() -> None:
    """CLI entry point."""
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    cmd = sys.argv[1].lower()

    if cmd == "height":
        _cmd_height()
    elif cmd == "block":
        if len(sys.argv) < 3:
            print("Usage: explorer_tool block <height|hash>")
            sys.exit(1)
        _cmd_block(sys.argv[2])
    elif cmd == "privacy":
        if len(sys.argv) < 3:
            print("Usage: explorer_tool privacy <txid>")
            sys.exit(1)
        _cmd_privacy(sys.argv[2])
    elif cmd == "validate":
        if len(sys.argv) < 3:
            print("Usage: explorer_tool validate <unified|sapling|orchard>")
            sys.exit(1)
        _cmd_validate(sys.argv[2])
    elif cmd == "scan":
        if len(sys.argv) < 5:
            print("Usage: explorer_tool scan <type> <start> <end> [label]")
            sys.exit(1)
        label = sys.argv[5] if len(sys.argv) > 5 else None
        _cmd_scan(sys.argv[2], int(sys.argv[3]), int(sys.argv[4]), label)
    else:
        print(f"Unknown command: {cmd}")
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main()
