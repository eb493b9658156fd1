#!/usr/bin/env python3
"""Operator commands for the Relay store.

Usage examples:
    # Allow the bot to reply in a channel
    uv run python scripts/admin.py channels add 123456789012345678

    # Replace the system instructions from a file
    uv run python scripts/admin.py instructions set --file prompt.md

    # Wipe the rolling memory
    uv run python scripts/admin.py memory clear

    # Add a reference document to the knowledge base
    uv run python scripts/admin.py files add docs/faq.txt
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Allow running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.allowlist.store import AllowlistStore
from src.config import settings
from src.instructions.store import InstructionsStore
from src.knowledge.blobs import BlobStorage
from src.knowledge.ingest import ingest_file, remove_file
from src.knowledge.store import KnowledgeStore
from src.memory.store import MemoryStore


async def _channels(args: argparse.Namespace) -> int:
    store = AllowlistStore.get()
    if args.action == "list":
        for entry in await store.list_entries():
            print(f"{entry.id}\t{entry.channel_id}")
    elif args.action == "add":
        entry = await store.add(args.channel_id)
        print(f"Allowed {entry.channel_id} (entry {entry.id})")
    elif not await store.remove(args.channel_id):
        print(f"Channel {args.channel_id} is not in the allowlist", file=sys.stderr)
        return 1
    return 0


async def _instructions(args: argparse.Namespace) -> int:
    store = InstructionsStore.get()
    if args.action == "show":
        record = await store.read()
        print(record.content if record and record.content else "(empty)")
        return 0

    if args.file:
        content = Path(args.file).read_text(encoding="utf-8")
    elif args.text is not None:
        content = args.text
    else:
        print("instructions set needs TEXT or --file", file=sys.stderr)
        return 2
    await store.write(content)
    print(f"Instructions updated ({len(content)} chars)")
    return 0


async def _memory(args: argparse.Namespace) -> int:
    store = MemoryStore.get()
    if args.action == "show":
        record = await store.read()
        print(record.summary if record and record.summary else "(empty)")
    else:
        await store.clear()
        print("Memory cleared")
    return 0


async def _files(args: argparse.Namespace) -> int:
    store = KnowledgeStore.get()
    blobs = BlobStorage.get()
    if args.action == "list":
        for f in await store.list_files():
            excerpt = "text" if f.content else "blob"
            print(f"{f.id}\t{f.name}\t{f.size} bytes\t{excerpt}")
    elif args.action == "add":
        record = await ingest_file(
            Path(args.path), store, blobs, max_chars=settings.knowledge_ingest_chars
        )
        print(f"Added {record.name} as file {record.id}")
    elif not await remove_file(args.file_id, store, blobs):
        print(f"No knowledge file with id {args.file_id}", file=sys.stderr)
        return 1
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage Relay's allowlist, prompt and knowledge")
    sub = parser.add_subparsers(dest="command", required=True)

    channels = sub.add_parser("channels", help="Allowed channels")
    ch_sub = channels.add_subparsers(dest="action", required=True)
    ch_sub.add_parser("list")
    ch_sub.add_parser("add").add_argument("channel_id")
    ch_sub.add_parser("remove").add_argument("channel_id")

    instructions = sub.add_parser("instructions", help="System instructions")
    in_sub = instructions.add_subparsers(dest="action", required=True)
    in_sub.add_parser("show")
    in_set = in_sub.add_parser("set")
    in_set.add_argument("text", nargs="?")
    in_set.add_argument("--file", help="Read instructions from this file")

    memory = sub.add_parser("memory", help="Rolling conversation memory")
    mem_sub = memory.add_subparsers(dest="action", required=True)
    mem_sub.add_parser("show")
    mem_sub.add_parser("clear")

    files = sub.add_parser("files", help="Knowledge-base files")
    f_sub = files.add_subparsers(dest="action", required=True)
    f_sub.add_parser("list")
    f_sub.add_parser("add").add_argument("path")
    f_sub.add_parser("remove").add_argument("file_id", type=int)

    return parser


_COMMANDS = {
    "channels": _channels,
    "instructions": _instructions,
    "memory": _memory,
    "files": _files,
}


def main() -> None:
    args = _build_parser().parse_args()
    sys.exit(asyncio.run(_COMMANDS[args.command](args)))


if __name__ == "__main__":
    main()
