#!/usr/bin/env -S python3 -u

# Re-fetch saved images that are suspiciously small (placeholder artwork)

import argparse
import asyncio
import logging
from pathlib import Path

import attr

import emojifetch.logging_setup
from emojifetch import batch, config, download_cache, fetcher, transport


async def run(args):
    emojifetch.logging_setup.install_loop_hook()
    conf = config.load_config(args.config)
    conf = attr.evolve(
        conf, fetch=attr.evolve(conf.fetch, min_bytes=args.min_bytes)
    )

    small = sorted(
        path.stem
        for path in conf.asset_dir.glob("*.png")
        if path.stat().st_size < args.min_bytes
    )
    logging.info(
        f"Found {len(small)} images under {args.min_bytes}b in {conf.asset_dir}"
    )
    if not small:
        return

    cache = download_cache.DownloadCache(conf.cache_path)
    cache.load()

    options = conf.fetch
    async with transport.HttpTransport(
        connect_timeout=options.connect_timeout,
        read_timeout=options.read_timeout,
    ) as tr:
        pipeline = await fetcher.make_pipeline(conf, tr, cache)
        stats = await batch.run_batch(
            small,
            pipeline,
            workers=args.workers or conf.workers,
            progress_every=conf.progress_every,
            flush_every=conf.flush_every,
            request_delay=options.request_delay,
            force=True,
        )

    logging.info(f"Re-fetch complete!\n{stats.summary()}")


parser = argparse.ArgumentParser(description="Re-fetch undersized emoji images")
parser.add_argument("--config", type=Path, help="TOML config (default: packaged)")
parser.add_argument("--debug", action="store_true")
parser.add_argument("--log", type=Path, help="Also write a run log here")
parser.add_argument("--min-bytes", type=int, default=1000, help="Size threshold")
parser.add_argument("--workers", type=int, default=10, help="Concurrent fetches")
args = parser.parse_args()
if args.debug:
    emojifetch.logging_setup.enable_debug()
if args.log:
    emojifetch.logging_setup.log_to_file(args.log)

asyncio.run(run(args))
