#!/usr/bin/env -S python3 -u

import argparse
import asyncio
import logging
from pathlib import Path

import attr

import emojifetch.logging_setup
from emojifetch import batch, config, download_cache, fetcher, index, transport


async def run(args):
    emojifetch.logging_setup.install_loop_hook()
    conf = config.load_config(args.config)
    if args.workers:
        conf = attr.evolve(conf, workers=args.workers)
    if args.index:
        conf = attr.evolve(conf, index_path=args.index)

    if args.keys:
        keys = list(args.keys)
    elif args.retry:
        if not conf.failure_path.is_file():
            logging.info(f"No failure record: {conf.failure_path}")
            return
        keys = download_cache.read_failures(conf.failure_path)
        logging.info(f"Retrying {len(keys)} failed keys")
    else:
        keys = index.load_index(conf.index_path)
        logging.info(f"Found {len(keys)} emojis in {conf.index_path}")

    cache = download_cache.DownloadCache(conf.cache_path)
    cache.load()

    options = conf.fetch
    async with transport.HttpTransport(
        connect_timeout=options.connect_timeout,
        read_timeout=options.read_timeout,
    ) as tr:
        pipeline = await fetcher.make_pipeline(conf, tr, cache)
        stats = await batch.run_batch(
            keys,
            pipeline,
            workers=conf.workers,
            progress_every=conf.progress_every,
            flush_every=conf.flush_every,
            request_delay=options.request_delay,
            force=args.force,
            scrape_only=args.scrape_only,
        )

    logging.info(f"Download complete!\n{stats.summary()}")
    if not args.keys:
        download_cache.write_failures(conf.failure_path, stats.failures)
        if stats.failures:
            logging.info(f"Failed list saved: {conf.failure_path}")


parser = argparse.ArgumentParser(description="Fetch emoji images by codepoint")
parser.add_argument("--config", type=Path, help="TOML config (default: packaged)")
parser.add_argument("--debug", action="store_true")
parser.add_argument("--log", type=Path, help="Also write a run log here")
parser.add_argument("--index", type=Path, help="Codepoint index (.yml or text)")
parser.add_argument("--workers", type=int, help="Concurrent fetches")
parser.add_argument("--retry", action="store_true", help="Only failed keys")
parser.add_argument("--scrape-only", action="store_true", help="Skip CDN guess")
parser.add_argument("--force", action="store_true", help="Ignore the cache")
parser.add_argument("keys", nargs="*", help="Codepoint keys (default: index)")
args = parser.parse_args()
if args.debug:
    emojifetch.logging_setup.enable_debug()
if args.log:
    emojifetch.logging_setup.log_to_file(args.log)

asyncio.run(run(args))
