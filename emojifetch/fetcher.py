# Fetch one emoji asset: templated CDN URLs, then a page-scrape fallback

import logging
import re
import urllib.parse
from pathlib import Path
from typing import Iterable, List, Optional, Union

import attr

from emojifetch import codepoints, config, download_cache, registry, slugs, transport

logger = logging.getLogger(__name__)


@attr.frozen
class Skipped:
    key: str
    reason: str  # "component" or "cached"


@attr.frozen
class Fetched:
    key: str
    via: str  # "direct" or "scraped"
    url: str
    size: int


@attr.frozen
class Failed:
    key: str
    reason: str  # "no-slug", "exhausted", "malformed" or "error"


Outcome = Union[Skipped, Fetched, Failed]


class FetchPipeline:
    def __init__(
        self,
        *,
        options: config.FetchConfig,
        tr: transport.Transport,
        resolver: slugs.SlugResolver,
        cache: download_cache.DownloadCache,
        asset_dir: Path,
        skip: Iterable[str] = (),
    ):
        self.options = options
        self.transport = tr
        self.resolver = resolver
        self.cache = cache
        self.asset_dir = asset_dir
        self.skip = frozenset(codepoints.normalize(k) for k in skip)
        self._asset_rx = re.compile(
            re.escape(options.cdn_url) + r"/[^\"'\s]+\.png"
        )

    def asset_path(self, key: str) -> Path:
        return self.asset_dir / f"{key}.png"

    def has_asset(self, key: str) -> bool:
        try:
            return self.asset_path(key).stat().st_size > self.options.min_bytes
        except FileNotFoundError:
            return False

    def skip_reason(self, key: str, *, force: bool = False) -> Optional[str]:
        if key in self.skip:
            return "component"
        if not force and self.cache.is_present(key) and self.has_asset(key):
            return "cached"
        return None

    def direct_urls(self, key: str, slug: str) -> List[str]:
        if "_" in slug:
            # Slug already carries its own codepoint suffix.
            template = self.options.full_slug_template
            return [template.format(cdn_base=self.options.cdn_url, slug=slug)]
        return [
            template.format(cdn_base=self.options.cdn_url, slug=slug, key=key)
            for template in self.options.url_templates
        ]

    def page_url(self, key: str) -> str:
        glyph = codepoints.to_glyph(key)
        return f"{self.options.page_url}/{urllib.parse.quote(glyph, safe='')}"

    async def fetch(
        self, key: str, *, force: bool = False, scrape_only: bool = False
    ) -> Outcome:
        reason = self.skip_reason(key, force=force)
        if reason:
            return Skipped(key, reason)

        candidates = [] if scrape_only else self.resolver.candidates(key)
        for slug in candidates:
            for url in self.direct_urls(key, slug):
                body = await self._download(url)
                if body is not None:
                    return self._store(key, "direct", url, body)

        url = await self.scrape_asset_url(key)
        if url:
            body = await self._download(url)
            if body is not None:
                return self._store(key, "scraped", url, body)

        if not candidates and not scrape_only:
            return Failed(key, "no-slug")
        return Failed(key, "exhausted")

    async def scrape_asset_url(self, key: str) -> Optional[str]:
        headers = {"User-Agent": transport.BROWSER_AGENT}
        try:
            page = self.page_url(key)
            response = await self.transport.get(page, headers=headers)
            if response.is_redirect:
                assert response.location is not None
                page = urllib.parse.urljoin(page, response.location)
                response = await self.transport.get(page, headers=headers)
        except (transport.TransportError, codepoints.MalformedCodepointError) as exc:
            logger.debug(f"[{key}] Scrape failed: {exc}")
            return None

        if response.status != 200:
            logger.debug(f"[{key}] Scrape page HTTP {response.status}: {page}")
            return None

        match = self._asset_rx.search(response.body.decode("utf-8", "replace"))
        if not match:
            logger.debug(f"[{key}] No asset URL on page: {page}")
            return None
        return match.group(0)

    async def _download(self, url: str) -> Optional[bytes]:
        try:
            response = await self.transport.get(url)
        except transport.TransportError as exc:
            logger.debug(f"{exc}")
            return None

        # The CDN answers some misses with a tiny placeholder and HTTP 200.
        size = len(response.body)
        if response.status != 200 or size <= self.options.min_bytes:
            logger.debug(f"Rejected {url} (HTTP {response.status}, {size}b)")
            return None
        return response.body

    def _store(self, key: str, via: str, url: str, body: bytes) -> Fetched:
        self.asset_dir.mkdir(parents=True, exist_ok=True)
        self.asset_path(key).write_bytes(body)
        self.cache.mark_present(key)
        logger.debug(f"[{key}] Saved {len(body)}b via {via}: {url}")
        return Fetched(key, via, url, len(body))


async def make_pipeline(
    conf: config.Config,
    tr: transport.Transport,
    cache: download_cache.DownloadCache,
) -> FetchPipeline:
    text = await registry.load_registry_text(
        tr, conf.registry_url, conf.registry_cache
    )
    names = registry.build_name_table(text)
    overrides = slugs.merge_overrides(conf.overrides)
    logger.info(
        f"Loaded {len(names)} registry names, {len(overrides)} overrides, "
        f"{len(conf.skip)} component skips"
    )
    return FetchPipeline(
        options=conf.fetch,
        tr=tr,
        resolver=slugs.SlugResolver(names, overrides),
        cache=cache,
        asset_dir=conf.asset_dir,
        skip=conf.skip,
    )
