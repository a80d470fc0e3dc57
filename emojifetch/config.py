# Configuration file representation

from pathlib import Path
from typing import Optional, Tuple

import attr
import cattr
import cattr.preconf.tomlkit
import cattrs.errors
import tomlkit
import tomlkit.exceptions

from emojifetch.codepoints import EmojiFetchError
from emojifetch.slugs import OverrideLayer

DEFAULT_PATH = Path(__file__).resolve().parent / "defaults.toml"


class ConfigError(EmojiFetchError):
    pass


@attr.frozen
class FetchConfig:
    release: str = "419"
    release_tag: str = "ios-18.4"
    cdn_base: str = "https://em-content.zobj.net/source/apple/{release}"
    page_base: str = "https://emojipedia.org/apple/{release_tag}"
    url_templates: Tuple[str, ...] = (
        "{cdn_base}/{slug}_{key}.png",
        "{cdn_base}/{slug}_{key}-fe0f.png",
    )
    full_slug_template: str = "{cdn_base}/{slug}.png"
    min_bytes: int = 100
    connect_timeout: float = 10.0
    read_timeout: float = 15.0
    request_delay: float = 0.1

    @property
    def cdn_url(self) -> str:
        return self.cdn_base.format(release=self.release).rstrip("/")

    @property
    def page_url(self) -> str:
        return self.page_base.format(release_tag=self.release_tag).rstrip("/")


@attr.frozen
class Config:
    fetch: FetchConfig = FetchConfig()
    registry_url: str = "https://unicode.org/Public/emoji/latest/emoji-test.txt"
    registry_cache: Path = Path(".context/emoji-test.txt")
    index_path: Path = Path("emoji/index.yml")
    asset_dir: Path = Path("emoji/images")
    cache_path: Path = Path(".context/emoji_cache.json")
    failure_path: Path = Path(".context/failed_emoji.txt")
    workers: int = 20
    progress_every: int = 100
    flush_every: int = 100
    skip: Tuple[str, ...] = attr.field(factory=tuple)
    overrides: Tuple[OverrideLayer, ...] = attr.field(factory=tuple)


def load_config(filename: Optional[Path] = None) -> Config:
    path = filename or DEFAULT_PATH
    converter = cattr.preconf.tomlkit.make_converter()
    converter.register_structure_hook(Path, lambda value, _: Path(value))
    try:
        with open(path, encoding="utf-8") as file:
            config_toml = tomlkit.load(file)
        return converter.structure(config_toml.unwrap(), Config)
    except (OSError, tomlkit.exceptions.TOMLKitError) as exc:
        raise ConfigError(f"Can't read {path}: {exc}") from exc
    except (cattrs.errors.BaseValidationError, ValueError, TypeError) as exc:
        raise ConfigError(f"Bad config {path}: {exc}") from exc
