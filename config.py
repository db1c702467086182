"""
Program configuration loaded from pulumi.Config().

Selects which website stack the program deploys and carries the few
per-stack overrides the program applies on top of the environment-derived
WebsiteSettings. Values are read from Pulumi config (Pulumi.<stack>.yaml or
``pulumi config set``); ``site_name`` and ``variant`` are required.
"""

from dataclasses import dataclass
from typing import Any, Callable

import pulumi

VARIANTS: tuple[str, ...] = ("spa", "static")

PRICE_CLASSES: tuple[str, ...] = ("PriceClass_100", "PriceClass_200", "PriceClass_All")

# WebsiteSettings fields a variant needs beyond the ones every stack needs.
_VARIANT_REQUIRED: dict[str, tuple[str, ...]] = {
    "spa": (),
    "static": ("referer_secret",),
}


def _require_str(config: pulumi.Config, key: str) -> str:
    return config.require(key)


def _get_str(config: pulumi.Config, key: str) -> str | None:
    return config.get(key) or None


def _require_variant(config: pulumi.Config, key: str) -> str:
    variant = config.require(key).strip().lower()
    if variant not in VARIANTS:
        raise ValueError(f"{key} must be one of {', '.join(VARIANTS)}, got {variant!r}")
    return variant


def _get_price_class(config: pulumi.Config, key: str) -> str | None:
    price_class = config.get(key)
    if price_class and price_class not in PRICE_CLASSES:
        raise ValueError(f"{key} must be one of {', '.join(PRICE_CLASSES)}, got {price_class!r}")
    return price_class or None


# (key, parser); parser receives (config, key) and returns value.
_CONFIG_SPEC: list[tuple[str, Callable[[pulumi.Config, str], Any]]] = [
    ("site_name", _require_str),
    ("variant", _require_variant),
    ("price_class", _get_price_class),
    ("bucket_name", _get_str),
    ("build_dir", _get_str),
]


@dataclass(frozen=True)
class StackConfig:
    """
    Program configuration from Pulumi config.

    Attributes:
        site_name: Name of the website stack component (required).
        variant: "spa" or "static" (required).
        price_class: CloudFront price class replacing the default
            PriceClass_200. SPA variant only.
        bucket_name: Overrides S3_BUCKET_NAME.
        build_dir: Overrides RELATIVE_PATH_TO_BUILD_DIR.
    """

    site_name: str
    variant: str
    price_class: str | None = None
    bucket_name: str | None = None
    build_dir: str | None = None

    def __post_init__(self):
        if self.price_class and self.variant != "spa":
            raise ValueError("price_class can only be overridden for the spa variant")

    def settings_overrides(self) -> dict[str, str]:
        """WebsiteSettings fields to replace, for the overrides that are set."""
        overrides = {
            "bucket_name": self.bucket_name,
            "relative_path_to_build_dir": self.build_dir,
        }
        return {field: value for field, value in overrides.items() if value}

    def required_settings(self) -> tuple[str, ...]:
        """Extra WebsiteSettings fields the chosen variant cannot deploy without."""
        return _VARIANT_REQUIRED[self.variant]

    @classmethod
    def from_pulumi_config(cls, config: pulumi.Config) -> "StackConfig":
        """
        Build StackConfig from pulumi.Config(). Parsers in _CONFIG_SPEC decide
        which keys are required.
        """
        kwargs = {key: parser(config, key) for key, parser in _CONFIG_SPEC}
        return cls(**kwargs)
