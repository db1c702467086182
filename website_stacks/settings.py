"""
Website settings loaded from environment variables.

Provides a typed, immutable view of the values every website stack starts
from: bucket name, custom domain, Route 53 hosted zone, build directory,
referer secret and the AWS provider region/profile. A ``.env`` file in the
working directory is loaded first (variables already set in the process
environment win). Missing values fall back to defaults; use
``require_complete()`` where an incomplete configuration must stop the
program.
"""

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from website_stacks.errors import MissingSettingError

# (field, env var, default)
_ENV_SPEC: list[tuple[str, str, str]] = [
    ("bucket_name", "S3_BUCKET_NAME", ""),
    ("custom_domain", "CUSTOM_DOMAIN", ""),
    ("hosted_zone_id", "HOSTED_ZONE_ID", ""),
    ("relative_path_to_build_dir", "RELATIVE_PATH_TO_BUILD_DIR", "../build"),
    ("referer_secret", "REFERER_SECRET", ""),
    ("aws_region", "AWS_REGION", "us-east-1"),
    ("aws_profile", "AWS_PROFILE", "default"),
    ("environment", "ENVIRONMENT", "dev"),
]

# Fields without a usable default; the stacks cannot produce a working site
# when these are empty.
_REQUIRED: tuple[str, ...] = ("bucket_name", "custom_domain", "hosted_zone_id")

ENV_VARS: dict[str, str] = {field: env for field, env, _ in _ENV_SPEC}


@dataclass(frozen=True)
class WebsiteSettings:
    """
    Settings shared by the website stacks.

    Attributes:
        bucket_name: S3 bucket name for the site (S3_BUCKET_NAME).
        custom_domain: Domain served by CloudFront (CUSTOM_DOMAIN).
        hosted_zone_id: Route 53 hosted zone for the domain (HOSTED_ZONE_ID).
        relative_path_to_build_dir: Directory uploaded to the bucket
            (RELATIVE_PATH_TO_BUILD_DIR, default "../build").
        referer_secret: Shared secret CloudFront sends to the S3 website
            endpoint (REFERER_SECRET).
        aws_region: AWS provider region (AWS_REGION, default "us-east-1").
        aws_profile: AWS provider profile (AWS_PROFILE, default "default").
        environment: Environment tag value (ENVIRONMENT, default "dev").
    """

    bucket_name: str = ""
    custom_domain: str = ""
    hosted_zone_id: str = ""
    relative_path_to_build_dir: str = "../build"
    referer_secret: str = ""
    aws_region: str = "us-east-1"
    aws_profile: str = "default"
    environment: str = "dev"

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        env_file: str | None = None,
    ) -> "WebsiteSettings":
        """
        Build WebsiteSettings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ after
                loading env_file (or ".env" in the working directory).
            env_file: Explicit dotenv file; ignored when environ is given.
        """
        if environ is None:
            load_dotenv(env_file or find_dotenv(usecwd=True), override=False)
            environ = os.environ
        kwargs = {field: environ.get(env) or default for field, env, default in _ENV_SPEC}
        return cls(**kwargs)

    def missing(self, extra: tuple[str, ...] = ()) -> list[str]:
        """
        Env var names of required settings that are empty.

        Args:
            extra: Further fields a particular stack needs, e.g.
                ("referer_secret",) for the static variant.
        """
        return [ENV_VARS[field] for field in (*_REQUIRED, *extra) if not getattr(self, field)]

    def require_complete(self, extra: tuple[str, ...] = ()) -> "WebsiteSettings":
        missing = self.missing(extra)
        if missing:
            raise MissingSettingError(missing)
        return self
