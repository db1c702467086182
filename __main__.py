"""
CloudFront static website - Pulumi entrypoint.

Reads the website settings from the environment (and ``.env``), applies the
overrides from Pulumi config and deploys one of the two stacks:

- **spa**: private bucket + Origin Access Control, for single page apps. An
  optional ``price_class`` replaces the default PriceClass_200.
- **static**: S3 website endpoint behind CloudFront, for sites with an index
  document per directory (e.g. docs).

Stack exports: bucket_id, cloudfront_domain_name, website_url.
"""

import dataclasses

import pulumi

from config import StackConfig
from website_stacks import (
    CloudfrontSpaWebsiteStack,
    CloudfrontStaticWebsiteStack,
    WebsiteSettings,
)


def _deploy_spa(config: StackConfig, settings: WebsiteSettings) -> CloudfrontSpaWebsiteStack:
    stack = CloudfrontSpaWebsiteStack(config.site_name, settings=settings)
    if not config.price_class:
        return stack.init()

    # Same order as init(), with the price class swapped in before the
    # distribution is created.
    (
        stack.create_aws_provider()
        .create_s3_bucket()
        .create_acm_certificate()
        .create_origin_access_control()
    )
    stack.cloudfront_distribution_config = {
        **stack.cloudfront_distribution_config,
        "price_class": config.price_class,
    }
    return (
        stack.create_cloudfront_distribution()
        .create_bucket_policy_document()
        .create_s3_bucket_policy()
        .create_route53_record()
        .upload_to_s3()
        .finalize()
    )


def main():
    """
    Build the configured website stack and export its outputs.

    Fails before declaring anything when a required environment variable
    (bucket name, custom domain, hosted zone id, and the referer secret for
    the static variant) is missing.
    """
    config = StackConfig.from_pulumi_config(pulumi.Config())
    settings = dataclasses.replace(
        WebsiteSettings.from_env(),
        **config.settings_overrides(),
    ).require_complete(config.required_settings())

    pulumi.log.info(
        f"Deploying {config.variant} website {config.site_name} "
        f"(bucket={settings.bucket_name}, domain={settings.custom_domain})"
    )
    if config.variant == "spa":
        stack = _deploy_spa(config, settings)
    else:
        stack = CloudfrontStaticWebsiteStack(config.site_name, settings=settings).init()

    for output_name, value in [
        ("bucket_id", stack.bucket_id),
        ("cloudfront_domain_name", stack.cloudfront_domain_name),
        ("website_url", stack.website_url),
    ]:
        pulumi.export(output_name, value)


if __name__ == "__main__":
    main()
