"""
CloudFront stack for static sites with an index document per directory.

Docs sites and other multi-page builds rely on the S3 website endpoint to
resolve ``/guide/`` to ``/guide/index.html``, which the REST endpoint behind
an Origin Access Control cannot do. The distribution therefore uses the
website endpoint as a custom (HTTP-only) origin. To keep the bucket from
being read directly, CloudFront sends a shared secret in the User-Agent
header and the bucket policy only allows requests carrying it.
"""

from typing import Any

import pulumi
import pulumi_aws as aws

from website_stacks._helpers import origin_id
from website_stacks.base import (
    DEFAULT_PRICE_CLASS,
    BaseWebsiteStack,
    default_cache_behavior,
    no_restrictions,
    sni_viewer_certificate,
)
from website_stacks.settings import WebsiteSettings

# Header CloudFront adds to origin requests; matched by the bucket policy.
SECRET_HEADER: str = "User-Agent"

ID: str = "websitestacks:aws:CloudfrontStaticWebsiteStack"


class CloudfrontStaticWebsiteStack(BaseWebsiteStack):
    """
    S3 website endpoint + CloudFront + ACM + Route 53 for static sites.

    Resources beyond the SPA variant: BucketOwnershipControls, BucketAcl,
    BucketPublicAccessBlock and BucketWebsiteConfiguration. No Origin
    Access Control is created.
    """

    def __init__(
        self,
        name: str,
        settings: WebsiteSettings | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__(name, settings, opts, resource_type=ID)

    def secret_policy_document_config(self) -> dict[str, Any]:
        """
        Policy allowing GetObject to anyone presenting the referer secret.
        """
        bucket = self._require("s3_bucket", "create_s3_bucket")
        return {
            "statements": [
                aws.iam.GetPolicyDocumentStatementArgs(
                    sid="AllowCFOrigin",
                    actions=["s3:GetObject"],
                    resources=[pulumi.Output.concat(bucket.arn, "/*")],
                    conditions=[
                        aws.iam.GetPolicyDocumentStatementConditionArgs(
                            test="StringEquals",
                            variable="aws:UserAgent",
                            values=[self.referer_secret],
                        )
                    ],
                    principals=[
                        aws.iam.GetPolicyDocumentStatementPrincipalArgs(
                            type="*",
                            identifiers=["*"],
                        )
                    ],
                )
            ],
        }

    def website_distribution_config(self) -> dict[str, Any]:
        """
        Distribution in front of the S3 website endpoint.

        Same cache behavior, restrictions and certificate as the SPA variant
        but no default root object, no error page rewrites and no query
        string forwarding.
        """
        website = self._require("s3_website_configuration", "create_s3_website_configuration")
        certificate = self._require("acm_certificate", "create_acm_certificate")
        target = origin_id(self.bucket_name)
        return {
            "origins": [
                aws.cloudfront.DistributionOriginArgs(
                    domain_name=website.website_endpoint,
                    origin_id=target,
                    custom_origin_config=aws.cloudfront.DistributionOriginCustomOriginConfigArgs(
                        origin_protocol_policy="http-only",
                        http_port=80,
                        https_port=443,
                        origin_ssl_protocols=["TLSv1.2"],
                    ),
                    custom_headers=[
                        aws.cloudfront.DistributionOriginCustomHeaderArgs(
                            name=SECRET_HEADER,
                            value=self.referer_secret,
                        )
                    ],
                )
            ],
            "enabled": True,
            "price_class": DEFAULT_PRICE_CLASS,
            "default_cache_behavior": default_cache_behavior(target, query_string=False),
            "restrictions": no_restrictions(),
            "viewer_certificate": sni_viewer_certificate(certificate.acm_arn),
            "aliases": [self.custom_domain],
        }

    def init(self) -> "CloudfrontStaticWebsiteStack":
        self.create_aws_provider().create_s3_bucket()
        self.bucket_policy_document_config = self.secret_policy_document_config()

        (
            self.create_bucket_policy_document()
            .create_acm_certificate()
            .create_s3_bucket_ownership_controls()
            .create_s3_bucket_acl()
            .create_s3_bucket_public_access_block()
            .create_s3_website_configuration()
        )
        self.cloudfront_distribution_config = self.website_distribution_config()

        return (
            self.create_cloudfront_distribution()
            .create_s3_bucket_policy()
            .create_route53_record()
            .upload_to_s3()
            .finalize()
        )
