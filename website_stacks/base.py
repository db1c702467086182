"""
Shared base for the CloudFront website stacks.

``BaseWebsiteStack`` is a ComponentResource holding everything the two
variants have in common:

- the settings (bucket name, custom domain, hosted zone, build directory,
  referer secret) copied onto the instance so callers can override them
  after construction and before ``init()``;
- one slot per resource, ``None`` until the matching ``create_*`` step ran;
- one configuration fragment per resource. Fragments are computed on first
  read and cached (``functools.cached_property``); assigning to a fragment
  replaces it, which is how a variant or a caller changes e.g. the price
  class before the resource is created;
- chainable ``create_*`` steps that register a resource from its fragment
  and return ``self``.

A fragment is a dict of keyword arguments for the resource it configures.
Fragments that point at another resource (bucket ARN, distribution domain,
...) raise ``StackOrderError`` when that resource has not been created yet.
"""

from functools import cached_property
from typing import Any

import pulumi
import pulumi_aws as aws

from website_stacks._helpers import default_tags, oac_name, origin_id
from website_stacks.certificate import AcmCertificate
from website_stacks.errors import StackOrderError
from website_stacks.settings import WebsiteSettings
from website_stacks.upload import upload_directory_to_s3

ID: str = "websitestacks:aws:BaseWebsiteStack"

# CloudFront only accepts ACM certificates from this region.
CLOUDFRONT_CERTIFICATE_REGION: str = "us-east-1"

ALLOWED_METHODS: list[str] = ["DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT"]
CACHED_METHODS: list[str] = ["GET", "HEAD"]

INDEX_DOCUMENT: str = "index.html"
DEFAULT_PRICE_CLASS: str = "PriceClass_200"


def default_cache_behavior(
    target_origin_id: str,
    query_string: bool,
) -> aws.cloudfront.DistributionDefaultCacheBehaviorArgs:
    """
    Cache behavior shared by both variants.

    HTTPS redirect, compression, TTLs of 0/3600/86400 seconds. Only the
    query-string forwarding differs between the variants.
    """
    forwarded_values = aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesArgs(
        query_string=query_string,
        cookies=aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesCookiesArgs(
            forward="none",
        ),
    )
    return aws.cloudfront.DistributionDefaultCacheBehaviorArgs(
        allowed_methods=list(ALLOWED_METHODS),
        cached_methods=list(CACHED_METHODS),
        target_origin_id=target_origin_id,
        forwarded_values=forwarded_values,
        viewer_protocol_policy="redirect-to-https",
        min_ttl=0,
        default_ttl=3600,
        max_ttl=86400,
        compress=True,
    )


def no_restrictions() -> aws.cloudfront.DistributionRestrictionsArgs:
    return aws.cloudfront.DistributionRestrictionsArgs(
        geo_restriction=aws.cloudfront.DistributionRestrictionsGeoRestrictionArgs(
            restriction_type="none",
        ),
    )


def sni_viewer_certificate(
    acm_certificate_arn: pulumi.Input[str],
) -> aws.cloudfront.DistributionViewerCertificateArgs:
    return aws.cloudfront.DistributionViewerCertificateArgs(
        acm_certificate_arn=acm_certificate_arn,
        ssl_support_method="sni-only",
        minimum_protocol_version="TLSv1.2_2019",
    )


class BaseWebsiteStack(pulumi.ComponentResource):
    """
    Settings, resource slots, configuration fragments and create steps.

    Subclasses implement ``init()`` with the order of steps for their
    variant and override fragments where the variant differs.
    """

    def __init__(
        self,
        name: str,
        settings: WebsiteSettings | None = None,
        opts: pulumi.ResourceOptions | None = None,
        resource_type: str = ID,
    ):
        """
        Register the component. No AWS resource is declared until a
        ``create_*`` step (or ``init()``) runs.

        Args:
            name: Pulumi resource name of the stack; prefixes every child.
            settings: Starting values. Defaults to WebsiteSettings.from_env().
            opts: Options for the component itself.
            resource_type: Component type token; each variant passes its own.
        """
        super().__init__(resource_type, name, None, opts)

        self.stack_name = name
        self.settings = settings if settings is not None else WebsiteSettings.from_env()

        self.bucket_name: str = self.settings.bucket_name
        self.custom_domain: str = self.settings.custom_domain
        self.hosted_zone_id: str = self.settings.hosted_zone_id
        self.relative_path_to_build_dir: str = self.settings.relative_path_to_build_dir
        self.referer_secret: str = self.settings.referer_secret

        self.aws_provider: aws.Provider | None = None
        self.certificate_provider: aws.Provider | None = None
        self.s3_bucket: aws.s3.Bucket | None = None
        self.bucket_policy_document: pulumi.Output[aws.iam.GetPolicyDocumentResult] | None = None
        self.acm_certificate: AcmCertificate | None = None
        self.s3_bucket_ownership_controls: aws.s3.BucketOwnershipControls | None = None
        self.s3_bucket_acl: aws.s3.BucketAcl | None = None
        self.s3_bucket_public_access_block: aws.s3.BucketPublicAccessBlock | None = None
        self.s3_website_configuration: aws.s3.BucketWebsiteConfiguration | None = None
        self.cloudfront_distribution: aws.cloudfront.Distribution | None = None
        self.s3_bucket_policy: aws.s3.BucketPolicy | None = None
        self.route53_record: aws.route53.Record | None = None
        self.origin_access_control: aws.cloudfront.OriginAccessControl | None = None
        self.s3_objects: list[aws.s3.BucketObject] = []

    def init(self) -> "BaseWebsiteStack":
        """Create every resource of the variant, in order, and register outputs."""
        raise NotImplementedError

    def _require(self, attr: str, step: str) -> Any:
        resource = getattr(self, attr)
        if resource is None:
            raise StackOrderError(attr, step)
        return resource

    def _child_opts(self, **kwargs: Any) -> pulumi.ResourceOptions:
        return pulumi.ResourceOptions(parent=self, provider=self.aws_provider, **kwargs)

    def _child_name(self, suffix: str) -> str:
        return f"{self.stack_name}-{suffix}"

    # Configuration fragments

    @cached_property
    def aws_config(self) -> dict[str, Any]:
        """AWS provider configuration."""
        return {
            "region": self.settings.aws_region,
            "profile": self.settings.aws_profile,
        }

    @cached_property
    def s3_bucket_config(self) -> dict[str, Any]:
        return {
            "bucket": self.bucket_name,
            "tags": default_tags(self.settings.environment),
        }

    @cached_property
    def acm_certificate_config(self) -> dict[str, Any]:
        return {
            "domain_name": self.custom_domain,
            "hosted_zone_id": self.hosted_zone_id,
        }

    @cached_property
    def bucket_policy_document_config(self) -> dict[str, Any]:
        """
        Policy letting only this distribution read objects, through the
        CloudFront service principal (origin access control).
        """
        bucket = self._require("s3_bucket", "create_s3_bucket")
        distribution = self._require("cloudfront_distribution", "create_cloudfront_distribution")
        return {
            "version": "2008-10-17",
            "statements": [
                aws.iam.GetPolicyDocumentStatementArgs(
                    sid="AllowCloudfrontServicePrincipal",
                    effect="Allow",
                    principals=[
                        aws.iam.GetPolicyDocumentStatementPrincipalArgs(
                            type="Service",
                            identifiers=["cloudfront.amazonaws.com"],
                        )
                    ],
                    actions=["s3:GetObject"],
                    resources=[pulumi.Output.concat(bucket.arn, "/*")],
                    conditions=[
                        aws.iam.GetPolicyDocumentStatementConditionArgs(
                            test="StringEquals",
                            variable="aws:SourceArn",
                            values=[distribution.arn],
                        )
                    ],
                )
            ],
        }

    @cached_property
    def s3_bucket_ownership_controls_config(self) -> dict[str, Any]:
        bucket = self._require("s3_bucket", "create_s3_bucket")
        return {
            "bucket": bucket.id,
            "rule": aws.s3.BucketOwnershipControlsRuleArgs(
                object_ownership="BucketOwnerPreferred",
            ),
        }

    @cached_property
    def s3_bucket_acl_config(self) -> dict[str, Any]:
        bucket = self._require("s3_bucket", "create_s3_bucket")
        return {
            "bucket": bucket.id,
            "acl": "private",
        }

    @cached_property
    def s3_bucket_public_access_block_config(self) -> dict[str, Any]:
        bucket = self._require("s3_bucket", "create_s3_bucket")
        return {
            "bucket": bucket.id,
            "block_public_policy": False,
            "restrict_public_buckets": False,
        }

    @cached_property
    def s3_bucket_website_configuration_config(self) -> dict[str, Any]:
        bucket = self._require("s3_bucket", "create_s3_bucket")
        return {
            "bucket": bucket.id,
            "index_document": aws.s3.BucketWebsiteConfigurationIndexDocumentArgs(
                suffix=INDEX_DOCUMENT,
            ),
        }

    @cached_property
    def cloudfront_distribution_config(self) -> dict[str, Any]:
        """
        Distribution serving a private bucket through origin access control.

        403 and 404 from the origin are answered with /index.html so client
        side routes of a single page app resolve.
        """
        bucket = self._require("s3_bucket", "create_s3_bucket")
        oac = self._require("origin_access_control", "create_origin_access_control")
        certificate = self._require("acm_certificate", "create_acm_certificate")
        target = origin_id(self.bucket_name)
        return {
            "origins": [
                aws.cloudfront.DistributionOriginArgs(
                    domain_name=bucket.bucket_regional_domain_name,
                    origin_id=target,
                    origin_access_control_id=oac.id,
                )
            ],
            "enabled": True,
            "default_root_object": INDEX_DOCUMENT,
            "price_class": DEFAULT_PRICE_CLASS,
            "custom_error_responses": [
                aws.cloudfront.DistributionCustomErrorResponseArgs(
                    error_code=error_code,
                    response_code=200,
                    response_page_path=f"/{INDEX_DOCUMENT}",
                )
                for error_code in (404, 403)
            ],
            "default_cache_behavior": default_cache_behavior(target, query_string=True),
            "restrictions": no_restrictions(),
            "viewer_certificate": sni_viewer_certificate(certificate.acm_arn),
            "aliases": [self.custom_domain],
        }

    @cached_property
    def s3_bucket_policy_config(self) -> dict[str, Any]:
        bucket = self._require("s3_bucket", "create_s3_bucket")
        document = self._require("bucket_policy_document", "create_bucket_policy_document")
        return {
            "bucket": bucket.id,
            "policy": document.json,
        }

    @cached_property
    def route53_record_config(self) -> dict[str, Any]:
        """A alias record pointing the custom domain at the distribution."""
        distribution = self._require("cloudfront_distribution", "create_cloudfront_distribution")
        return {
            "name": self.custom_domain,
            "zone_id": self.hosted_zone_id,
            "type": "A",
            "aliases": [
                aws.route53.RecordAliasArgs(
                    name=distribution.domain_name,
                    zone_id=distribution.hosted_zone_id,
                    evaluate_target_health=False,
                )
            ],
        }

    @cached_property
    def origin_access_control_config(self) -> dict[str, Any]:
        return {
            "name": oac_name(self.bucket_name),
            "description": "Allow Cloudfront access to the bucket",
            "origin_access_control_origin_type": "s3",
            "signing_behavior": "always",
            "signing_protocol": "sigv4",
        }

    # Create steps

    def create_aws_provider(self) -> "BaseWebsiteStack":
        self.aws_provider = aws.Provider(
            resource_name=self._child_name("aws"),
            opts=pulumi.ResourceOptions(parent=self),
            **self.aws_config,
        )
        return self

    def create_s3_bucket(self) -> "BaseWebsiteStack":
        self.s3_bucket = aws.s3.Bucket(
            resource_name=self._child_name("s3-bucket"),
            opts=self._child_opts(),
            **self.s3_bucket_config,
        )
        return self

    def create_bucket_policy_document(self) -> "BaseWebsiteStack":
        """Evaluate the IAM policy document data source from its fragment."""
        self.bucket_policy_document = aws.iam.get_policy_document_output(
            opts=pulumi.InvokeOptions(parent=self, provider=self.aws_provider),
            **self.bucket_policy_document_config,
        )
        return self

    def create_acm_certificate(self) -> "BaseWebsiteStack":
        """
        Request the DNS-validated certificate for the custom domain.

        The certificate gets its own us-east-1 provider when the stack's
        region is anything else.
        """
        opts = self._child_opts()
        if self.aws_config.get("region") != CLOUDFRONT_CERTIFICATE_REGION:
            self.certificate_provider = aws.Provider(
                resource_name=self._child_name(f"aws-{CLOUDFRONT_CERTIFICATE_REGION}"),
                region=CLOUDFRONT_CERTIFICATE_REGION,
                profile=self.aws_config.get("profile"),
                opts=pulumi.ResourceOptions(parent=self),
            )
            opts = pulumi.ResourceOptions(parent=self, provider=self.certificate_provider)
        self.acm_certificate = AcmCertificate(
            name=self._child_name("acm-certificate"),
            opts=opts,
            **self.acm_certificate_config,
        )
        return self

    def create_s3_bucket_ownership_controls(self) -> "BaseWebsiteStack":
        self.s3_bucket_ownership_controls = aws.s3.BucketOwnershipControls(
            resource_name=self._child_name("s3-bucket-ownership-controls"),
            opts=self._child_opts(),
            **self.s3_bucket_ownership_controls_config,
        )
        return self

    def create_s3_bucket_acl(self) -> "BaseWebsiteStack":
        # ACLs are rejected until ownership controls allow them.
        ownership_controls = self._require(
            "s3_bucket_ownership_controls", "create_s3_bucket_ownership_controls"
        )
        self.s3_bucket_acl = aws.s3.BucketAcl(
            resource_name=self._child_name("s3-bucket-acl"),
            opts=self._child_opts(depends_on=[ownership_controls]),
            **self.s3_bucket_acl_config,
        )
        return self

    def create_s3_bucket_public_access_block(self) -> "BaseWebsiteStack":
        self.s3_bucket_public_access_block = aws.s3.BucketPublicAccessBlock(
            resource_name=self._child_name("s3-public-access-block"),
            opts=self._child_opts(),
            **self.s3_bucket_public_access_block_config,
        )
        return self

    def create_s3_website_configuration(self) -> "BaseWebsiteStack":
        self.s3_website_configuration = aws.s3.BucketWebsiteConfiguration(
            resource_name=self._child_name("s3-website-configuration"),
            opts=self._child_opts(),
            **self.s3_bucket_website_configuration_config,
        )
        return self

    def create_cloudfront_distribution(self) -> "BaseWebsiteStack":
        # The distribution must be deleted before the OAC it references.
        depends_on = [self.origin_access_control] if self.origin_access_control else []
        self.cloudfront_distribution = aws.cloudfront.Distribution(
            resource_name=self._child_name("website-distribution"),
            opts=self._child_opts(depends_on=depends_on),
            **self.cloudfront_distribution_config,
        )
        return self

    def create_s3_bucket_policy(self) -> "BaseWebsiteStack":
        # A public-principal policy is refused while the access block is pending.
        depends_on = (
            [self.s3_bucket_public_access_block] if self.s3_bucket_public_access_block else []
        )
        self.s3_bucket_policy = aws.s3.BucketPolicy(
            resource_name=self._child_name("bucket-policy"),
            opts=self._child_opts(depends_on=depends_on),
            **self.s3_bucket_policy_config,
        )
        return self

    def create_route53_record(self) -> "BaseWebsiteStack":
        self.route53_record = aws.route53.Record(
            resource_name=self._child_name("route53-record"),
            opts=self._child_opts(),
            **self.route53_record_config,
        )
        return self

    def create_origin_access_control(self) -> "BaseWebsiteStack":
        self.origin_access_control = aws.cloudfront.OriginAccessControl(
            resource_name=self._child_name("origin-access-control"),
            opts=self._child_opts(),
            **self.origin_access_control_config,
        )
        return self

    def upload_to_s3(self) -> "BaseWebsiteStack":
        """Declare one S3 object per file of the build directory."""
        bucket = self._require("s3_bucket", "create_s3_bucket")
        self.s3_objects = upload_directory_to_s3(
            self.relative_path_to_build_dir,
            bucket,
            "",
            self.stack_name,
            opts=self._child_opts(),
        )
        return self

    def finalize(self) -> "BaseWebsiteStack":
        """
        Register the component outputs for whatever has been created.

        Outputs (set on self when available):
            bucket_id: Name of the created bucket.
            cloudfront_domain_name: Distribution FQDN.
            cloudfront_hosted_zone_id: Route 53 zone id of the distribution.
            website_url: HTTPS URL of the custom domain.
        """
        outputs: dict[str, Any] = {"website_url": f"https://{self.custom_domain}"}
        if self.s3_bucket is not None:
            self.bucket_id: pulumi.Output[str] = self.s3_bucket.bucket
            outputs["bucket_id"] = self.bucket_id
        if self.cloudfront_distribution is not None:
            self.cloudfront_domain_name: pulumi.Output[str] = (
                self.cloudfront_distribution.domain_name
            )
            self.cloudfront_hosted_zone_id: pulumi.Output[str] = (
                self.cloudfront_distribution.hosted_zone_id
            )
            outputs["cloudfront_domain_name"] = self.cloudfront_domain_name
            outputs["cloudfront_hosted_zone_id"] = self.cloudfront_hosted_zone_id
        self.website_url: str = outputs["website_url"]
        self.register_outputs(outputs)
        return self
