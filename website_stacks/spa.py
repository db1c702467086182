"""
CloudFront stack for single page applications.

The bucket stays private: CloudFront reads it through an Origin Access
Control and the bucket policy only admits the CloudFront service principal
for this distribution. 403/404 answers fall back to /index.html so client
side routing works.

Example (``__main__.py`` of a Pulumi program)::

    from website_stacks import CloudfrontSpaWebsiteStack

    CloudfrontSpaWebsiteStack("my-react-app").init()
"""

import pulumi

from website_stacks.base import BaseWebsiteStack
from website_stacks.settings import WebsiteSettings

ID: str = "websitestacks:aws:CloudfrontSpaWebsiteStack"


class CloudfrontSpaWebsiteStack(BaseWebsiteStack):
    """
    S3 (private) + OAC + CloudFront + ACM + Route 53 for a single page app.

    ``init()`` runs every step in order. To change a fragment, run the steps
    by hand and assign the fragment before the step that consumes it::

        stack = CloudfrontSpaWebsiteStack("my-react-app")
        stack.create_aws_provider().create_s3_bucket().create_acm_certificate()
        stack.create_origin_access_control()
        stack.cloudfront_distribution_config = {
            **stack.cloudfront_distribution_config,
            "price_class": "PriceClass_100",
        }
        (
            stack.create_cloudfront_distribution()
            .create_bucket_policy_document()
            .create_s3_bucket_policy()
            .create_route53_record()
            .upload_to_s3()
            .finalize()
        )
    """

    def __init__(
        self,
        name: str,
        settings: WebsiteSettings | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__(name, settings, opts, resource_type=ID)

    def init(self) -> "CloudfrontSpaWebsiteStack":
        return (
            self.create_aws_provider()
            .create_s3_bucket()
            .create_acm_certificate()
            .create_origin_access_control()
            .create_cloudfront_distribution()
            .create_bucket_policy_document()
            .create_s3_bucket_policy()
            .create_route53_record()
            .upload_to_s3()
            .finalize()
        )
