"""
CloudFront static-website stacks for Pulumi.

Two ComponentResources share one base (settings, cached configuration
fragments, chainable create steps). Use from a Pulumi entrypoint (e.g.
__main__.py):

- **CloudfrontSpaWebsiteStack**: private S3 bucket behind an Origin Access
  Control; 403/404 rewritten to /index.html for single page apps.
- **CloudfrontStaticWebsiteStack**: S3 website endpoint as a custom origin,
  protected by a shared User-Agent secret; serves an index document per
  directory.

Both request a DNS-validated ACM certificate, point a Route 53 alias at the
distribution and upload the build directory to the bucket.
"""

from website_stacks.base import BaseWebsiteStack
from website_stacks.certificate import AcmCertificate
from website_stacks.errors import MissingSettingError, StackOrderError, WebsiteStackError
from website_stacks.settings import WebsiteSettings
from website_stacks.spa import CloudfrontSpaWebsiteStack
from website_stacks.static_site import CloudfrontStaticWebsiteStack

__all__ = [
    "AcmCertificate",
    "BaseWebsiteStack",
    "CloudfrontSpaWebsiteStack",
    "CloudfrontStaticWebsiteStack",
    "MissingSettingError",
    "StackOrderError",
    "WebsiteSettings",
    "WebsiteStackError",
]
