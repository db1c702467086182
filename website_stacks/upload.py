"""
Upload a build directory to an S3 bucket, one BucketObject per file.

The walk itself lives in ``_helpers.iter_site_files`` so it can be tested
without Pulumi runtime; this module only turns each file into a resource
declaration. Transfer, retries and diffing are left to Pulumi.
"""

import pulumi
import pulumi_aws as aws

from website_stacks._helpers import iter_site_files, object_resource_name


def upload_directory_to_s3(
    source_path: str,
    bucket: aws.s3.Bucket,
    prefix: str,
    name_prefix: str,
    opts: pulumi.ResourceOptions | None = None,
) -> list[aws.s3.BucketObject]:
    """
    Declare an S3 object for every file below source_path.

    Args:
        source_path: Build directory to upload.
        bucket: Destination bucket.
        prefix: Key prefix ("" uploads to the bucket root).
        name_prefix: Prefix for the generated resource names, usually the
            stack name.
        opts: Options applied to every object (parent, provider).

    Returns:
        The declared objects, in walk order.
    """
    objects = []
    for site_file in iter_site_files(source_path, prefix):
        objects.append(
            aws.s3.BucketObject(
                resource_name=object_resource_name(name_prefix, site_file.key),
                bucket=bucket.id,
                key=site_file.key,
                source=pulumi.FileAsset(site_file.path),
                content_type=site_file.content_type,
                opts=opts,
            )
        )
    parent = opts.parent if opts else None
    pulumi.log.info(f"Declared {len(objects)} objects from {source_path}", resource=parent)
    return objects
