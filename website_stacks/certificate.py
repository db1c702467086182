"""
ACM certificate for a custom domain, validated through Route 53 DNS.

CloudFront only accepts certificates issued in us-east-1, so callers pass a
provider pinned to that region when the rest of the stack lives elsewhere.
The ``acm_arn`` output resolves only after validation completed, which keeps
the distribution from being created with a pending certificate.
"""

import pulumi
import pulumi_aws as aws

ID: str = "websitestacks:aws:AcmCertificate"

# TTL of the validation CNAME record.
VALIDATION_RECORD_TTL: int = 60


class AcmCertificate(pulumi.ComponentResource):
    """
    DNS-validated ACM certificate.

    Resources: Certificate, validation Record (CNAME in the hosted zone),
    CertificateValidation.
    """

    def __init__(
        self,
        name: str,
        domain_name: str,
        hosted_zone_id: str,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Request the certificate and create its validation record.

        Args:
            name: Pulumi resource name prefix.
            domain_name: Domain the certificate covers.
            hosted_zone_id: Route 53 zone in which the validation record is
                created.
            opts: Options for the component (parent, provider).

        Outputs (set on self, registered for the component):
            acm_arn: ARN of the validated certificate.
        """
        super().__init__(ID, name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.certificate = aws.acm.Certificate(
            resource_name=f"{name}-cert",
            domain_name=domain_name,
            validation_method="DNS",
            opts=child_opts,
        )

        # ACM hands back one validation option per domain; only one is requested.
        option = self.certificate.domain_validation_options.apply(lambda options: options[0])
        self.validation_record = aws.route53.Record(
            resource_name=f"{name}-validation-record",
            zone_id=hosted_zone_id,
            name=option.resource_record_name,
            type=option.resource_record_type,
            records=[option.resource_record_value],
            ttl=VALIDATION_RECORD_TTL,
            allow_overwrite=True,
            opts=child_opts,
        )

        self.validation = aws.acm.CertificateValidation(
            resource_name=f"{name}-validation",
            certificate_arn=self.certificate.arn,
            validation_record_fqdns=[self.validation_record.fqdn],
            opts=child_opts,
        )

        self.acm_arn: pulumi.Output[str] = self.validation.certificate_arn
        self.register_outputs({"acm_arn": self.acm_arn})
