"""
Provisioning error taxonomy.

Every error raised inside a pipeline step derives from ProvisioningError and
carries a stable `code`; the pipeline records the code as the job's
failure_reason and the message verbatim as the job's error.
"""


class ProvisioningError(Exception):
    code = "PROVISIONING_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TenantRecordError(ProvisioningError):
    code = "TENANT_RECORD_ERROR"


class TemplateNotFound(ProvisioningError):
    code = "TEMPLATE_NOT_FOUND"

    def __init__(self, name: str):
        self.template_name = name
        super().__init__(f"Template '{name}' not found")


class GenerationIO(ProvisioningError):
    code = "GENERATION_IO"


class DnsProviderUnavailable(ProvisioningError):
    code = "DNS_PROVIDER_UNAVAILABLE"


class DomainAlreadyInUse(ProvisioningError):
    code = "DOMAIN_ALREADY_IN_USE"

    def __init__(self, domain: str, detail: str = "is already in use"):
        self.domain = domain
        super().__init__(f"Domain '{domain}' {detail}")


class DeploymentProviderUnavailable(ProvisioningError):
    code = "DEPLOYMENT_PROVIDER_UNAVAILABLE"


class NoProviderConfigured(ProvisioningError):
    """Non-retryable: an operator has to enable a provider first."""

    code = "NO_PROVIDER_CONFIGURED"

    def __init__(self, provider_type: str):
        self.provider_type = provider_type
        super().__init__(f"No {provider_type} provider configured")


class FinalizationError(ProvisioningError):
    code = "FINALIZATION_ERROR"


class StepTimeout(ProvisioningError):
    code = "TIMEOUT"

    def __init__(self, step_name: str, timeout: float):
        self.step_name = step_name
        self.timeout = timeout
        super().__init__(f"Step '{step_name}' timed out after {timeout:g}s")


class NotificationError(Exception):
    """Welcome notification could not be sent. Never fails a job."""


# Job store errors


class JobNotFound(Exception):
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Provisioning job '{job_id}' not found")


class InvalidJobTransition(Exception):
    pass


class SubdomainInFlight(Exception):
    def __init__(self, subdomain: str):
        self.subdomain = subdomain
        super().__init__(f"Subdomain '{subdomain}' is already being provisioned")
