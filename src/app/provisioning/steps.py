"""
Concrete provisioning steps.

Each step has the signature `(job, ctx) -> success message`, opens its own
unit of work and leaves its results on the StepContext for the steps after
it. The lists returned by `provisioning()`, `redeploy()` and `resume()` are the
pipelines' single source of truth for step order and progress checkpoints.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from src.app.provisioning.context import StepContext, UnitOfWorkFactory
from src.app.provisioning.deployment_executor import DeploymentExecutor
from src.app.provisioning.domain_configurator import DomainConfigurator
from src.app.provisioning.errors import (
    FinalizationError,
    GenerationIO,
    TenantRecordError,
)
from src.app.provisioning.finalizer import Finalizer
from src.app.provisioning.pipeline import PipelineStep
from src.app.provisioning.settings import ProvisioningSettings
from src.app.services.application_generator import IApplicationGenerator
from src.app.services.template_registry import ITemplateRegistry
from src.domain.base import utcnow
from src.domain.entities import (
    AuditEvent,
    Category,
    ProvisioningJob,
    Tag,
    Tenant,
    TenantConfig,
    TenantStatus,
    User,
    UserRole,
)

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("General", "general", "General articles"),
    ("Technology", "technology", "Articles about technology"),
    ("Business", "business", "Articles about business"),
]

DEFAULT_TAGS = [
    ("News", "news", "#3B82F6"),
    ("Tutorial", "tutorial", "#10B981"),
    ("Tips", "tips", "#F59E0B"),
]


class ProvisioningSteps:
    """Builds the provisioning, redeploy and resume step lists over shared collaborators"""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        template_registry: ITemplateRegistry,
        generator: IApplicationGenerator,
        domain_configurator: DomainConfigurator,
        deployment_executor: DeploymentExecutor,
        finalizer: Finalizer,
        settings: ProvisioningSettings,
    ):
        self.uow_factory = uow_factory
        self.template_registry = template_registry
        self.generator = generator
        self.domain_configurator = domain_configurator
        self.deployment_executor = deployment_executor
        self.finalizer = finalizer
        self.settings = settings

    def provisioning(self) -> List[PipelineStep]:
        return [
            PipelineStep(
                "create_tenant", "Creating tenant database record", 25, self.create_tenant
            ),
            PipelineStep(
                "seed_tenant_data",
                "Setting up tenant schema and initial data",
                40,
                self.seed_tenant_data,
            ),
            PipelineStep(
                "generate_app",
                "Generating tenant application from template",
                60,
                self.generate_app,
            ),
            PipelineStep(
                "configure_domain", "Configuring domain and DNS", 75, self.configure_domain
            ),
            PipelineStep("deploy", "Building and deploying application", 90, self.deploy),
            PipelineStep("finalize", "Finalizing deployment", 100, self.finalize),
        ]

    def redeploy(self) -> List[PipelineStep]:
        return [
            PipelineStep(
                "attach_tenant", "Loading existing tenant record", 40, self.attach_tenant
            ),
            PipelineStep(
                "generate_app",
                "Regenerating tenant application from template",
                60,
                self.generate_app,
            ),
            PipelineStep(
                "configure_domain", "Configuring domain and DNS", 75, self.configure_domain
            ),
            PipelineStep("deploy", "Building and deploying application", 90, self.deploy),
            PipelineStep("reactivate", "Reactivating tenant", 100, self.reactivate),
        ]

    def resume(self) -> List[PipelineStep]:
        """Completes a tenant whose first provisioning run failed part-way"""
        return [
            PipelineStep(
                "attach_tenant", "Loading existing tenant record", 25, self.attach_tenant
            ),
            PipelineStep(
                "seed_tenant_data",
                "Setting up tenant schema and initial data",
                40,
                self.seed_tenant_data,
            ),
            PipelineStep(
                "generate_app",
                "Generating tenant application from template",
                60,
                self.generate_app,
            ),
            PipelineStep(
                "configure_domain", "Configuring domain and DNS", 75, self.configure_domain
            ),
            PipelineStep("deploy", "Building and deploying application", 90, self.deploy),
            PipelineStep("finalize", "Finalizing deployment", 100, self.finalize),
        ]

    # Steps

    async def create_tenant(self, job: ProvisioningJob, ctx: StepContext) -> str:
        config = ctx.config
        try:
            async with self.uow_factory() as uow:
                if await uow.tenants.get_by_subdomain(config.subdomain):
                    raise TenantRecordError(
                        f"Subdomain '{config.subdomain}' is already taken"
                    )

                # The custom domain is claimed later by configure_domain.
                tenant = await uow.tenants.create(
                    Tenant(
                        name=config.blog_name,
                        slug=config.subdomain,
                        subdomain=config.subdomain,
                        owner_email=config.owner_email,
                        status=TenantStatus.provisioning,
                        requested_custom_domain=config.custom_domain,
                        theme=config.theme,
                        primary_color=config.primary_color,
                        niche=config.niche,
                        company_name=config.company_name,
                        template_name=ctx.template_name,
                    )
                )
                owner = await uow.users.create(
                    User(
                        tenant_id=tenant.id,
                        email=config.owner_email,
                        name=config.owner_name or "Admin",
                        role=UserRole.admin,
                    )
                )
                await uow.commit()
        except SQLAlchemyError as exc:
            raise TenantRecordError(f"Failed to create tenant record: {exc}") from exc

        ctx.tenant_id = tenant.id
        ctx.owner_user_id = owner.id
        return "Tenant database record created successfully"

    async def seed_tenant_data(self, job: ProvisioningJob, ctx: StepContext) -> str:
        try:
            async with self.uow_factory() as uow:
                existing = {c.slug for c in await uow.categories.list_by_tenant(ctx.tenant_id)}
                for name, slug, description in DEFAULT_CATEGORIES:
                    if slug not in existing:
                        await uow.categories.create(
                            Category(
                                tenant_id=ctx.tenant_id,
                                name=name,
                                slug=slug,
                                description=description,
                            )
                        )

                existing = {t.slug for t in await uow.tags.list_by_tenant(ctx.tenant_id)}
                for name, slug, color in DEFAULT_TAGS:
                    if slug not in existing:
                        await uow.tags.create(
                            Tag(tenant_id=ctx.tenant_id, name=name, slug=slug, color=color)
                        )
                await uow.commit()
        except SQLAlchemyError as exc:
            raise TenantRecordError(f"Failed to seed tenant data: {exc}") from exc

        return "Tenant schema and initial data configured"

    async def generate_app(self, job: ProvisioningJob, ctx: StepContext) -> str:
        template = self.template_registry.get_template(ctx.template_name)
        variables = self.build_variables(ctx)
        ctx.app_path = await self.generator.generate(template, variables)
        return f"Tenant application generated successfully from template '{template.name}'"

    async def configure_domain(self, job: ProvisioningJob, ctx: StepContext) -> str:
        tenant = await self._load_tenant(ctx)
        custom_domain = ctx.config.custom_domain
        # Custom domains need the hosting target; missing hosting fails this step.
        target = (
            self.deployment_executor.target_host(ctx.config) if custom_domain else None
        )
        ctx.domain_config = await self.domain_configurator.configure(
            tenant, target, custom_domain
        )
        names = ", ".join(domain.name for domain in ctx.domain_config.domains)
        return f"Domain configuration completed ({names})"

    async def deploy(self, job: ProvisioningJob, ctx: StepContext) -> str:
        if ctx.app_path is None:
            raise GenerationIO("No generated application to deploy")
        ctx.deployment = await self.deployment_executor.deploy(
            ctx.app_path, ctx.config, ctx.tenant_id
        )
        return f"Application deployed successfully: {ctx.deployment.url}"

    async def finalize(self, job: ProvisioningJob, ctx: StepContext) -> str:
        tenant = await self._load_tenant(ctx)
        result = await self.finalizer.finalize(
            tenant, ctx.deployment, ctx.config, job_id=job.job_id
        )
        ctx.finalization = result
        ctx.warnings.extend(result.warnings)
        return "Deployment finalized successfully"

    async def attach_tenant(self, job: ProvisioningJob, ctx: StepContext) -> str:
        tenant = await self._load_tenant(ctx)
        async with self.uow_factory() as uow:
            owner = await uow.users.get_by_tenant_and_email(tenant.id, tenant.owner_email)
        ctx.owner_user_id = owner.id if owner else None
        return f"Tenant '{tenant.subdomain}' loaded"

    async def reactivate(self, job: ProvisioningJob, ctx: StepContext) -> str:
        try:
            async with self.uow_factory() as uow:
                tenant = await uow.tenants.get_by_id(ctx.tenant_id)
                if tenant is None:
                    raise FinalizationError(f"Tenant {ctx.tenant_id} not found")
                now = utcnow()
                tenant.status = TenantStatus.active
                tenant.deactivated_at = None
                tenant.deployment_url = ctx.deployment.url
                tenant.updated_at = now
                if tenant.provisioned_at is None:
                    tenant.provisioned_at = now
                await uow.tenants.update(tenant)
                await uow.audit_events.create(
                    AuditEvent(
                        tenant_id=tenant.id,
                        action="tenant_redeployed",
                        event_metadata={
                            "job_id": job.job_id,
                            "deployment_url": ctx.deployment.url,
                            "provider": ctx.deployment.provider,
                        },
                    )
                )
                await uow.commit()
        except SQLAlchemyError as exc:
            raise FinalizationError(f"Failed to reactivate tenant: {exc}") from exc

        return f"Tenant reactivated at {ctx.deployment.url}"

    # Helpers

    def build_variables(self, ctx: StepContext) -> Dict[str, str]:
        """Tenant values substituted into the template's config files"""
        config = ctx.config
        return {
            "TENANT_ID": str(ctx.tenant_id or ""),
            "SUBDOMAIN": config.subdomain,
            "CUSTOM_DOMAIN": config.custom_domain or "",
            "BLOG_NAME": config.blog_name,
            "SITE_URL": self.site_url(config),
            "THEME": config.theme,
            "PRIMARY_COLOR": config.primary_color,
            "NICHE": config.niche,
            "OWNER_EMAIL": config.owner_email,
            "API_BASE_URL": self.settings.api_base_url,
            "CREDENTIALS_ENDPOINT": self.settings.resolved_credentials_endpoint,
        }

    def site_url(self, config: TenantConfig) -> str:
        host = config.custom_domain or f"{config.subdomain}.{self.settings.platform_domain}"
        return f"https://{host}"

    async def _load_tenant(self, ctx: StepContext) -> Tenant:
        async with self.uow_factory() as uow:
            tenant: Optional[Tenant] = await uow.tenants.get_by_id(ctx.tenant_id)
        if tenant is None:
            raise TenantRecordError(f"Tenant {ctx.tenant_id} not found")
        return tenant
