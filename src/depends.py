import logging
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import List

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.providers.cloudflare import CloudflareDnsProvider
from src.adapter.providers.local import LocalHostingProvider
from src.adapter.providers.mailgun import MailgunEmailProvider
from src.adapter.providers.netlify import NetlifyProvider
from src.adapter.providers.sendgrid import SendGridEmailProvider
from src.adapter.providers.vercel import VercelProvider
from src.adapter.repositories.in_memory_job_store import InMemoryJobStore
from src.adapter.services.application_generator import FilesystemApplicationGenerator
from src.adapter.services.template_registry import FilesystemTemplateRegistry
from src.adapter.services.unit_of_work import SessionScopedUnitOfWork, SqlAlchemyUnitOfWork
from src.app.provisioning.deployment_executor import DeploymentExecutor
from src.app.provisioning.domain_configurator import DomainConfigurator
from src.app.provisioning.finalizer import Finalizer
from src.app.provisioning.orchestrator import ProvisioningOrchestrator
from src.app.provisioning.settings import ProvisioningSettings
from src.app.provisioning.steps import ProvisioningSteps
from src.app.repositories.job_store import IJobStore
from src.app.services.dns_provider import IDnsProvider
from src.app.services.email_provider import IEmailProvider
from src.app.services.hosting_provider import IHostingProvider
from src.app.services.template_registry import ITemplateRegistry

logger = logging.getLogger(__name__)

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


# Provisioning singletons


def build_settings(config=ApplicationConfig) -> ProvisioningSettings:
    return ProvisioningSettings(
        default_template=config.DEFAULT_TEMPLATE,
        platform_domain=config.PLATFORM_DOMAIN,
        api_base_url=config.API_BASE_URL,
        credentials_endpoint=config.CREDENTIALS_ENDPOINT,
        support_email=config.SUPPORT_EMAIL,
        estimated_time=config.ESTIMATED_TIME,
        step_timeout=float(config.STEP_TIMEOUT_SECONDS) if config.STEP_TIMEOUT_SECONDS else None,
        job_retention=timedelta(hours=config.JOB_RETENTION_HOURS),
        sweep_interval=float(config.JOB_SWEEP_INTERVAL_SECONDS),
    )


def build_hosting_providers(config=ApplicationConfig) -> List[IHostingProvider]:
    available = {
        "vercel": lambda: VercelProvider(config.VERCEL_TOKEN, config.PROJECT_PREFIX),
        "netlify": lambda: NetlifyProvider(config.NETLIFY_TOKEN, config.PROJECT_PREFIX),
        "local": lambda: LocalHostingProvider(config.PLATFORM_DOMAIN),
    }
    return _build("hosting", config.HOSTING_PROVIDERS, available)


def build_dns_providers(config=ApplicationConfig) -> List[IDnsProvider]:
    available = {
        "cloudflare": lambda: CloudflareDnsProvider(
            config.CLOUDFLARE_TOKEN, config.CLOUDFLARE_ZONE_ID
        ),
    }
    return _build("dns", config.DNS_PROVIDERS, available)


def build_email_providers(config=ApplicationConfig) -> List[IEmailProvider]:
    available = {
        "sendgrid": lambda: SendGridEmailProvider(
            config.SENDGRID_API_KEY, config.SENDGRID_WELCOME_TEMPLATE_ID, config.FROM_EMAIL
        ),
        "mailgun": lambda: MailgunEmailProvider(config.MAILGUN_API_KEY, config.MAILGUN_DOMAIN),
    }
    return _build("email", config.EMAIL_PROVIDERS, available)


def _build(kind: str, names, available) -> list:
    providers = []
    for name in names:
        factory = available.get(name)
        if factory is None:
            logger.warning(f"Unknown {kind} provider '{name}' ignored")
            continue
        providers.append(factory())
    enabled = [p.name for p in providers if p.enabled]
    logger.info(f"{kind} providers: {names} (enabled: {enabled or 'none'})")
    return providers


def build_orchestrator(
    job_store: IJobStore,
    template_registry: ITemplateRegistry,
    config=ApplicationConfig,
    session_factory=None,
    hosting_providers=None,
    dns_providers=None,
    email_providers=None,
) -> ProvisioningOrchestrator:
    settings = build_settings(config)
    session_factory = session_factory or AsyncSessionLocal

    def uow_factory():
        return SessionScopedUnitOfWork(session_factory)

    steps = ProvisioningSteps(
        uow_factory=uow_factory,
        template_registry=template_registry,
        generator=FilesystemApplicationGenerator(
            Path(config.DEPLOYMENTS_DIR), config.PROJECT_PREFIX
        ),
        domain_configurator=DomainConfigurator(
            uow_factory,
            dns_providers if dns_providers is not None else build_dns_providers(config),
            settings.platform_domain,
        ),
        deployment_executor=DeploymentExecutor(
            uow_factory,
            hosting_providers
            if hosting_providers is not None
            else build_hosting_providers(config),
        ),
        finalizer=Finalizer(
            uow_factory,
            email_providers if email_providers is not None else build_email_providers(config),
            settings.support_email,
            settings.resolved_credentials_endpoint,
        ),
        settings=settings,
    )
    return ProvisioningOrchestrator(job_store, steps, settings)


@lru_cache
def get_job_store() -> IJobStore:
    return InMemoryJobStore()


@lru_cache
def get_template_registry() -> ITemplateRegistry:
    return FilesystemTemplateRegistry(Path(ApplicationConfig.TEMPLATES_DIR))


@lru_cache
def get_orchestrator() -> ProvisioningOrchestrator:
    return build_orchestrator(get_job_store(), get_template_registry())
