import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./provisioning.db")
    CREATE_TABLES = bool(data.get("CREATE_TABLES", True))
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # Provisioning
    TEMPLATES_DIR = data.get("TEMPLATES_DIR", os.path.join(ROOT_PATH, "templates"))
    DEPLOYMENTS_DIR = data.get("DEPLOYMENTS_DIR", os.path.join(ROOT_PATH, "deployments"))
    DEFAULT_TEMPLATE = data.get("DEFAULT_TEMPLATE", "modern-blog")
    PLATFORM_DOMAIN = data.get("PLATFORM_DOMAIN", "blogs.example.com")
    API_BASE_URL = data.get("API_BASE_URL", "http://localhost:8000")
    CREDENTIALS_ENDPOINT = data.get("CREDENTIALS_ENDPOINT")
    ESTIMATED_TIME = data.get("ESTIMATED_TIME", "5-10 minutes")
    STEP_TIMEOUT_SECONDS = data.get("STEP_TIMEOUT_SECONDS", 300)
    JOB_RETENTION_HOURS = data.get("JOB_RETENTION_HOURS", 24)
    JOB_SWEEP_INTERVAL_SECONDS = data.get("JOB_SWEEP_INTERVAL_SECONDS", 3600)

    # Providers, in preference order: the first enabled one is used
    HOSTING_PROVIDERS = data.get("HOSTING_PROVIDERS", ["vercel", "netlify", "local"])
    DNS_PROVIDERS = data.get("DNS_PROVIDERS", ["cloudflare"])
    EMAIL_PROVIDERS = data.get("EMAIL_PROVIDERS", ["sendgrid", "mailgun"])
    PROJECT_PREFIX = data.get("PROJECT_PREFIX", "blog")

    VERCEL_TOKEN = data.get("VERCEL_TOKEN")
    NETLIFY_TOKEN = data.get("NETLIFY_TOKEN")
    CLOUDFLARE_TOKEN = data.get("CLOUDFLARE_TOKEN")
    CLOUDFLARE_ZONE_ID = data.get("CLOUDFLARE_ZONE_ID")
    SENDGRID_API_KEY = data.get("SENDGRID_API_KEY")
    SENDGRID_WELCOME_TEMPLATE_ID = data.get("SENDGRID_WELCOME_TEMPLATE_ID")
    MAILGUN_API_KEY = data.get("MAILGUN_API_KEY")
    MAILGUN_DOMAIN = data.get("MAILGUN_DOMAIN")
    FROM_EMAIL = data.get("FROM_EMAIL", "noreply@blogs.example.com")
    SUPPORT_EMAIL = data.get("SUPPORT_EMAIL", "support@blogs.example.com")
