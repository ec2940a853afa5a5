import json
from typing import Optional

import httpx

from src.adapter.providers.http import HttpProvider
from src.app.services.email_provider import IEmailProvider, WelcomeEmail


class MailgunEmailProvider(HttpProvider, IEmailProvider):
    """Sends the welcome mail through a Mailgun stored template"""

    name = "mailgun"
    base_url = "https://api.mailgun.net/v3"

    def __init__(
        self,
        api_key: Optional[str],
        domain: Optional[str],
        template: str = "welcome",
        from_name: str = "Blog Platform",
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(client)
        self.api_key = api_key
        self.domain = domain
        self.template = template
        self.from_name = from_name

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.domain)

    async def send_welcome(self, email: WelcomeEmail) -> Optional[str]:
        response = await self._request(
            "POST",
            f"/{self.domain}/messages",
            auth=("api", self.api_key),
            data={
                "from": f"{self.from_name} <noreply@{self.domain}>",
                "to": email.to,
                "subject": email.subject,
                "template": self.template,
                "h:X-Mailgun-Variables": json.dumps(email.data, default=str),
            },
        )
        return response.json().get("id")
