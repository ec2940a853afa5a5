from typing import Optional

import httpx

from src.adapter.providers.http import HttpProvider
from src.app.services.email_provider import IEmailProvider, WelcomeEmail


class SendGridEmailProvider(HttpProvider, IEmailProvider):
    """Sends the welcome mail through a SendGrid dynamic template"""

    name = "sendgrid"
    base_url = "https://api.sendgrid.com/v3"

    def __init__(
        self,
        api_key: Optional[str],
        welcome_template_id: Optional[str],
        from_email: str,
        from_name: str = "Blog Platform",
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(client)
        self.api_key = api_key
        self.welcome_template_id = welcome_template_id
        self.from_email = from_email
        self.from_name = from_name

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _headers(self):
        return {"Authorization": f"Bearer {self.api_key}"}

    async def send_welcome(self, email: WelcomeEmail) -> Optional[str]:
        payload = {
            "personalizations": [
                {"to": [{"email": email.to}], "dynamic_template_data": email.data}
            ],
            "from": {"email": self.from_email, "name": self.from_name},
            "subject": email.subject,
        }
        if self.welcome_template_id:
            payload["template_id"] = self.welcome_template_id
        else:
            payload["content"] = [{"type": "text/plain", "value": _plain_text(email)}]

        response = await self._request("POST", "/mail/send", json=payload)
        return response.headers.get("x-message-id")


def _plain_text(email: WelcomeEmail) -> str:
    data = email.data
    return (
        f"Hi {data.get('owner_name', 'there')},\n\n"
        f"{data.get('blog_name')} is live at {data.get('blog_url')}.\n"
        f"Manage it at {data.get('admin_url')}.\n\n"
        f"Questions? Write to {data.get('support_email')}."
    )
