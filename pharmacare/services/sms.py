"""
Outbound SMS / OTP delivery through a Textlocal-compatible HTTP gateway.
"""
import logging
from typing import Optional

import httpx

from pharmacare.config.settings import Settings

logger = logging.getLogger(__name__)


class SmsGateway:
    def __init__(
        self,
        api_url: str,
        username: Optional[str],
        api_hash: Optional[str],
        sender: Optional[str],
        test_mode: bool = True,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.username = username
        self.api_hash = api_hash
        self.sender = sender
        self.test_mode = test_mode
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmsGateway":
        return cls(
            api_url=settings.sms_api_url,
            username=settings.sms_username,
            api_hash=settings.sms_hash,
            sender=settings.sms_sender,
            test_mode=settings.sms_test_mode,
            timeout=settings.sms_timeout_seconds,
        )

    async def send(self, message: str, phone_number: str, test: Optional[bool] = None) -> bool:
        """
        Send one SMS. Returns True when the gateway reports success.

        Transport and HTTP errors are logged and reported as False; the caller
        decides whether a failed delivery is fatal for its request.
        """
        is_test = self.test_mode if test is None else test
        data = {
            "username": self.username or "",
            "hash": self.api_hash or "",
            "message": message,
            "sender": self.sender or "",
            "numbers": phone_number,
            "test": "true" if is_test else "false",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.api_url, data=data)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            logger.error(f"SMS gateway request to {phone_number} failed: {e}")
            return False
        except ValueError:
            logger.error(f"SMS gateway returned a non-JSON body for {phone_number}")
            return False

        if body.get("status") != "success":
            logger.warning(f"SMS gateway rejected message to {phone_number}: {body.get('errors')}")
            return False

        logger.info(f"SMS sent to {phone_number} (test={is_test})")
        return True
