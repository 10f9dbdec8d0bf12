"""
SES (v2) service for sending email.
"""
import boto3
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from bs4 import BeautifulSoup
from logger_config import get_logger
from utils.decorators import aws_operation

if TYPE_CHECKING:
    from mypy_boto3_sesv2 import SESV2Client
else:
    SESV2Client = Any

logger = get_logger(__name__)


def html_to_text(html: str) -> str:
    """Plain-text alternative for an HTML body."""
    return BeautifulSoup(html, 'html.parser').get_text(separator='\n').strip()


def build_simple_email(
    from_address: str,
    to_addresses: List[str],
    subject: str,
    text: Optional[str] = None,
    html: Optional[str] = None,
    cc_addresses: Optional[List[str]] = None,
    bcc_addresses: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Build a SendEmail request with simple (non-templated) content.

    When only ``html`` is given, the text part is derived from it.

    Raises:
        ValueError: If there is no recipient or no body
    """
    if not to_addresses:
        raise ValueError("At least one recipient address is required")
    if text is None and html is None:
        raise ValueError("Either a text or an HTML body is required")

    body: Dict[str, Any] = {}
    if html is not None:
        body['Html'] = {'Data': html}
        if text is None:
            text = html_to_text(html)
    body['Text'] = {'Data': text}

    return {
        'FromEmailAddress': from_address,
        'Destination': {
            'ToAddresses': list(to_addresses),
            'CcAddresses': list(cc_addresses or []),
            'BccAddresses': list(bcc_addresses or []),
        },
        'Content': {
            'Simple': {
                'Subject': {'Data': subject},
                'Body': body,
            },
        },
    }


class SESService:
    """Service for SES v2 operations."""

    def __init__(self, region_name: Optional[str] = None) -> None:
        self.region_name = region_name
        self._client: Optional[SESV2Client] = None

    @property
    def client(self) -> SESV2Client:
        """Lazy initialization of SES v2 client."""
        if self._client is None:
            self._client = boto3.client('sesv2', region_name=self.region_name)
        return self._client

    @aws_operation(default=False)
    def send_email(self, mail_content: Dict[str, Any]) -> bool:
        """
        Send an email.

        Args:
            mail_content: SendEmail parameters, see build_simple_email

        Returns:
            True on success, False if the call failed
        """
        response = self.client.send_email(**mail_content)
        logger.info(f'SendEmail response: {response}')
        return True
