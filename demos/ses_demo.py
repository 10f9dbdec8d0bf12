"""
SES demo: send one plain-text email.
"""
from typing import Optional

from config import Config, get_config
from logger_config import get_logger
from services.ses_service import SESService, build_simple_email

logger = get_logger(__name__)


def run_all(
    config: Optional[Config] = None,
    service: Optional[SESService] = None
) -> bool:
    config = config or get_config()
    service = service or SESService(config.aws_region)

    mail_content = build_simple_email(
        from_address=config.ses_from_address,
        to_addresses=config.ses_to_addresses,
        subject='Test email',
        text='This is test email.',
        cc_addresses=[],
        bcc_addresses=[],
    )

    logger.info('SendEmailCommand:')
    return service.send_email(mail_content)


if __name__ == '__main__':
    run_all()
