"""
Cognito demo: create a user pool, inspect and update it, manage one user,
then remove everything again.
"""
from typing import Optional

from config import Config, get_config
from logger_config import get_logger
from services.cognito_service import CognitoService

logger = get_logger(__name__)

PASSWORD_POLICY = {
    'PasswordPolicy': {
        'MinimumLength': 8,
        'RequireUppercase': True,
        'RequireLowercase': True,
        'RequireNumbers': True,
        'RequireSymbols': False,
    }
}
POOL_TAGS = {'project': 'aws-sdk-demos'}


def run_all(
    config: Optional[Config] = None,
    service: Optional[CognitoService] = None
) -> Optional[str]:
    """
    Run the Cognito calls in order.

    Returns:
        The created pool ID, or None if the pool could not be created
    """
    config = config or get_config()
    service = service or CognitoService(config.aws_region)

    logger.info('>>> Create user pool')
    pool_id = service.create_user_pool(config.cognito_user_pool_name, Policies=PASSWORD_POLICY)
    if not pool_id:
        logger.warning('User pool was not created, skipping remaining Cognito calls')
        return None

    logger.info('>>> Describe user pool')
    service.describe_user_pool(pool_id)

    logger.info('>>> Update user pool')
    service.update_user_pool(
        pool_id,
        Policies=PASSWORD_POLICY,
        AutoVerifiedAttributes=['email'],
        UserPoolTags=POOL_TAGS,
    )

    logger.info('>>> List user pools')
    service.list_user_pools()

    username = config.cognito_test_username
    logger.info('>>> Create user')
    attributes = {'email': config.ses_to_addresses[0]} if config.ses_to_addresses else None
    service.admin_create_user(pool_id, username, attributes=attributes)

    logger.info('>>> List users')
    service.list_users(pool_id)

    logger.info('>>> Delete user')
    service.admin_delete_user(pool_id, username)

    logger.info('>>> Delete user pool')
    service.delete_user_pool(pool_id)

    return pool_id


if __name__ == '__main__':
    run_all()
