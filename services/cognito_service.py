"""
Cognito service for user pool and user operations.
"""
import boto3
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from botocore.exceptions import BotoCoreError, ClientError
from logger_config import get_logger
from utils.decorators import aws_operation, describe_error

if TYPE_CHECKING:
    from mypy_boto3_cognito_idp import CognitoIdentityProviderClient
else:
    CognitoIdentityProviderClient = Any

logger = get_logger(__name__)

# ListUserPools rejects MaxResults above 60
MAX_USER_POOL_PAGE_SIZE = 60


class CognitoService:
    """Service for Cognito user pool operations."""

    def __init__(self, region_name: Optional[str] = None) -> None:
        """
        Initialize Cognito service.

        Args:
            region_name: AWS region (falls back to the boto3 default chain)
        """
        self.region_name = region_name
        self._client: Optional[CognitoIdentityProviderClient] = None

    @property
    def client(self) -> CognitoIdentityProviderClient:
        """Lazy initialization of Cognito Identity Provider client."""
        if self._client is None:
            self._client = boto3.client('cognito-idp', region_name=self.region_name)
        return self._client

    @aws_operation(default=None)
    def create_user_pool(self, pool_name: str, **settings: Any) -> Optional[str]:
        """
        Create a user pool.

        Args:
            pool_name: Name of the new pool
            **settings: Extra CreateUserPool parameters (Policies, Tags, ...)

        Returns:
            The new pool ID, or None if the call failed
        """
        response = self.client.create_user_pool(PoolName=pool_name, **settings)
        pool = response['UserPool']
        logger.info(f"Created user pool {pool.get('Name')} ({pool['Id']})")
        return pool['Id']

    def list_user_pools(self, max_results: int = MAX_USER_POOL_PAGE_SIZE) -> List[Dict[str, Any]]:
        """
        List user pools, following ``NextToken`` across pages.

        Returns:
            ``{"Id", "Name"}`` entries collected before the listing ended or failed
        """
        page_size = min(max_results, MAX_USER_POOL_PAGE_SIZE)
        pools: List[Dict[str, Any]] = []
        try:
            paginator = self.client.get_paginator('list_user_pools')
            for page in paginator.paginate(PaginationConfig={'PageSize': page_size}):
                for pool in page.get('UserPools', []):
                    pools.append({'Id': pool.get('Id'), 'Name': pool.get('Name')})
        except (ClientError, BotoCoreError) as e:
            logger.error(f'ListUserPools failed: {describe_error(e)}')

        logger.info(f'User pools: {pools}')
        return pools

    @aws_operation(default=None)
    def describe_user_pool(self, user_pool_id: str) -> Optional[Dict[str, Any]]:
        """Return the ``UserPool`` payload, or None if the call failed."""
        response = self.client.describe_user_pool(UserPoolId=user_pool_id)
        logger.info(f"DescribeUserPool response: {response['UserPool']}")
        return response['UserPool']

    @aws_operation(default=False)
    def update_user_pool(self, user_pool_id: str, **settings: Any) -> bool:
        """
        Update a user pool.

        UpdateUserPool resets every attribute not passed, so callers send
        the full set they want to keep.
        """
        response = self.client.update_user_pool(UserPoolId=user_pool_id, **settings)
        logger.info(f'Updated user pool {user_pool_id}: {response}')
        return True

    @aws_operation(default=None)
    def admin_create_user(
        self,
        user_pool_id: str,
        username: str,
        attributes: Optional[Dict[str, str]] = None,
        temporary_password: Optional[str] = None,
        suppress_message: bool = True,
    ) -> Optional[Dict[str, Any]]:
        """
        Create a user as an administrator.

        Args:
            user_pool_id: Pool to create the user in
            username: Username of the new user
            attributes: User attributes, e.g. ``{"email": "..."}``
            temporary_password: Optional temporary password
            suppress_message: Skip sending the invitation message

        Returns:
            The ``User`` payload, or None if the call failed
        """
        params: Dict[str, Any] = {'UserPoolId': user_pool_id, 'Username': username}
        if attributes:
            params['UserAttributes'] = [
                {'Name': name, 'Value': value} for name, value in attributes.items()
            ]
        if temporary_password:
            params['TemporaryPassword'] = temporary_password
        if suppress_message:
            params['MessageAction'] = 'SUPPRESS'

        response = self.client.admin_create_user(**params)
        logger.info(f"Created user {username}: {response['User']}")
        return response['User']

    def list_users(self, user_pool_id: str) -> List[str]:
        """
        List usernames in a pool, following ``PaginationToken`` across pages.

        Returns:
            Usernames collected before the listing ended or failed
        """
        usernames: List[str] = []
        try:
            paginator = self.client.get_paginator('list_users')
            for page in paginator.paginate(UserPoolId=user_pool_id):
                usernames.extend(
                    user['Username'] for user in page.get('Users', []) if user.get('Username')
                )
        except (ClientError, BotoCoreError) as e:
            logger.error(f'ListUsers failed for pool {user_pool_id}: {describe_error(e)}')

        logger.info(f'Users in {user_pool_id}: {usernames}')
        return usernames

    @aws_operation(default=False)
    def admin_delete_user(self, user_pool_id: str, username: str) -> bool:
        self.client.admin_delete_user(UserPoolId=user_pool_id, Username=username)
        logger.info(f'Deleted user {username} from {user_pool_id}')
        return True

    @aws_operation(default=False)
    def delete_user_pool(self, user_pool_id: str) -> bool:
        self.client.delete_user_pool(UserPoolId=user_pool_id)
        logger.info(f'Deleted user pool {user_pool_id}')
        return True
