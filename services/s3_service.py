"""
S3 service for bucket, object and presigned URL operations.
"""
import json
import os
import boto3
import requests
from typing import Any, Dict, List, Optional, Union, TYPE_CHECKING
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from more_itertools import chunked
from config import Config
from logger_config import get_logger
from utils.decorators import AWS_ERRORS, aws_operation, describe_error

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client
else:
    S3Client = Any

logger = get_logger(__name__)

# DeleteObjects accepts at most 1000 keys per request
DELETE_OBJECTS_LIMIT = 1000
PRESIGNED_UPLOAD_TIMEOUT = 30


def encode_body(data: Any) -> bytes:
    """Encode an object body: dicts and lists as JSON, str as UTF-8."""
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode('UTF-8')
    return json.dumps(data).encode('UTF-8')


class S3Service:
    """Service for S3 operations."""

    def __init__(
        self,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        force_path_style: bool = False,
    ):
        """
        Initialize S3 service.

        Args:
            region_name: AWS region
            endpoint_url: Custom endpoint, e.g. a local s3rver mock
            access_key_id: Explicit access key (default credential chain if None)
            secret_access_key: Explicit secret key (default credential chain if None)
            force_path_style: Address buckets as ``endpoint/bucket`` instead of subdomains
        """
        self.region_name = region_name
        self.endpoint_url = endpoint_url
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.force_path_style = force_path_style
        self._s3_client: Optional[S3Client] = None

    @classmethod
    def from_config(cls, config: Config) -> "S3Service":
        return cls(
            region_name=config.aws_region,
            endpoint_url=config.s3_endpoint_url,
            access_key_id=config.s3_access_key_id,
            secret_access_key=config.s3_secret_access_key,
            force_path_style=config.s3_force_path_style,
        )

    @property
    def s3_client(self) -> S3Client:
        """Lazy initialization of S3 client."""
        if self._s3_client is None:
            client_kwargs: Dict[str, Any] = {'region_name': self.region_name}
            if self.endpoint_url:
                client_kwargs['endpoint_url'] = self.endpoint_url
            if self.access_key_id and self.secret_access_key:
                client_kwargs['aws_access_key_id'] = self.access_key_id
                client_kwargs['aws_secret_access_key'] = self.secret_access_key
            if self.force_path_style:
                client_kwargs['config'] = BotoConfig(s3={'addressing_style': 'path'})
            self._s3_client = boto3.client('s3', **client_kwargs)
        return self._s3_client

    @aws_operation(default=False)
    def create_bucket(self, bucket: str) -> bool:
        params: Dict[str, Any] = {'Bucket': bucket}
        # us-east-1 rejects an explicit LocationConstraint
        if self.region_name and self.region_name != 'us-east-1':
            params['CreateBucketConfiguration'] = {'LocationConstraint': self.region_name}
        response = self.s3_client.create_bucket(**params)
        logger.info(f'Success {response}')
        return True

    @aws_operation(default=False)
    def put_bucket_policy(self, bucket: str, policy: Union[Dict[str, Any], str]) -> bool:
        """
        Apply a bucket policy.

        Args:
            bucket: Bucket name
            policy: Policy document, as a dict or an already-encoded JSON string
        """
        if not isinstance(policy, str):
            policy = json.dumps(policy)
        response = self.s3_client.put_bucket_policy(Bucket=bucket, Policy=policy)
        logger.info(f'Success {response}')
        return True

    @aws_operation(default=False)
    def put_bucket_cors(self, bucket: str, cors_rules: List[Dict[str, Any]]) -> bool:
        response = self.s3_client.put_bucket_cors(
            Bucket=bucket,
            CORSConfiguration={'CORSRules': cors_rules}
        )
        logger.info(f'Success {response}')
        return True

    def list_buckets(self) -> List[str]:
        """
        List bucket names.

        Returns:
            Bucket names, empty if the call failed
        """
        bucket_names: List[str] = []
        try:
            response = self.s3_client.list_buckets()
            bucket_names = [
                bucket['Name'] for bucket in response.get('Buckets', []) if bucket.get('Name')
            ]
        except (ClientError, BotoCoreError) as e:
            logger.error(f'ListBuckets failed: {describe_error(e)}')
        logger.info(f'Success {bucket_names}')
        return bucket_names

    @aws_operation(default=False)
    def put_object(self, bucket: str, key: str, data: Any) -> bool:
        """
        Put an object into a bucket.

        Args:
            bucket: Bucket name
            key: Object key
            data: dict/list (JSON-encoded), str (UTF-8) or bytes

        Returns:
            True on success, False if the call failed
        """
        response = self.s3_client.put_object(Bucket=bucket, Key=key, Body=encode_body(data))
        logger.info(f'Success {response}')
        return True

    @aws_operation(default=None)
    def get_object(self, bucket: str, key: str) -> Optional[str]:
        """
        Get an object's body as text.

        Bytes that are not valid UTF-8 are replaced with U+FFFD, so binary
        objects come back as (lossy) text instead of failing.

        Returns:
            The decoded body, or None if the call failed
        """
        response = self.s3_client.get_object(Bucket=bucket, Key=key)
        logger.info(f'Success s3://{bucket}/{key}')
        return response['Body'].read().decode('UTF-8', errors='replace')

    def get_json_object(self, bucket: str, key: str) -> Any:
        """Get an object and decode it as JSON; None if missing or not JSON."""
        body = self.get_object(bucket, key)
        if body is None:
            return None
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            logger.error(f'Object s3://{bucket}/{key} is not valid JSON: {str(e)}')
            return None

    @aws_operation(default=False, errors=AWS_ERRORS + (OSError,))
    def upload_file(self, bucket: str, path: str, key: Optional[str] = None) -> bool:
        """
        Stream a local file into a bucket.

        Args:
            bucket: Bucket name
            path: Local file path
            key: Object key (defaults to the file's base name)
        """
        key = key or os.path.basename(path)
        with open(path, 'rb') as body:
            response = self.s3_client.put_object(Bucket=bucket, Key=key, Body=body)
        logger.info(f'Success {response}')
        return True

    def list_objects(
        self,
        bucket: str,
        prefix: str = '',
        page_size: Optional[int] = None
    ) -> List[str]:
        """
        List object keys under a prefix, following ``Marker`` across pages.

        The next marker is ``NextMarker`` when the service returns it and
        the last key of the page otherwise.

        Args:
            bucket: Bucket name
            prefix: Key prefix to filter on
            page_size: Optional MaxKeys per request

        Returns:
            Keys collected before the listing ended or failed
        """
        params: Dict[str, Any] = {'Bucket': bucket, 'Prefix': prefix}
        if page_size:
            params['PaginationConfig'] = {'PageSize': page_size}

        keys: List[str] = []
        try:
            paginator = self.s3_client.get_paginator('list_objects')
            for page in paginator.paginate(**params):
                keys.extend(item['Key'] for item in page.get('Contents', []) if item.get('Key'))
        except (ClientError, BotoCoreError) as e:
            logger.error(f'ListObjects failed for bucket {bucket}: {describe_error(e)}')

        logger.info(f'Objects: {keys}')
        return keys

    @aws_operation(default=False)
    def get_presigned_url(
        self,
        bucket: str,
        key: str,
        data: Any = None,
        expires_in: int = 3600,
        method: str = 'put_object'
    ) -> Union[str, bool]:
        """
        Generate a presigned URL.

        Args:
            bucket: Bucket name
            key: Object key
            data: Body to sign into a put_object URL, if any
            expires_in: Validity in seconds
            method: Client method to sign

        Returns:
            The URL, or False if signing failed
        """
        params: Dict[str, Any] = {'Bucket': bucket, 'Key': key}
        if data is not None and method == 'put_object':
            params['Body'] = encode_body(data)
        url = self.s3_client.generate_presigned_url(
            ClientMethod=method,
            Params=params,
            ExpiresIn=expires_in
        )
        logger.info(f'Success {url}')
        return url

    @aws_operation(default=False, errors=(requests.RequestException,))
    def upload_via_presigned_url(self, url: str, data: Any) -> bool:
        """PUT a body to a presigned URL; non-2xx responses count as failure."""
        response = requests.put(url, data=encode_body(data), timeout=PRESIGNED_UPLOAD_TIMEOUT)
        response.raise_for_status()
        logger.info(f'Uploaded via presigned URL ({response.status_code})')
        return True

    @aws_operation(default=False)
    def delete_object(self, bucket: str, key: str) -> bool:
        params = {'Bucket': bucket, 'Key': key}
        logger.info(f'DeleteObject {params}')
        response = self.s3_client.delete_object(**params)
        logger.info(f'Success {response}')
        return True

    def delete_objects(self, bucket: str, keys: List[str]) -> bool:
        """
        Delete keys in bulk, in chunks the API accepts.

        Returns:
            True if every chunk succeeded with no per-key errors
        """
        succeeded = True
        for chunk in chunked(keys, DELETE_OBJECTS_LIMIT):
            succeeded = self._delete_object_chunk(bucket, list(chunk)) and succeeded
        return succeeded

    @aws_operation(default=False)
    def _delete_object_chunk(self, bucket: str, keys: List[str]) -> bool:
        response = self.s3_client.delete_objects(
            Bucket=bucket,
            Delete={'Objects': [{'Key': key} for key in keys], 'Quiet': True}
        )
        errors = response.get('Errors', [])
        for error in errors:
            logger.error(f"Failed to delete {error.get('Key')}: {error.get('Code')} {error.get('Message')}")
        logger.info(f'Deleted {len(keys) - len(errors)} of {len(keys)} objects from {bucket}')
        return not errors

    @aws_operation(default=False)
    def delete_bucket(self, bucket: str) -> bool:
        response = self.s3_client.delete_bucket(Bucket=bucket)
        logger.info(f'Success {response}')
        return True
