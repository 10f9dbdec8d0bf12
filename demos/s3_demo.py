"""
S3 demo: bucket setup, object round trip, listing, presigned URL and
cleanup, run against the endpoint in the config (s3rver by default).
"""
from typing import Any, Dict, List, Optional

from config import Config, get_config
from logger_config import get_logger
from services.s3_service import S3Service

logger = get_logger(__name__)

SAMPLE_KEY = 'json/sample.json'
SAMPLE_DATA = {'data': 'sample'}


def bucket_policy(bucket: str) -> Dict[str, Any]:
    return {
        'Version': '2012-10-17',
        'Statement': [
            {
                'Sid': 'sample-bucket-policy',
                'Effect': 'Allow',
                'Principal': {'AWS': '*'},
                'Action': ['s3:GetObject', 's3:PutObject'],
                'Resource': [f'arn:aws:s3:::{bucket}/*'],
            }
        ],
    }


CORS_RULES = [
    {
        'ID': 'Sample-Bucket-CORS',
        'AllowedHeaders': ['*'],
        'AllowedMethods': ['GET', 'PUT'],
        'AllowedOrigins': ['*'],
        'ExposeHeaders': [],
        'MaxAgeSeconds': 3000,
    }
]


def run_all(
    config: Optional[Config] = None,
    service: Optional[S3Service] = None
) -> List[str]:
    """
    Run the S3 calls in order.

    Returns:
        The object keys found in the bucket before cleanup
    """
    config = config or get_config()
    service = service or S3Service.from_config(config)
    bucket = config.s3_bucket

    logger.info('>>> Create bucket')
    service.create_bucket(bucket)

    logger.info('>>> Put bucket policy')
    service.put_bucket_policy(bucket, bucket_policy(bucket))

    logger.info('>>> Put bucket CORS')
    service.put_bucket_cors(bucket, CORS_RULES)

    logger.info('>>> List buckets')
    service.list_buckets()

    logger.info('>>> Put object')
    service.put_object(bucket, SAMPLE_KEY, SAMPLE_DATA)

    logger.info('>>> Get object')
    sample = service.get_json_object(bucket, SAMPLE_KEY)
    logger.info(sample if sample is not None else '')

    logger.info('>>> List objects')
    keys = service.list_objects(bucket, '')

    logger.info('>>> Get presigned URL')
    service.get_presigned_url(bucket, SAMPLE_KEY, SAMPLE_DATA, expires_in=config.s3_presign_expires)

    logger.info('>>> Delete object')
    for key in keys:
        if not key:
            continue
        service.delete_object(bucket, key)

    logger.info('>>> Delete bucket')
    service.delete_bucket(bucket)

    return keys


if __name__ == '__main__':
    run_all()
