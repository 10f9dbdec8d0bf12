"""
AWS Batch demo: submit a job, describe it, list the queue, cancel the job.
"""
from typing import Any, Dict, Optional

from config import Config, get_config
from logger_config import get_logger
from services.batch_service import BatchService, resource_requirements

logger = get_logger(__name__)


def build_submit_request(config: Config) -> Dict[str, Any]:
    return {
        'jobName': config.batch_job_name,
        'jobDefinition': config.batch_job_definition,
        'jobQueue': config.batch_job_queue,
        'containerOverrides': {
            'command': ['echo', 'hello world'],
            'environment': [{'name': 'NAME', 'value': 'VALUE'}],
            # See FARGATE_MEMORY_BY_VCPU for the larger sizes
            'resourceRequirements': resource_requirements(vcpu='0.25', memory='512'),
        },
    }


def run_all(
    config: Optional[Config] = None,
    service: Optional[BatchService] = None
) -> Optional[str]:
    """
    Run the Batch calls in order.

    Returns:
        The submitted job ID, or None if submission failed
    """
    config = config or get_config()
    service = service or BatchService(config.aws_region)

    logger.info('SubmitJobRequest:')
    response = service.submit_job(build_submit_request(config))
    if not response or not response.get('jobId'):
        logger.warning('Job was not submitted, skipping remaining Batch calls')
        return None
    job_id = response['jobId']

    logger.info('DescribeJobsCommand:')
    service.describe_jobs([job_id])

    logger.info('ListJobsCommand:')
    service.list_jobs(config.batch_job_queue)

    logger.info('CancelJobCommand:')
    service.cancel_job(job_id)

    return job_id


if __name__ == '__main__':
    run_all()
