"""
AWS Batch service for job submission and job queue operations.
"""
import boto3
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from botocore.exceptions import BotoCoreError, ClientError
from more_itertools import chunked
from logger_config import get_logger
from utils.decorators import aws_operation, describe_error

if TYPE_CHECKING:
    from mypy_boto3_batch import BatchClient
else:
    BatchClient = Any

logger = get_logger(__name__)

# DescribeJobs accepts at most 100 job IDs per call
DESCRIBE_JOBS_LIMIT = 100


def _memory_steps(start: int, stop: int, step: int) -> List[int]:
    return list(range(start, stop + 1, step))


# Valid Fargate memory values (MiB) for each vCPU setting
FARGATE_MEMORY_BY_VCPU: Dict[str, List[int]] = {
    '0.25': [512, 1024, 2048],
    '0.5': [1024, 2048, 3072, 4096],
    '1': _memory_steps(2048, 8192, 1024),
    '2': _memory_steps(4096, 16384, 1024),
    '4': _memory_steps(8192, 30720, 1024),
    '8': _memory_steps(16384, 61440, 4096),
    '16': _memory_steps(32768, 122880, 8192),
}


def resource_requirements(vcpu: str, memory: str) -> List[Dict[str, str]]:
    """
    Build a Fargate ``resourceRequirements`` override.

    Args:
        vcpu: vCPU count as accepted by Batch (e.g. "0.25", "1")
        memory: Memory in MiB (e.g. "512")

    Returns:
        List with the MEMORY and VCPU requirements

    Raises:
        ValueError: If the combination is not one Fargate accepts
    """
    allowed = FARGATE_MEMORY_BY_VCPU.get(str(vcpu))
    if allowed is None:
        raise ValueError(
            f"Unsupported vCPU value {vcpu!r}, expected one of {sorted(FARGATE_MEMORY_BY_VCPU, key=float)}"
        )
    try:
        memory_mib = int(memory)
    except (TypeError, ValueError):
        raise ValueError(f"Memory must be an integer number of MiB, got {memory!r}") from None
    if memory_mib not in allowed:
        raise ValueError(
            f"Memory {memory_mib} MiB is not valid for {vcpu} vCPU, expected one of {allowed}"
        )
    return [
        {'type': 'MEMORY', 'value': str(memory_mib)},
        {'type': 'VCPU', 'value': str(vcpu)},
    ]


class BatchService:
    """Service for AWS Batch operations."""

    def __init__(self, region_name: Optional[str] = None) -> None:
        """
        Initialize Batch service.

        Args:
            region_name: AWS region (falls back to the boto3 default chain)
        """
        self.region_name = region_name
        self._client: Optional[BatchClient] = None

    @property
    def client(self) -> BatchClient:
        """Lazy initialization of Batch client."""
        if self._client is None:
            self._client = boto3.client('batch', region_name=self.region_name)
        return self._client

    @aws_operation(default=False)
    def submit_job(self, request: Dict[str, Any]) -> Any:
        """
        Submit a job to a job queue.

        Args:
            request: SubmitJob parameters (jobName, jobQueue, jobDefinition, ...)

        Returns:
            SubmitJob response, or False if the call failed
        """
        response = self.client.submit_job(**request)
        logger.info(f'Submitted job: {response}')
        return response

    def describe_jobs(self, job_ids: List[str]) -> bool:
        """
        Describe submitted jobs, in chunks the API accepts.

        Returns:
            True if every chunk was described, False otherwise
        """
        succeeded = True
        for chunk in chunked(job_ids, DESCRIBE_JOBS_LIMIT):
            succeeded = self._describe_job_chunk(list(chunk)) and succeeded
        return succeeded

    @aws_operation(default=False)
    def _describe_job_chunk(self, job_ids: List[str]) -> bool:
        response = self.client.describe_jobs(jobs=job_ids)
        logger.info(f'DescribeJobs response: {response}')
        for job in response.get('jobs', []):
            logger.info(f"Job {job.get('jobId')} ({job.get('jobName')}): {job.get('status')}")
        return True

    def list_jobs(self, job_queue: str, job_status: Optional[str] = None) -> bool:
        """
        List the jobs in a queue, following ``nextToken`` across pages.

        Args:
            job_queue: Queue name or ARN
            job_status: Optional status filter (e.g. RUNNABLE)

        Returns:
            True if every page was retrieved, False otherwise
        """
        params: Dict[str, Any] = {'jobQueue': job_queue}
        if job_status:
            params['jobStatus'] = job_status

        summaries: List[Dict[str, Any]] = []
        try:
            paginator = self.client.get_paginator('list_jobs')
            for page in paginator.paginate(**params):
                logger.info(f'ListJobs response: {page}')
                summaries.extend(page.get('jobSummaryList', []))
        except (ClientError, BotoCoreError) as e:
            logger.error(f'ListJobs failed for queue {job_queue}: {describe_error(e)}')
            return False

        logger.info(f'Found {len(summaries)} jobs in queue {job_queue}')
        return True

    @aws_operation(default=False)
    def cancel_job(self, job_id: str, reason: str = 'Cancelling job.') -> bool:
        """
        Cancel a job that has not reached STARTING yet.

        Returns:
            True on success, False if the call failed
        """
        response = self.client.cancel_job(jobId=job_id, reason=reason)
        logger.info(f'Cancelled job {job_id}: {response}')
        return True

    @aws_operation(default=False)
    def terminate_job(self, job_id: str, reason: str = 'Terminating job.') -> bool:
        """Terminate a job, including one that is already STARTING or RUNNING."""
        response = self.client.terminate_job(jobId=job_id, reason=reason)
        logger.info(f'Terminated job {job_id}: {response}')
        return True
