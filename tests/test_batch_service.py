"""
Unit tests for the Batch service and demo.
"""
import boto3
import pytest
from unittest.mock import Mock, patch
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from config import Config
from demos import batch_demo
from services.batch_service import (
    BatchService,
    FARGATE_MEMORY_BY_VCPU,
    resource_requirements,
)


def client_error(operation):
    return ClientError({'Error': {'Code': 'ClientException', 'Message': 'boom'}}, operation)


@pytest.fixture
def mock_client():
    return Mock()


@pytest.fixture
def service(mock_client):
    service = BatchService('us-east-1')
    service._client = mock_client
    return service


@pytest.fixture
def stubbed_service():
    client = boto3.client('batch', region_name='us-east-1')
    stubber = Stubber(client)
    service = BatchService('us-east-1')
    service._client = client
    with stubber:
        yield service, stubber


class TestResourceRequirements:
    """Tests for resource_requirements."""

    def test_smallest_fargate_size(self):
        assert resource_requirements('0.25', '512') == [
            {'type': 'MEMORY', 'value': '512'},
            {'type': 'VCPU', 'value': '0.25'},
        ]

    @pytest.mark.parametrize('vcpu,memory', [
        ('0.5', '4096'),
        ('1', '3072'),
        ('4', '30720'),
        ('8', '61440'),
        ('16', '122880'),
    ])
    def test_valid_combinations(self, vcpu, memory):
        requirements = resource_requirements(vcpu, memory)
        assert {'type': 'VCPU', 'value': vcpu} in requirements

    @pytest.mark.parametrize('vcpu,memory', [
        ('0.25', '4096'),
        ('8', '20000'),
        ('3', '8192'),
        ('1', 'lots'),
    ])
    def test_invalid_combinations(self, vcpu, memory):
        with pytest.raises(ValueError):
            resource_requirements(vcpu, memory)

    def test_table_bounds(self):
        assert FARGATE_MEMORY_BY_VCPU['2'][0] == 4096
        assert FARGATE_MEMORY_BY_VCPU['2'][-1] == 16384
        assert FARGATE_MEMORY_BY_VCPU['16'][-1] == 122880


class TestBatchService:
    """Tests for BatchService."""

    def test_init(self):
        service = BatchService('eu-west-1')
        assert service.region_name == 'eu-west-1'
        assert service._client is None

    @patch('services.batch_service.boto3')
    def test_client_lazy_init(self, mock_boto3):
        mock_client = Mock()
        mock_boto3.client.return_value = mock_client

        service = BatchService('eu-west-1')

        assert service.client == mock_client
        assert service.client == mock_client
        mock_boto3.client.assert_called_once_with('batch', region_name='eu-west-1')

    def test_submit_job_success(self, service, mock_client):
        mock_client.submit_job.return_value = {'jobId': 'job-1', 'jobName': 'test-job'}
        request = {'jobName': 'test-job', 'jobQueue': 'q', 'jobDefinition': 'd'}

        result = service.submit_job(request)

        assert result == {'jobId': 'job-1', 'jobName': 'test-job'}
        mock_client.submit_job.assert_called_once_with(**request)

    def test_submit_job_failure(self, service, mock_client):
        mock_client.submit_job.side_effect = client_error('SubmitJob')
        assert service.submit_job({'jobName': 'x'}) is False

    def test_describe_jobs_chunks(self, service, mock_client):
        mock_client.describe_jobs.return_value = {'jobs': []}
        job_ids = [f'job-{i}' for i in range(250)]

        assert service.describe_jobs(job_ids) is True

        calls = mock_client.describe_jobs.call_args_list
        assert [len(call.kwargs['jobs']) for call in calls] == [100, 100, 50]

    def test_describe_jobs_empty(self, service, mock_client):
        assert service.describe_jobs([]) is True
        mock_client.describe_jobs.assert_not_called()

    def test_describe_jobs_partial_failure(self, service, mock_client):
        mock_client.describe_jobs.side_effect = [
            client_error('DescribeJobs'),
            {'jobs': [{'jobId': 'job-100', 'jobName': 'n', 'status': 'RUNNABLE'}]},
        ]

        assert service.describe_jobs([f'job-{i}' for i in range(150)]) is False
        assert mock_client.describe_jobs.call_count == 2

    def test_list_jobs_paginates(self, stubbed_service):
        service, stubber = stubbed_service
        stubber.add_response(
            'list_jobs',
            {'jobSummaryList': [{'jobId': '1', 'jobName': 'a'}], 'nextToken': 'page-2'},
            {'jobQueue': 'test-queue', 'jobStatus': 'RUNNABLE'},
        )
        stubber.add_response(
            'list_jobs',
            {'jobSummaryList': [{'jobId': '2', 'jobName': 'b'}]},
            {'jobQueue': 'test-queue', 'jobStatus': 'RUNNABLE', 'nextToken': 'page-2'},
        )

        assert service.list_jobs('test-queue', job_status='RUNNABLE') is True
        stubber.assert_no_pending_responses()

    def test_list_jobs_failure(self, stubbed_service):
        service, stubber = stubbed_service
        stubber.add_response(
            'list_jobs',
            {'jobSummaryList': [], 'nextToken': 'page-2'},
            {'jobQueue': 'test-queue'},
        )
        stubber.add_client_error(
            'list_jobs',
            service_error_code='ClientException',
            service_message='boom',
            expected_params={'jobQueue': 'test-queue', 'nextToken': 'page-2'},
        )

        assert service.list_jobs('test-queue') is False
        stubber.assert_no_pending_responses()

    def test_cancel_job(self, service, mock_client):
        mock_client.cancel_job.return_value = {}
        assert service.cancel_job('job-1') is True
        mock_client.cancel_job.assert_called_once_with(jobId='job-1', reason='Cancelling job.')

    def test_cancel_job_failure(self, service, mock_client):
        mock_client.cancel_job.side_effect = client_error('CancelJob')
        assert service.cancel_job('job-1') is False

    def test_terminate_job(self, service, mock_client):
        mock_client.terminate_job.return_value = {}
        assert service.terminate_job('job-1', reason='stop') is True
        mock_client.terminate_job.assert_called_once_with(jobId='job-1', reason='stop')


class TestBatchDemo:
    """Tests for the Batch demo sequence."""

    def test_build_submit_request(self):
        request = batch_demo.build_submit_request(Config())

        assert request['jobName'] == 'test-job'
        assert request['jobQueue'] == 'test-queue'
        assert request['jobDefinition'] == 'test-job-definition'
        overrides = request['containerOverrides']
        assert overrides['command'] == ['echo', 'hello world']
        assert overrides['environment'] == [{'name': 'NAME', 'value': 'VALUE'}]
        assert {'type': 'VCPU', 'value': '0.25'} in overrides['resourceRequirements']

    def test_run_all_calls_in_order(self):
        service = Mock()
        service.submit_job.return_value = {'jobId': 'job-1'}

        result = batch_demo.run_all(Config(), service)

        assert result == 'job-1'
        called = [name for name, _, _ in service.method_calls]
        assert called == ['submit_job', 'describe_jobs', 'list_jobs', 'cancel_job']
        service.describe_jobs.assert_called_once_with(['job-1'])
        service.list_jobs.assert_called_once_with('test-queue')
        service.cancel_job.assert_called_once_with('job-1')

    @pytest.mark.parametrize('response', [False, {}, {'jobId': ''}])
    def test_run_all_stops_when_submit_fails(self, response):
        service = Mock()
        service.submit_job.return_value = response

        assert batch_demo.run_all(Config(), service) is None
        service.describe_jobs.assert_not_called()
        service.cancel_job.assert_not_called()
