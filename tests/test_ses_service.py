"""
Unit tests for the SES service and demo.
"""
import pytest
from unittest.mock import Mock, patch
from botocore.exceptions import ClientError

from demos import ses_demo
from services.ses_service import SESService, build_simple_email, html_to_text


class TestBuildSimpleEmail:
    """Tests for build_simple_email."""

    def test_text_email(self):
        mail = build_simple_email(
            'from@gmail.com', ['to@gmail.com'], 'Test email', text='This is test email.'
        )

        assert mail == {
            'FromEmailAddress': 'from@gmail.com',
            'Destination': {
                'ToAddresses': ['to@gmail.com'],
                'CcAddresses': [],
                'BccAddresses': [],
            },
            'Content': {
                'Simple': {
                    'Subject': {'Data': 'Test email'},
                    'Body': {'Text': {'Data': 'This is test email.'}},
                },
            },
        }

    def test_html_email_derives_text(self):
        mail = build_simple_email(
            'from@example.com',
            ['to@example.com'],
            'Hello',
            html='<h1>Hi</h1><p>Body <b>text</b></p>',
            cc_addresses=['cc@example.com'],
        )

        body = mail['Content']['Simple']['Body']
        assert body['Html'] == {'Data': '<h1>Hi</h1><p>Body <b>text</b></p>'}
        assert '<' not in body['Text']['Data']
        assert 'Hi' in body['Text']['Data']
        assert mail['Destination']['CcAddresses'] == ['cc@example.com']

    def test_html_with_explicit_text(self):
        mail = build_simple_email('f@x.com', ['t@x.com'], 's', text='plain', html='<p>rich</p>')
        assert mail['Content']['Simple']['Body']['Text'] == {'Data': 'plain'}

    def test_requires_recipient(self):
        with pytest.raises(ValueError, match="recipient"):
            build_simple_email('f@x.com', [], 's', text='t')

    def test_requires_body(self):
        with pytest.raises(ValueError, match="body"):
            build_simple_email('f@x.com', ['t@x.com'], 's')

    def test_html_to_text(self):
        assert html_to_text('<p>One</p><p>Two</p>') == 'One\nTwo'


class TestSESService:
    """Tests for SESService."""

    @patch('services.ses_service.boto3')
    def test_client_lazy_init(self, mock_boto3):
        mock_client = Mock()
        mock_boto3.client.return_value = mock_client

        service = SESService('us-east-1')

        assert service.client == mock_client
        mock_boto3.client.assert_called_once_with('sesv2', region_name='us-east-1')

    def test_send_email_success(self):
        service = SESService('us-east-1')
        service._client = Mock()
        service._client.send_email.return_value = {'MessageId': 'abc'}
        mail = build_simple_email('f@x.com', ['t@x.com'], 's', text='t')

        assert service.send_email(mail) is True
        service._client.send_email.assert_called_once_with(**mail)

    def test_send_email_failure(self):
        service = SESService('us-east-1')
        service._client = Mock()
        service._client.send_email.side_effect = ClientError(
            {'Error': {'Code': 'MessageRejected', 'Message': 'Email address is not verified.'}},
            'SendEmail'
        )

        assert service.send_email({'FromEmailAddress': 'f@x.com'}) is False


class TestSESDemo:
    """Tests for the SES demo."""

    def test_run_all(self, test_config):
        service = Mock()
        service.send_email.return_value = True

        assert ses_demo.run_all(test_config, service) is True

        mail = service.send_email.call_args.args[0]
        assert mail['FromEmailAddress'] == 'from@gmail.com'
        assert mail['Destination']['ToAddresses'] == ['to@gmail.com']
        assert mail['Content']['Simple']['Subject'] == {'Data': 'Test email'}
        assert mail['Content']['Simple']['Body'] == {'Text': {'Data': 'This is test email.'}}

    def test_run_all_reports_failure(self, test_config):
        service = Mock()
        service.send_email.return_value = False

        assert ses_demo.run_all(test_config, service) is False
