import json
import unittest
from unittest.mock import patch, MagicMock

# Module to test
from report_api.services.sheets import client
from report_api.config.config_loader import AppConfig
from report_api.utils.error_utils import ConfigurationError


def _config(sa_json):
    config = AppConfig()
    config.service_account_json_string = sa_json
    return config


class TestGetGspreadClient(unittest.TestCase):

    @patch('report_api.services.sheets.client.gspread.authorize')
    @patch('report_api.services.sheets.client.service_account.Credentials.from_service_account_info')
    def test_authorizes_with_parsed_info(self, mock_from_info, mock_authorize):
        """Test the JSON blob is parsed and exchanged for a gspread client."""
        info = {'client_email': 'bot@example.iam.gserviceaccount.com', 'private_key': 'k'}
        mock_creds = MagicMock()
        mock_from_info.return_value = mock_creds
        mock_authorize.return_value = 'gspread-client'

        result = client.get_gspread_client(_config(json.dumps(info)))

        self.assertEqual(result, 'gspread-client')
        mock_from_info.assert_called_once_with(info, scopes=['https://www.googleapis.com/auth/spreadsheets'])
        mock_authorize.assert_called_once_with(mock_creds)

    @patch('report_api.services.sheets.client.gspread.authorize')
    def test_invalid_json(self, mock_authorize):
        with self.assertRaises(ConfigurationError) as ctx:
            client.get_gspread_client(_config('{not json'))
        self.assertIn('Invalid service account JSON', ctx.exception.message)
        mock_authorize.assert_not_called()

    def test_json_not_an_object(self):
        with self.assertRaises(ConfigurationError):
            client.get_gspread_client(_config('["a", "b"]'))

    def test_missing_credentials(self):
        with self.assertRaises(ConfigurationError):
            client.get_gspread_client(_config(None))

    @patch('report_api.services.sheets.client.service_account.Credentials.from_service_account_info')
    def test_rejected_key_material_propagates(self, mock_from_info):
        """google-auth errors are not swallowed."""
        mock_from_info.side_effect = ValueError("Service account info was not in the expected format")
        with self.assertRaises(ValueError):
            client.get_gspread_client(_config('{"type": "service_account"}'))


if __name__ == '__main__':
    unittest.main()
