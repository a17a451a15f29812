import os
import tempfile
import unittest
from unittest.mock import patch

# Module to test
from report_api.config import config_loader
from report_api.utils.error_utils import ConfigurationError


class TestLoadConfig(unittest.TestCase):

    @patch.dict(os.environ, {'GOOGLE_SERVICE_ACCOUNT_JSON': '{"type": "service_account"}'}, clear=True)
    def test_loads_json_from_env(self):
        config = config_loader.load_config()
        self.assertEqual(config.service_account_json_string, '{"type": "service_account"}')
        self.assertEqual(config.scopes, ['https://www.googleapis.com/auth/spreadsheets'])

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_credentials(self):
        with self.assertRaises(ConfigurationError) as ctx:
            config_loader.load_config()
        self.assertEqual(ctx.exception.message, 'Missing GOOGLE_SERVICE_ACCOUNT_JSON')
        self.assertEqual(ctx.exception.status_code, 500)

    def test_falls_back_to_key_file(self):
        """GOOGLE_APPLICATION_CREDENTIALS is read when the JSON variable is unset."""
        with tempfile.NamedTemporaryFile('w', suffix='.json', delete=False) as f:
            f.write('{"client_email": "file@example.com"}')
            path = f.name
        try:
            with patch.dict(os.environ, {'GOOGLE_APPLICATION_CREDENTIALS': path}, clear=True):
                config = config_loader.load_config()
            self.assertEqual(config.service_account_json_string, '{"client_email": "file@example.com"}')
        finally:
            os.remove(path)

    @patch.dict(os.environ, {'GOOGLE_APPLICATION_CREDENTIALS': '/nonexistent/key.json'}, clear=True)
    def test_missing_key_file(self):
        with self.assertRaises(ConfigurationError):
            config_loader.load_config()

    @patch.dict(os.environ, {'GOOGLE_SERVICE_ACCOUNT_JSON': '{"a": 1}',
                             'GOOGLE_APPLICATION_CREDENTIALS': '/nonexistent/key.json'}, clear=True)
    def test_env_json_takes_priority(self):
        config = config_loader.load_config()
        self.assertEqual(config.service_account_json_string, '{"a": 1}')


if __name__ == '__main__':
    unittest.main()
