from django.conf import settings
from django.test import SimpleTestCase


class TestDatabaseConfigurationTests(SimpleTestCase):
    def test_tests_run_against_sqlite(self):
        self.assertEqual(settings.DATABASES['default']['ENGINE'], 'django.db.backends.sqlite3')

    def test_test_settings_keep_project_configuration(self):
        self.assertEqual(settings.AUTH_USER_MODEL, 'waste.User')
        self.assertEqual(settings.REPORT_REWARD_POINTS, 10)
        self.assertIn('waste', settings.INSTALLED_APPS)
