"""
Global pytest configuration and fixtures.
"""
import datetime as dt
import os
import sqlite3
from typing import Dict

import pytest
from unittest.mock import Mock

from wfm_sync.config import WfmSyncConfig, reload_config
from wfm_sync.models import BillingMapping, BillingTarget, RawEntry, StaffMember


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'WFM_API_KEY': 'test-api-key',
        'WFM_ACCOUNT_KEY': 'test-account-key',
        'WFM_BASE_URL': 'https://api.test.workflowmax.com/',
        'LOG_LEVEL': 'DEBUG'
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)
    for key in ('WFM_STAFF_EMAIL', 'TIMETRAP_CONFIG_FILE', 'TIMETRAP_DATABASE_FILE',
                'LOG_FORMAT', 'LOG_FILE'):
        monkeypatch.delenv(key, raising=False)

    # Clear the global config to force reload with test values
    import wfm_sync.config.settings
    wfm_sync.config.settings._config = None

    yield test_env_vars

    # Clean up
    wfm_sync.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> WfmSyncConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def billing_mapping() -> BillingMapping:
    """Mapping with two configured sheets."""
    return BillingMapping(
        staff_email='me@example.org',
        targets={
            'client-a': BillingTarget(job_id='J000150', task_id='39034523'),
            'client-b': BillingTarget(job_id='J000151', task_id='39034524'),
        },
    )


@pytest.fixture
def staff_list():
    """WorkflowMax staff list containing the configured user."""
    return [
        StaffMember(staff_id='100', name='Someone Else', email='else@example.org'),
        StaffMember(staff_id='200', name='Me', email='Me@Example.org'),
    ]


@pytest.fixture
def mock_wfm_client(staff_list):
    """Mock WorkflowMaxClient with no remote time recorded."""
    client = Mock()
    client.list_staff.return_value = staff_list
    client.get_time_records.return_value = None
    client.add_time_entry.return_value = None
    return client


@pytest.fixture
def sample_entries():
    """Raw Timetrap entries across two sheets and two days."""
    return [
        RawEntry(sheet='client-a', start=dt.datetime(2024, 1, 1, 9, 0), duration=1800, note='x'),
        RawEntry(sheet='client-a', start=dt.datetime(2024, 1, 1, 14, 0), duration=1800, note='y'),
        RawEntry(sheet='client-a', start=dt.datetime(2024, 1, 2, 9, 0), duration=5400, note='review'),
        RawEntry(sheet='client-b', start=dt.datetime(2024, 1, 1, 11, 0), duration=900, note='call'),
    ]


@pytest.fixture
def timetrap_db(tmp_path):
    """Create an empty Timetrap database and return a row inserter."""
    path = tmp_path / 'timetrap.db'
    connection = sqlite3.connect(path)
    connection.execute(
        'CREATE TABLE entries ('
        'id INTEGER PRIMARY KEY AUTOINCREMENT, note VARCHAR(255), '
        'start TIMESTAMP, "end" TIMESTAMP, sheet VARCHAR(255))'
    )
    connection.commit()

    def insert(sheet, start, end, note=''):
        connection.execute(
            'INSERT INTO entries (note, start, "end", sheet) VALUES (?, ?, ?, ?)',
            (note, start, end, sheet),
        )
        connection.commit()

    insert.path = path
    yield insert
    connection.close()


@pytest.fixture
def timetrap_config_file(tmp_path):
    """Write a Timetrap YAML config with a wfm section."""
    path = tmp_path / 'timetrap.yml'
    path.write_text(
        'database_file: "~/.timetrap.db"\n'
        'wfm:\n'
        '  email: me@example.org\n'
        '  aliases:\n'
        '    client-a:\n'
        '      job: J000150\n'
        '      task: 39034523\n'
        '    client-b:\n'
        '      job: J000151\n'
        '      task: 39034524\n',
        encoding='utf-8',
    )
    return path


@pytest.fixture(autouse=True)
def cleanup_test_files():
    """Clean up any test files created during testing."""
    yield

    # Remove test coverage files in case they're created
    test_files = ['coverage.xml', '.coverage']
    for file in test_files:
        if os.path.exists(file):
            os.remove(file)


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        # Add unit marker for tests in tests/unit/
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        # Add integration marker for tests in tests/integration/
        elif "tests/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
