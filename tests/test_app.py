"""Tests for the application wiring."""

import logging

import pytest

from gradedesk.app_logger import ROOT_LOGGER_NAME, get_logger
from gradedesk.core import ConfigurationError, ServerError
from gradedesk.main import GradeDeskApp
from gradedesk.services import ErrorLogger, GradeService

from conftest import STUDENT_ID, FakeGradeGateway, make_grade


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv('GRADEDESK_LOG_LEVEL', raising=False)


def test_app_wires_services(gateway, storage):
    app = GradeDeskApp(gateway, storage=storage, config={'max_error_logs': 7, 'log_level': 'DEBUG'})

    assert isinstance(app.grade_service, GradeService)
    assert isinstance(app.error_logger, ErrorLogger)
    assert app.config['max_error_logs'] == 7
    assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.DEBUG


def test_config_property_is_a_copy(gateway):
    app = GradeDeskApp(gateway)
    app.config['max_error_logs'] = 1
    assert app.config['max_error_logs'] == 100


def test_invalid_config_is_rejected(gateway):
    with pytest.raises(ConfigurationError):
        GradeDeskApp(gateway, config={'max_persisted_errors': -1})


@pytest.mark.anyio
async def test_gateway_failures_reach_the_error_log(storage):
    gateway = FakeGradeGateway(grades=[make_grade()])
    gateway.failures['get_student_grades'] = RuntimeError('socket closed')
    app = GradeDeskApp(gateway, storage=storage, config={'error_log_storage_key': 'gd-errors'})

    with pytest.raises(ServerError):
        await app.grade_service.calculate_gpa(STUDENT_ID)

    assert len(app.error_logger.get_all_error_logs()) == 1
    assert app.error_logger.get_persisted_errors()[0]['message'] == 'socket closed'
    assert 'gd-errors' in storage.data


def test_get_logger_namespaces_under_package():
    assert get_logger().name == ROOT_LOGGER_NAME
    assert get_logger('gradedesk.services').name == 'gradedesk.services'
    assert get_logger('tests').name == 'gradedesk.tests'
