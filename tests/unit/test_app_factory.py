"""Unit tests for StressCheck application factory."""

from pathlib import Path

from flask import Flask

from stresscheck import __version__, create_app
from stresscheck.core.analysis import get_classification_policy, get_statistics_analyzer
from stresscheck.models.diagnostic import StressLevel


class TestCreateApp:
    """Tests for create_app function."""

    def test_create_app_returns_flask_instance(self, history_path):
        app = create_app('testing', overrides={'STRESSCHECK_HISTORY_PATH': str(history_path)})
        assert isinstance(app, Flask)

    def test_create_app_testing_config(self, app):
        assert app.config['TESTING'] is True
        assert app.config['DEBUG'] is False

    def test_create_app_development_config(self, history_path):
        app = create_app('development', overrides={'STRESSCHECK_HISTORY_PATH': str(history_path)})
        assert app.config['DEBUG'] is True
        assert app.config['TESTING'] is False

    def test_create_app_production_config(self, history_path):
        app = create_app('production', overrides={'STRESSCHECK_HISTORY_PATH': str(history_path)})
        assert app.config['DEBUG'] is False
        assert app.config['TESTING'] is False


class TestSettings:
    """YAML settings and store paths."""

    def test_bundled_settings_loaded(self, app):
        settings = app.config['STRESSCHECK_SETTINGS']
        assert settings['classification']['thresholds']['moderate'] == 150
        assert settings['statistics']['trend_window'] == 3

    def test_override_path_wins(self, app, history_path):
        assert app.config['STRESSCHECK_HISTORY_PATH'] == str(history_path)

    def test_catalog_path_resolved_from_project_root(self, app):
        path = Path(app.config['STRESSCHECK_CATALOG_PATH'])
        assert path.is_absolute()
        assert path.parts[-2:] == ('catalog', 'events.json')

    def test_missing_config_uses_defaults(self, tmp_path, history_path):
        app = create_app('testing', overrides={
            'STRESSCHECK_CONFIG_PATH': str(tmp_path / 'absent.yaml'),
            'STRESSCHECK_HISTORY_PATH': str(history_path),
        })
        assert app.config['STRESSCHECK_SETTINGS'] == {}
        assert get_classification_policy().thresholds['high'] == 300

    def test_thresholds_from_yaml(self, tmp_path, history_path):
        config_file = tmp_path / 'stresscheck.yaml'
        config_file.write_text(
            'classification:\n'
            '  thresholds:\n'
            '    moderate: 100\n'
            '    high: 200\n'
            'statistics:\n'
            '  trend_window: 2\n',
            encoding='utf-8',
        )
        create_app('testing', overrides={
            'STRESSCHECK_CONFIG_PATH': str(config_file),
            'STRESSCHECK_HISTORY_PATH': str(history_path),
        })
        assert get_classification_policy().level_for(150) == StressLevel.MODERE
        assert get_statistics_analyzer().min_records_for_trend == 4

    def test_invalid_thresholds_fall_back_to_defaults(self, tmp_path, history_path):
        config_file = tmp_path / 'stresscheck.yaml'
        config_file.write_text(
            'classification:\n'
            '  thresholds:\n'
            '    moderate: 500\n'
            '    high: 100\n',
            encoding='utf-8',
        )
        create_app('testing', overrides={
            'STRESSCHECK_CONFIG_PATH': str(config_file),
            'STRESSCHECK_HISTORY_PATH': str(history_path),
        })
        assert get_classification_policy().thresholds['moderate'] == 150

    def test_invalid_yaml_uses_defaults(self, tmp_path, history_path):
        config_file = tmp_path / 'stresscheck.yaml'
        config_file.write_text('classification: [unclosed\n', encoding='utf-8')
        app = create_app('testing', overrides={
            'STRESSCHECK_CONFIG_PATH': str(config_file),
            'STRESSCHECK_HISTORY_PATH': str(history_path),
        })
        assert app.config['STRESSCHECK_SETTINGS'] == {}


class TestHealthEndpoint:
    """Tests for /api/health endpoint."""

    def test_health_endpoint_returns_200(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json() == {'status': 'ok', 'version': __version__}


class TestErrorHandlers:
    """JSON error envelope."""

    def test_unknown_route(self, client):
        response = client.get('/api/nope')
        assert response.status_code == 404
        data = response.get_json()
        assert data['success'] is False
        assert data['error']['code'] == 'SYSTEM_NOT_FOUND'

    def test_method_not_allowed(self, client):
        response = client.put('/api/diagnostic/submit')
        assert response.status_code == 405
        assert response.get_json()['error']['code'] == 'SYSTEM_METHOD_NOT_ALLOWED'


class TestStatisticsSettings:
    """statistics section of the YAML file."""

    def _app(self, tmp_path, history_path, delta):
        config_file = tmp_path / 'stresscheck.yaml'
        config_file.write_text(
            'statistics:\n'
            '  trend_window: 3\n'
            f'  trend_delta: {delta}\n',
            encoding='utf-8',
        )
        return create_app('testing', overrides={
            'STRESSCHECK_CONFIG_PATH': str(config_file),
            'STRESSCHECK_HISTORY_PATH': str(history_path),
        })

    def _stats_after_six(self, app):
        client = app.test_client()
        for _ in range(6):
            response = client.post('/api/diagnostic/submit', json={'selectedEventIds': [1]})
            assert response.status_code == 201
        return client.get('/api/diagnostic/stats')

    def test_quoted_delta_is_converted(self, tmp_path, history_path):
        app = self._app(tmp_path, history_path, "'20'")
        response = self._stats_after_six(app)
        assert response.status_code == 200
        assert response.get_json()['result']['recentTrend'] == 'stable'

    def test_invalid_delta_falls_back_to_default(self, tmp_path, history_path):
        app = self._app(tmp_path, history_path, 'beaucoup')
        response = self._stats_after_six(app)
        assert response.status_code == 200
        assert response.get_json()['result']['recentTrend'] == 'stable'
