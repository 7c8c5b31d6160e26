"""StressCheck Application Factory.

This module provides the application factory pattern for creating Flask
application instances with the appropriate configuration.
"""

from pathlib import Path

from flask import Flask

from stresscheck.config import config

__version__ = '0.1.0'


def create_app(config_name='default', overrides=None):
    """Create and configure the Flask application.

    Args:
        config_name: Configuration name ('development', 'testing', 'production', 'default')
        overrides: Optional config values applied after the config class
                   (e.g. STRESSCHECK_HISTORY_PATH in tests)

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config[config_name])
    if overrides:
        app.config.update(overrides)

    # Accents kept as-is, key order kept for levelDistribution
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    _configure_logging(app)

    # Load YAML settings
    _load_settings(app)

    # Classification thresholds and trend parameters
    _configure_analysis(app)

    # Catalog and history files
    _configure_stores(app)

    # Register blueprints
    _register_blueprints(app)

    # Register error handlers
    _register_error_handlers(app)

    app.logger.info(f'Application created (config={config_name})')

    return app


def _configure_logging(app):
    """Structured log format, level from STRESSCHECK_LOG_LEVEL or DEBUG."""
    from stresscheck.logging_config import configure_logging
    configure_logging(app)


def _base_path(app):
    return Path(app.root_path).parent


def _load_settings(app):
    """Load data/config/stresscheck.yaml into app.config['STRESSCHECK_SETTINGS'].

    A missing or invalid file leaves the defaults in place.

    Args:
        app: Flask application instance
    """
    import yaml

    config_path = Path(app.config['STRESSCHECK_CONFIG_PATH'])
    if not config_path.is_absolute():
        config_path = _base_path(app) / config_path

    settings = {}
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                settings = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            app.logger.error(f'Failed to read config (path={config_path}, error={str(e)})')
            settings = {}
    else:
        app.logger.warning(f'Config file not found: {config_path}')

    if not isinstance(settings, dict):
        app.logger.error(f'Invalid config file, using defaults (path={config_path})')
        settings = {}

    app.config['STRESSCHECK_SETTINGS'] = settings


def _configure_analysis(app):
    """Build the classification policy, engine and statistics analyzer.

    Invalid thresholds are logged and replaced by the defaults.

    Args:
        app: Flask application instance
    """
    from stresscheck.core.analysis import (
        get_diagnostic_engine,
        get_statistics_analyzer,
        reset_classification_policy,
        reset_diagnostic_engine,
        reset_statistics_analyzer,
    )

    settings = app.config['STRESSCHECK_SETTINGS']
    reset_classification_policy()
    reset_diagnostic_engine()
    reset_statistics_analyzer()

    try:
        engine = get_diagnostic_engine(settings.get('classification'))
    except (TypeError, ValueError) as e:
        app.logger.error(f'Invalid classification config, using defaults (error={str(e)})')
        reset_classification_policy()
        engine = get_diagnostic_engine()

    try:
        get_statistics_analyzer(settings.get('statistics'))
    except (TypeError, ValueError) as e:
        app.logger.error(f'Invalid statistics config, using defaults (error={str(e)})')
        reset_statistics_analyzer()
        get_statistics_analyzer()

    app.logger.info(f'Analysis configured (thresholds={engine.policy.thresholds})')


def _configure_stores(app):
    """Resolve the catalog and history paths and load the catalog.

    Paths set on app.config win over the storage section of the YAML file.

    Args:
        app: Flask application instance
    """
    from stresscheck.services import (
        get_catalog_store,
        reset_catalog_store,
        reset_history_store,
    )

    storage = app.config['STRESSCHECK_SETTINGS'].get('storage') or {}
    base_path = _base_path(app)
    defaults = {
        'STRESSCHECK_CATALOG_PATH': storage.get('catalog_path', 'data/catalog/events.json'),
        'STRESSCHECK_HISTORY_PATH': storage.get('history_path', 'data/history/diagnostics.json'),
    }
    for key, value in defaults.items():
        path = Path(app.config.get(key) or value)
        if not path.is_absolute():
            path = base_path / path
        app.config[key] = str(path)

    reset_catalog_store()
    reset_history_store()

    with app.app_context():
        catalog = get_catalog_store().get_catalog()

    app.logger.info(
        f'Stores configured (events={len(catalog)}, '
        f'history={app.config["STRESSCHECK_HISTORY_PATH"]})'
    )


def _register_blueprints(app):
    """Register all application blueprints.

    Args:
        app: Flask application instance
    """
    from stresscheck.blueprints.api import api_bp

    app.register_blueprint(api_bp, url_prefix='/api')


def _register_error_handlers(app):
    """Register custom error handlers.

    Args:
        app: Flask application instance
    """
    from flask import jsonify

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({
            'success': False,
            'error': {
                'code': 'SYSTEM_NOT_FOUND',
                'message': 'The requested resource was not found',
                'details': {}
            }
        }), 404

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify({
            'success': False,
            'error': {
                'code': 'SYSTEM_METHOD_NOT_ALLOWED',
                'message': 'The method is not allowed for the requested URL',
                'details': {}
            }
        }), 405

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({
            'success': False,
            'error': {
                'code': 'SYSTEM_INTERNAL_ERROR',
                'message': 'An internal server error occurred',
                'details': {}
            }
        }), 500
