"""Configuration classes for StressCheck application."""

import os


class Config:
    """Base configuration."""

    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key'
    STRESSCHECK_CONFIG_PATH = os.environ.get('STRESSCHECK_CONFIG_PATH') or 'data/config/stresscheck.yaml'
    # None means "use the storage section of the YAML file"
    STRESSCHECK_CATALOG_PATH = os.environ.get('STRESSCHECK_CATALOG_PATH')
    STRESSCHECK_HISTORY_PATH = os.environ.get('STRESSCHECK_HISTORY_PATH')
    # DEBUG/INFO/WARNING...; unset means DEBUG follows the config class
    STRESSCHECK_LOG_LEVEL = os.environ.get('STRESSCHECK_LOG_LEVEL')


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""

    DEBUG = False
    TESTING = True


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    TESTING = False


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
