"""WSGI entry point for StressCheck application."""

import os
from stresscheck import create_app

config_name = os.environ.get('STRESSCHECK_CONFIG', 'development')
app = create_app(config_name)

if __name__ == '__main__':
    # Development server - use gunicorn in production
    debug = os.environ.get('FLASK_DEBUG', '0') == '1'
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', '5000')), debug=debug)
