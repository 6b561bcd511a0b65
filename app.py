"""
Las Tortillas Restaurant Back-end
Application Entry Point

This file serves as the entry point for the Flask application.
It uses the application factory pattern defined in the tortillas package.
"""

from tortillas import create_app

# Create the Flask application using the factory
app = create_app()

if __name__ == '__main__':
    # Threaded so password hashing in one request never stalls the others
    app.run(debug=not app.config['PRODUCTION'], host='0.0.0.0', port=5000, threaded=True)
