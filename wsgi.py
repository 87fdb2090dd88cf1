"""
WSGI entry point for the translation service.

Usage with gunicorn:
    gunicorn -w 2 -b 0.0.0.0:8000 wsgi:app

Set TRANSLATE_API_KEY before starting; without it every /translate call
answers 500.
"""

from app import create_app

app = create_app()

if __name__ == '__main__':
    # Local development only
    app.run(debug=True)
