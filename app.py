import os

from course_drive import create_app

app = create_app()


if __name__ == '__main__':
    port = int(os.getenv('PORT', '5000'))
    debug = str(os.getenv('FLASK_DEBUG', '0')).strip().lower() in {'1', 'true', 'yes', 'on'}
    app.run(host='0.0.0.0', port=port, debug=debug)
