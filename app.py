from flask import Flask, current_app, send_from_directory
import os


def create_app(root):
    """Flask app that serves files out of ``root`` and nothing else."""
    app = Flask(__name__, static_folder=None)
    app.config['ROOT'] = os.path.abspath(root)

    @app.route("/")
    def index():
        return send_from_directory(current_app.config['ROOT'], "index.html")

    @app.route("/<path:path>")
    def static_files(path):
        return send_from_directory(current_app.config['ROOT'], path)

    return app
