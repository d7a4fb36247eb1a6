#!/usr/bin/env python3
"""Live-reload dev server for the I-Ching Elm app on port 3000."""

import logging
import os
import sys

import livereload
from tornado.ioloop import IOLoop

from app import create_app
from builder import POLL_INTERVAL, BuildTrigger

ROOT = os.path.dirname(os.path.abspath(__file__))
ELM_MAIN = os.path.join(ROOT, "Main.elm")
ELM_JS_OUTPUT = os.path.join(ROOT, "elm.js")
COMPILER = "elm make"
HOST = "0.0.0.0"
PORT = 3000

logger = logging.getLogger(__name__)


def create_server(app, artifact):
    """Wrap ``app`` in a livereload server that reloads browsers when ``artifact`` changes."""
    server = livereload.Server(app.wsgi_app)
    server.watch(str(artifact))
    return server


def create_dev_loop(root, source, artifact, compiler=COMPILER, interval=POLL_INTERVAL):
    """
    Wire the static app, the reload server and the build trigger together.

    The source is polled on the current IOLoop and the first build is queued
    on it, so both start as soon as the loop runs. Returns (server, trigger).
    """
    server = create_server(create_app(root), artifact)

    trigger = BuildTrigger(source, artifact, compiler=compiler)
    trigger.attach(interval)
    IOLoop.current().add_callback(trigger.trigger)
    return server, trigger


def main():
    logging.basicConfig(level=logging.INFO, format='%(message)s', stream=sys.stdout)

    server, _ = create_dev_loop(ROOT, ELM_MAIN, ELM_JS_OUTPUT)

    logger.info("Serving files on %d", PORT)
    server.serve(host=HOST, port=PORT, root=ROOT, debug=False)


if __name__ == "__main__":
    main()
