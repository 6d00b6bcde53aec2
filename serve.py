#!/usr/bin/env python3
"""
Simple HTTP server for the webtest harness page and test scripts.

Serves the repository root so /pages/webtest.html, /python/... and
/tests/webtest/... resolve the same way the driver expects.
"""

import functools
import http.server
import os
import socketserver
from pathlib import Path

PORT = int(os.environ.get("WEBTEST_PORT", "8000"))
ROOT = Path(__file__).resolve().parent


class CORSHTTPRequestHandler(http.server.SimpleHTTPRequestHandler):
    """HTTP handler with isolation headers and no caching of test scripts."""

    extensions_map = {
        **http.server.SimpleHTTPRequestHandler.extensions_map,
        ".py": "text/x-python",
        ".toml": "application/toml",
    }

    def end_headers(self):
        self.send_header('Cross-Origin-Opener-Policy', 'same-origin')
        self.send_header('Cross-Origin-Embedder-Policy', 'require-corp')
        self.send_header('Access-Control-Allow-Origin', '*')
        # Test scripts are edited between runs; always refetch them
        self.send_header('Cache-Control', 'no-store')
        super().end_headers()

    def do_OPTIONS(self):
        self.send_response(200)
        self.end_headers()


if __name__ == '__main__':
    handler = functools.partial(CORSHTTPRequestHandler, directory=str(ROOT))
    with socketserver.TCPServer(("", PORT), handler) as httpd:
        print(f"Serving at http://localhost:{PORT}/pages/webtest.html")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped")
