#!/usr/bin/env python3
"""Serve the events API locally by passing HTTP requests to the Lambda handler."""

import http.server
import os
import socketserver
from urllib.parse import parse_qsl, urlsplit

from lambda_function import lambda_handler

PORT = int(os.environ.get("PORT", "3000"))


def to_proxy_event(method: str, raw_path: str, body: str) -> dict:
    """Build an API Gateway proxy event from a plain HTTP request."""
    parts = urlsplit(raw_path)
    return {
        "httpMethod": method,
        "path": parts.path,
        "queryStringParameters": dict(parse_qsl(parts.query)) or None,
        "body": body or None,
    }


class Handler(http.server.BaseHTTPRequestHandler):
    def _dispatch(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length).decode("utf-8") if length else ""
        response = lambda_handler(to_proxy_event(self.command, self.path, body), None)

        payload = response["body"].encode("utf-8")
        self.send_response(response["statusCode"])
        for name, value in response.get("headers", {}).items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    do_GET = _dispatch
    do_POST = _dispatch

    def log_message(self, format, *args):
        # Handler already logs each request as JSON
        pass


def main():
    url = f"http://localhost:{PORT}"
    print(f"Events API running at {url}")
    print("Press Ctrl+C to stop.\n")

    socketserver.TCPServer.allow_reuse_address = True
    with socketserver.TCPServer(("", PORT), Handler) as httpd:
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")


if __name__ == "__main__":
    main()
