#!/usr/bin/env python3
import argparse
import json
import logging
import shlex
import sys
import threading
import time
from http.server import HTTPServer, BaseHTTPRequestHandler
from typing import Dict, Any, List, Optional

from prometheus_client import CONTENT_TYPE_LATEST

from .cli import add_api_arguments, filter_modules, setup_logging
from .client import NodeClient
from .core import Collector

log = logging.getLogger("siad-exporter")


class CollectorDaemon:
    def __init__(self, config: Dict[str, Any], collector: Optional[Collector] = None):
        self.config = config
        self.collector = collector or Collector(
            NodeClient(
                addr=config.get('api_addr'),
                password=config.get('api_password'),
                timeout=config.get('timeout'),
            ),
            modules=config.get('modules'),
        )
        self.latest_results: Dict[str, Any] = {}
        self.lock = threading.Lock()
        self.running = False
        self.stop_event = threading.Event()
        self.worker_thread: Optional[threading.Thread] = None
        self.httpd: Optional[HTTPServer] = None

    def run_collectors(self) -> Dict[str, Any]:
        """Run one refresh cycle and keep its snapshot for /metadata."""
        debug = self.config.get('debug', False)
        try:
            results = self.collector.refresh(debug=debug)
            snapshot = self.collector.snapshot(results)
        except Exception as e:
            log.error(f"Failed to run collectors: {e}", exc_info=debug)
            snapshot = {
                "error": str(e),
                "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S%z")
            }

        with self.lock:
            self.latest_results = snapshot
        return snapshot

    def _worker_loop(self):
        """Background worker that refreshes the gauges on a schedule."""
        interval = self.config.get('interval', 30)
        log.debug(f"Starting worker loop with {interval}s interval")

        # start() has already run the first collection.
        next_run = time.time() + interval
        while not self.stop_event.wait(max(0, next_run - time.time())):
            start_time = time.time()
            log.debug("Running scheduled collection")
            self.run_collectors()
            log.debug(f"Collection completed in {time.time() - start_time:.2f} seconds")
            next_run = start_time + interval

    def start(self):
        """Start the refresh worker and serve HTTP until interrupted."""
        if self.running:
            log.warning("Daemon is already running")
            return

        self.running = True
        self.stop_event.clear()

        log.info("Running initial collection")
        self.run_collectors()

        self.worker_thread = threading.Thread(
            target=self._worker_loop,
            name="collector-worker",
            daemon=True
        )
        self.worker_thread.start()

        addr = (self.config.get('host', ''), self.config.get('port', 9983))
        httpd = HTTPServer(addr, self._make_handler())
        self.httpd = httpd

        log.info(f"Starting HTTP server on {addr[0]}:{addr[1]}")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            log.info("Shutting down...")
        finally:
            self.stop()

    def stop(self):
        """Stop the daemon and clean up."""
        if not self.running:
            return
        self.running = False
        self.stop_event.set()
        if self.worker_thread:
            self.worker_thread.join(timeout=5)
        if self.httpd:
            self.httpd.shutdown()
            self.httpd.server_close()

    def _make_handler(self):
        """Create a request handler with access to this daemon instance."""
        daemon = self

        class RequestHandler(BaseHTTPRequestHandler):
            def do_GET(self):
                path = self.path.split('?', 1)[0]
                if path == '/metrics':
                    self._handle_metrics()
                elif path == '/metadata':
                    self._handle_metadata()
                elif path == '/healthz':
                    self._handle_healthz()
                else:
                    self._handle_not_found()

            def _set_headers(self, status_code=200, content_type="application/json"):
                self.send_response(status_code)
                self.send_header("Content-Type", content_type)
                self.send_header("Cache-Control", "no-store")
                self.end_headers()

            def _handle_metrics(self):
                if daemon.config.get('refresh_on_scrape'):
                    daemon.run_collectors()
                data = daemon.collector.gauges.exposition()
                self._set_headers(content_type=CONTENT_TYPE_LATEST)
                self.wfile.write(data)

            def _handle_metadata(self):
                with daemon.lock:
                    data = json.dumps(daemon.latest_results, indent=2).encode('utf-8')
                self._set_headers()
                self.wfile.write(data)

            def _handle_healthz(self):
                self._set_headers(content_type="text/plain")
                self.wfile.write(b"ok\n")

            def _handle_not_found(self):
                self._set_headers(404)
                self.wfile.write(json.dumps({
                    "error": "Not found",
                    "endpoints": ["/metrics", "/metadata", "/healthz"]
                }).encode('utf-8'))

            def log_message(self, fmt, *args):
                log.debug(f"{self.address_string()} - {fmt % args}")

        return RequestHandler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="siad-exporterd", description='siad Prometheus exporter daemon')
    add_api_arguments(parser)
    parser.add_argument('--host', default='0.0.0.0',
                        help='Host to bind the HTTP server to (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=9983,
                        help='Port to run the HTTP server on (default: 9983)')
    parser.add_argument('--interval', type=int, default=30,
                        help='Refresh interval in seconds (default: 30)')
    parser.add_argument('--refresh-on-scrape', action='store_true',
                        help='Also refresh the gauges on every /metrics request')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug output (overrides --log-level)')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Logging level (default: INFO, ignored if --debug is used)')
    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    if args is None and len(sys.argv) == 2:
        args = shlex.split(sys.argv[1])
    parsed_args = build_parser().parse_args(args)

    setup_logging(debug=parsed_args.debug, level=parsed_args.log_level)
    if parsed_args.debug:
        log.debug(f"Command line arguments: {sys.argv}")

    modules = filter_modules(parsed_args.modules, log)
    if not modules:
        log.error("No valid modules specified")
        return 1

    daemon = CollectorDaemon({
        'modules': modules,
        'api_addr': parsed_args.api_addr,
        'api_password': parsed_args.api_password,
        'timeout': parsed_args.timeout,
        'host': parsed_args.host,
        'port': parsed_args.port,
        'interval': parsed_args.interval,
        'refresh_on_scrape': parsed_args.refresh_on_scrape,
        'debug': parsed_args.debug,
    })

    try:
        daemon.start()
    except KeyboardInterrupt:
        log.info("Shutting down...")
    except Exception as e:
        log.error(f"Fatal error: {e}")
        return 1
    finally:
        daemon.stop()
    return 0


if __name__ == '__main__':
    sys.exit(main())
