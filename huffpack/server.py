"""
server.py

HTTP front end for the huffpack codec. Request bodies are raw bytes:
POST /compress returns a container, POST /decompress returns the original
data. Codec statistics travel in X-Huffpack-* response headers.
"""

import io
from datetime import datetime, timezone

from flask import Flask, Response, jsonify, request

from .compression import Compressor
from .config_loader import configure_logging, load_config
from .errors import CompressionError


def create_app(config=None):
    config = config if config is not None else load_config()
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config["server"]["max_content_length"]
    app.config["HUFFPACK"] = config
    compressor = Compressor(config)

    def codec_response(payload, stats):
        response = Response(payload, mimetype="application/octet-stream")
        response.headers["X-Huffpack-Original-Size"] = str(stats.original_size)
        response.headers["X-Huffpack-Compressed-Size"] = str(stats.compressed_size)
        response.headers["X-Huffpack-Symbols"] = str(stats.distinct_symbols)
        return response

    def run_codec(operation):
        sink = io.BytesIO()
        try:
            stats = operation(io.BytesIO(request.get_data()), sink)
        except CompressionError as e:
            app.logger.warning("%s rejected: %s", request.path, e)
            return jsonify({"error": str(e), "type": type(e).__name__}), 400
        except OSError as e:
            app.logger.error("%s failed: %s", request.path, e)
            return jsonify({"error": str(e), "type": "IOFailure"}), 500
        return codec_response(sink.getvalue(), stats)

    @app.route("/compress", methods=["POST"])
    def compress():
        """Compress the raw request body into a container"""
        return run_codec(compressor.compress_stream)

    @app.route("/decompress", methods=["POST"])
    def decompress():
        """Restore the original bytes from a container in the request body"""
        return run_codec(compressor.decompress_stream)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Health check endpoint"""
        return jsonify({
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "degenerate_policy": config["codec"]["degenerate_policy"],
            "endpoints": [
                "/compress",
                "/decompress",
                "/debug_routes",
                "/health"
            ]
        })

    @app.route("/debug_routes", methods=["GET"])
    def debug_routes():
        """Debug endpoint to list all registered routes"""
        routes = []
        for rule in app.url_map.iter_rules():
            routes.append({
                "endpoint": rule.endpoint,
                "methods": sorted(rule.methods),
                "rule": str(rule)
            })
        return jsonify({"routes": routes})

    @app.after_request
    def after_request(response):
        response.headers.add("Access-Control-Allow-Origin", "*")
        response.headers.add("Access-Control-Allow-Headers", "Content-Type,Authorization")
        response.headers.add("Access-Control-Allow-Methods", "GET,POST,OPTIONS")
        return response

    return app


if __name__ == "__main__":
    config = load_config()
    configure_logging(config)
    app = create_app(config)
    app.logger.info("Starting huffpack server on %s:%s", config["server"]["host"], config["server"]["port"])
    app.run(host=config["server"]["host"], port=config["server"]["port"])
