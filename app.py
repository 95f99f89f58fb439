from flask import Flask, request, jsonify

from config import setup_logging
from printing.errors import ErrorKind
from services.print_service import print_from_request

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def create_app(print_options: dict | None = None):
    """print_options se pasa tal cual a print_from_request (timeout, allowed, ...)."""
    app = Flask(__name__)
    options = dict(print_options or {})

    @app.after_request
    def add_cors(resp):
        resp.headers.update(CORS_HEADERS)
        return resp

    @app.errorhandler(405)
    def method_not_allowed(_err):
        return jsonify(success=False, error="Only POST method allowed"), 405

    @app.get("/health")
    def health():
        return jsonify(status="ok")

    # OPTIONS (preflight CORS) lo responde Flask automáticamente: 200, cuerpo vacío
    @app.post("/api/print")
    def print_ticket():
        # Cuerpo JSON sin importar Content-Type (text/plain evita el preflight)
        data = request.get_json(force=True, silent=True)
        result = print_from_request(data, **options)
        if result.success:
            status = 200
        elif result.error_kind is ErrorKind.VALIDATION:
            status = 400
        else:
            status = 500
        return jsonify(result.to_response()), status

    return app


if __name__ == "__main__":
    setup_logging()
    app = create_app()
    # dev server
    app.run(host="0.0.0.0", port=8000, debug=True)
