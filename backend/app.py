from flask import Flask, Response, request, jsonify, stream_with_context
from flask_cors import CORS
import os
import json
import logging

# Setup Logging
log_file = os.environ.get('LOG_FILE', 'server.log')
logging.basicConfig(
    filename=log_file,
    level=logging.DEBUG,
    format='%(asctime)s %(levelname)s: %(message)s'
)
logging.info("Server starting up...")

from backend.statement_etl import (
    ParsedTransaction,
    ParsingError,
    StatementPipeline,
    UnsupportedFormat,
    validate_transactions,
)


app = Flask(__name__)
cors_origins = os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://localhost:3000').split(',')
CORS(app, resources={r"/*": {"origins": [o.strip() for o in cors_origins if o.strip()]}})

MAX_UPLOAD_MB = float(os.environ.get('MAX_UPLOAD_MB', 10))

pipeline = StatementPipeline()


def _error_status(exc: ParsingError) -> int:
    return 415 if isinstance(exc, UnsupportedFormat) else 422


def _read_upload():
    """Returns (content, mime_type, filename) or a (response, status) error tuple."""
    if 'file' not in request.files:
        return None, (jsonify({"error": "No file part"}), 400)

    file = request.files['file']
    if file.filename == '':
        return None, (jsonify({"error": "No selected file"}), 400)

    content = file.read()
    size_mb = len(content) / (1024 * 1024)
    if size_mb > MAX_UPLOAD_MB:
        return None, (jsonify({"error": f"File too large ({size_mb:.1f}MB). Max is {MAX_UPLOAD_MB:g}MB."}), 400)

    return (content, file.mimetype or '', file.filename), None


@app.route('/health', methods=['GET'])
def health():
    return jsonify({"status": "ok"})


@app.route('/parse', methods=['POST'])
def parse_document():
    upload, error = _read_upload()
    if error:
        return error
    content, mime_type, filename = upload

    try:
        table = pipeline.parse(content, mime_type, filename)
    except ParsingError as e:
        logging.warning(f"Parse rejected for {filename}: {type(e).__name__}: {e}")
        return jsonify({"error": str(e), "error_type": type(e).__name__}), _error_status(e)

    report = validate_transactions(table.transactions)
    return jsonify({
        **table.to_dict(),
        "validation": report.to_dict(),
    })


@app.route('/convert/document', methods=['POST'])
def convert_document():
    upload, error = _read_upload()
    if error:
        return error
    content, mime_type, filename = upload

    def generate():
        yield json.dumps({"p": 5, "status": "Initializing..."}) + "\n"

        final_result = None
        for p, msg, res in pipeline.process(content, mime_type, filename):
            if res:
                final_result = res
            else:
                yield json.dumps({"p": p, "status": msg}) + "\n"

        if not final_result or not final_result["success"]:
            error_msg = final_result.get("error", "Unknown parse error") if final_result else "Pipeline failed"
            yield json.dumps({
                "status": "failed",
                "error": error_msg,
                "error_type": final_result.get("error_type") if final_result else None,
            }) + "\n"
            return

        yield json.dumps({
            "status": "success",
            "table": final_result["table"],
            "validation": final_result["validation"],
            "stats": final_result["stats"],
        }) + "\n"

    return Response(stream_with_context(generate()), mimetype='application/x-ndjson')


@app.route('/validate', methods=['POST'])
def validate():
    data = request.get_json(silent=True) or {}
    items = data.get('transactions')
    if not isinstance(items, list):
        return jsonify({"error": "transactions list required"}), 400

    try:
        transactions = [ParsedTransaction.from_dict(item) for item in items]
    except (ValueError, TypeError, AttributeError) as e:
        return jsonify({"error": f"Invalid transaction payload: {e}"}), 400

    return jsonify(validate_transactions(transactions).to_dict())


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app.run(host='0.0.0.0', port=port, debug=os.environ.get('FLASK_DEBUG', 'False') == 'True')
