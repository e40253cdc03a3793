from flask import Flask, request, jsonify
from flask_cors import CORS

import minilang

app = Flask(__name__)
app.config.update(
    MAX_CONTENT_LENGTH=64 * 1024,  # source text is small; reject anything bigger
)
app.config.from_prefixed_env()  # FLASK_* environment overrides
CORS(app)  # allow cross-origin requests from the phase viewer


def serialize_result(result):
    """
    Serialize a CompilationResult for the phase viewer
    """
    data = result.to_dict()
    # drop the EOF sentinel the same way the token panel always has
    if data["tokens"]:
        data["tokens"] = [t for t in data["tokens"] if t["kind"] != "EOF"]
    data["errors"] = [d.format() for d in result.diagnostics]
    return data


@app.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"})


@app.route("/compile", methods=["POST"])
def compile_code():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get("code", ""), str):
        return jsonify({"success": False, "errors": ["Request body must be JSON with a string 'code' field"]}), 400
    code = data.get("code", "")
    try:
        result = minilang.compile_source(code)
        app.logger.debug("compiled %d characters, success=%s", len(code), result.success)
        return jsonify(serialize_result(result))
    except Exception as e:
        app.logger.exception("compile endpoint failed")
        return jsonify({
            "success": False,
            "tokens": None,
            "ast": None,
            "ir": None,
            "optimizedIr": None,
            "code": None,
            "diagnostics": [],
            "errors": [f"Unexpected error: {str(e)}"],
        }), 500


if __name__ == "__main__":
    app.run(debug=True)
