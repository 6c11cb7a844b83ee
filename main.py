from flask import Flask, request, jsonify
from flask_cors import CORS
from fee_engine import FeeProcessor
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes so the browser calculator can call the API
CORS(app)

# Initialize the fee processor
processor = FeeProcessor()


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Fee Proposal Calculator API",
        "version": "1.0",
        "endpoints": {
            "fee": "/fee [POST]",
            "basket": "/basket [POST]",
            "apply_target": "/basket/apply_target [POST]",
            "sacap": "/sacap [POST]",
            "bim": "/bim [POST]",
            "hourly": "/hourly [POST]",
            "snapshot": "/snapshot [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


def _run(label, handler):
    """
    Parse the JSON body, run one processor step and map errors to responses
    """
    try:
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        logger.info(f"Processing {label}")

        result = handler(input_data)

        logger.info(f"{label} processed successfully")

        return jsonify(result), 200

    except (ValueError, KeyError, TypeError, AttributeError) as e:
        # Validation errors from engine
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during processing",
            "status": "failed"
        }), 500


@app.route("/fee", methods=["POST"])
def single_fee():
    """Base fee for one discipline"""
    return _run("discipline fee", processor.calculate_single_fee)


@app.route("/basket", methods=["POST"])
def basket():
    """Apportion the basket of fees"""
    return _run("basket of fees", processor.process_basket_from_dict)


@app.route("/basket/apply_target", methods=["POST"])
def basket_apply_target():
    """Convert the basket target into a global discount"""
    return _run("basket target", processor.apply_target_from_dict)


@app.route("/sacap", methods=["POST"])
def sacap():
    return _run("SACAP stages", processor.process_sacap_from_dict)


@app.route("/bim", methods=["POST"])
def bim():
    return _run("BIM estimate", processor.process_bim_from_dict)


@app.route("/hourly", methods=["POST"])
def hourly():
    return _run("hourly billing", processor.process_hourly_from_dict)


@app.route("/snapshot", methods=["POST"])
def snapshot():
    """Full fee snapshot across every section"""
    return _run("fee snapshot", processor.process_snapshot_from_dict)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
