import os
import logging
from datetime import datetime

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.utils import secure_filename

from config import config
from event_ocr.env_config import ensure_env_loaded
from event_ocr.event_records import draft_to_event_record, merge_draft_into_record
from event_ocr.event_text_parser import parse_event_text
from event_ocr.image_event_processor import ImageEventProcessor, OcrError

# Ensure environment is loaded
ensure_env_loaded()

app = Flask(__name__)
app.config.from_object(config.get(os.getenv('FLASK_ENV', 'default'), config['default']))
CORS(app)

# Configure logging
def setup_logging():
    """Setup file and console logging"""
    # Create logs directory if it doesn't exist
    logs_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), app.config['LOG_DIR'])
    os.makedirs(logs_dir, exist_ok=True)

    # Configure logging format
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    # Setup file handler for all logs
    file_handler = logging.FileHandler(os.path.join(logs_dir, 'app.log'))
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(log_format))

    # Setup console handler for important logs
    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, app.config['LOG_LEVEL'].upper(), logging.INFO))
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    # Configure root logger
    logging.basicConfig(
        level=logging.DEBUG,
        format=log_format,
        handlers=[file_handler, console_handler]
    )

    # Create specific loggers
    app_logger = logging.getLogger('app')
    api_logger = logging.getLogger('api')
    ocr_logger = logging.getLogger('ocr')

    return app_logger, api_logger, ocr_logger

# Setup logging
app_logger, api_logger, ocr_logger = setup_logging()


def allowed_image(filename):
    """Check the upload's extension against the allowed image types"""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in app.config['ALLOWED_IMAGE_EXTENSIONS']


def get_image_processor(ocr_engine=None):
    """Create the OCR processor for a request"""
    return ImageEventProcessor(
        ocr_engine_preference=ocr_engine or app.config['OCR_ENGINE'],
        language=app.config['OCR_LANGUAGE']
    )


@app.errorhandler(413)
def image_too_large(e):
    return jsonify({'error': 'Image is too large'}), 413


@app.route('/api/health')
def health():
    return jsonify({'status': 'ok'})


# Image Upload and Event Extraction Endpoints
@app.route('/api/admin/upload-event-image', methods=['POST'])
def upload_event_image():
    """Upload an image (or point at one) and extract event information"""
    payload = request.get_json(silent=True) or {}
    ocr_engine = request.form.get('ocr_engine') or payload.get('ocr_engine')
    image_url = request.form.get('image_url') or payload.get('image_url')
    file = request.files.get('image')

    if file is None and not image_url:
        return jsonify({'error': 'No image file or image_url provided'}), 400

    file_path = None
    if file is not None:
        if file.filename == '':
            return jsonify({'error': 'No image file selected'}), 400

        # Validate file type
        if not allowed_image(file.filename):
            return jsonify({'error': 'Invalid file type. Allowed: PNG, JPG, JPEG, GIF, BMP, TIFF, WEBP'}), 400

        # Save uploaded file
        upload_dir = app.config['UPLOAD_DIR']
        os.makedirs(upload_dir, exist_ok=True)
        filename = f"event_image_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}_{secure_filename(file.filename)}"
        file_path = os.path.join(upload_dir, filename)
        file.save(file_path)

    try:
        processor = get_image_processor(ocr_engine)
        if file_path:
            result = processor.process_image(file_path)
        else:
            result = processor.process_image_url(image_url)
    except OcrError as e:
        ocr_logger.warning(f"OCR failed: {e}")
        return jsonify({'error': str(e)}), 502
    except Exception as e:
        app_logger.error(f"Error processing uploaded image: {e}")
        return jsonify({'error': str(e)}), 500
    finally:
        # Clean up uploaded file
        if file_path:
            try:
                os.remove(file_path)
            except OSError as e:
                app_logger.warning(f"Could not remove uploaded file {file_path}: {e}")

    api_logger.info(f"Extracted event draft via {result.engine}: {result.draft.name}")
    return jsonify({
        'success': True,
        'raw_text': result.raw_text,
        'engine': result.engine,
        'extracted_data': result.draft.to_dict(),
        'record': draft_to_event_record(result.draft, result.raw_text)
    })


@app.route('/api/admin/parse-event-text', methods=['POST'])
def parse_event_text_endpoint():
    """Re-derive the event draft from recognized text the operator edited"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'text' not in data:
        return jsonify({'error': 'JSON body with a "text" field is required'}), 400

    text = data.get('text')
    if text is not None and not isinstance(text, str):
        return jsonify({'error': '"text" must be a string'}), 400

    record = data.get('record')
    if record is not None and not isinstance(record, dict):
        return jsonify({'error': '"record" must be an object'}), 400

    draft = parse_event_text(text)
    response = {
        'success': True,
        'extracted_data': draft.to_dict()
    }

    if record is None:
        response['record'] = draft_to_event_record(draft, text)
    else:
        # Only fill fields the operator has not already set
        merged, filled = merge_draft_into_record(record, draft)
        merged['ocr_text'] = text or None
        response['record'] = merged
        response['filled_fields'] = filled

    return jsonify(response)


def main():
    """Run the development server"""
    port = int(os.getenv('PORT', app.config['APP_PORT']))
    app.run(host=app.config['APP_HOST'], port=port, debug=app.config['FLASK_DEBUG'])


if __name__ == '__main__':
    main()
