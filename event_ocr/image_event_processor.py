#!/usr/bin/env python3
"""
Image Event Processor

This module runs OCR on an event flyer or poster (Google Cloud Vision when
credentials are available, Tesseract otherwise) and hands the recognized text to
the event text parser to build an event draft.
"""

import argparse
import io
import json
import logging
import os
import sys
import tempfile
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple, Union

import pytesseract
import requests
from google.cloud import vision
from PIL import Image

from event_ocr.env_config import get_ocr_config, has_google_credentials
from event_ocr.event_records import draft_to_event_record
from event_ocr.event_text_parser import EventDraft, parse_event_text

# Setup logging
logger = logging.getLogger(__name__)

ImageSource = Union[str, bytes]


class OcrError(Exception):
    """Raised when an image cannot be fetched or no OCR engine can read it"""


@dataclass
class OcrResult:
    """Recognized text and the draft parsed from it"""
    raw_text: str
    draft: EventDraft
    engine: str


def setup_google_credentials() -> Optional[str]:
    """Write GOOGLE_APPLICATION_CREDENTIALS_JSON to a file the Vision client can use"""
    json_creds = os.getenv('GOOGLE_APPLICATION_CREDENTIALS_JSON')
    if not json_creds or os.getenv('GOOGLE_APPLICATION_CREDENTIALS'):
        return None

    try:
        creds_data = json.loads(json_creds)
    except ValueError as e:
        logger.warning(f"GOOGLE_APPLICATION_CREDENTIALS_JSON is not valid JSON: {e}")
        return None

    with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
        json.dump(creds_data, f)
        creds_path = f.name

    os.environ['GOOGLE_APPLICATION_CREDENTIALS'] = creds_path
    logger.info("Google credentials set up from JSON environment variable")
    return creds_path


class ImageEventProcessor:
    """Runs OCR on event images and parses the text into event drafts"""

    def __init__(self, ocr_engine_preference: Optional[str] = None, language: Optional[str] = None):
        self.ocr_config = get_ocr_config()
        self.ocr_engine_preference = (ocr_engine_preference or self.ocr_config['engine']).lower()
        self.language = language or self.ocr_config['language']
        self.vision_client = None

        if self.ocr_config['tesseract_cmd']:
            pytesseract.pytesseract.tesseract_cmd = self.ocr_config['tesseract_cmd']

        self.ocr_engine = self._setup_ocr_engine()

    def _setup_ocr_engine(self) -> str:
        """Setup OCR engine (Google Vision preferred, Tesseract fallback)"""
        preference = self.ocr_engine_preference
        if preference not in ('auto', 'google_vision', 'tesseract'):
            logger.warning(f"Unknown OCR engine preference '{preference}', using auto")
            preference = 'auto'

        if preference == 'tesseract':
            logger.info("Using Tesseract OCR engine")
            return 'tesseract'

        # Only try Google Cloud Vision when asked to or when credentials exist
        if preference == 'google_vision' or has_google_credentials():
            setup_google_credentials()
            try:
                self.vision_client = vision.ImageAnnotatorClient()
                logger.info("Using Google Cloud Vision OCR engine")
                return 'google_vision'
            except Exception as e:
                logger.warning(f"Google Vision client creation failed: {e}")

        logger.info("Using Tesseract OCR engine")
        return 'tesseract'

    def _load_image_bytes(self, image: ImageSource) -> bytes:
        if isinstance(image, (bytes, bytearray)):
            return bytes(image)
        try:
            with open(image, 'rb') as image_file:
                return image_file.read()
        except OSError as e:
            raise OcrError(f"Could not read image {image}: {e}") from e

    def fetch_image(self, url: str) -> bytes:
        """Download an image for OCR"""
        try:
            response = requests.get(url, timeout=self.ocr_config['fetch_timeout'])
            response.raise_for_status()
        except requests.RequestException as e:
            raise OcrError(f"Could not download image from {url}: {e}") from e

        content_type = response.headers.get('Content-Type', '')
        if content_type and not content_type.startswith('image/'):
            raise OcrError(f"URL did not return an image (Content-Type: {content_type})")

        logger.info(f"Downloaded {len(response.content)} bytes from {url}")
        return response.content

    def _extract_text_google_vision(self, content: bytes) -> str:
        """Extract text using Google Cloud Vision API"""
        response = self.vision_client.text_detection(image=vision.Image(content=content))
        if response.error.message:
            raise OcrError(f"Google Vision API error: {response.error.message}")

        texts = response.text_annotations
        return texts[0].description if texts else ""

    def _extract_text_tesseract(self, content: bytes) -> str:
        """Extract text using Tesseract with a uniform-block page layout"""
        image = Image.open(io.BytesIO(content))
        if image.mode not in ('RGB', 'L'):
            image = image.convert('RGB')

        config = f"--psm {self.ocr_config['tesseract_psm']} --oem {self.ocr_config['tesseract_oem']}"
        return pytesseract.image_to_string(image, lang=self.language, config=config).strip()

    def _recognize(self, content: bytes) -> Tuple[str, str]:
        """Run OCR and report which engine produced the text"""
        vision_answered = False

        if self.ocr_engine == 'google_vision':
            try:
                text = self._extract_text_google_vision(content)
                if text.strip():
                    logger.info("Successfully extracted text using Google Vision")
                    return text, 'google_vision'
                vision_answered = True
                logger.warning("Google Vision returned empty text, falling back to Tesseract")
            except Exception as e:
                logger.warning(f"Google Vision failed: {e}, falling back to Tesseract")

        try:
            return self._extract_text_tesseract(content), 'tesseract'
        except Exception as e:
            if vision_answered:
                logger.warning(f"Tesseract fallback failed: {e}")
                return "", 'google_vision'
            logger.error(f"Tesseract OCR error: {e}")
            raise OcrError(f"No OCR engine could read the image: {e}") from e

    def extract_text_from_image(self, image: ImageSource) -> str:
        """Extract text from an image path or raw image bytes"""
        text, _ = self._recognize(self._load_image_bytes(image))
        return text

    def process_image(self, image: ImageSource, today: Optional[date] = None) -> OcrResult:
        """Main method to process an image and extract event data"""
        raw_text, engine = self._recognize(self._load_image_bytes(image))
        logger.info(f"Extracted text ({engine}): {raw_text[:200]}...")

        draft = parse_event_text(raw_text, today)
        logger.info(f"Extracted event data: {draft}")
        return OcrResult(raw_text=raw_text, draft=draft, engine=engine)

    def process_image_url(self, url: str, today: Optional[date] = None) -> OcrResult:
        return self.process_image(self.fetch_image(url), today)

    def process_text(self, text: str, today: Optional[date] = None) -> EventDraft:
        """Parse text that was recognized earlier or edited by hand"""
        return parse_event_text(text, today)


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Extract an event draft from a flyer image or its text')
    parser.add_argument('source', help='Image path, image URL, or text file with --text')
    parser.add_argument('--text', action='store_true', help='Treat source as a text file of recognized text')
    parser.add_argument('--engine', choices=['auto', 'google_vision', 'tesseract'], help='OCR engine to use')
    parser.add_argument('--today', type=date.fromisoformat,
                        help='Reference date (YYYY-MM-DD) for dates printed without a year')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Print the draft extracted from an image or text file as JSON"""
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s', stream=sys.stderr)
    args = _parse_args(argv)

    if args.text:
        try:
            with open(args.source, 'r', encoding='utf-8') as f:
                raw_text = f.read()
        except OSError as e:
            logger.error(f"Could not read text file {args.source}: {e}")
            return 1
        draft = parse_event_text(raw_text, args.today)
        engine = None
    else:
        processor = ImageEventProcessor(ocr_engine_preference=args.engine)
        try:
            if args.source.startswith(('http://', 'https://')):
                result = processor.process_image_url(args.source, args.today)
            else:
                result = processor.process_image(args.source, args.today)
        except OcrError as e:
            logger.error(str(e))
            return 1
        raw_text, draft, engine = result.raw_text, result.draft, result.engine

    print(json.dumps({
        'raw_text': raw_text,
        'engine': engine,
        'extracted_data': draft.to_dict(),
        'record': draft_to_event_record(draft, raw_text),
    }, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
