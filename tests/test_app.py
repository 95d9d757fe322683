"""
Test suite for the event OCR service
"""

import unittest
import sys
import os
import io
import shutil
import tempfile
from unittest.mock import MagicMock, patch

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from app import app
from event_ocr.event_text_parser import parse_event_text
from event_ocr.image_event_processor import OcrError, OcrResult

FLYER = "ANNUAL HARVEST FESTIVAL\nSaturday, October 4, 2025\n10:00 AM - 4:00 PM"


class TestEventOcrApp(unittest.TestCase):
    """Test cases for the event OCR endpoints"""

    def setUp(self):
        """Set up test fixtures"""
        self.upload_dir = tempfile.mkdtemp()
        self.app = app
        self.app.config['TESTING'] = True
        self.app.config['UPLOAD_DIR'] = self.upload_dir
        self.client = self.app.test_client()

    def tearDown(self):
        """Clean up after tests"""
        shutil.rmtree(self.upload_dir, ignore_errors=True)

    def _processor(self):
        processor = MagicMock()
        result = OcrResult(raw_text=FLYER, draft=parse_event_text(FLYER), engine='tesseract')
        processor.process_image.return_value = result
        processor.process_image_url.return_value = result
        return processor

    def test_health(self):
        response = self.client.get('/api/health')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['status'], 'ok')

    def test_parse_text(self):
        """Test parsing text into a draft and a new record"""
        response = self.client.post('/api/admin/parse-event-text', json={'text': FLYER})
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertTrue(data['success'])
        self.assertEqual(data['extracted_data']['name'], 'ANNUAL HARVEST FESTIVAL')
        self.assertEqual(data['extracted_data']['start_date'], '2025-10-04')
        self.assertEqual(data['record']['slug'], 'annual-harvest-festival')
        self.assertEqual(data['record']['ocr_text'], FLYER)
        self.assertNotIn('filled_fields', data)

    def test_parse_text_into_record(self):
        """Test that typed fields are kept when merging"""
        response = self.client.post('/api/admin/parse-event-text', json={
            'text': FLYER,
            'record': {'name': 'Harvest Fest', 'start_date': ''}
        })
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data['record']['name'], 'Harvest Fest')
        self.assertEqual(data['record']['start_date'], '2025-10-04')
        self.assertEqual(data['record']['ocr_text'], FLYER)
        self.assertIn('start_date', data['filled_fields'])
        self.assertNotIn('name', data['filled_fields'])

    def test_parse_empty_text(self):
        response = self.client.post('/api/admin/parse-event-text', json={'text': ''})
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertTrue(all(value is None for value in data['extracted_data'].values()))

    def test_parse_text_bad_requests(self):
        """Test invalid parse requests"""
        for body in ({}, {'text': 42}, {'text': FLYER, 'record': 'not a record'}):
            response = self.client.post('/api/admin/parse-event-text', json=body)
            self.assertEqual(response.status_code, 400)
            self.assertIn('error', response.get_json())

    def test_upload_without_image(self):
        response = self.client.post('/api/admin/upload-event-image')
        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.get_json())

    def test_upload_invalid_file_type(self):
        response = self.client.post(
            '/api/admin/upload-event-image',
            data={'image': (io.BytesIO(b'not an image'), 'flyer.txt')},
            content_type='multipart/form-data'
        )
        self.assertEqual(response.status_code, 400)

    @patch('app.get_image_processor')
    def test_upload_image(self, mock_get_processor):
        """Test a successful upload and cleanup of the saved file"""
        processor = self._processor()
        mock_get_processor.return_value = processor

        response = self.client.post(
            '/api/admin/upload-event-image',
            data={'image': (io.BytesIO(b'fake png'), 'flyer.png'), 'ocr_engine': 'tesseract'},
            content_type='multipart/form-data'
        )
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertTrue(data['success'])
        self.assertEqual(data['engine'], 'tesseract')
        self.assertEqual(data['raw_text'], FLYER)
        self.assertEqual(data['extracted_data']['name'], 'ANNUAL HARVEST FESTIVAL')
        self.assertEqual(data['record']['status'], 'draft')

        mock_get_processor.assert_called_once_with('tesseract')
        saved_path = processor.process_image.call_args[0][0]
        self.assertFalse(os.path.exists(saved_path))
        self.assertEqual(os.listdir(self.upload_dir), [])

    @patch('app.get_image_processor')
    def test_upload_image_url(self, mock_get_processor):
        processor = self._processor()
        mock_get_processor.return_value = processor

        response = self.client.post('/api/admin/upload-event-image',
                                    json={'image_url': 'https://example.org/flyer.png'})
        self.assertEqual(response.status_code, 200)
        processor.process_image_url.assert_called_once_with('https://example.org/flyer.png')

    @patch('app.get_image_processor')
    def test_upload_ocr_failure(self, mock_get_processor):
        processor = MagicMock()
        processor.process_image.side_effect = OcrError('No OCR engine could read the image')
        mock_get_processor.return_value = processor

        response = self.client.post(
            '/api/admin/upload-event-image',
            data={'image': (io.BytesIO(b'fake png'), 'flyer.png')},
            content_type='multipart/form-data'
        )
        self.assertEqual(response.status_code, 502)
        self.assertIn('error', response.get_json())
        self.assertEqual(os.listdir(self.upload_dir), [])


if __name__ == '__main__':
    unittest.main()
