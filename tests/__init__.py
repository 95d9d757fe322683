"""
Event OCR test suite

Run with `python -m unittest discover tests` or pytest. No OCR engine needs to be
installed; the Tesseract and Vision clients are mocked.
"""

import unittest
import sys
import os

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

def run_tests(pattern='test_*.py'):
    """Discover and run the event OCR tests"""
    loader = unittest.TestLoader()
    suite = loader.discover(os.path.dirname(__file__), pattern=pattern)

    result = unittest.TextTestRunner(verbosity=2).run(suite)
    return result.wasSuccessful()

if __name__ == '__main__':
    sys.exit(0 if run_tests(*sys.argv[1:2]) else 1)
