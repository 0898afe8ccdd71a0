"""
Tests for stellar_crypto.logging_config.

Covers:
  - JSON and human console formats
  - Level handling
  - Handler replacement on repeated setup
  - JSON file handler
"""

import io
import json
import logging
import unittest

from stellar_crypto.logging_config import LOGGER_NAME, setup_logging


class TestSetupLogging(unittest.TestCase):

    def tearDown(self):
        logger = logging.getLogger(LOGGER_NAME)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)

    def test_json_format(self):
        stream = io.StringIO()
        setup_logging(level="INFO", fmt="json", stream=stream)
        logging.getLogger("stellar_crypto.test").info("hello %s", "world")
        entry = json.loads(stream.getvalue().strip())
        self.assertEqual(entry["level"], "INFO")
        self.assertEqual(entry["logger"], "stellar_crypto.test")
        self.assertEqual(entry["msg"], "hello world")
        self.assertIn("ts", entry)

    def test_human_format_without_colour_on_non_tty(self):
        stream = io.StringIO()
        setup_logging(level="DEBUG", fmt="human", stream=stream)
        logging.getLogger("stellar_crypto.test").debug("derived")
        line = stream.getvalue()
        self.assertIn("[DEBUG  ]", line)
        self.assertIn("stellar_crypto.test: derived", line)
        self.assertNotIn("\033[", line)

    def test_level_filters(self):
        stream = io.StringIO()
        setup_logging(level="warning", fmt="json", stream=stream)
        log = logging.getLogger("stellar_crypto.test")
        log.info("hidden")
        log.warning("shown")
        lines = stream.getvalue().strip().splitlines()
        self.assertEqual(len(lines), 1)
        self.assertEqual(json.loads(lines[0])["msg"], "shown")

    def test_unknown_level_falls_back_to_warning(self):
        logger = setup_logging(level="chatty", stream=io.StringIO())
        self.assertEqual(logger.level, logging.WARNING)

    def test_repeat_setup_replaces_handlers(self):
        setup_logging(stream=io.StringIO())
        logger = setup_logging(stream=io.StringIO())
        self.assertEqual(len(logger.handlers), 1)

    def test_exception_in_json(self):
        stream = io.StringIO()
        setup_logging(level="ERROR", fmt="json", stream=stream)
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logging.getLogger("stellar_crypto.test").exception("failed")
        entry = json.loads(stream.getvalue().strip())
        self.assertIn("RuntimeError: boom", entry["exception"])


def test_file_handler_writes_json(tmp_path):
    log_file = tmp_path / "nested" / "stellar.log"
    logger = setup_logging(level="INFO", fmt="human", log_file=str(log_file), stream=io.StringIO())
    try:
        logging.getLogger("stellar_crypto.file").info("to file")
        for handler in logger.handlers:
            handler.flush()
        entry = json.loads(log_file.read_text(encoding="utf-8").strip())
        assert entry["msg"] == "to file"
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
