import logging
import unittest

from utils import logging_utils
from utils.logging_utils import EnsureTagFilter, MaxLevelFilter, build_logging_config, get_tagged_logger


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        self.records.append(record)


class TestLoggingUtils(unittest.TestCase):
    def test_build_logging_config_has_expected_handlers_and_filters(self):
        cfg = build_logging_config(job_name="jobtest")
        self.assertIn("stdout", cfg["handlers"])
        self.assertIn("stderr", cfg["handlers"])
        self.assertEqual(cfg["filters"]["job_name"]["job_name"], "jobtest")
        self.assertEqual(cfg["loggers"]["urllib3"]["level"], "WARNING")

    def test_default_job_name(self):
        cfg = build_logging_config()
        self.assertEqual(cfg["filters"]["job_name"]["job_name"], "pinpoint")

    def test_get_tagged_logger_injects_tag(self):
        handler = _ListHandler()
        logger = get_tagged_logger("pinpoint.test.sample", tag="custom_tag")
        base_logger = logger.logger
        base_logger.setLevel(logging.DEBUG)
        base_logger.addHandler(handler)
        base_logger.propagate = False
        try:
            logger.info("hello world")
        finally:
            base_logger.removeHandler(handler)
            base_logger.propagate = True

        self.assertEqual(handler.records[-1].tag, "custom_tag")

    def test_default_tag_is_last_name_segment(self):
        logger = get_tagged_logger("pinpoint.data_sources.open_meteo_client")
        self.assertEqual(logger.extra["tag"], "open_meteo_client")

    def test_ensure_tag_filter_fills_missing_tag(self):
        record = logging.LogRecord("urllib3.connectionpool", logging.INFO, __file__, 1, "msg", None, None)
        self.assertTrue(EnsureTagFilter().filter(record))
        self.assertEqual(record.tag, "connectionpool")

    def test_max_level_filter(self):
        f = MaxLevelFilter(logging.INFO)
        info = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        warning = logging.LogRecord("x", logging.WARNING, __file__, 1, "msg", None, None)
        self.assertTrue(f.filter(info))
        self.assertFalse(f.filter(warning))

    def test_setup_logging_is_once_per_process(self):
        root = logging.getLogger()
        orig_handlers = root.handlers[:]
        orig_level = root.level
        try:
            logging_utils._CONFIGURED = False
            self.assertTrue(logging_utils.setup_logging(level="INFO", job_name="jobtest"))
            self.assertFalse(logging_utils.setup_logging(level="DEBUG"))
            self.assertTrue(
                any(
                    any(f.__class__.__name__ == "JobNameFilter" for f in h.filters)
                    for h in root.handlers
                )
            )
            self.assertTrue(logging_utils.setup_logging(level="DEBUG", override_existing=True))
            self.assertEqual(root.level, logging.DEBUG)
        finally:
            root.handlers = orig_handlers
            root.setLevel(orig_level)
            logging_utils._CONFIGURED = False


if __name__ == "__main__":
    unittest.main()
