"""Logging setup unit tests"""

import logging

from formrules import log


def test_setup_creates_log_directory(tmp_path):
    logfile = tmp_path / "logs" / "formrules.log"
    try:
        log.setup(logfile)
        logging.getLogger("formrules.test").info("hello")

        assert logfile.parent.is_dir()
        assert "hello" in logfile.read_text()
    finally:
        for handler in list(logging.getLogger("formrules").handlers):
            handler.close()
            logging.getLogger("formrules").removeHandler(handler)


def test_setup_leaves_default_config_untouched(tmp_path):
    try:
        log.setup(tmp_path / "other.log")
        assert log.LOGGING_CONFIG["handlers"]["file"]["filename"] == "data/formrules.log"
    finally:
        for handler in list(logging.getLogger("formrules").handlers):
            handler.close()
            logging.getLogger("formrules").removeHandler(handler)
