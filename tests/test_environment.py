import importlib
import logging
import pkgutil

import pytest

import pyerosion as pe


def test_initialise_refuses_to_run_twice():
	assert pe.environment.is_initialised()
	with pytest.raises(RuntimeError):
		pe.environment.initialise()


def test_setup_logging_writes_to_file(tmp_path):
	log_file = tmp_path / "erosion.log"
	pe.logging_config.setup_logging(logging.DEBUG, str(log_file))
	logger = logging.getLogger("pyerosion")
	try:
		logging.getLogger("pyerosion.erosion.engine").debug("seed %d", 5)
		for handler in logger.handlers:
			handler.flush()
		text = log_file.read_text(encoding = "utf-8")
		assert "Logging initialized." in text
		assert "seed 5" in text
		assert len(logger.handlers) == 2

		# Reconfiguring replaces the handlers instead of stacking them
		pe.logging_config.setup_logging(logging.INFO)
		assert len(logger.handlers) == 1
	finally:
		for handler in logger.handlers:
			handler.close()
		logger.handlers.clear()
		logger.setLevel(logging.NOTSET)


def test_every_module_is_documented():
	for info in pkgutil.walk_packages(pe.__path__, prefix = "pyerosion."):
		module = importlib.import_module(info.name)
		assert module.__doc__ and module.__doc__.strip(), info.name
