# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import pytest

from callhints.config import HintConfig
from callhints.registry import Registry, reset_default_registry


@pytest.fixture(autouse=True)
def _isolated_default_registry():
	"""
	Every test starts with a fresh process-wide registry.

	Hints registered through the module-level helpers would otherwise leak
	between tests (the default registry is append-only).
	"""
	previous = reset_default_registry(Registry(config=HintConfig()))
	yield
	reset_default_registry(previous)


@pytest.fixture
def registry() -> Registry:
	return Registry(config=HintConfig())
