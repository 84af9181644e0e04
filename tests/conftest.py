from __future__ import annotations

import logging
from typing import Iterator

import pytest

from tauria.extractor import Extractor
from tauria.syntax.parser import RustParser


@pytest.fixture
def rust_parser() -> RustParser:
    """Provide a fresh tree-sitter backed Rust parser."""
    return RustParser()


@pytest.fixture
def extractor(rust_parser: RustParser) -> Extractor:
    """Provide an extractor running with the default configuration."""
    return Extractor(parser=rust_parser)


@pytest.fixture(autouse=True)
def _reset_tauria_logger() -> Iterator[None]:
    """Undo configure_logging so caplog keeps seeing tauria records."""
    yield
    logger = logging.getLogger("tauria")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
