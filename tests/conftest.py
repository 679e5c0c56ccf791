"""Pytest configuration and shared fixtures for the block2html test suite.

This module provides shared fixtures, test configuration, and helpers
that are used across the entire test suite.
"""

import logging
import os
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from block2html.ast import Block
from block2html.handlers import register_builtin_handlers
from block2html.logging_utils import PACKAGE_LOGGER_NAME
from block2html.options import ConversionOptions
from block2html.registry import HandlerRegistry

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "property: Property-based tests using Hypothesis")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def reset_package_logger():
    """Undo CLI logging configuration so caplog keeps receiving records."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


def make_block(block_type: str = "core/paragraph", markup: str = "", **attributes: Any) -> Block:
    """Build a block with one raw segment and the given attributes."""
    return Block(block_type=block_type, attributes=attributes, raw_segments=[markup] if markup else [])


@pytest.fixture
def block_factory():
    """Provide :func:`make_block` to tests."""
    return make_block


@pytest.fixture
def builtin_registry() -> HandlerRegistry:
    """Provide an isolated registry holding the built-in handlers only.

    Returns
    -------
    HandlerRegistry
        Fresh registry, independent of the default ``handler_registry``.

    """
    registry = HandlerRegistry()
    register_builtin_handlers(registry)
    return registry


@pytest.fixture
def empty_registry() -> HandlerRegistry:
    """Provide an isolated registry with no handlers."""
    return HandlerRegistry()


@pytest.fixture
def default_options() -> ConversionOptions:
    """Provide default conversion options."""
    return ConversionOptions()


@pytest.fixture
def wordpress_post() -> list[dict]:
    """Provide a small post in the WordPress ``parse_blocks()`` shape.

    Returns
    -------
    list of dict
        Heading, paragraph, a group holding a paragraph, and an image.

    """
    return [
        {
            "blockName": "core/heading",
            "attrs": {"level": 1},
            "innerBlocks": [],
            "innerHTML": "<h1>Welcome</h1>",
            "innerContent": ["<h1>Welcome</h1>"],
        },
        {
            "blockName": "core/paragraph",
            "attrs": {"align": "center"},
            "innerBlocks": [],
            "innerHTML": '<p class="has-text-align-center">Hello world</p>',
            "innerContent": ['<p class="has-text-align-center">Hello world</p>'],
        },
        {
            "blockName": "core/group",
            "attrs": [],
            "innerBlocks": [
                {
                    "blockName": "core/paragraph",
                    "attrs": {},
                    "innerBlocks": [],
                    "innerHTML": "<p>Inside</p>",
                    "innerContent": ["<p>Inside</p>"],
                }
            ],
            "innerHTML": '<div class="wp-block-group"></div>',
            "innerContent": ['<div class="wp-block-group">', None, "</div>"],
        },
        {
            "blockName": "core/image",
            "attrs": {"url": "https://cdn.example.com/a.png", "alt": "A"},
            "innerBlocks": [],
            "innerHTML": '<figure class="wp-block-image"><img src="https://cdn.example.com/a.png" alt="A"/></figure>',
            "innerContent": [
                '<figure class="wp-block-image"><img src="https://cdn.example.com/a.png" alt="A"/></figure>'
            ],
        },
    ]
