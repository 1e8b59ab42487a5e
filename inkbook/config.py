"""
Configuration settings for the inkbook content pipeline
"""

import logging
import os
import re

logger = logging.getLogger(__name__)


class InkbookConfig:
    """Configuration class for content transformation settings."""

    # Display sizes in pixels, keyed by ImageSizeClass name
    IMAGE_SIZES = {
        'STANDARD': (300, 225),
        'PORTRAIT': (225, 300),
        'LANDSCAPE': (400, 225),
        'DIAGRAM': (500, 350),
        'FLOWCHART': (550, 400),
        'ARCHITECTURE': (600, 450),
        'SEQUENCE': (500, 400),
    }

    # Alt text keywords that mark an image as diagram-like
    DIAGRAM_KEYWORDS = (
        'diagram', 'flowchart', 'chart', 'graph', 'architecture',
        'flow', 'process', 'sequence', 'workflow', 'system', 'structure',
    )

    # Sub-classification checks, in priority order
    DIAGRAM_PRIORITY = (
        ('flowchart', 'FLOWCHART'),
        ('architecture', 'ARCHITECTURE'),
        ('sequence', 'SEQUENCE'),
    )

    # Non-diagram images pick one of these at random
    PHOTO_SIZE_CLASSES = ('STANDARD', 'PORTRAIT', 'LANDSCAPE')

    # Serialized LangChain objects leaked by the generation backend
    ARTIFACT_PATTERN = re.compile(
        r'\{"lc":\d+,"type":"constructor","id":\["langchain_core"[^}]+\}'
    )

    # Inline image syntax: ![alt](url)
    IMAGE_PATTERN = re.compile(r'!\[(.*?)\]\((.*?)\)')

    # Tags that already form a block; such fragments are never re-wrapped
    BLOCK_TAGS = (
        'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'p', 'ul', 'ol', 'li',
        'figure', 'div', 'blockquote', 'pre', 'table', 'hr', 'section',
    )

    # Presentation classes used by the styled preview
    STYLE_CLASSES = {
        'h1': 'text-3xl font-bold mb-5 text-gray-900',
        'h2': 'text-2xl font-bold mb-4 text-gray-800',
        'h3': 'text-xl font-bold mb-3 text-gray-800',
        'h4': 'text-lg font-bold mb-2 text-gray-700',
        'p': 'mb-4 text-gray-700 leading-relaxed',
        'strong': 'font-semibold text-gray-900',
        'em': 'italic text-gray-800',
        'ul': 'list-disc pl-6 mb-4 space-y-1',
        'ol': 'list-decimal pl-6 mb-4 space-y-1',
        'li': 'mb-1',
        'hr': 'my-6 border-t-2 border-gray-300',
    }

    # Markdown rendering settings for the preview surface
    MARKDOWN_EXTENSIONS = [
        'fenced_code',
        'tables',
        'footnotes',
        'attr_list',
        'def_list',
        'sane_lists',
    ]

    DEFAULT_LOG_LEVEL = 'WARNING'

    @classmethod
    def get_image_seed(cls):
        """Get the classifier seed from INKBOOK_IMAGE_SEED, if set."""
        raw = os.environ.get('INKBOOK_IMAGE_SEED')
        if raw is None or not raw.strip():
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring non-integer INKBOOK_IMAGE_SEED=%r", raw)
            return None

    @classmethod
    def get_log_level(cls) -> str:
        """Get the log level name, checking environment variables."""
        level = os.environ.get('INKBOOK_LOG_LEVEL', cls.DEFAULT_LOG_LEVEL).upper()
        if level not in logging.getLevelNamesMapping():
            return cls.DEFAULT_LOG_LEVEL
        return level

    @classmethod
    def get_image_size(cls, size_class_name: str) -> tuple:
        """Return the (width, height) pair for a size class name."""
        return cls.IMAGE_SIZES[size_class_name]
