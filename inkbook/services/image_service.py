"""Image classification service.

Maps an image's alt text to a size category and display dimensions.
Diagram-like images get a fixed size per diagram kind; other images
get one of the photo sizes at random.
"""

import logging
import random
from typing import Optional

from ..config import InkbookConfig
from ..domain import ImageClassification, ImageSizeClass, coerce_text

logger = logging.getLogger(__name__)


class ImageClassifier:
    """Classifies images by alt text.

    The random generator used for non-diagram images is injectable so
    callers can get reproducible sizes. Without one, the generator is
    seeded from INKBOOK_IMAGE_SEED when set, otherwise from the OS.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        config: type[InkbookConfig] = InkbookConfig,
    ) -> None:
        """Initialize the classifier.

        Args:
            rng: Random generator for photo sizes.
            config: Configuration holding keywords and sizes.
        """
        self._config = config
        self._rng = rng if rng is not None else random.Random(config.get_image_seed())

    def is_diagram(self, alt_text: object) -> bool:
        """Check whether alt text names a diagram-like image."""
        text = coerce_text(alt_text).lower()
        return any(keyword in text for keyword in self._config.DIAGRAM_KEYWORDS)

    def classify(self, alt_text: object) -> ImageSizeClass:
        """Determine the size class for an image.

        Diagram kinds are checked in priority order, so alt text such as
        "architecture flowchart" resolves to FLOWCHART.
        """
        text = coerce_text(alt_text).lower()

        if self.is_diagram(text):
            for keyword, class_name in self._config.DIAGRAM_PRIORITY:
                if keyword in text:
                    return ImageSizeClass(class_name)
            return ImageSizeClass.DIAGRAM

        return ImageSizeClass(self._rng.choice(self._config.PHOTO_SIZE_CLASSES))

    def classify_and_size(self, alt_text: object) -> ImageClassification:
        """Classify an image and return its class with (width, height)."""
        size_class = self.classify(alt_text)
        result = ImageClassification.for_class(size_class)
        logger.debug(
            "Classified image %r as %s (%dx%d)",
            coerce_text(alt_text),
            size_class.value,
            result.width,
            result.height,
        )
        return result


_default_classifier: Optional[ImageClassifier] = None


def get_default_classifier() -> ImageClassifier:
    """Return the shared classifier, creating it on first use."""
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = ImageClassifier()
    return _default_classifier


def is_diagram(alt_text: object) -> bool:
    """Check whether alt text names a diagram-like image."""
    return get_default_classifier().is_diagram(alt_text)


def classify_and_size(
    alt_text: object, rng: Optional[random.Random] = None
) -> ImageClassification:
    """Classify an image by alt text.

    Args:
        alt_text: The image's alt text.
        rng: Optional random generator for non-diagram images.

    Returns:
        ImageClassification of (size_class, width, height).
    """
    if rng is None:
        return get_default_classifier().classify_and_size(alt_text)
    return ImageClassifier(rng=rng).classify_and_size(alt_text)
