from __future__ import annotations

import logging
from typing import Iterable

from .models import ComponentDescriptor

logger = logging.getLogger("ngselectors.analyzer")


def deduplicate_components(descriptors: Iterable[ComponentDescriptor]) -> list[ComponentDescriptor]:
    """Collapse descriptors sharing a component name, keeping the most informative one.

    The first descriptor of a name holds its slot in the output order. A later
    one replaces it only when it carries strictly more selectors.
    """
    kept: dict[str, ComponentDescriptor] = {}
    for descriptor in descriptors:
        existing = kept.get(descriptor.name)
        if existing is None:
            kept[descriptor.name] = descriptor
            continue
        if _has_more_information(descriptor, existing):
            logger.info(
                "Duplicate component %s: %s replaces %s.",
                descriptor.name,
                descriptor.source_path,
                existing.source_path,
            )
            kept[descriptor.name] = descriptor
        else:
            logger.info("Duplicate component %s at %s ignored.", descriptor.name, descriptor.source_path)
    return list(kept.values())


def _has_more_information(candidate: ComponentDescriptor, existing: ComponentDescriptor) -> bool:
    # Also covers an empty existing descriptor against a non-empty candidate.
    return len(candidate.selectors) > len(existing.selectors)
