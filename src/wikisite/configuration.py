"""
Parser configuration for one site.

Gathers every extractor's result for a siteinfo ``Query`` into a single
``SiteConfiguration`` that a wikitext parser can hold for a session.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

from wikisite import extract
from wikisite.settings import Settings
from wikisite.siteinfo import Query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SiteConfiguration:
    category_namespaces: FrozenSet[str] = field(default_factory=frozenset)
    extension_tags: FrozenSet[str] = field(default_factory=frozenset)
    file_namespaces: FrozenSet[str] = field(default_factory=frozenset)
    link_trail_characters: FrozenSet[str] = field(default_factory=frozenset)
    magic_words: FrozenSet[str] = field(default_factory=frozenset)
    protocols: FrozenSet[str] = field(default_factory=frozenset)
    redirect_magic_words: FrozenSet[str] = field(default_factory=frozenset)

    def to_dict(self) -> Dict[str, List[str]]:
        """Return each set as a sorted list, for stable serialized output."""
        return {
            'category_namespaces': sorted(self.category_namespaces),
            'extension_tags': sorted(self.extension_tags),
            'file_namespaces': sorted(self.file_namespaces),
            'link_trail_characters': sorted(self.link_trail_characters),
            'magic_words': sorted(self.magic_words),
            'protocols': sorted(self.protocols),
            'redirect_magic_words': sorted(self.redirect_magic_words),
        }

    def summary(self) -> str:
        """Return a human-readable summary of the configuration."""
        return (
            f"  - {len(self.category_namespaces)} category namespace names\n"
            f"  - {len(self.file_namespaces)} file namespace names\n"
            f"  - {len(self.extension_tags)} extension tags\n"
            f"  - {len(self.protocols)} protocols\n"
            f"  - {len(self.magic_words)} magic words\n"
            f"  - {len(self.redirect_magic_words)} redirect magic words\n"
            f"  - {len(self.link_trail_characters)} link trail characters"
        )


def build_configuration(query: Query, settings: Optional[Settings] = None) -> SiteConfiguration:
    """
    Build the parser configuration for a site.

    Any extractor error propagates unchanged; there is no partial result.
    """
    if settings is None:
        settings = Settings()

    config = SiteConfiguration(
        category_namespaces=frozenset(extract.namespaces(query, settings.category_namespace)),
        extension_tags=frozenset(extract.extension_tags(query)),
        file_namespaces=frozenset(extract.namespaces(query, settings.file_namespace)),
        link_trail_characters=frozenset(extract.link_trail(query)),
        magic_words=frozenset(extract.magic_words(query)),
        protocols=frozenset(extract.protocols(query)),
        redirect_magic_words=frozenset(extract.magic_words_redirect(query)),
    )
    logger.info(f"Built configuration for {query.general.sitename or 'site'}:\n{config.summary()}")
    return config
