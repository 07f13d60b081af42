"""
Site configuration extraction for wikitext parsing.

This package derives the parser configuration of a MediaWiki site from its
siteinfo response:

- siteinfo: siteinfo response data model and loading
- extract: namespace, extension tag, protocol, magic word and link trail extractors
- pcre: PCRE pattern literal parsing into ``hir`` syntax trees
- hir: syntax tree node kinds
- configuration: all extractors combined into one SiteConfiguration
- settings: YAML settings
"""

from wikisite.configuration import SiteConfiguration, build_configuration
from wikisite.siteinfo import Query, SiteInfoError, load_siteinfo, parse_siteinfo

__all__ = [
    "SiteConfiguration",
    "build_configuration",
    "Query",
    "SiteInfoError",
    "load_siteinfo",
    "parse_siteinfo",
]
