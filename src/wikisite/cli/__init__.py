"""
Command-line interface entry points for wikisite.

Entry points:
- wsconfig: Build a site's parser configuration from its siteinfo response
"""
