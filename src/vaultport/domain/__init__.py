"""Domain layer — path keys, exclusion rules, tags, headers, link syntax.

This layer depends only on stdlib and ruamel.yaml.
It must never import from services, infrastructure, commands, or config.
"""
