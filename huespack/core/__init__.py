"""
Core data structures and catalog management for huespack.

Modules:
- models: Resource models (AudioResource, ImageResource) and metadata records
- constants: Beat/alignment grammars, pack layout names, PCM format
- errors: Exception hierarchy for catalog and decode failures
- metadata: XML metadata parsing (songs.xml, images.xml, info.xml)
- pack: ResourcePack catalog
- persistence: Catalog snapshot I/O (.hcat format)
- settings: User settings (~/.huespack/settings.json)
"""
