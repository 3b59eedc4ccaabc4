"""
Services package for the catalog feed service

This package contains the fetch, decode, projection and rendering stages.
"""
from catalog_feeds.services.catalog_service import load_catalog
from catalog_feeds.services.channel_decoder import decode_channels
from catalog_feeds.services.guide_service import project_guide, render_guide
from catalog_feeds.services.playlist_service import project_playlist, render_playlist
from catalog_feeds.services.stream_list_service import project_stream_list
from catalog_feeds.services.upstream_fetcher import UpstreamFetcher

__all__ = [
    'load_catalog',
    'decode_channels',
    'project_guide',
    'render_guide',
    'project_playlist',
    'render_playlist',
    'project_stream_list',
    'UpstreamFetcher',
]
