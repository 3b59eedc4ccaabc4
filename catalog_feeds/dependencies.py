"""
Request dependencies

The settings object, the resolved field policy and the upstream fetcher are
built once in create_app() and stored on app.state; handlers receive them
through these FastAPI dependencies instead of reading the environment.
"""
from typing import Annotated

from fastapi import Depends, Request

from catalog_feeds.config import CustomSettings
from catalog_feeds.field_policy import FieldPolicy
from catalog_feeds.services.upstream_fetcher import UpstreamFetcher


def get_settings(request: Request) -> CustomSettings:
    return request.app.state.settings


def get_field_policy(request: Request) -> FieldPolicy:
    return request.app.state.field_policy


def get_fetcher(request: Request) -> UpstreamFetcher:
    return request.app.state.fetcher


SettingsDep = Annotated[CustomSettings, Depends(get_settings)]
FieldPolicyDep = Annotated[FieldPolicy, Depends(get_field_policy)]
FetcherDep = Annotated[UpstreamFetcher, Depends(get_fetcher)]
