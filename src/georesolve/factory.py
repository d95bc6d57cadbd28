"""Build resolvers, caches and credentials from a deployment profile."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv

from .cache import DURABILITY_PRESETS, GeoCache
from .credentials import CredentialLookup
from .geocoding import (
    BoundingBox,
    DEFAULT_BBOX,
    GeoCoder,
    GeocodingProvider,
    LocationIQProvider,
    MapQuestProvider,
)
from .provider import DEFAULT_TIMEOUT_SEC
from .routing import (
    DEMO_OSRM_URL,
    LOCAL_OSRM_URL,
    MAX_TABLE_SIZE,
    GeoRouter,
    NullSupervisor,
    OpenRouteServiceProvider,
    OSRMProvider,
    OSRMServerSupervisor,
    RoutingProvider,
)
from .routing.supervisor import ServerSupervisor
from .tools.config_loader import ConfigLoader, apply_env_overrides

Profile = Union[str, Dict[str, Any], None]


def _load_profile(profile: Profile) -> Dict[str, Any]:
    if isinstance(profile, dict):
        return profile
    if profile:
        return apply_env_overrides(ConfigLoader.load_profile(profile))
    return ConfigLoader.load_default_or_env_profile()


def _plausibility_settings(profile: Dict[str, Any]) -> BoundingBox:
    bbox = (profile.get("plausibility") or {}).get("bbox")
    if not bbox:
        return DEFAULT_BBOX
    return BoundingBox(
        min_lat=float(bbox["min_lat"]),
        min_lng=float(bbox["min_lng"]),
        max_lat=float(bbox["max_lat"]),
        max_lng=float(bbox["max_lng"]),
    )


def _geocoding_settings(profile: Dict[str, Any]) -> Dict[str, Any]:
    geocoding_cfg = profile.get("geocoding") or {}
    return {
        "providers": geocoding_cfg.get("providers") or ["mapquest", "locationiq"],
        "timeout": float(geocoding_cfg.get("timeout_sec", DEFAULT_TIMEOUT_SEC)),
        "mapquest_bbox": geocoding_cfg.get("mapquest_bbox"),
    }


def _routing_settings(profile: Dict[str, Any]) -> Dict[str, Any]:
    routing_cfg = profile.get("routing") or {}
    return {
        "providers": routing_cfg.get("providers") or ["osrm-local", "osrm-demo", "openrouteservice"],
        "local_osrm_url": routing_cfg.get("local_osrm_url", LOCAL_OSRM_URL),
        "demo_osrm_url": routing_cfg.get("demo_osrm_url", DEMO_OSRM_URL),
        "profile": routing_cfg.get("profile", "driving"),
        "timeout": float(routing_cfg.get("timeout_sec", DEFAULT_TIMEOUT_SEC)),
        "max_table_size": routing_cfg.get("max_table_size", MAX_TABLE_SIZE),
        "local_server": routing_cfg.get("local_server") or {},
    }


def load_credentials(profile: Profile = None, dotenv: bool = True) -> CredentialLookup:
    """
    Credential lookup for the key file named in the profile.

    Args:
        profile: Profile name, mapping or None for the default/env profile
        dotenv: Load a ``.env`` file into the environment first, so
            GEORESOLVE_KEY_* entries in it are picked up
    """
    if dotenv:
        load_dotenv()
    cfg = _load_profile(profile)
    path = (cfg.get("credentials") or {}).get("file")
    credentials = CredentialLookup(path=path)
    credentials.load()
    return credentials


def open_cache(profile: Profile = None, path: Optional[Union[str, Path]] = None) -> GeoCache:
    """Open the durable cache configured in the profile."""
    cfg = _load_profile(profile)
    cache_cfg = cfg.get("cache") or {}

    durability_name = cache_cfg.get("durability", "one_month")
    if durability_name not in DURABILITY_PRESETS:
        raise ValueError(
            f"Unknown cache durability '{durability_name}'. "
            f"Available: {', '.join(DURABILITY_PRESETS)}"
        )
    durability = DURABILITY_PRESETS[durability_name]
    return GeoCache.open(path or cache_cfg.get("path", ".georesolve/cache.sqlite"), durability)


def _geocoding_provider(name: str, settings: Dict[str, Any], credentials: CredentialLookup) -> GeocodingProvider:
    if name == "mapquest":
        return MapQuestProvider(
            credentials=credentials,
            timeout=settings["timeout"],
            bounding_box=settings["mapquest_bbox"],
        )
    if name == "locationiq":
        return LocationIQProvider(credentials=credentials, timeout=settings["timeout"])
    raise ValueError(f"Unknown geocoding provider '{name}'")


def _routing_provider(name: str, settings: Dict[str, Any], credentials: CredentialLookup) -> RoutingProvider:
    if name == "osrm-local":
        return OSRMProvider(
            settings["local_osrm_url"],
            name="OSRM local",
            profile=settings["profile"],
            timeout=settings["timeout"],
        )
    if name == "osrm-demo":
        return OSRMProvider(
            settings["demo_osrm_url"],
            name="OSRM demo",
            profile=settings["profile"],
            timeout=settings["timeout"],
        )
    if name == "openrouteservice":
        return OpenRouteServiceProvider(credentials=credentials, timeout=settings["timeout"])
    raise ValueError(f"Unknown routing provider '{name}'")


def _matrix_provider(providers: List[RoutingProvider], settings: Dict[str, Any]) -> OSRMProvider:
    """The local OSRM server; duration matrices never go to a public service."""
    local_url = settings["local_osrm_url"].rstrip("/")
    for provider in providers:
        if isinstance(provider, OSRMProvider) and provider.base_url == local_url:
            return provider
    return OSRMProvider(
        local_url,
        name="OSRM local",
        profile=settings["profile"],
        timeout=settings["timeout"],
    )


def _supervisor(settings: Dict[str, Any], verbose: bool) -> ServerSupervisor:
    server_cfg = settings["local_server"]
    if not server_cfg.get("enabled"):
        return NullSupervisor()
    return OSRMServerSupervisor(
        executable=server_cfg["executable"],
        data_file=server_cfg["data_file"],
        host=server_cfg.get("host", "127.0.0.1"),
        port=int(server_cfg.get("port", 7880)),
        algorithm=server_cfg.get("algorithm", "MLD"),
        verbose=verbose,
    )


def build_geocoder(profile: Profile = None, credentials: Optional[CredentialLookup] = None) -> GeoCoder:
    """GeoCoder wired according to the profile."""
    cfg = _load_profile(profile)
    credentials = credentials if credentials is not None else load_credentials(cfg)
    settings = _geocoding_settings(cfg)

    providers: List[GeocodingProvider] = [
        _geocoding_provider(name, settings, credentials) for name in settings["providers"]
    ]
    return GeoCoder(
        providers=providers,
        credentials=credentials,
        bbox=_plausibility_settings(cfg),
        verbose=bool(cfg.get("verbose", False)),
    )


def build_router(profile: Profile = None, credentials: Optional[CredentialLookup] = None) -> GeoRouter:
    """GeoRouter wired according to the profile."""
    cfg = _load_profile(profile)
    credentials = credentials if credentials is not None else load_credentials(cfg)
    settings = _routing_settings(cfg)
    verbose = bool(cfg.get("verbose", False))

    providers: List[RoutingProvider] = [
        _routing_provider(name, settings, credentials) for name in settings["providers"]
    ]
    return GeoRouter(
        providers=providers,
        matrix_provider=_matrix_provider(providers, settings),
        supervisor=_supervisor(settings, verbose),
        credentials=credentials,
        verbose=verbose,
        timeout=settings["timeout"],
        max_table_size=settings["max_table_size"],
    )
