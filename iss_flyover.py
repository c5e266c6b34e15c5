#!/usr/bin/env python3
"""
ISS Flyover Lookup
Finds the next ISS passes over the caller's location by chaining three
lookups: public IP -> coordinates -> pass times.
"""

import configparser
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

import requests

logger = logging.getLogger(__name__)

DEFAULT_IP_URL = 'https://api.ipify.org?format=json'
DEFAULT_GEO_URL = 'http://ipwho.is/'
DEFAULT_FLYOVER_URL = 'https://iss-flyover.herokuapp.com/json/'
DEFAULT_TIMEOUT = 30.0

# One pass entry exactly as the prediction service returns it
PassWindow = Dict[str, Any]


class FlyoverError(Exception):
    """Base class for lookup failures raised by this module"""

    def __init__(self, message: str, stage: str):
        super().__init__(message)
        self.stage = stage


class UnexpectedStatusError(FlyoverError):
    """HTTP response arrived but the status code was not 200"""

    def __init__(self, message: str, stage: str, status_code: int, body: str):
        super().__init__(message, stage)
        self.status_code = status_code
        self.body = body


class UnexpectedBodyError(FlyoverError):
    """Service answered but the JSON body lacks the field this stage reads"""

    def __init__(self, message: str, stage: str, body: Any):
        super().__init__(message, stage)
        self.body = body


class UpstreamFailureError(FlyoverError):
    """Geolocation service answered but reported success as false"""

    def __init__(self, message: str, upstream_message: Optional[str], ip: str):
        super().__init__(message, 'geo')
        self.upstream_message = upstream_message
        self.ip = ip


@dataclass
class Coordinates:
    """Latitude/longitude in WGS-84 degrees, taken as-is from upstream"""
    latitude: float
    longitude: float

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'Coordinates':
        return cls(latitude=data['latitude'], longitude=data['longitude'])

    def as_dict(self) -> Dict[str, float]:
        return {'latitude': self.latitude, 'longitude': self.longitude}


@dataclass
class Config:
    """Configuration class to hold all settings"""
    ip_url: str = DEFAULT_IP_URL
    geo_url: str = DEFAULT_GEO_URL
    flyover_url: str = DEFAULT_FLYOVER_URL
    timeout: float = DEFAULT_TIMEOUT
    timezone_str: str = 'UTC'


def load_config(path: str = 'config.ini') -> Config:
    """Load configuration from config.ini, falling back to defaults"""
    config = configparser.ConfigParser()
    read_files = config.read(path)
    if not read_files:
        logger.debug(f"No config file at {path}, using defaults")

    return Config(
        ip_url=config.get('endpoints', 'ip_url', fallback=DEFAULT_IP_URL),
        geo_url=config.get('endpoints', 'geo_url', fallback=DEFAULT_GEO_URL),
        flyover_url=config.get('endpoints', 'flyover_url', fallback=DEFAULT_FLYOVER_URL),
        timeout=config.getfloat('http', 'timeout', fallback=DEFAULT_TIMEOUT),
        timezone_str=config.get('display', 'timezone', fallback='UTC'),
    )


_STAGE_NAMES = {'ip': 'IP', 'geo': 'coordinates', 'passes': 'ISS pass times'}


def _field(data: Any, key: str, stage: str) -> Any:
    """Read ``key`` from a decoded JSON body or raise UnexpectedBodyError"""
    try:
        return data[key]
    except (KeyError, TypeError, IndexError) as e:
        msg = f"Response body has no '{key}' field when fetching {_STAGE_NAMES[stage]}: {json.dumps(data)}"
        logger.warning(msg)
        raise UnexpectedBodyError(msg, stage, data) from e


class FlyoverLookup:
    """Runs the IP -> coordinates -> pass times chain against one HTTP session"""

    def __init__(self, config: Optional[Config] = None, session=None):
        self.config = config or Config()
        # Only a session created here is closed by close()
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def close(self):
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None):
        # Transport errors propagate unchanged
        return self.session.get(url, params=params, timeout=self.config.timeout)

    def fetch_my_ip(self) -> str:
        """Return the caller's public IP address, e.g. "162.245.144.188" """
        logger.debug(f"Fetching public IP from {self.config.ip_url}")
        response = self._get(self.config.ip_url)

        if response.status_code != 200:
            msg = f"Status Code {response.status_code} when fetching IP. Response: {response.text}"
            logger.warning(msg)
            raise UnexpectedStatusError(msg, 'ip', response.status_code, response.text)

        ip = _field(response.json(), 'ip', 'ip')
        logger.info(f"Public IP: {ip}")
        return ip

    def fetch_coords_by_ip(self, ip: str) -> Coordinates:
        """Return the coordinates the geolocation service reports for ``ip``.

        The HTTP status code is not checked here: the service's own
        ``success`` flag decides the outcome.
        """
        url = f"{self.config.geo_url.rstrip('/')}/{ip}"
        logger.debug(f"Geolocating {ip} via {url}")
        response = self._get(url)
        data = response.json()

        if not isinstance(data, dict):
            msg = f"Response body is not a JSON object when fetching coordinates for IP {ip}: {json.dumps(data)}"
            logger.warning(msg)
            raise UnexpectedBodyError(msg, 'geo', data)

        if not data.get('success'):
            reported_ip = data.get('ip')
            message = (f"Success status was {json.dumps(data.get('success'))}. "
                       f"Server message says: {data.get('message')} when fetching for IP {reported_ip}")
            if reported_ip != ip:
                message += f" (queried {ip})"
            logger.warning(message)
            raise UpstreamFailureError(message, data.get('message'), ip)

        coords = Coordinates(latitude=_field(data, 'latitude', 'geo'),
                             longitude=_field(data, 'longitude', 'geo'))
        logger.info(f"Location for {ip}: {coords.latitude}, {coords.longitude}")
        return coords

    def fetch_iss_flyover_times(self, coords: Union[Coordinates, Mapping[str, Any]]) -> List[PassWindow]:
        """Return the upcoming passes for ``coords`` in upstream order, untouched"""
        if not isinstance(coords, Coordinates):
            coords = Coordinates.from_mapping(coords)

        params = {'lat': coords.latitude, 'lon': coords.longitude}
        logger.debug(f"Fetching ISS passes from {self.config.flyover_url} with {params}")
        response = self._get(self.config.flyover_url, params=params)

        if response.status_code != 200:
            msg = f"Status Code {response.status_code} when fetching ISS pass times: {response.text}"
            logger.warning(msg)
            raise UnexpectedStatusError(msg, 'passes', response.status_code, response.text)

        passes = _field(response.json(), 'response', 'passes')
        logger.info(f"Received ISS pass times for {coords.latitude}, {coords.longitude}")
        return passes

    def next_iss_times_for_my_location(self) -> List[PassWindow]:
        """Chain the three lookups; the first failure aborts the rest"""
        ip = self.fetch_my_ip()
        coords = self.fetch_coords_by_ip(ip)
        return self.fetch_iss_flyover_times(coords)


def fetch_my_ip(config: Optional[Config] = None, session=None) -> str:
    with FlyoverLookup(config, session) as lookup:
        return lookup.fetch_my_ip()


def fetch_coords_by_ip(ip: str, config: Optional[Config] = None, session=None) -> Coordinates:
    with FlyoverLookup(config, session) as lookup:
        return lookup.fetch_coords_by_ip(ip)


def fetch_iss_flyover_times(coords, config: Optional[Config] = None, session=None) -> List[PassWindow]:
    with FlyoverLookup(config, session) as lookup:
        return lookup.fetch_iss_flyover_times(coords)


def next_iss_times_for_my_location(config: Optional[Config] = None, session=None) -> List[PassWindow]:
    with FlyoverLookup(config, session) as lookup:
        return lookup.next_iss_times_for_my_location()
