#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
HTTP transport to the device's REST surface.

Stateless apart from the session and the target address. Each
request builds its URL from the address at the moment it starts,
so the address may be changed between requests.
"""
from __future__ import annotations

import asyncio

import aiohttp

from pixeltree.errors import ProtocolError, RejectedError, TransportError, ValidationError
from pixeltree.log import Log, LOG_TRACE
from pixeltree.model import DeviceStatus, validate_brightness


# Address of the device when running as an access point
DEFAULT_BASE_URL = 'http://192.168.4.1'

DEFAULT_TIMEOUT = 5.0
DEFAULT_PROBE_TIMEOUT = 2.0

API_STATUS = '/api/led/status'
API_EFFECTS = '/api/led/effects'
API_PARAMS = '/api/led/params'
API_EFFECT = '/api/led/effect'
API_POWER = '/api/led/power'
API_BRIGHTNESS = '/api/led/brightness'


def normalize_base_url(address: str) -> str:
    """
    Turn a bare host (or host:port) into a base URL
    """
    if not isinstance(address, str) or address.strip() == '':
        raise ValueError('Device address must be a non-empty string')

    address = address.strip().rstrip('/')
    if '://' not in address:
        address = 'http://%s' % address
    return address


class DeviceGateway(object):
    """
    Request/response client for a single device
    """
    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = DEFAULT_TIMEOUT,
                 probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
                 session: aiohttp.ClientSession = None):
        self._logger = Log.get('pixeltree.gateway')
        self._base_url = normalize_base_url(base_url)
        self._timeout = timeout
        self._probe_timeout = probe_timeout
        self._session = session
        self._owns_session = session is None


    @property
    def base_url(self) -> str:
        """
        Address of the device. Changing it only affects requests
        which have not started yet.
        """
        return self._base_url


    @base_url.setter
    def base_url(self, value: str):
        self._base_url = normalize_base_url(value)
        self._logger.info('Device address set to %s', self._base_url)


    @property
    def timeout(self) -> float:
        return self._timeout


    @property
    def probe_timeout(self) -> float:
        return self._probe_timeout


    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session


    async def close(self):
        """
        Close the HTTP session, if we created it
        """
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


    async def __aenter__(self):
        return self


    async def __aexit__(self, *args):
        await self.close()


    async def _request(self, method: str, path: str, payload: dict = None,
                       timeout: float = None):
        url = self._base_url + path
        client_timeout = aiohttp.ClientTimeout(
            total=self._timeout if timeout is None else timeout)

        self._logger.debug('%s %s %s', method, url, payload if payload is not None else '')

        try:
            async with self._get_session().request(method, url, json=payload,
                                                   timeout=client_timeout) as resp:
                status = resp.status
                try:
                    body = await resp.json(content_type=None)
                except ValueError:
                    body = None

        except asyncio.TimeoutError as err:
            raise TransportError('Timed out talking to %s' % url) from err
        except aiohttp.ClientError as err:
            raise TransportError('Unable to reach %s: %s' % (url, err)) from err

        if self._logger.isEnabledFor(LOG_TRACE):
            self._logger.log(LOG_TRACE, '%s %s -> %d %r', method, url, status, body)

        if not 200 <= status < 300:
            message = body.get('error') if isinstance(body, dict) else None
            if not isinstance(message, str):
                message = 'HTTP %d' % status
            if 400 <= status < 500:
                raise RejectedError(message, status)
            raise ProtocolError('%s %s failed: %s' % (method, path, message), status=status)

        if body is None:
            raise ProtocolError('%s %s returned a non-JSON body' % (method, path), status=status)

        return body


    async def get_status(self, timeout: float = None) -> DeviceStatus:
        """
        Fetch power, brightness and the active effect
        """
        return DeviceStatus.from_json(await self._request('GET', API_STATUS, timeout=timeout))


    async def probe_status(self) -> DeviceStatus:
        """
        Fetch the status with the (shorter) liveness timeout
        """
        return await self.get_status(timeout=self._probe_timeout)


    async def get_effects(self) -> list:
        """
        Fetch the raw effect catalog
        """
        body = await self._request('GET', API_EFFECTS)
        if not isinstance(body, list):
            raise ProtocolError('Effect list is not an array')
        return body


    async def get_params(self) -> dict:
        """
        Fetch the current parameter values of the active effect
        """
        body = await self._request('GET', API_PARAMS)
        if not isinstance(body, dict):
            raise ProtocolError('Parameter response is not an object')

        params = body.get('params')
        if params is None:
            return {}
        if not isinstance(params, dict):
            raise ProtocolError('Parameter values are not an object')
        return params


    async def set_effect(self, effect_id: int) -> dict:
        """
        Switch the active effect
        """
        if isinstance(effect_id, bool) or not isinstance(effect_id, int) or effect_id < 0:
            raise ValidationError('Effect id must be a non-negative integer (was: %r)'
                                  % (effect_id,))
        return await self._request('POST', API_EFFECT, {'id': effect_id})


    async def set_params(self, params: dict) -> int:
        """
        Update one or more parameters of the active effect

        :return: the number of parameters the device applied
        """
        if not params:
            raise ValidationError('No parameters to update')

        body = await self._request('POST', API_PARAMS, dict(params))
        updated = body.get('updated') if isinstance(body, dict) else None
        if isinstance(updated, bool) or not isinstance(updated, int):
            raise ProtocolError('Parameter update response is missing a count')
        return updated


    async def set_power(self, on: bool) -> bool:
        """
        Switch the strip on or off
        """
        body = await self._request('POST', API_POWER, {'on': bool(on)})
        power = body.get('power') if isinstance(body, dict) else None
        return power if isinstance(power, bool) else bool(on)


    async def set_brightness(self, value: int, save: bool = False) -> int:
        """
        Set the global brightness

        :param value: level from 0 to 255
        :param save: ask the device to persist the level
        """
        value = validate_brightness(value)
        body = await self._request('POST', API_BRIGHTNESS, {'value': value, 'save': bool(save)})
        brightness = body.get('brightness') if isinstance(body, dict) else None
        if isinstance(brightness, bool) or not isinstance(brightness, int):
            return value
        return brightness
