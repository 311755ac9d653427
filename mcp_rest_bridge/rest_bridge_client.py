"""
REST Bridge Client

Turns a tool call into exactly one outbound HTTP request against the REST
route the tool is bound to, and normalizes the response.

Placement policy:
- ``:name`` tokens of the route path are filled from the call arguments,
  and those keys are dropped from the payload
- POST, PUT and PATCH send the remaining arguments as a JSON body
- every other verb appends the remaining non-null arguments as a query string
"""

import json
import re
import shlex
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlencode

import httpx

from .config import config
from .protocol.errors import BridgeHTTPError
from .registry.definitions import RouteDefinition
from .utils.logger import get_logger

logger = get_logger(__name__)

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

PATH_PARAM_PATTERN = re.compile(r":(\w+)")


@dataclass
class BridgeRequest:
    """A fully resolved outbound request"""
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[str] = None


def stringify(value: Any) -> str:
    """Render an argument for a URL the way a JSON client would"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(',', ':'))
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def path_param_names(path: str) -> List[str]:
    return PATH_PARAM_PATTERN.findall(path)


def substitute_path(path: str, arguments: Mapping[str, Any]) -> str:
    """Replace every ``:key`` token whose key is present in ``arguments``"""
    def _replace(match: "re.Match") -> str:
        name = match.group(1)
        if name in arguments:
            return stringify(arguments[name])
        return match.group(0)

    return PATH_PARAM_PATTERN.sub(_replace, path)


def _header(request: Any, name: str) -> Optional[str]:
    headers = getattr(request, "headers", None)
    if not headers:
        return None
    return headers.get(name)


class RestBridgeClient:
    """Client executing bridged tool calls against the hosting REST API"""

    def __init__(
        self,
        port: Optional[int] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        debug_curl: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the bridge client

        Args:
            port: Port used in the fallback base URL when the inbound request has no Host header
            timeout: Timeout in seconds for each outbound call
            user_agent: User-Agent sent on every outbound call
            debug_curl: Log an equivalent curl command for each call
            transport: Optional httpx transport, e.g. ``httpx.ASGITransport`` for in-process calls
        """
        self.port = port if port is not None else config.bridge.port
        self.timeout = httpx.Timeout(timeout if timeout is not None else config.bridge.request_timeout)
        self.user_agent = user_agent or config.bridge.user_agent
        self.debug_curl = debug_curl if debug_curl is not None else config.bridge.debug_curl
        self.transport = transport

    def base_url(self, request: Any = None) -> str:
        protocol = _header(request, "x-forwarded-proto") or "http"
        host = _header(request, "host") or f"localhost:{self.port}"
        return f"{protocol}://{host}"

    def build_request(
        self,
        route: RouteDefinition,
        arguments: Optional[Mapping[str, Any]] = None,
        request: Any = None
    ) -> BridgeRequest:
        """Resolve URL, headers and body for a call to ``route``"""
        args = dict(arguments) if isinstance(arguments, Mapping) else {}
        method = route.method.upper()

        url = f"{self.base_url(request)}{substitute_path(route.path, args)}"
        consumed = set(path_param_names(route.path))

        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent
        }
        authorization = _header(request, "authorization")
        if authorization:
            headers["Authorization"] = authorization

        body = None
        if method in BODY_METHODS:
            payload = {k: v for k, v in args.items() if k not in consumed}
            body = json.dumps(payload, separators=(',', ':'), ensure_ascii=False)
        else:
            query = [
                (k, stringify(v)) for k, v in args.items()
                if v is not None and k not in consumed
            ]
            if query:
                url += ('&' if '?' in url else '?') + urlencode(query)

        return BridgeRequest(method=method, url=url, headers=headers, body=body)

    def _generate_curl_command(self, outbound: BridgeRequest) -> str:
        """Generate curl command for debugging"""
        curl_parts = ['curl', '-X', outbound.method]
        for key, value in outbound.headers.items():
            if key.lower() != 'user-agent':
                curl_parts.extend(['-H', shlex.quote(f'{key}: {value}')])
        if outbound.body is not None:
            curl_parts.extend(['-d', shlex.quote(outbound.body)])
        curl_parts.append(shlex.quote(outbound.url))
        return ' '.join(curl_parts)

    async def call_endpoint(
        self,
        route: RouteDefinition,
        arguments: Optional[Mapping[str, Any]] = None,
        request: Any = None
    ) -> Any:
        """
        Execute one bridged call

        Returns:
            Decoded JSON when the response declares ``application/json``,
            otherwise the raw text body

        Raises:
            BridgeHTTPError: The endpoint answered with a non-2xx status
            httpx.HTTPError: Connection failures and timeouts
        """
        outbound = self.build_request(route, arguments, request)

        if self.debug_curl:
            logger.info(f"CURL: {self._generate_curl_command(outbound)}")
        logger.info(f"[REQUEST] {outbound.method} {outbound.url}")

        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True
        ) as client:
            response = await client.request(
                method=outbound.method,
                url=outbound.url,
                headers=outbound.headers,
                content=outbound.body
            )

        logger.info(f"[RESPONSE] {outbound.method} {outbound.url} -> {response.status_code}")

        if not response.is_success:
            logger.error(f"HTTP {response.status_code} for {outbound.method} {route.path}: {response.text}")
            raise BridgeHTTPError(response.status_code, response.text)

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            return response.json()
        return response.text
