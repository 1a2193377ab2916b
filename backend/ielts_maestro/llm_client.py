from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, Optional
from .settings import settings

logger = logging.getLogger(__name__)


class UpstreamError(RuntimeError):
	"""The generative API could not be reached or returned an unusable response."""


class AnthropicClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		timeout: Optional[float] = None,
	) -> None:
		self.api_key = api_key or settings.anthropic_api_key
		self.model = model or settings.anthropic_model
		self.base_url = base_url or settings.anthropic_base_url
		self._headers = {
			"x-api-key": self.api_key or "",
			"anthropic-version": settings.anthropic_version,
			"Content-Type": "application/json",
		}
		self._client = httpx.AsyncClient(timeout=timeout or settings.llm_timeout_seconds)

	async def invoke(self, system: str, prompt: str, *, max_tokens: int, temperature: float) -> str:
		if not self.api_key:
			raise UpstreamError("ANTHROPIC_API_KEY is not configured")
		payload: Dict[str, Any] = {
			"model": self.model,
			"max_tokens": max_tokens,
			"temperature": temperature,
			"system": system,
			"messages": [{"role": "user", "content": prompt}],
		}
		try:
			r = await self._client.post(self.base_url, headers=self._headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			logger.error("Anthropic API returned %s: %s", http_err.response.status_code, http_err.response.text)
			raise UpstreamError(f"Anthropic API returned {http_err.response.status_code}") from http_err
		except httpx.RequestError as net_err:
			logger.error("Anthropic API request failed: %s", net_err)
			raise UpstreamError(f"Anthropic API request failed: {net_err}") from net_err
		try:
			data = r.json()
			return data["content"][0]["text"]
		except (ValueError, KeyError, IndexError, TypeError) as err:
			raise UpstreamError(f"Unexpected Anthropic response: {r.text}") from err

	async def aclose(self) -> None:
		await self._client.aclose()


async def get_llm_client():
	client = AnthropicClient()
	try:
		yield client
	finally:
		await client.aclose()
