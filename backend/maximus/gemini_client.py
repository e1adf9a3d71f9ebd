from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, Optional, Tuple
from .settings import settings

logger = logging.getLogger(__name__)


def _candidate_text(data: Dict[str, Any]) -> str:
	return data["candidates"][0]["content"]["parts"][0]["text"]


def _choice_text(data: Dict[str, Any]) -> str:
	return data["choices"][0]["message"]["content"]


class GeminiClient:
	"""Text-only Gemini caller with an optional OpenRouter fallback.

	One client per oracle call; close it with ``aclose`` or ``async with``.
	"""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		self.base_url = base_url or self._endpoint()
		timeout = httpx.Timeout(settings.gemini_timeout_seconds)
		self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
		self._openrouter_api_key = settings.openrouter_api_key
		self._fallback_client: Optional[httpx.AsyncClient] = None
		if self._openrouter_api_key:
			self._fallback_client = httpx.AsyncClient(timeout=timeout, transport=transport)

	def _endpoint(self) -> str:
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			return (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}"
				f"/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
		return f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"

	def _auth(self) -> Tuple[Dict[str, str], Dict[str, str]]:
		# AI Studio takes the key as a query parameter, Vertex Express as a header
		if self.provider == "vertex":
			return {}, {"x-goog-api-key": self.api_key}
		return {"key": self.api_key}, {}

	async def __aenter__(self) -> "GeminiClient":
		return self

	async def __aexit__(self, *exc_info: Any) -> None:
		await self.aclose()

	async def generate(
		self,
		prompt: str,
		*,
		thinking_budget: Optional[int] = None,
		json_mode: bool = False,
	) -> str:
		payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
		generation: Dict[str, Any] = {}
		if json_mode:
			generation["responseMimeType"] = "application/json"
		if thinking_budget is not None:
			generation["thinkingConfig"] = {"thinkingBudget": int(thinking_budget)}
		if generation:
			payload["generationConfig"] = generation
		try:
			return await self._generate_primary(payload)
		except (httpx.HTTPError, RuntimeError) as primary_error:
			if self._fallback_client is None:
				raise
			logger.warning("Gemini call failed (%s); falling back to OpenRouter", primary_error)
			return await self._fallback_generate(prompt, primary_error, json_mode=json_mode)

	async def _generate_primary(self, payload: Dict[str, Any]) -> str:
		params, headers = self._auth()
		r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
		generation = payload.get("generationConfig", {})
		if r.is_error and "thinkingConfig" in generation:
			# Some models reject thinkingConfig; retry once without it
			logger.debug("Gemini rejected thinkingConfig (%s), retrying without it", r.status_code)
			generation = {k: v for k, v in generation.items() if k != "thinkingConfig"}
			payload = {**payload, "generationConfig": generation}
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
		r.raise_for_status()
		try:
			return _candidate_text(r.json())
		except (ValueError, KeyError, IndexError, TypeError) as exc:
			raise RuntimeError(f"Unexpected Gemini response: {r.text[:200]}") from exc

	async def _fallback_generate(self, prompt: str, primary_error: Exception, *, json_mode: bool) -> str:
		if self._fallback_client is None:
			raise primary_error
		headers = {
			"Authorization": f"Bearer {self._openrouter_api_key}",
			"Content-Type": "application/json",
			"HTTP-Referer": settings.openrouter_referer,
			"X-Title": settings.openrouter_title,
		}
		payload: Dict[str, Any] = {
			"model": settings.openrouter_model,
			"messages": [{"role": "user", "content": prompt}],
		}
		if json_mode:
			payload["response_format"] = {"type": "json_object"}
		try:
			r = await self._fallback_client.post(settings.openrouter_base_url, headers=headers, json=payload)
			r.raise_for_status()
			return _choice_text(r.json())
		except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as fallback_err:
			raise RuntimeError(
				f"Gemini primary call failed ({primary_error}); fallback via OpenRouter also failed"
			) from fallback_err

	async def aclose(self) -> None:
		await self._client.aclose()
		if self._fallback_client is not None:
			await self._fallback_client.aclose()
