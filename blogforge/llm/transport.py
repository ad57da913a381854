from abc import ABC, abstractmethod
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from blogforge.models import CompletionRequest, CompletionResult, FailureKind
from blogforge.utils.logger import logger

RATE_LIMIT_CODE = 'rate_limit_exceeded'

# Authorization or configuration failures; retrying cannot fix these
FATAL_ERROR_CODES = {
	'invalid_api_key',
	'authentication_error',
	'permission_denied',
	'insufficient_quota',
	'configuration_error',
	'model_not_found',
}

FATAL_STATUS_CODES = {401, 403}


def classify_failure(status_code: int, payload: Any) -> CompletionResult:
	message = f'Completion service returned HTTP {status_code}'
	code = None

	if isinstance(payload, dict):
		error = payload.get('error')
		if isinstance(error, dict):
			message = error.get('message') or message
			code = error.get('code') or error.get('type')
		elif isinstance(error, str) and error:
			message = error

		details = payload.get('details')
		if isinstance(details, dict):
			code = details.get('code') or code
			if details.get('message'):
				message = f'{message}: {details["message"]}'
		elif isinstance(details, str) and details:
			message = f'{message}: {details}'

	if code == RATE_LIMIT_CODE:
		kind = FailureKind.RATE_LIMITED
	elif code in FATAL_ERROR_CODES or status_code in FATAL_STATUS_CODES:
		kind = FailureKind.FATAL
	elif status_code == 429:
		kind = FailureKind.RATE_LIMITED
	else:
		kind = FailureKind.TRANSIENT

	return CompletionResult.error(kind, message, code=code)


def decode_success(payload: Any) -> CompletionResult:
	if not isinstance(payload, dict):
		return CompletionResult.error(FailureKind.MALFORMED, 'Response body is not a JSON object')

	content = payload.get('content')
	if content is None and isinstance(payload.get('choices'), list):
		# Raw chat completions body, as forwarded by the development server
		try:
			content = payload['choices'][0]['message']['content']
		except (IndexError, KeyError, TypeError):
			content = None

	if not isinstance(content, str) or not content.strip():
		return CompletionResult.error(FailureKind.MALFORMED, 'Response is missing the content field or it is empty')

	usage = payload.get('usage') or {}
	return CompletionResult.success(
		content,
		input_tokens=usage.get('prompt_tokens', 0) or 0,
		output_tokens=usage.get('completion_tokens', 0) or 0,
	)


class BaseTransport(ABC):
	@abstractmethod
	async def send(self, request: CompletionRequest) -> CompletionResult:
		raise NotImplementedError

	async def aclose(self):
		return None


class ProxyTransport(BaseTransport):
	"""Talks to the completion proxy: ``{messages}`` in, ``{content}`` or ``{error, details}`` out."""

	def __init__(self, url: str, timeout: float = 30.0, client: httpx.AsyncClient | None = None):
		self.url = url
		self._owns_client = client is None
		self._client = client or httpx.AsyncClient(timeout=timeout)

	async def send(self, request: CompletionRequest) -> CompletionResult:
		try:
			response = await self._client.post(self.url, json=request.to_payload())
		except httpx.TimeoutException as e:
			return CompletionResult.error(FailureKind.TRANSIENT, f'Request timed out: {e}')
		except httpx.TransportError as e:
			return CompletionResult.error(FailureKind.TRANSIENT, f'Connection failed: {e}')

		try:
			payload = response.json()
		except ValueError:
			payload = None

		if response.is_success:
			return decode_success(payload)

		logger.debug(f'Completion proxy returned {response.status_code}: {payload}')
		return classify_failure(response.status_code, payload)

	async def aclose(self):
		if self._owns_client:
			await self._client.aclose()


class OpenAITransport(BaseTransport):
	def __init__(
		self,
		api_key: str,
		model: str,
		base_url: str | None = None,
		timeout: float = 30.0,
		client: Any | None = None,
	):
		self.model = model
		# Retries are owned by CompletionClient
		self._client = client or AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)

	async def send(self, request: CompletionRequest) -> CompletionResult:
		try:
			response = await self._client.chat.completions.create(
				model=self.model,
				messages=[m.to_dict() for m in request.messages],
				**request.options.to_payload(),
			)
		except openai.APIStatusError as e:
			return classify_failure(e.status_code, {'error': {'message': e.message, 'code': e.code}})
		except openai.APIConnectionError as e:
			return CompletionResult.error(FailureKind.TRANSIENT, f'Connection failed: {e}')

		choices = getattr(response, 'choices', None)
		if not choices:
			return CompletionResult.error(FailureKind.MALFORMED, 'Response contained no choices')

		content = getattr(choices[0].message, 'content', None)
		if not isinstance(content, str) or not content.strip():
			return CompletionResult.error(FailureKind.MALFORMED, 'Response is missing message content')

		usage = getattr(response, 'usage', None)
		return CompletionResult.success(
			content,
			input_tokens=getattr(usage, 'prompt_tokens', 0) or 0,
			output_tokens=getattr(usage, 'completion_tokens', 0) or 0,
		)

	async def aclose(self):
		await self._client.close()
