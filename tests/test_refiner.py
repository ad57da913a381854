import asyncio
from unittest.mock import AsyncMock

import pytest

from blogforge.core.cancellation import CancellationToken
from blogforge.core.errors import FatalServiceError, GenerationCancelled, TransientServiceError
from blogforge.generators import ContentRefiner
from blogforge.models import LengthRange

TARGET = LengthRange(min=800, max=1200)


def test_valid_text_needs_no_requests(mock_llm_client, config, text_of_length):
	refiner = ContentRefiner(mock_llm_client, config)
	text = text_of_length(900)

	assert asyncio.run(refiner.refine(text, TARGET)) == text
	mock_llm_client.complete.assert_not_called()


def test_short_text_is_bounded_and_never_raises(mock_llm_client, config, text_of_length):
	# The model keeps answering with 500 characters against an 800-1200 target
	mock_llm_client.complete = AsyncMock(return_value=text_of_length(500))
	refiner = ContentRefiner(mock_llm_client, config)

	result = asyncio.run(refiner.refine(text_of_length(500), TARGET, attempts_remaining=3))

	assert isinstance(result, str)
	assert len(result) == 500
	assert mock_llm_client.complete.call_count == 3


def test_expansion_is_followed_by_a_consistency_pass(mock_llm_client, config, text_of_length):
	mock_llm_client.complete = AsyncMock(return_value=text_of_length(950))
	refiner = ContentRefiner(mock_llm_client, config)

	result = asyncio.run(refiner.refine(text_of_length(500), TARGET, section_title='背景'))

	assert len(result) == 950
	assert mock_llm_client.complete.call_count == 2
	resize_prompt = mock_llm_client.complete.call_args_list[0].args[0][1].content
	assert resize_prompt.startswith('Expand this "背景" section to 800-1200 characters.')


def test_long_text_is_condensed(mock_llm_client, config, text_of_length):
	mock_llm_client.complete = AsyncMock(return_value=text_of_length(1000))
	refiner = ContentRefiner(mock_llm_client, config)

	asyncio.run(refiner.refine(text_of_length(2000), TARGET))

	assert mock_llm_client.complete.call_args_list[0].args[0][1].content.startswith('Condense')


def test_unterminated_paragraph_is_fixed(mock_llm_client, config, text_of_length):
	broken = f'{text_of_length(500)}\n\n途中で終わる段落' + 'い' * 400
	fixed = f'{text_of_length(500)}\n\n{text_of_length(400)}'
	mock_llm_client.complete = AsyncMock(return_value=fixed)
	refiner = ContentRefiner(mock_llm_client, config)

	result = asyncio.run(refiner.refine(broken, TARGET))

	assert result == fixed
	assert 'Fix ONLY the paragraph endings' in mock_llm_client.complete.call_args_list[0].args[0][1].content


def test_zero_budget_returns_text_unchanged(mock_llm_client, config, text_of_length):
	refiner = ContentRefiner(mock_llm_client, config)
	text = text_of_length(100)

	assert asyncio.run(refiner.refine(text, TARGET, attempts_remaining=0)) == text
	mock_llm_client.complete.assert_not_called()


def test_service_failure_keeps_best_effort(mock_llm_client, config, text_of_length):
	mock_llm_client.complete = AsyncMock(side_effect=TransientServiceError('Service unavailable'))
	refiner = ContentRefiner(mock_llm_client, config)
	text = text_of_length(500)

	assert asyncio.run(refiner.refine(text, TARGET)) == text
	assert mock_llm_client.complete.call_count == 1


def test_fatal_failure_propagates(mock_llm_client, config, text_of_length):
	mock_llm_client.complete = AsyncMock(side_effect=FatalServiceError('Bad key', code='invalid_api_key'))
	refiner = ContentRefiner(mock_llm_client, config)

	with pytest.raises(FatalServiceError):
		asyncio.run(refiner.refine(text_of_length(500), TARGET))


def test_empty_revision_is_ignored(mock_llm_client, config, text_of_length):
	mock_llm_client.complete = AsyncMock(return_value='   ')
	refiner = ContentRefiner(mock_llm_client, config)
	text = text_of_length(500)

	assert asyncio.run(refiner.refine(text, TARGET)) == text


def test_cancelled_token_stops_refinement(mock_llm_client, config, text_of_length):
	refiner = ContentRefiner(mock_llm_client, config)
	token = CancellationToken()
	token.cancel()

	with pytest.raises(GenerationCancelled):
		asyncio.run(refiner.refine(text_of_length(500), TARGET, cancellation_token=token))

	mock_llm_client.complete.assert_not_called()
