from enum import Enum
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class CompletionBackend(Enum):
	PROXY = 'proxy'
	OPENAI = 'openai'


class Settings(BaseSettings):
	# Completion service
	COMPLETION_BACKEND: str = 'proxy'
	COMPLETION_URL: str = 'http://localhost:3000/api/chat/completions'
	OPENAI_API_KEY: str | None = None
	OPENAI_BASE_URL: str | None = None
	WRITING_MODEL: str = 'gpt-4'
	REQUEST_TIMEOUT: float = 30.0

	DEFAULT_TEMPERATURE: float = 0.7
	DEFAULT_MAX_TOKENS: int = 1000

	# Retry and refinement budgets
	MAX_RETRIES: int = 3
	RETRY_BASE_DELAY: float = 1.0
	REFINE_ATTEMPTS: int = 3

	# Article shape
	SECTION_MIN_LENGTH: int = 800
	SECTION_MAX_LENGTH: int = 1200
	PACING_DELAY: float = 1.0
	ARTICLE_LANGUAGE: str = 'Japanese'

	# App Settings
	APP_NAME: str = 'Blogforge'
	LOG_LEVEL: str = 'INFO'

	# Paths
	BASE_DIR: Path = Path(__file__).parent.parent.parent
	LOG_DIR: Path = BASE_DIR / 'logs'

	model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

	@property
	def backend(self) -> CompletionBackend:
		return CompletionBackend(self.COMPLETION_BACKEND.lower())


settings = Settings()
