import argparse
import asyncio
import signal
import sys
from pathlib import Path

from dotenv import load_dotenv

from blogforge.config.defaults import DEFAULT_TONE, VALID_TONES
from blogforge.config.settings import Settings, settings
from blogforge.core.cancellation import CancellationToken
from blogforge.core.errors import GenerationCancelled, GenerationError
from blogforge.core.orchestrator import ArticleOrchestrator
from blogforge.generators import GeneratorFactory
from blogforge.llm.client import create_completion_client
from blogforge.models import GenerationMode
from blogforge.utils.logger import logger, setup_logger


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description='Blogforge')
	parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Console log level (default: LOG_LEVEL)')
	commands = parser.add_subparsers(dest='command', required=True)

	titles = commands.add_parser('titles', help='Suggest three article titles')
	titles.add_argument('--theme', help='Article theme')
	titles.add_argument('--content', help='Existing article body to title')

	outline = commands.add_parser('outline', help='Generate an article outline')
	outline.add_argument('theme')
	outline.add_argument('--tone', default=DEFAULT_TONE, choices=VALID_TONES)

	section = commands.add_parser('section', help='Generate one section on its own')
	section.add_argument('theme')
	section.add_argument('title', help='Section title')
	section.add_argument('--tone', default=DEFAULT_TONE, choices=VALID_TONES)

	article = commands.add_parser('article', help='Generate a whole article: titles, outline, sections')
	article.add_argument('theme')
	article.add_argument('--tone', default=DEFAULT_TONE, choices=VALID_TONES)
	article.add_argument('--output', type=Path, help='Write the article to this file')

	return parser


async def run_command(args: argparse.Namespace, config: Settings, token: CancellationToken):
	client = create_completion_client(config)
	factory = GeneratorFactory(client, config)

	try:
		if args.command == 'titles':
			titles = await factory.get_title_generator().generate(args.theme, args.content, token)
			for i, title in enumerate(titles, 1):
				print(f'{i}. {title}')

		elif args.command == 'outline':
			outline = await factory.get_outline_generator().generate(args.theme, args.tone, token)
			for section in outline.sections:
				print(f'[{section.kind.value}] {section.title} ({section.recommended_length})')
				if section.description:
					print(f'    {section.description}')

		elif args.command == 'section':
			generator = factory.get_section_generator(GenerationMode.SIMPLE)
			print(await generator.generate(args.theme, args.title, cancellation_token=token, tone=args.tone))

		elif args.command == 'article':
			orchestrator = ArticleOrchestrator(client, config)
			article = await orchestrator.run(args.theme, args.tone, token)
			if args.output:
				args.output.parent.mkdir(parents=True, exist_ok=True)
				args.output.write_text(article.full_text, encoding='utf-8')
				print(f'Article saved to {args.output}')
			else:
				print(article.full_text)

		stats = client.get_usage_stats()
		logger.info(f'Requests: {stats["requests"]} ({stats["retries"]} retries), tokens: {stats["total_tokens"]:,}')
	finally:
		await client.aclose()


async def run_cancellable(args: argparse.Namespace, config: Settings):
	token = CancellationToken()
	loop = asyncio.get_running_loop()
	try:
		loop.add_signal_handler(signal.SIGINT, token.cancel)
	except NotImplementedError:
		# No signal handlers on this event loop; Ctrl-C falls back to KeyboardInterrupt
		pass

	await run_command(args, config, token)


def main():
	load_dotenv()

	args = build_parser().parse_args()
	if args.log_level:
		setup_logger(args.log_level)
	if args.command == 'titles' and not (args.theme or args.content):
		print('Error: titles needs --theme or --content')
		sys.exit(1)

	asyncio.run(run_cancellable(args, settings))


if __name__ == '__main__':
	try:
		main()
	except (KeyboardInterrupt, GenerationCancelled):
		print('\n\nGeneration cancelled.')
		sys.exit(0)
	except (GenerationError, ValueError) as e:
		print(f'\nError: {e}')
		sys.exit(1)
