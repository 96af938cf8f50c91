"""Main script for running Aleth from the terminal."""

import asyncio
import mimetypes
from pathlib import Path

from dotenv import load_dotenv

from .domain.errors import ConfigurationError, ParseError, RateLimitError, UpstreamError
from .domain.models.analysis_input import AnalysisInput, ImageInput, TextInput, UrlInput
from .domain.models.analysis_result import AnalysisResult
from .domain.services.analysis_service import AnalysisService
from .domain.services.rate_limiter import RateLimiter
from .infrastructure.ai.gemini_adapter import GeminiAdapter, GeminiConfig
from .infrastructure.config import AlethConfig
from .infrastructure.identity.session_identity import SessionIdentityProvider


def parse_input(line: str) -> AnalysisInput:
    """Interpret a line as an image path, a URL, or plain text."""
    if line.startswith("image:"):
        path = Path(line[len("image:"):].strip()).expanduser()
        mime_type, _ = mimetypes.guess_type(path.name)
        return ImageInput(data=path.read_bytes(), mime_type=mime_type or "")
    if line.startswith(("http://", "https://")):
        return UrlInput(url=line)
    return TextInput(text=line)


def print_result(result: AnalysisResult) -> None:
    """Print a verdict."""
    print("\nResults:")
    print(f"Truth score: {result.truth_score}/100 ({result.verdict_label})")
    print(f"Source credibility: {result.source_credibility_score}/100")
    category = result.category.value
    if result.sub_category:
        category += f" / {result.sub_category.value}"
    print(f"Category: {category}")
    print(f"\nSummary: {result.summary}")
    print(f"\n{result.detailed_analysis}")

    if result.external_fact_checks:
        print("\nExisting fact-checks:")
        for check in result.external_fact_checks:
            print(f"- {check.organization or 'Unknown'}: {check.rating or 'n/a'} {check.url or ''}")

    if result.grounding_sources:
        print("\nSources:")
        for i, source in enumerate(result.grounding_sources, 1):
            print(f"{i}. {source.title} - {source.uri}")


async def main():
    """Run the interactive checker."""
    load_dotenv()
    print("Aleth - search grounded fact checking")
    print("-------------------------------------")

    config = AlethConfig.from_env()
    provider = GeminiAdapter(GeminiConfig.from_env())
    service = AnalysisService(
        provider,
        RateLimiter(config.rate_limit_max_requests, config.rate_limit_window_ms),
        identity_provider=SessionIdentityProvider(),
        temperature=config.temperature,
        enable_grounding=config.enable_grounding,
    )

    try:
        while True:
            line = input("\nEnter a claim, a URL or image:<path> (or 'quit' to exit): ").strip()
            if line.lower() in ('quit', 'exit', 'q'):
                break
            if not line:
                continue

            print("\nChecking facts...")
            try:
                result = await service.analyze(parse_input(line))
                print_result(result)
            except RateLimitError as e:
                print(f"\nSlow down: try again in {e.retry_after_seconds} seconds.")
            except ConfigurationError as e:
                print(f"\nConfiguration error: {e}")
                break
            except (UpstreamError, ParseError) as e:
                print(f"\nAnalysis failed, please retry: {e}")
            except (ValueError, OSError) as e:
                print(f"\nInvalid input: {e}")

    finally:
        await provider.shutdown()


def cli():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
