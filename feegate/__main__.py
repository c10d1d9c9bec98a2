"""
Process entry point.

Loads settings, configures logging, and runs one fee-gated submission.
Exit code is 0 when the run completes (sent or exhausted) and 1 on a fatal fault.
"""

import asyncio
import sys
import warnings

# Suppress eth_utils network warnings about invalid ChainId
warnings.filterwarnings(
    "ignore",
    message=".*does not have a valid ChainId.*",
    category=UserWarning,
)

from loguru import logger  # noqa: E402

from feegate.config.settings import Settings, load_settings  # noqa: E402
from feegate.initialization.logging import setup_logging  # noqa: E402
from feegate.initialization.services import (  # noqa: E402
    create_fiat_converter,
    create_intent,
    create_provider,
    create_submission_loop,
)
from feegate.models import RetryExhausted, SubmissionOutcome  # noqa: E402
from feegate.utils.exceptions import ConfigError, FeeGateError  # noqa: E402


async def run(settings: Settings) -> SubmissionOutcome | RetryExhausted:
    """Run one fee-gated submission with resources released afterwards."""
    provider = create_provider(settings)
    fiat_converter = create_fiat_converter(settings)
    try:
        submission_loop = create_submission_loop(settings, provider, fiat_converter)
        return await submission_loop.run(create_intent(settings))
    finally:
        if fiat_converter is not None:
            await fiat_converter.close()
        await provider.close()


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as e:
        setup_logging()
        logger.error(str(e))
        return 1

    setup_logging(settings.log_level, settings.log_json, settings.log_file)

    try:
        result = asyncio.run(run(settings))
    except FeeGateError as e:
        logger.error(f"Run aborted: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected fatal error: {e}")
        return 1

    if isinstance(result, RetryExhausted):
        logger.info(f"Gave up after {result.attempts} attempts")
    return 0


if __name__ == "__main__":
    sys.exit(main())
