"""
Command line entry point: run one AWS service demo, or all of them.

    python main.py s3
    python main.py all --log-level DEBUG
"""
import argparse
from typing import Callable, Dict, List, Optional

from config import get_config
from logger_config import get_logger, set_log_level
from demos import batch_demo, cognito_demo, s3_demo, ses_demo

logger = get_logger(__name__)

DEMOS: Dict[str, Callable] = {
    'batch': batch_demo.run_all,
    'cognito': cognito_demo.run_all,
    's3': s3_demo.run_all,
    'ses': ses_demo.run_all,
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Run AWS SDK demo scripts.')
    parser.add_argument('demo', choices=[*DEMOS, 'all'], help='Demo to run')
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        type=str.upper,
        help='Overrides LOG_LEVEL',
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = get_config()
    set_log_level(args.log_level or config.log_level)

    selected = list(DEMOS) if args.demo == 'all' else [args.demo]
    for name in selected:
        logger.info(f'=== {name} demo ===')
        DEMOS[name](config)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
