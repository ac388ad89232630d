# src/main.py

import logging
import sys
from pathlib import Path
from typing import Optional
import argparse
import signal

# Add src to path
sys.path.append(str(Path(__file__).parent))

from config import config
from data.float_generator import DataFilters, float_generator
from data.models import OceanData
from data.regions import list_regions
from nlp.chat_engine import ChatEngine
from utils.helpers import DataExporter, FileHandler

logger = logging.getLogger(__name__)


class FloatChatCLI:
    """Command-line controller for float summaries, chat queries and exports"""

    def __init__(self, language: Optional[str] = None):
        self.language = language or config.get('chat.default_language', 'en')
        self.chat_engine = ChatEngine()
        self.history = []
        self.is_running = False

        signal.signal(signal.SIGTERM, self._signal_handler)

    def load_data(self, filters: DataFilters) -> OceanData:
        logger.info(f"Loading float data for {filters.region}")
        return float_generator.get_argo_data(filters)

    def print_summary(self, ocean_data: OceanData):
        summary = ocean_data.summary
        print(f"=== {ocean_data.region} ({ocean_data.start_date} to {ocean_data.end_date}) ===")
        print(f"Total floats:     {summary.total_floats}")
        print(f"Active floats:    {summary.active_floats}")
        print(f"Avg temperature:  {summary.avg_temperature:.2f} °C")
        print(f"Avg salinity:     {summary.avg_salinity:.2f} PSU")
        print(f"Data points:      {summary.data_points:,}")

    def export(self, ocean_data: OceanData, filters: DataFilters, fmt: str, output: Optional[str]) -> Path:
        if fmt == 'csv':
            content = DataExporter.floats_to_csv(ocean_data.floats)
        else:
            content = DataExporter.floats_to_json(ocean_data.floats, filters)
        slug = ocean_data.region.lower().replace(' ', '_')
        path = Path(output) if output else Path(f"floatchat_{slug}.{fmt}")
        return FileHandler.write_bytes(content, path)

    def ask(self, query: str) -> str:
        if not (query or '').strip():
            result = self.chat_engine.process_query('', self.language)
            content, meta = result['response'], result
        else:
            self.history = self.chat_engine.send_message(self.history, query, self.language)
            reply = self.history[-1]
            content, meta = reply.content, reply.metadata
        return (f"{content}\n\n"
                f"[intent: {meta['intent']} | confidence: {meta['confidence']}% | "
                f"quality: {meta['data_quality']}]")

    def run_interactive_mode(self):
        """Run interactive command-line mode"""
        self.is_running = True

        print("=== FloatChat - Interactive Mode ===")
        print("Commands: regions, summary <region>, lang <en|hi|ta>, ask <text>, exit")
        print("Anything else is sent to the assistant.")

        while self.is_running:
            try:
                command = input("\nfloatchat> ").strip()
                if not command:
                    continue

                cmd, _, rest = command.partition(' ')
                cmd = cmd.lower()

                if cmd == 'exit':
                    break
                elif cmd == 'regions':
                    print('\n'.join(list_regions()))
                elif cmd == 'summary':
                    self.print_summary(self.load_data(DataFilters.from_settings(region=rest.strip() or None)))
                elif cmd == 'lang' and rest:
                    self.language = rest.strip()
                    print(f"Language set to {self.language}")
                elif cmd == 'ask' and rest:
                    print(self.ask(rest))
                else:
                    print(self.ask(command))

            except (KeyboardInterrupt, EOFError):
                break

        self.shutdown()

    def _signal_handler(self, signum, frame):
        logger.info(f"Received signal {signum}, shutting down...")
        self.shutdown()

    def shutdown(self):
        self.is_running = False
        logger.info("FloatChat CLI shutdown complete")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='FloatChat ocean data assistant')
    parser.add_argument('--region', help='Region to summarise, e.g. "Indian Ocean"')
    parser.add_argument('--start-date', help='Start date (YYYY-MM-DD)')
    parser.add_argument('--end-date', help='End date (YYYY-MM-DD)')
    parser.add_argument('--temp-min', type=float)
    parser.add_argument('--temp-max', type=float)
    parser.add_argument('--salinity-min', type=float)
    parser.add_argument('--salinity-max', type=float)
    parser.add_argument('--depth-min', type=float)
    parser.add_argument('--depth-max', type=float)
    parser.add_argument('--status', help='Comma-separated statuses, e.g. active,inactive')
    parser.add_argument('--query', help='Ask the assistant a question')
    parser.add_argument('--language', choices=['en', 'hi', 'ta'], help='Response language')
    parser.add_argument('--export', choices=['csv', 'json'], help='Export the filtered floats')
    parser.add_argument('--output', help='Export file path')
    parser.add_argument('--interactive', action='store_true', help='Run interactive mode')
    parser.add_argument('--config', help='Path to configuration file')
    return parser


def filters_from_args(args) -> DataFilters:
    statuses = None
    if args.status:
        statuses = tuple(s.strip() for s in args.status.split(',') if s.strip())
    return DataFilters.from_settings(
        region=args.region,
        start_date=args.start_date,
        end_date=args.end_date,
        temp_min=args.temp_min,
        temp_max=args.temp_max,
        salinity_min=args.salinity_min,
        salinity_max=args.salinity_max,
        depth_min=args.depth_min,
        depth_max=args.depth_max,
        statuses=statuses
    )


def main(argv=None):
    """Main entry point with command-line interface"""
    args = build_parser().parse_args(argv)

    if args.config:
        config.load_config(args.config)

    cli = FloatChatCLI(language=args.language)

    try:
        if args.query:
            print(cli.ask(args.query))
            return 0

        if args.interactive:
            cli.run_interactive_mode()
            return 0

        filters = filters_from_args(args)
        ocean_data = cli.load_data(filters)
        cli.print_summary(ocean_data)

        if args.export:
            path = cli.export(ocean_data, filters, args.export, args.output)
            print(f"Exported {len(ocean_data.floats)} floats to {path}")
        return 0

    except Exception as e:
        logger.exception("FloatChat CLI failed")
        print(f"Error: {e}")
        return 1
    finally:
        cli.shutdown()


if __name__ == "__main__":
    sys.exit(main())
