"""
Command line entry point: load a configuration, crawl, write results and profile data.
"""

import argparse
import sys
from typing import List, Optional, TextIO

from webcrawler.config import ConfigManager, CrawlerConfiguration, export_config
from webcrawler.crawler.parallel_crawler import ParallelWebCrawler
from webcrawler.output.result_writer import CrawlResultWriter
from webcrawler.parser.page_parser import HtmlPageParser
from webcrawler.profiler import Profiler
from webcrawler.utils.errors import ConfigurationError, CrawlerError, OutputError, handle_error
from webcrawler.utils.logging import get_logger, setup_logging


logger = get_logger(__name__)


class WebCrawlerApp:
    """Wires configuration, crawler, profiler and writers together for one run."""
    
    def __init__(self, config: CrawlerConfiguration, stdout: Optional[TextIO] = None):
        self.config = config
        self.stdout = stdout or sys.stdout
        self.profiler = Profiler()
    
    def run(self) -> int:
        """
        Run one crawl.
        
        Returns:
            Process exit code
        """
        logger.debug(f"Configuration: {export_config(self.config)}")
        
        page_parser = HtmlPageParser(ignored_words=self.config.ignored_words)
        try:
            crawler = self.profiler.wrap(ParallelWebCrawler.from_config(
                self.config,
                self.profiler.wrap(page_parser)
            ))
            result = crawler.crawl(list(self.config.start_pages))
        finally:
            page_parser.close()
        
        writer = CrawlResultWriter(result)
        if self.config.result_path:
            writer.write(self.config.result_path)
        else:
            writer.write_to(self.stdout)
        
        if self.config.profile_output_path:
            self.profiler.write_data(self.config.profile_output_path)
        else:
            self.profiler.write_data_to(self.stdout)
        self.stdout.flush()
        
        return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Parallel web crawler that counts the most popular words",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  webcrawler config.json
  webcrawler config.json --log-file logs/crawler.log
  WEBCRAWLER_LOG_LEVEL=DEBUG webcrawler config.json
        """
    )
    parser.add_argument('config', help='Path to the JSON crawler configuration')
    parser.add_argument('--log-file', help='Optional log file, rotated daily')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    
    try:
        config = ConfigManager(args.config).load_config()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    
    setup_logging(log_level=config.log_level, log_file=args.log_file)
    
    try:
        return WebCrawlerApp(config).run()
    except (CrawlerError, OutputError) as e:
        handle_error(e, logger, {"config": args.config}, reraise=False)
        return 1


if __name__ == '__main__':
    sys.exit(main())
